"""
Interfaces package.

Contains all user-facing interfaces (presentation layer).

Structure:
- api/: FastAPI HTTP interface for the setlist clients
"""
