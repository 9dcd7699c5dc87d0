"""
API response types package.

Pydantic models that transform internal DTOs into API responses.
"""
