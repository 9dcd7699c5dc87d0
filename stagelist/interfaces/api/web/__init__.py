"""
Web package.

Exports the combined router for all endpoints.
Individual endpoint implementations live in *_if.py modules.
"""

from .router import router

__all__ = ["router"]
