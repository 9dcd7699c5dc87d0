"""
API layer package for stagelist.
Exports the FastAPI app and auth components.
"""

from stagelist.interfaces.api.api_app import api_app, create_app
from stagelist.interfaces.api.auth import auth_scheme, get_current_actor

__all__ = [
    "api_app",
    "auth_scheme",
    "create_app",
    "get_current_actor",
]
