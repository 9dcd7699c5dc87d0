"""
Authentication logic for the FastAPI application.
Thin wrapper around the ActorDirectory for FastAPI dependency injection.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from stagelist.helpers.dto.actor_dto import Actor
from stagelist.persistence.gateway import ActorDirectory

auth_scheme = HTTPBearer(auto_error=False)


def get_actor_directory() -> ActorDirectory:
    """Get the ActorDirectory owned by the Application instance."""
    from stagelist.app import application

    if application.actor_directory is None:
        raise RuntimeError("ActorDirectory not initialized")
    return application.actor_directory


async def get_current_actor(
    creds: HTTPAuthorizationCredentials | None = Depends(auth_scheme),
    directory: ActorDirectory = Depends(get_actor_directory),
) -> Actor:
    """Resolve the bearer token to the acting user."""
    if creds is None:
        raise HTTPException(status_code=401, detail="Missing Authorization header")
    token = creds.credentials.strip()

    actor = directory.resolve(token)
    if actor is None:
        raise HTTPException(status_code=403, detail="Unknown or expired token")
    return actor
