"""
Actor DTOs.

The acting user as reported by the external authorization query.

Rules:
- Import only stdlib and typing (no stagelist.* imports)
- Pure data structures only
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_ELEVATED_ROLES: frozenset[str] = frozenset({"leader", "operator"})


@dataclass(frozen=True)
class Actor:
    """Nickname and role of the user performing an operation."""

    nickname: str
    role: str = "member"
