"""
Configuration DTOs.

Rules:
- Import only stdlib and typing (no stagelist.* imports)
- Pure data structures only
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SetListSettings:
    """Settings the setlist services need, extracted from the composed config."""

    max_conflict_retries: int
    max_flexible_slots: int
    elevated_roles: frozenset[str]


@dataclass(frozen=True)
class ArangoSettings:
    hosts: str
    username: str
    password: str
    db_name: str


@dataclass(frozen=True)
class GetInternalInfoResult:
    """Read-only internal constants exposed for diagnostics."""

    version: str
    api_prefix: str
    max_flexible_slots_hard_limit: int
