"""Info API response types."""

from __future__ import annotations

from pydantic import BaseModel
from typing_extensions import Self

from stagelist.helpers.dto.config_dto import GetInternalInfoResult


class SystemInfoResponse(BaseModel):
    version: str
    api_prefix: str
    max_flexible_slots_hard_limit: int

    @classmethod
    def from_dto(cls, info: GetInternalInfoResult) -> Self:
        return cls(
            version=info.version,
            api_prefix=info.api_prefix,
            max_flexible_slots_hard_limit=info.max_flexible_slots_hard_limit,
        )


class HealthStatusResponse(BaseModel):
    status: str
