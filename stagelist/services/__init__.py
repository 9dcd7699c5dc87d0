"""Services layer - async orchestration over components and persistence.

Services:
- Hold long-lived resources (gateway, writer lock, settings)
- Call pure components for every domain decision
- Return OperationResult to interfaces instead of raising
"""

from .aggregate_writer_svc import AggregateWriter, run_operation
from .config_svc import ConfigService
from .setlist_admin_svc import SetListAdminService
from .setlist_svc import SetListService, build_view

__all__ = [
    "AggregateWriter",
    "ConfigService",
    "SetListAdminService",
    "SetListService",
    "build_view",
    "run_operation",
]
