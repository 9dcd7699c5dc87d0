"""
Persistence layer - gateway contract and store adapters.

Nothing here holds domain rules; adapters only encode, decode, version-check
and notify.
"""

from .gateway import ActorDirectory, ChangeListener, SetListGateway, SongCatalog, Unsubscribe
from .memory_gateway import InMemorySetListGateway, InMemorySongCatalog, StaticActorDirectory

__all__ = [
    "ActorDirectory",
    "ChangeListener",
    "InMemorySetListGateway",
    "InMemorySongCatalog",
    "SetListGateway",
    "SongCatalog",
    "StaticActorDirectory",
    "Unsubscribe",
]
