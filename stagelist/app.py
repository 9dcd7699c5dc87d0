"""
Application composition root and dependency injection container.

This module defines the Application class, which serves as the strict DI container
and lifecycle manager for stagelist. The gateway, song catalog, actor directory,
change broker and all services are owned and initialized by the Application instance.

Architecture:
- Application owns: config, broker, gateway, catalog, actor directory, services
- All configuration values are instance attributes (no module-level config globals)
- Services are registered via register_service() during start()
- Access services via: application.get_service("name") or application.services["name"]
- Do NOT construct services directly outside of this class

The singleton instance is available as `application` at module level.
"""

from __future__ import annotations

import logging
from typing import Any

from stagelist.components.events.event_broker_comp import SetListBroker
from stagelist.persistence.gateway import ActorDirectory, SetListGateway, SongCatalog
from stagelist.persistence.memory_gateway import InMemorySetListGateway, InMemorySongCatalog, StaticActorDirectory
from stagelist.services.aggregate_writer_svc import AggregateWriter
from stagelist.services.config_svc import ConfigService
from stagelist.services.setlist_admin_svc import SetListAdminService
from stagelist.services.setlist_svc import SetListService


# ----------------------------------------------------------------------
#  Application Class - Composition Root & DI Container
# ----------------------------------------------------------------------
class Application:
    """
    Application composition root and dependency injection container.

    Configuration Access:
    - Raw config is PRIVATE (_config) and used only internally in Application
    - To access config outside app.py, use: application.get_service("config").get()
    - Prefer the extracted settings (setlist_settings, gesture_thresholds, api_host, ...)

    Store selection (`api.store`):
    - "memory": InMemorySetListGateway, catalog and tokens from config
    - "arango": ArangoSetListGateway and ArangoSongCatalog over python-arango

    Any of gateway / catalog / actor_directory may be injected directly (tests do).
    """

    def __init__(
        self,
        config_service: ConfigService | None = None,
        gateway: SetListGateway | None = None,
        catalog: SongCatalog | None = None,
        actor_directory: ActorDirectory | None = None,
    ) -> None:
        self._config_service = config_service or ConfigService()
        self._config = self._config_service.get_config()

        self.setlist_settings = self._config_service.make_setlist_settings()
        self.gesture_thresholds = self._config_service.make_gesture_thresholds()
        self.api_host: str = str(self._config["api"].get("host", "0.0.0.0"))
        self.api_port: int = int(self._config["api"].get("port", 8400))
        self.store: str = str(self._config["api"].get("store", "memory"))

        self.broker = SetListBroker()
        self.gateway: SetListGateway | None = gateway
        self.catalog: SongCatalog | None = catalog
        self.actor_directory: ActorDirectory | None = actor_directory

        # Services container (DI registry)
        self.services: dict[str, Any] = {}

        self._running = False

    def register_service(self, name: str, service: Any) -> None:
        self.services[name] = service

    def get_service(self, name: str) -> Any:
        """
        Get a service from the DI container.

        Raises:
            KeyError: If service not found
        """
        if name not in self.services:
            raise KeyError(f"Service '{name}' not found. Available services: {list(self.services.keys())}")
        return self.services[name]

    def start(self) -> None:
        """
        Start the application - build the store adapters and register all services.

        1. Connects the configured store (and bootstraps the Arango schema)
        2. Builds the shared AggregateWriter
        3. Registers config, setlist and setlist_admin services
        """
        if self._running:
            logging.warning("[Application] Already running, ignoring start() call")
            return

        logging.info("[Application] Starting...")

        if self.gateway is None or self.catalog is None:
            self._init_store()
        if self.actor_directory is None:
            self.actor_directory = StaticActorDirectory.from_config(self._config["api"].get("tokens") or {})

        assert self.gateway is not None
        writer = AggregateWriter(self.gateway, max_conflict_retries=self.setlist_settings.max_conflict_retries)

        self.register_service("config", self._config_service)
        self.register_service("setlist", SetListService(writer, self.setlist_settings, self.catalog))
        self.register_service("setlist_admin", SetListAdminService(writer, self.setlist_settings))

        self._running = True
        logging.info(f"[Application] Started successfully (store={self.store})")

    def stop(self) -> None:
        if not self._running:
            return
        logging.info("[Application] Shutting down...")
        self.services.clear()
        self._running = False
        logging.info("[Application] Shutdown complete")

    def is_running(self) -> bool:
        return self._running

    def _init_store(self) -> None:
        if self.store == "arango":
            # Lazy import: python-arango is only touched when the Arango store is selected
            from stagelist.components.platform.arango_bootstrap_comp import ensure_schema
            from stagelist.persistence.arango_client import create_arango_client
            from stagelist.persistence.arango_gateway import ArangoSetListGateway, ArangoSongCatalog

            db = create_arango_client(self._config_service.make_arango_settings())
            ensure_schema(db)
            self.gateway = self.gateway or ArangoSetListGateway(db, self.broker)
            self.catalog = self.catalog or ArangoSongCatalog(db)
        elif self.store == "memory":
            logging.info("[Application] Using in-memory store")
            self.gateway = self.gateway or InMemorySetListGateway(self.broker)
            self.catalog = self.catalog or InMemorySongCatalog()
        else:
            raise ValueError(f"Unknown store '{self.store}' (expected 'memory' or 'arango')")


# ----------------------------------------------------------------------
#  Global application instance
# ----------------------------------------------------------------------
application = Application()
