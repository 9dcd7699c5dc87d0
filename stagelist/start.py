#!/usr/bin/env python3
"""
Stagelist Application Starter
Initializes the Application (store, broker, services) then starts the API server.
"""

import locale
import logging
import signal
import sys

import uvicorn

from stagelist.app import application

# Configure logging once for the whole process
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


def configure_collation() -> None:
    """Adopt the environment's LC_COLLATE so statistics rank nicknames in locale order."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logging.warning(f"[Application] Unusable collation locale, keeping C ordering: {e}")


def shutdown_handler(signum, frame):
    """Handle shutdown signals gracefully."""
    logging.info(f"Received signal {signum}, shutting down...")
    application.stop()
    sys.exit(0)


def main() -> None:
    signal.signal(signal.SIGTERM, shutdown_handler)
    signal.signal(signal.SIGINT, shutdown_handler)
    configure_collation()

    logging.info("[Application] Starting stagelist Application...")
    application.start()

    settings = application.setlist_settings
    logging.info(
        "Effective config: store=%s api=%s:%d max_conflict_retries=%d max_flexible_slots=%d elevated_roles=%s",
        application.store,
        application.api_host,
        application.api_port,
        settings.max_conflict_retries,
        settings.max_flexible_slots,
        ",".join(sorted(settings.elevated_roles)),
    )

    try:
        uvicorn.run(
            "stagelist.interfaces.api.api_app:api_app",
            host=application.api_host,
            port=application.api_port,
            timeout_keep_alive=90,
            log_level="info",
        )
    finally:
        logging.info("API server stopped, cleaning up...")
        application.stop()


if __name__ == "__main__":
    main()
