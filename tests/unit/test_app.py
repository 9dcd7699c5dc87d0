"""Tests for the Application composition root."""

import pytest

from stagelist.app import Application
from stagelist.persistence.memory_gateway import InMemorySetListGateway, InMemorySongCatalog
from stagelist.services.config_svc import ConfigService
from stagelist.services.setlist_admin_svc import SetListAdminService
from stagelist.services.setlist_svc import SetListService

pytestmark = pytest.mark.unit


def make_app(**api) -> Application:
    overrides = {"api": {"store": "memory", **api}}
    return Application(config_service=ConfigService(overrides=overrides))


def test_start_registers_services() -> None:
    app = make_app(tokens={"t-lead": {"nickname": "leader", "role": "leader"}})

    app.start()

    assert isinstance(app.get_service("setlist"), SetListService)
    assert isinstance(app.get_service("setlist_admin"), SetListAdminService)
    assert isinstance(app.gateway, InMemorySetListGateway)
    assert app.actor_directory.resolve("t-lead").role == "leader"
    assert app.is_running()


def test_start_twice_is_ignored() -> None:
    app = make_app()
    app.start()
    setlist_service = app.get_service("setlist")

    app.start()

    assert app.get_service("setlist") is setlist_service


def test_stop_clears_services() -> None:
    app = make_app()
    app.start()

    app.stop()

    assert not app.is_running()
    with pytest.raises(KeyError):
        app.get_service("setlist")


def test_unknown_store_is_rejected() -> None:
    app = make_app(store="bogus")

    with pytest.raises(ValueError, match="bogus"):
        app.start()


def test_injected_gateway_is_kept() -> None:
    gateway = InMemorySetListGateway()
    app = Application(
        config_service=ConfigService(overrides={"api": {"store": "arango"}}),
        gateway=gateway,
        catalog=InMemorySongCatalog(),
    )

    app.start()

    assert app.gateway is gateway
