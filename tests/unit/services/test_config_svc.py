"""Unit tests for ConfigService: layering and settings extraction."""

import os

import pytest

from stagelist.services.config_svc import INTERNAL_MAX_FLEXIBLE_SLOTS, ConfigService


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Run from an empty directory with no STAGELIST_* variables."""
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("STAGELIST_"):
            monkeypatch.delenv(key)
    return tmp_path


class TestConfigService:
    @pytest.mark.unit
    def test_defaults(self) -> None:
        service = ConfigService()

        assert service.get("api.store") == "memory"
        assert service.get("setlist.max_conflict_retries") == 3
        assert service.get("missing.key", "fallback") == "fallback"

    @pytest.mark.unit
    def test_yaml_file_then_env_then_overrides(self, isolated_config, monkeypatch) -> None:
        # Arrange
        (isolated_config / "config").mkdir()
        (isolated_config / "config" / "config.yaml").write_text(
            "api:\n  port: 9000\nsetlist:\n  max_flexible_slots: 6\n", encoding="utf-8"
        )
        monkeypatch.setenv("STAGELIST_API_PORT", "9100")
        monkeypatch.setenv("STAGELIST_SETLIST_ELEVATED_ROLES", "leader, host")

        # Act
        service = ConfigService(overrides={"api": {"host": "127.0.0.1"}})

        # Assert
        assert service.get("api.port") == 9100
        assert service.get("api.host") == "127.0.0.1"
        settings = service.make_setlist_settings()
        assert settings.max_flexible_slots == 6
        assert settings.elevated_roles == frozenset({"leader", "host"})

    @pytest.mark.unit
    def test_unknown_env_keys_are_ignored(self, monkeypatch) -> None:
        monkeypatch.setenv("STAGELIST_API_COLOUR", "red")

        assert ConfigService().get("api.colour") is None

    @pytest.mark.unit
    def test_slot_limit_is_clamped_to_hard_ceiling(self) -> None:
        service = ConfigService(overrides={"setlist": {"max_flexible_slots": 50, "max_conflict_retries": -2}})

        settings = service.make_setlist_settings()

        assert settings.max_flexible_slots == INTERNAL_MAX_FLEXIBLE_SLOTS
        assert settings.max_conflict_retries == 0

    @pytest.mark.unit
    def test_gesture_thresholds(self) -> None:
        thresholds = ConfigService(overrides={"gestures": {"min_swipe_distance": 120}}).make_gesture_thresholds()

        assert thresholds.min_swipe_distance == 120.0
        assert thresholds.drop_margin == 50.0

    @pytest.mark.unit
    def test_unreadable_yaml_is_ignored(self, isolated_config) -> None:
        (isolated_config / "config").mkdir()
        (isolated_config / "config" / "config.yaml").write_text("- just\n- a list\n", encoding="utf-8")

        assert ConfigService().get("api.port") == 8400

    @pytest.mark.unit
    def test_internal_info(self) -> None:
        info = ConfigService().get_internal_info()

        assert info.api_prefix == "/api"
        assert info.max_flexible_slots_hard_limit == INTERNAL_MAX_FLEXIBLE_SLOTS
