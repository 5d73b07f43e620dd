from __future__ import annotations

from pathlib import Path

from motion_core.settings import DEFAULT_REGISTRY_URL, Settings


def test_defaults_from_empty_environment() -> None:
    settings = Settings.from_env({"HOME": "/home/dev"})

    assert settings.registry_url == DEFAULT_REGISTRY_URL
    assert settings.registry_ttl_seconds == 600
    assert settings.asset_ttl_seconds == 86400
    assert settings.assume_yes is False
    assert settings.ci is False


def test_environment_overrides(tmp_path: Path) -> None:
    settings = Settings.from_env(
        {
            "MOTION_CORE_REGISTRY_URL": " https://example.test/registry ",
            "MOTION_CORE_CACHE_DIR": str(tmp_path),
            "MOTION_CORE_CACHE_TTL_MS": "1500",
            "MOTION_CORE_ASSET_CACHE_TTL_MS": "-5",
            "MOTION_CORE_CLI_ASSUME_YES": "",
            "CI": "true",
            "MOTION_CORE_LOG_LEVEL": "debug",
        }
    )

    assert settings.registry_url == "https://example.test/registry"
    assert settings.cache_dir == tmp_path
    assert settings.registry_ttl_seconds == 1.5
    assert settings.asset_ttl_seconds == 86400
    assert settings.assume_yes is True
    assert settings.ci is True
    assert settings.log_level == "DEBUG"


def test_cache_dir_prefers_xdg_over_local_app_data() -> None:
    settings = Settings.from_env({"XDG_CACHE_HOME": "/xdg", "LOCALAPPDATA": "/appdata"})
    assert settings.cache_dir == Path("/xdg") / "motion-core"

    settings = Settings.from_env({"LOCALAPPDATA": "/appdata"})
    assert settings.cache_dir == Path("/appdata") / "motion-core"
