from __future__ import annotations

import json
from pathlib import Path

import pytest

from motion_core.config import CONFIG_SCHEMA_URL, Config, find_config, load_config, save_config, try_load_config
from motion_core.errors import ConfigError


def test_default_config_serializes_camel_case_keys() -> None:
    payload = Config().to_dict()

    assert payload["$schema"] == CONFIG_SCHEMA_URL
    assert payload["tailwind"] == {"css": "src/app.css"}
    assert payload["aliases"]["helpers"] == {
        "filesystem": "src/lib/motion-core/helpers",
        "import": "$lib/motion-core/helpers",
    }
    assert payload["aliasPrefixes"] == {"components": "$lib/motion-core"}
    assert payload["exports"]["components"] == {"barrel": "src/lib/motion-core/index.ts", "strategy": "named"}


def test_partial_config_falls_back_to_defaults() -> None:
    config = Config.from_dict({"aliases": {"components": {"filesystem": "src/ui"}}, "tailwind": {}})

    assert config.aliases.components.filesystem == "src/ui"
    assert config.aliases.components.import_path == "$lib/motion-core"
    assert config.aliases.utils.filesystem == "src/lib/motion-core/utils"
    assert config.tailwind.css == "src/app.css"
    assert config.schema is None


def test_save_and_load(tmp_path: Path) -> None:
    path = tmp_path / "motion-core.json"
    config = Config.from_dict({"tailwind": {"css": "src/styles/app.css"}})

    save_config(path, config)

    assert load_config(path) == config
    assert path.read_text(encoding="utf-8").endswith("}\n")


@pytest.mark.parametrize("text", ["{not json", json.dumps([1, 2]), json.dumps({"tailwind": {"css": 3}})])
def test_invalid_config_raises(tmp_path: Path, text: str) -> None:
    path = tmp_path / "motion-core.json"
    path.write_text(text, encoding="utf-8")

    with pytest.raises(ConfigError) as excinfo:
        load_config(path)
    assert excinfo.value.action == "parse"
    assert excinfo.value.path == path


def test_find_config_walks_up(tmp_path: Path) -> None:
    save_config(tmp_path / "motion-core.json", Config())
    nested = tmp_path / "src" / "routes"
    nested.mkdir(parents=True)

    assert find_config(nested) == (tmp_path / "motion-core.json").resolve()


def test_try_load_config_missing(tmp_path: Path) -> None:
    assert try_load_config(tmp_path / "motion-core.json") is None
