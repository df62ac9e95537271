from __future__ import annotations

import logging
from pathlib import Path

import pytest

from adapters.layout.hierarchical import LayoutConfig
from app.config import (
    CONFIG_PATH_ENV,
    LayoutSettings,
    load_settings,
    parse_max_nodes_per_level,
    resolve_config_path,
)


def _write_config(path: Path, body: str) -> Path:
    path.write_text(body, encoding="utf-8")
    return path


def test_defaults_without_config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    settings = load_settings()

    assert settings.layout.to_layout_config() == LayoutConfig()
    assert settings.render.transitive_reduction is True


def test_yaml_config_is_loaded(tmp_path: Path) -> None:
    config_path = _write_config(
        tmp_path / "blocks_graph.yaml",
        "layout:\n  orientation: rtl\n  max_nodes_per_level: 3\n  node_width: 150\n"
        "render:\n  transitive_reduction: false\n",
    )

    settings = load_settings(config_path)

    assert settings.layout.orientation == "rtl"
    assert settings.layout.max_nodes_per_level == 3
    assert settings.layout.node_width == 150
    assert settings.render.transitive_reduction is False


def test_env_overrides_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = _write_config(
        tmp_path / "blocks_graph.yaml", "layout:\n  orientation: rtl\n  node_width: 150\n"
    )
    monkeypatch.setenv("BLOCKS_GRAPH_LAYOUT__ORIENTATION", "BTT")

    settings = load_settings(config_path)

    assert settings.layout.orientation == "btt"
    assert settings.layout.node_width == 150


def test_config_path_from_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = _write_config(tmp_path / "custom.yaml", "layout:\n  vertical_spacing: 40\n")
    monkeypatch.setenv(CONFIG_PATH_ENV, str(config_path))

    assert load_settings().layout.vertical_spacing == 40


def test_missing_config_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="Config file not found"):
        load_settings(tmp_path / "absent.yaml")


def test_invalid_orientation_falls_back(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        settings = LayoutSettings(orientation="diagonal")  # type: ignore[arg-type]

    assert settings.orientation == "ttb"
    assert 'Invalid orientation "diagonal"' in caplog.text


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(None, None), ("", None), ("4", 4), (2, 2), ("0", None), ("-3", None), ("many", None)],
)
def test_parse_max_nodes_per_level(raw: object, expected: int | None) -> None:
    assert parse_max_nodes_per_level(raw) == expected


def test_layout_settings_reject_non_positive_node_size() -> None:
    with pytest.raises(ValueError):
        LayoutSettings(node_width=0)


def test_resolve_config_path_prefers_argument(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    explicit = _write_config(tmp_path / "explicit.yaml", "layout: {}\n")
    from_env = _write_config(tmp_path / "env.yaml", "layout: {}\n")
    monkeypatch.setenv(CONFIG_PATH_ENV, str(from_env))

    assert resolve_config_path(explicit) == explicit
    assert resolve_config_path() == from_env

    monkeypatch.delenv(CONFIG_PATH_ENV)
    assert resolve_config_path() is None
