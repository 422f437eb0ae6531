"""Tests for the sitedata config loader."""

from __future__ import annotations

import warnings
from pathlib import Path

import pytest
import yaml

from sitedata.config import (
    PROJECT_CONFIG_NAME,
    ConfigError,
    SiteDataConfig,
    config_to_dict,
    load_config,
    write_default_config,
)
from sitedata.normalize.models import ResourceType


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SITEDATA_OUTPUT_DIR", raising=False)


def _write_yaml(path: Path, data: dict) -> None:
    path.write_text(yaml.dump(data), encoding="utf-8")


# ---------------------------------------------------------------------------
# Defaults — no config file present
# ---------------------------------------------------------------------------


def test_load_config_defaults_no_file(tmp_path: Path) -> None:
    """No sitedata.yaml → the built-in corpus layout."""
    cfg = load_config(project_dir=tmp_path)

    assert cfg.output.directory == "api"
    assert cfg.output.version == "1.0.0"
    assert [c.name for c in cfg.collections] == ["configurations", "prompts", "tools"]
    assert [c.directory for c in cfg.collections] == [
        "data/claude-configs",
        "data/prompts",
        "data/tools",
    ]
    assert [c.type for c in cfg.collections] == [
        ResourceType.CONFIGURATION,
        ResourceType.PROMPT_TEMPLATE,
        ResourceType.EXTERNAL,
    ]
    assert cfg.collections[1].exclude == ["prompts.ts"]
    assert cfg.collections[1].content_field == "prompt"
    assert cfg.collections[2].exclude == ["tools.ts"]
    assert cfg.categories.source == "data/categories.ts"
    assert cfg.categories.table.resolve("Tools & CLI") == "tools-cli"
    assert cfg.defaults.difficulty == "ADVANCED"
    assert cfg.defaults.last_updated == "2024-01-31"


def test_load_config_defaults_to_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write_yaml(tmp_path / PROJECT_CONFIG_NAME, {"output": {"directory": "public/api"}})
    monkeypatch.chdir(tmp_path)
    assert load_config().output.directory == "public/api"


def test_load_config_empty_file(tmp_path: Path) -> None:
    """Empty sitedata.yaml → defaults (no crash)."""
    (tmp_path / PROJECT_CONFIG_NAME).write_text("", encoding="utf-8")
    cfg = load_config(project_dir=tmp_path)
    assert cfg.output.directory == "api"


# ---------------------------------------------------------------------------
# Project config
# ---------------------------------------------------------------------------


def test_project_output_overrides(tmp_path: Path) -> None:
    _write_yaml(tmp_path / PROJECT_CONFIG_NAME, {"output": {"directory": "out", "version": "2.0.0"}})
    cfg = load_config(project_dir=tmp_path)
    assert cfg.output.directory == "out"
    assert cfg.output.version == "2.0.0"


def test_project_collections_replace_defaults(tmp_path: Path) -> None:
    _write_yaml(
        tmp_path / PROJECT_CONFIG_NAME,
        {
            "collections": [
                {"name": "guides", "directory": "content/guides", "type": "CONFIGURATION", "suffix": ".js"},
            ]
        },
    )
    cfg = load_config(project_dir=tmp_path)
    assert len(cfg.collections) == 1
    guides = cfg.collections[0]
    assert guides.name == "guides"
    assert guides.suffix == ".js"
    assert guides.exclude == []
    assert guides.content_field is None


def test_project_categories_mapping(tmp_path: Path) -> None:
    _write_yaml(
        tmp_path / PROJECT_CONFIG_NAME,
        {"categories": {"default_id": "misc", "mapping": {"Backend": "backend"}}},
    )
    cfg = load_config(project_dir=tmp_path)
    assert cfg.categories.table.resolve("Backend") == "backend"
    assert cfg.categories.table.resolve("Tools & CLI") == "misc"
    assert cfg.categories.source == "data/categories.ts"


def test_project_categories_default_id_only_keeps_mapping(tmp_path: Path) -> None:
    _write_yaml(tmp_path / PROJECT_CONFIG_NAME, {"categories": {"default_id": "misc"}})
    table = load_config(project_dir=tmp_path).categories.table
    assert table.resolve("Prompt Templates") == "prompt-templates"
    assert table.resolve("Unknown") == "misc"


def test_project_defaults_unquoted_date(tmp_path: Path) -> None:
    """YAML reads 2024-05-01 as a date; it comes back as the ISO string."""
    (tmp_path / PROJECT_CONFIG_NAME).write_text(
        "defaults:\n  last_updated: 2024-05-01\n  difficulty: BEGINNER\n",
        encoding="utf-8",
    )
    cfg = load_config(project_dir=tmp_path)
    assert cfg.defaults.last_updated == "2024-05-01"
    assert cfg.defaults.difficulty == "BEGINNER"
    assert cfg.defaults.author["name"] == "Claude Code Directory"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


def test_explicit_missing_config_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config(project_dir=tmp_path, config_path=tmp_path / "custom.yaml")


def test_explicit_config_path_used(tmp_path: Path) -> None:
    custom = tmp_path / "custom.yaml"
    _write_yaml(custom, {"output": {"directory": "custom-out"}})
    assert load_config(project_dir=tmp_path, config_path=custom).output.directory == "custom-out"


def test_invalid_yaml_raises(tmp_path: Path) -> None:
    (tmp_path / PROJECT_CONFIG_NAME).write_text("output: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="not valid YAML"):
        load_config(project_dir=tmp_path)


def test_non_mapping_document_raises(tmp_path: Path) -> None:
    (tmp_path / PROJECT_CONFIG_NAME).write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="mapping at the top level"):
        load_config(project_dir=tmp_path)


def test_unknown_collection_type_raises(tmp_path: Path) -> None:
    _write_yaml(
        tmp_path / PROJECT_CONFIG_NAME,
        {"collections": [{"name": "x", "directory": "x", "type": "PLUGIN"}]},
    )
    with pytest.raises(ConfigError, match="Unknown collection type 'PLUGIN'"):
        load_config(project_dir=tmp_path)


def test_collection_without_directory_raises(tmp_path: Path) -> None:
    _write_yaml(tmp_path / PROJECT_CONFIG_NAME, {"collections": [{"name": "x"}]})
    with pytest.raises(ConfigError, match="needs 'name', 'directory'"):
        load_config(project_dir=tmp_path)


def test_section_not_mapping_raises(tmp_path: Path) -> None:
    _write_yaml(tmp_path / PROJECT_CONFIG_NAME, {"output": "api"})
    with pytest.raises(ConfigError, match="'output'.*must be a mapping"):
        load_config(project_dir=tmp_path)


# ---------------------------------------------------------------------------
# Unknown key warnings
# ---------------------------------------------------------------------------


def test_unknown_top_level_key_warns(tmp_path: Path) -> None:
    _write_yaml(tmp_path / PROJECT_CONFIG_NAME, {"outptu": {"directory": "x"}})

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        cfg = load_config(project_dir=tmp_path)

    assert any("outptu" in str(w.message) for w in caught)
    assert cfg.output.directory == "api"


# ---------------------------------------------------------------------------
# Environment overrides
# ---------------------------------------------------------------------------


def test_env_output_dir_overrides_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """SITEDATA_OUTPUT_DIR env var overrides config file value."""
    _write_yaml(tmp_path / PROJECT_CONFIG_NAME, {"output": {"directory": "from-file"}})
    monkeypatch.setenv("SITEDATA_OUTPUT_DIR", "from-env")
    assert load_config(project_dir=tmp_path).output.directory == "from-env"


def test_empty_env_output_dir_is_ignored(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SITEDATA_OUTPUT_DIR", "")
    assert load_config(project_dir=tmp_path).output.directory == "api"


# ---------------------------------------------------------------------------
# write_default_config
# ---------------------------------------------------------------------------


def test_write_default_config_reloads_to_defaults(tmp_path: Path) -> None:
    path = write_default_config(tmp_path / PROJECT_CONFIG_NAME)
    assert path.read_text(encoding="utf-8").startswith("# sitedata configuration")
    assert config_to_dict(load_config(project_dir=tmp_path)) == config_to_dict(SiteDataConfig())


def test_write_default_config_keeps_unicode(tmp_path: Path) -> None:
    path = write_default_config(tmp_path / PROJECT_CONFIG_NAME)
    assert "Tools & CLI" in path.read_text(encoding="utf-8")
