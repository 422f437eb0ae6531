"""sitedata configuration loader.

Priority (high → low):
  1. CLI flags           (handled at call site — not in this module)
  2. Environment variables  (SITEDATA_OUTPUT_DIR)
  3. Per-project sitedata.yaml  (project root)
  4. Hardcoded defaults  (the corpus layout under data/, output to api/)

Every path in the config is relative to the project root.
All YAML reads use yaml.safe_load() — never yaml.load().
"""

from __future__ import annotations

import os
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from sitedata.artifacts.writer import ARTIFACT_VERSION
from sitedata.corpus.reader import DEFAULT_SUFFIX
from sitedata.normalize.category import DEFAULT_CATEGORY_TABLE, CategoryTable
from sitedata.normalize.models import ResourceDefaults, ResourceType

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

PROJECT_CONFIG_NAME: str = "sitedata.yaml"

# Known top-level sections; unknown keys produce a warning
_KNOWN_SECTIONS: frozenset[str] = frozenset(["output", "collections", "categories", "defaults"])


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a config file is missing, malformed, or holds an invalid value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class OutputCfg:
    """Artifact output (sitedata.yaml: output:)."""

    directory: str = "api"
    version: str = ARTIFACT_VERSION


@dataclass
class CollectionCfg:
    """One content collection (sitedata.yaml: collections[]).

    Attributes:
        name: Collection label used in skip notices and the build summary.
        directory: Source directory, relative to the project root.
        type: Resource type tag assigned to every record of the collection.
        suffix: Content-file suffix filter.
        exclude: Index/barrel file names that only re-export other files.
        content_field: Record field holding the body text when it is not
            ``content`` (prompt templates keep theirs under ``prompt``).
    """

    name: str
    directory: str
    type: ResourceType
    suffix: str = DEFAULT_SUFFIX
    exclude: list[str] = field(default_factory=list)
    content_field: str | None = None


def _default_collections() -> list[CollectionCfg]:
    return [
        CollectionCfg(
            name="configurations",
            directory="data/claude-configs",
            type=ResourceType.CONFIGURATION,
        ),
        CollectionCfg(
            name="prompts",
            directory="data/prompts",
            type=ResourceType.PROMPT_TEMPLATE,
            exclude=["prompts.ts"],
            content_field="prompt",
        ),
        CollectionCfg(
            name="tools",
            directory="data/tools",
            type=ResourceType.EXTERNAL,
            exclude=["tools.ts"],
        ),
    ]


@dataclass
class CategoriesCfg:
    """Category source and display-name table (sitedata.yaml: categories:)."""

    source: str = "data/categories.ts"
    declaration: str = "categories"  # name of the const holding the array
    table: CategoryTable = DEFAULT_CATEGORY_TABLE


@dataclass
class SiteDataConfig:
    """Root configuration object, built by load_config()."""

    output: OutputCfg = field(default_factory=OutputCfg)
    collections: list[CollectionCfg] = field(default_factory=_default_collections)
    categories: CategoriesCfg = field(default_factory=CategoriesCfg)
    defaults: ResourceDefaults = field(default_factory=ResourceDefaults)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}' — ignored.",
                UserWarning,
                stacklevel=4,
            )


def _section(data: dict[str, Any], key: str, source: Path) -> dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' in '{source}' must be a mapping, got {type(value).__name__}.")
    return value


def _parse_type(value: Any, source: Path) -> ResourceType:
    try:
        return ResourceType(str(value))
    except ValueError:
        allowed = ", ".join(t.value for t in ResourceType)
        raise ConfigError(
            f"Unknown collection type '{value}' in '{source}'.\n"
            f"  Allowed types: {allowed}"
        ) from None


# ---------------------------------------------------------------------------
# Build
# ---------------------------------------------------------------------------


def _cfg_from_dict(data: dict[str, Any], source: Path) -> SiteDataConfig:
    """Build a *SiteDataConfig* from a raw YAML dict."""
    cfg = SiteDataConfig()

    if "output" in data:
        o = _section(data, "output", source)
        cfg.output = OutputCfg(
            directory=str(o.get("directory", cfg.output.directory)),
            version=str(o.get("version", cfg.output.version)),
        )

    if "collections" in data:
        raw_collections = data["collections"] or []
        if not isinstance(raw_collections, list):
            raise ConfigError(f"'collections' in '{source}' must be a list.")
        collections: list[CollectionCfg] = []
        for c in raw_collections:
            if not isinstance(c, dict) or "name" not in c or "directory" not in c:
                raise ConfigError(
                    f"Each entry of 'collections' in '{source}' needs 'name', 'directory' and 'type'."
                )
            collections.append(
                CollectionCfg(
                    name=str(c["name"]),
                    directory=str(c["directory"]),
                    type=_parse_type(c.get("type"), source),
                    suffix=str(c.get("suffix", DEFAULT_SUFFIX)),
                    exclude=[str(x) for x in c.get("exclude") or []],
                    content_field=c.get("content_field"),
                )
            )
        cfg.collections = collections

    if "categories" in data:
        ca = _section(data, "categories", source)
        table = cfg.categories.table
        if "mapping" in ca or "default_id" in ca:
            mapping = ca.get("mapping", table.mapping) or {}
            if not isinstance(mapping, dict):
                raise ConfigError(f"'categories.mapping' in '{source}' must be a mapping.")
            table = CategoryTable.from_mapping(
                {str(k): str(v) for k, v in mapping.items()},
                default_id=str(ca.get("default_id", table.default_id)),
            )
        cfg.categories = CategoriesCfg(
            source=str(ca.get("source", cfg.categories.source)),
            declaration=str(ca.get("declaration", cfg.categories.declaration)),
            table=table,
        )

    if "defaults" in data:
        d = _section(data, "defaults", source)
        author = d.get("author", cfg.defaults.author)
        if not isinstance(author, dict):
            raise ConfigError(f"'defaults.author' in '{source}' must be a mapping.")
        cfg.defaults = ResourceDefaults(
            author=dict(author),
            difficulty=str(d.get("difficulty", cfg.defaults.difficulty)),
            # YAML reads an unquoted 2024-01-31 as a date; str() restores it.
            last_updated=str(d.get("last_updated", cfg.defaults.last_updated)),
        )

    return cfg


def _apply_env_overrides(cfg: SiteDataConfig) -> SiteDataConfig:
    """Apply SITEDATA_* environment variable overrides (layer 2)."""
    if directory := os.environ.get("SITEDATA_OUTPUT_DIR"):
        cfg.output.directory = directory
    return cfg


def config_to_dict(cfg: SiteDataConfig) -> dict[str, Any]:
    """Plain-dict form of *cfg*, in the layout sitedata.yaml uses."""
    return {
        "output": {
            "directory": cfg.output.directory,
            "version": cfg.output.version,
        },
        "collections": [
            {
                "name": c.name,
                "directory": c.directory,
                "type": c.type.value,
                "suffix": c.suffix,
                "exclude": list(c.exclude),
                "content_field": c.content_field,
            }
            for c in cfg.collections
        ],
        "categories": {
            "source": cfg.categories.source,
            "declaration": cfg.categories.declaration,
            "default_id": cfg.categories.table.default_id,
            "mapping": dict(cfg.categories.table.mapping),
        },
        "defaults": {
            "author": dict(cfg.defaults.author),
            "difficulty": cfg.defaults.difficulty,
            "last_updated": cfg.defaults.last_updated,
        },
    }


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    config_path: Path | None = None,
) -> SiteDataConfig:
    """Load and return a merged *SiteDataConfig*.

    Applies layers in order: defaults → sitedata.yaml → env vars.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *sitedata.yaml*. Defaults to CWD.
        config_path: Explicit config file; unlike the project default, it
            must exist.

    Returns:
        Fully merged *SiteDataConfig* with env var overrides applied.

    Raises:
        ConfigError: If the explicit config file is missing, the document is
            not a mapping, or a value is invalid.
    """
    search_dir = project_dir if project_dir is not None else Path.cwd()
    path = config_path if config_path is not None else search_dir / PROJECT_CONFIG_NAME

    cfg = SiteDataConfig()
    if path.exists():
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Config file '{path}' is not valid YAML: {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigError(f"Config file '{path}' must contain a mapping at the top level.")
        _warn_unknown_keys(raw, path)
        cfg = _cfg_from_dict(raw, path)
    elif config_path is not None:
        raise ConfigError(f"Config file not found: '{config_path}'")

    return _apply_env_overrides(cfg)


def write_default_config(path: Path) -> Path:
    """Write the default configuration to *path* as YAML and return *path*."""
    header = (
        "# sitedata configuration — paths are relative to the project root.\n"
        "# Delete a section to fall back to its built-in defaults.\n"
        "\n"
    )
    body = yaml.safe_dump(
        config_to_dict(SiteDataConfig()),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(header + body, encoding="utf-8")
    return path
