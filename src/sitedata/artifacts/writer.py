"""Artifact writer: normalized collections → JSON envelopes on disk.

Writes into one output directory (created if missing):

  resources.json       {data: [Resource…],  meta: {total, generated_at, version}}
  configurations.json  {data: [Resource…],  meta: {total, type, generated_at, version}}
  prompts.json         (same, PROMPT_TEMPLATE only)
  tools.json           (same, EXTERNAL only)
  featured.json        {data: [Resource…],  meta: {total, limit, generated_at, version}}
  popular.json         {data: [Resource…],  meta: {total, limit, generated_at, version}}
  categories.json      {data: [Category…],  meta: {total, generated_at, version}}
  stats.json           {data: {counters…},  meta: {generated_at, version}}
  search.json          {data: {resources, tags, languages, frameworks, authors},
                        meta: {total, generated_at, version}}
  manifest.json        {name, description, version, generated_at, endpoints, stats}

Only the run timestamp depends on the clock; every other value is a pure
function of the corpus, so re-running over unchanged input reproduces it
byte for byte. Each file is written atomically (temp file → rename).
"""

from __future__ import annotations

import json
import math
import os
import tempfile
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from sitedata.normalize.models import Resource, ResourceDefaults, ResourceType

ARTIFACT_VERSION = "1.0.0"
ARTIFACT_MODE = 0o644

RESOURCES_FILE = "resources.json"
CATEGORIES_FILE = "categories.json"
STATS_FILE = "stats.json"
SEARCH_FILE = "search.json"
FEATURED_FILE = "featured.json"
POPULAR_FILE = "popular.json"
MANIFEST_FILE = "manifest.json"

FEATURED_LIMIT = 12
POPULAR_LIMIT = 15

MANIFEST_NAME = "Claude Code Directory Data"
MANIFEST_DESCRIPTION = "Static data repository for Claude Code Directory"

# Fixed placeholders until contributor / copy tracking exists.
_TOTAL_CONTRIBUTORS = 1
_TOTAL_COPIES = 0

_TYPE_KEYS = {
    ResourceType.CONFIGURATION: "configurations",
    ResourceType.PROMPT_TEMPLATE: "prompts",
    ResourceType.EXTERNAL: "tools",
}
_DIFFICULTIES = ("BEGINNER", "INTERMEDIATE", "ADVANCED")


@dataclass(frozen=True)
class ArtifactPaths:
    resources: Path
    categories: Path
    stats: Path
    search: Path
    by_type: dict[ResourceType, Path]
    featured: Path
    popular: Path
    manifest: Path

    def all(self) -> list[Path]:
        """Every written file, manifest last."""
        return [
            self.resources,
            *self.by_type.values(),
            self.featured,
            self.popular,
            self.categories,
            self.stats,
            self.search,
            self.manifest,
        ]


# ------------------------------------------------------------------
# Payload builders
# ------------------------------------------------------------------


def iso_timestamp(moment: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a ``Z`` suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def envelope(
    data: Any,
    generated_at: str,
    *,
    version: str = ARTIFACT_VERSION,
    total: int | None = None,
    extra: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Wrap *data* as ``{data, meta}``.

    ``meta.total`` is present only when *total* is given; *extra* keys (a
    split's ``type``, a ranking's ``limit``) follow it.
    """
    meta: dict[str, Any] = {}
    if total is not None:
        meta["total"] = total
    meta.update(extra or {})
    meta["generated_at"] = generated_at
    meta["version"] = version
    return {"data": data, "meta": meta}


def build_stats(
    resources: Sequence[Resource],
    categories: Sequence[dict[str, Any]],
    *,
    default_last_updated: str = ResourceDefaults.last_updated,
) -> dict[str, Any]:
    """Aggregate corpus counters for ``stats.json``.

    ``lastUpdated`` is the newest resource ``lastUpdated`` (ISO dates sort
    lexically), or *default_last_updated* for an empty corpus.
    """
    last_updated = max(
        (r.last_updated for r in resources if isinstance(r.last_updated, str)),
        default=default_last_updated,
    )
    return {
        "totalResources": len(resources),
        "totalCategories": len(categories),
        "totalContributors": _TOTAL_CONTRIBUTORS,
        "totalCopies": _TOTAL_COPIES,
        "lastUpdated": last_updated,
        "breakdown": {
            "by_type": {
                key: sum(1 for r in resources if r.type is rtype)
                for rtype, key in _TYPE_KEYS.items()
            },
            "by_difficulty": {
                level.lower(): sum(1 for r in resources if r.difficulty == level)
                for level in _DIFFICULTIES
            },
            "by_category": [
                {
                    "id": cat.get("id"),
                    "name": cat.get("name"),
                    "count": sum(1 for r in resources if r.category_id == cat.get("id")),
                }
                for cat in categories
            ],
            "featured_count": sum(1 for r in resources if r.featured),
        },
    }


def build_search_index(resources: Sequence[Resource]) -> dict[str, Any]:
    """Client-side search payload: slim resource entries plus facet lists."""
    entries = []
    for r in resources:
        entry = {
            "id": r.id,
            "title": r.title,
            "description": r.description,
            "tags": list(r.tags),
            "categoryId": r.category_id,
            "type": r.type.value,
            "difficulty": r.difficulty,
            "language": r.language,
            "framework": r.framework,
            "slug": r.slug,
        }
        entries.append({k: v for k, v in entry.items() if v is not None})

    return {
        "resources": entries,
        "tags": _facet(t for r in resources for t in r.tags),
        "languages": _facet(r.language for r in resources),
        "frameworks": _facet(r.framework for r in resources),
        "authors": _facet(r.author.get("name") for r in resources if isinstance(r.author, dict)),
    }


def _facet(values) -> list[str]:
    return sorted({v for v in values if isinstance(v, str) and v})


def _stat(resource: Resource, key: str) -> int | float:
    value = resource.stats.get(key) if isinstance(resource.stats, dict) else None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        return 0
    return value


def select_featured(resources: Sequence[Resource]) -> list[Resource]:
    """Featured resources, most votes first; ties keep corpus order."""
    return sorted((r for r in resources if r.featured), key=lambda r: -_stat(r, "votes"))


def select_popular(resources: Sequence[Resource]) -> list[Resource]:
    """All resources, most copies first; ties keep corpus order."""
    return sorted(resources, key=lambda r: -_stat(r, "copies"))


def build_manifest(
    paths: ArtifactPaths,
    stats: dict[str, Any],
    generated_at: str,
    *,
    version: str = ARTIFACT_VERSION,
) -> dict[str, Any]:
    """Index of the written artifacts plus headline counters.

    Endpoints are file names relative to the output directory.
    """
    return {
        "name": MANIFEST_NAME,
        "description": MANIFEST_DESCRIPTION,
        "version": version,
        "generated_at": generated_at,
        "endpoints": {
            "categories": paths.categories.name,
            "resources": {
                "all": paths.resources.name,
                **{_TYPE_KEYS[rtype]: path.name for rtype, path in paths.by_type.items()},
                "featured": paths.featured.name,
                "popular": paths.popular.name,
            },
            "stats": paths.stats.name,
            "search": paths.search.name,
        },
        "stats": {
            "total_resources": stats["totalResources"],
            "total_categories": stats["totalCategories"],
            "total_contributors": stats["totalContributors"],
            "last_updated": stats["lastUpdated"],
        },
    }


# ------------------------------------------------------------------
# Writing
# ------------------------------------------------------------------


def dumps(payload: Any) -> str:
    """Pretty-printed JSON, two-space indent, non-ASCII kept as-is."""
    return json.dumps(_finite(payload), indent=2, ensure_ascii=False, allow_nan=False)


def _finite(value: Any) -> Any:
    """Replace NaN and infinities with None, as JSON.stringify does."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {k: _finite(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_finite(v) for v in value]
    return value


def write_json(path: Path, payload: Any) -> None:
    """Write *payload* to *path* atomically (temp → rename).

    Creates parent directories if needed. The file ends up with mode 0644.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(dumps(payload))
        os.chmod(tmp_path, ARTIFACT_MODE)
        os.replace(tmp_path, path)
    except Exception:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def write_artifacts(
    output_dir: Path,
    resources: Sequence[Resource],
    categories: Sequence[dict[str, Any]],
    *,
    generated_at: datetime | None = None,
    version: str = ARTIFACT_VERSION,
    default_last_updated: str = ResourceDefaults.last_updated,
) -> ArtifactPaths:
    """Serialize all artifacts into *output_dir*.

    Args:
        output_dir: Target directory; created if absent (idempotent).
        resources: Normalized resources, in output order.
        categories: Normalized category descriptors.
        generated_at: Run timestamp; defaults to now. One value is shared by
            every artifact of the run.
        version: ``meta.version`` literal.
        default_last_updated: ``stats.lastUpdated`` for an empty corpus.

    Returns:
        Paths of the written files.

    Raises:
        OSError: If the directory cannot be created or a file cannot be written.
    """
    stamp = iso_timestamp(generated_at or datetime.now(timezone.utc))
    output_dir.mkdir(parents=True, exist_ok=True)

    paths = ArtifactPaths(
        resources=output_dir / RESOURCES_FILE,
        categories=output_dir / CATEGORIES_FILE,
        stats=output_dir / STATS_FILE,
        search=output_dir / SEARCH_FILE,
        by_type={rtype: output_dir / f"{key}.json" for rtype, key in _TYPE_KEYS.items()},
        featured=output_dir / FEATURED_FILE,
        popular=output_dir / POPULAR_FILE,
        manifest=output_dir / MANIFEST_FILE,
    )
    stats = build_stats(resources, categories, default_last_updated=default_last_updated)

    write_json(
        paths.resources,
        envelope([r.to_dict() for r in resources], stamp, version=version, total=len(resources)),
    )
    for rtype, path in paths.by_type.items():
        subset = [r.to_dict() for r in resources if r.type is rtype]
        write_json(
            path,
            envelope(subset, stamp, version=version, total=len(subset), extra={"type": rtype.value}),
        )

    featured = select_featured(resources)
    write_json(
        paths.featured,
        envelope(
            [r.to_dict() for r in featured[:FEATURED_LIMIT]],
            stamp,
            version=version,
            total=len(featured),
            extra={"limit": FEATURED_LIMIT},
        ),
    )
    write_json(
        paths.popular,
        envelope(
            [r.to_dict() for r in select_popular(resources)[:POPULAR_LIMIT]],
            stamp,
            version=version,
            total=len(resources),
            extra={"limit": POPULAR_LIMIT},
        ),
    )
    write_json(
        paths.categories,
        envelope(list(categories), stamp, version=version, total=len(categories)),
    )
    write_json(paths.stats, envelope(stats, stamp, version=version))
    write_json(
        paths.search,
        envelope(build_search_index(resources), stamp, version=version, total=len(resources)),
    )
    write_json(paths.manifest, build_manifest(paths, stats, stamp, version=version))
    return paths
