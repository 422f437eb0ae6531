"""Build pipeline: read → extract → normalize per collection, then write.

Per-file failures (no export found, literal not parseable, record not
mappable) are skip-and-continue: the file contributes nothing and the skip is
reported through ``on_skip``. Everything else — a missing content directory,
an unreadable file, a missing categories file, an output write failure —
propagates and aborts the run.

Usage:
    result = run_build(load_config(root), root, on_skip=print)
    print(len(result.resources), result.paths.resources)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from sitedata.artifacts.writer import ArtifactPaths, write_artifacts
from sitedata.config import CollectionCfg, SiteDataConfig
from sitedata.corpus.extractor import (
    ExtractionError,
    as_records,
    declaration_pattern,
    extract_literal,
)
from sitedata.corpus.reader import read_source, read_sources
from sitedata.normalize.category import DEFAULT_CATEGORY_TABLE, CategoryTable, normalize_category
from sitedata.normalize.models import RecordError, Resource, ResourceDefaults, ResourceType
from sitedata.normalize.resource import normalize_resource

CATEGORIES_LABEL = "categories"


@dataclass(frozen=True)
class SkippedFile:
    collection: str
    name: str
    reason: str


SkipCallback = Callable[[SkippedFile], None]


@dataclass
class CollectionResult:
    name: str
    type: ResourceType
    files: int = 0
    resources: list[Resource] = field(default_factory=list)
    skipped: list[SkippedFile] = field(default_factory=list)
    unmapped_categories: set[str] = field(default_factory=set)


@dataclass
class BuildResult:
    collections: list[CollectionResult]
    categories: list[dict[str, Any]]
    output_dir: Path
    category_skips: list[SkippedFile] = field(default_factory=list)
    paths: ArtifactPaths | None = None  # None on a dry run

    @property
    def resources(self) -> list[Resource]:
        return [r for c in self.collections for r in c.resources]

    @property
    def skipped(self) -> list[SkippedFile]:
        return [s for c in self.collections for s in c.skipped] + self.category_skips


# ------------------------------------------------------------------
# Collections
# ------------------------------------------------------------------


def normalize_records(
    records: list[Any],
    collection: CollectionCfg,
    *,
    categories: CategoryTable = DEFAULT_CATEGORY_TABLE,
    defaults: ResourceDefaults | None = None,
) -> list[Resource]:
    """Normalize the records extracted from one content file.

    All-or-nothing: if any record fails, the whole file is rejected.

    Raises:
        RecordError: If one of the records cannot be normalized.
    """
    defaults = defaults or ResourceDefaults()
    resources = []
    for raw in records:
        override = None
        if collection.content_field and isinstance(raw, dict):
            override = raw.get(collection.content_field)
        resources.append(
            normalize_resource(
                raw,
                collection.type,
                categories=categories,
                defaults=defaults,
                content=override,
            )
        )
    return resources


def transform_collection(
    root: Path,
    collection: CollectionCfg,
    *,
    categories: CategoryTable = DEFAULT_CATEGORY_TABLE,
    defaults: ResourceDefaults | None = None,
    on_skip: SkipCallback | None = None,
) -> CollectionResult:
    """Read and normalize one collection directory, skipping bad files.

    Raises:
        SourceDirectoryError: If the collection directory does not exist.
        SourceReadError: If a file in it cannot be read.
    """
    sources = read_sources(
        root / collection.directory,
        suffix=collection.suffix,
        exclude=collection.exclude,
    )
    result = CollectionResult(name=collection.name, type=collection.type, files=len(sources))

    for source in sources:
        try:
            records = as_records(extract_literal(source.text))
            resources = normalize_records(
                records, collection, categories=categories, defaults=defaults
            )
        except (ExtractionError, RecordError) as exc:
            skip = SkippedFile(collection=collection.name, name=source.name, reason=str(exc))
            result.skipped.append(skip)
            if on_skip is not None:
                on_skip(skip)
            continue

        result.resources.extend(resources)
        result.unmapped_categories.update(
            raw["category"]
            for raw in records
            if isinstance(raw.get("category"), str) and not categories.is_mapped(raw["category"])
        )

    return result


# ------------------------------------------------------------------
# Categories
# ------------------------------------------------------------------


def transform_categories(
    path: Path,
    declaration: str = "categories",
    *,
    on_skip: SkipCallback | None = None,
) -> tuple[list[dict[str, Any]], list[SkippedFile]]:
    """Extract and normalize the category descriptors in *path*.

    An unparseable categories file is reported as a skip and yields no
    categories; a missing one is fatal.

    Returns:
        ``(categories, skipped)``.

    Raises:
        SourceReadError: If *path* cannot be read.
    """
    source = read_source(path)
    try:
        records = as_records(extract_literal(source.text, declaration_pattern(declaration)))
        return [normalize_category(r) for r in records], []
    except (ExtractionError, RecordError) as exc:
        skip = SkippedFile(collection=CATEGORIES_LABEL, name=source.name, reason=str(exc))
        if on_skip is not None:
            on_skip(skip)
        return [], [skip]


# ------------------------------------------------------------------
# Whole build
# ------------------------------------------------------------------


def run_build(
    cfg: SiteDataConfig,
    root: Path,
    *,
    output_dir: Path | None = None,
    dry_run: bool = False,
    on_skip: SkipCallback | None = None,
    now: datetime | None = None,
) -> BuildResult:
    """Run the full pipeline for the project at *root*.

    Args:
        cfg: Loaded configuration.
        root: Project root that every configured path is relative to.
        output_dir: Override for ``cfg.output.directory``.
        dry_run: Stop before writing anything.
        on_skip: Called once per skipped file, as it is skipped.
        now: Run timestamp for ``meta.generated_at`` (default: current time).

    Raises:
        SourceError: On a missing content directory or unreadable file.
        OSError: If the artifacts cannot be written.
    """
    collections = [
        transform_collection(
            root,
            collection,
            categories=cfg.categories.table,
            defaults=cfg.defaults,
            on_skip=on_skip,
        )
        for collection in cfg.collections
    ]
    categories, category_skips = transform_categories(
        root / cfg.categories.source,
        cfg.categories.declaration,
        on_skip=on_skip,
    )

    target = output_dir if output_dir is not None else root / cfg.output.directory
    result = BuildResult(
        collections=collections,
        categories=categories,
        output_dir=target,
        category_skips=category_skips,
    )
    if dry_run:
        return result

    result.paths = write_artifacts(
        target,
        result.resources,
        categories,
        generated_at=now,
        version=cfg.output.version,
        default_last_updated=cfg.defaults.last_updated,
    )
    return result
