"""JSON artifact generation for the static site."""

from sitedata.artifacts.writer import (
    ARTIFACT_MODE,
    ARTIFACT_VERSION,
    FEATURED_LIMIT,
    POPULAR_LIMIT,
    ArtifactPaths,
    build_manifest,
    build_search_index,
    build_stats,
    envelope,
    iso_timestamp,
    select_featured,
    select_popular,
    write_artifacts,
    write_json,
)

__all__ = [
    "ARTIFACT_MODE",
    "ARTIFACT_VERSION",
    "FEATURED_LIMIT",
    "POPULAR_LIMIT",
    "ArtifactPaths",
    "build_manifest",
    "build_search_index",
    "build_stats",
    "envelope",
    "iso_timestamp",
    "select_featured",
    "select_popular",
    "write_artifacts",
    "write_json",
]
