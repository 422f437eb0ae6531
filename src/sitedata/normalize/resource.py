"""Record normalizer — raw content record → ``Resource``.

Every field the output schema declares as always-present is resolved here:

  slug         → ``id`` when missing or empty
  tagline      → first sentence of ``description`` (up to and including ".")
  categoryId   → ``CategoryTable.resolve(category)``, default id if unmapped
  tags         → ``[]`` unless a list
  author       → ``ResourceDefaults.author``
  stats        → ``{"votes": 0, "copies": 0}``
  difficulty   → ``ResourceDefaults.difficulty``
  lastUpdated  → ``ResourceDefaults.last_updated``
  featured     → ``False``

Beyond presence and defaulting nothing is validated: an empty title is the
content author's problem. Only a record without ``id`` or ``description``
cannot be mapped at all and raises ``RecordError``.
"""

from __future__ import annotations

from typing import Any

from sitedata.normalize.category import DEFAULT_CATEGORY_TABLE, CategoryTable
from sitedata.normalize.models import RecordError, Resource, ResourceDefaults, ResourceType

_DEFAULT_DEFAULTS = ResourceDefaults()


def derive_tagline(description: str) -> str:
    """Return the first sentence of *description*, period included.

    Without a period the whole description is the tagline.
    """
    head, sep, _ = description.partition(".")
    return head + sep if sep else description


def normalize_resource(
    raw: Any,
    resource_type: ResourceType | str,
    *,
    categories: CategoryTable = DEFAULT_CATEGORY_TABLE,
    defaults: ResourceDefaults = _DEFAULT_DEFAULTS,
    content: str | None = None,
) -> Resource:
    """Map one raw record onto the unified ``Resource`` schema.

    Args:
        raw: Record object as extracted from a content file.
        resource_type: Collection tag assigned by the caller.
        categories: Display-name → id table for ``categoryId``.
        defaults: Fallback author / difficulty / lastUpdated.
        content: Body text stored under a collection-specific field (e.g. a
            prompt's ``prompt``); replaces ``content`` when non-empty.

    Raises:
        RecordError: If *raw* is not an object or lacks ``id`` / ``description``.
    """
    if not isinstance(raw, dict):
        raise RecordError(f"record is {type(raw).__name__}, expected an object")

    record_id = raw.get("id")
    if not record_id:
        raise RecordError("record has no 'id'")
    description = raw.get("description")
    if not isinstance(description, str):
        raise RecordError(f"record {record_id!r} has no 'description'")

    tags = raw.get("tags")

    return Resource(
        id=record_id,
        title=raw.get("title"),
        slug=raw.get("slug") or record_id,
        tagline=raw.get("tagline") or derive_tagline(description),
        description=description,
        category_id=categories.resolve(raw.get("category")),
        type=ResourceType(resource_type),
        content=content or raw.get("content"),
        url=raw.get("url"),
        tags=tuple(tags) if isinstance(tags, list) else (),
        author=raw.get("author") or dict(defaults.author),
        stats=raw.get("stats") or {"votes": 0, "copies": 0},
        difficulty=raw.get("difficulty") or defaults.difficulty,
        language=raw.get("language"),
        framework=raw.get("framework"),
        last_updated=raw.get("lastUpdated") or defaults.last_updated,
        featured=bool(raw.get("featured")),
    )
