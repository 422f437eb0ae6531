"""Output models shared by the normalizer and the artifact writer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class RecordError(ValueError):
    """Raised when a raw record cannot be mapped onto the output schema."""


class ResourceType(str, Enum):
    """Which collection a resource came from."""

    CONFIGURATION = "CONFIGURATION"
    PROMPT_TEMPLATE = "PROMPT_TEMPLATE"
    EXTERNAL = "EXTERNAL"


def _default_author() -> dict[str, str]:
    return {"name": "Claude Code Directory", "url": "https://claudecode.directory"}


@dataclass(frozen=True)
class ResourceDefaults:
    """Values filled in when a raw record leaves a field out."""

    author: dict[str, Any] = field(default_factory=_default_author)
    difficulty: str = "ADVANCED"
    last_updated: str = "2024-01-31"


@dataclass(frozen=True)
class Resource:
    id: str
    title: str | None
    slug: str
    tagline: str
    description: str
    category_id: str
    type: ResourceType
    tags: tuple[str, ...]
    author: dict[str, Any]
    stats: dict[str, Any]
    difficulty: str
    last_updated: str
    featured: bool
    content: str | None = None   # inline body, omitted from JSON when absent
    url: str | None = None
    language: str | None = None
    framework: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON shape consumed by the site: camelCase keys, absent fields omitted."""
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "tagline": self.tagline,
            "description": self.description,
            "categoryId": self.category_id,
            "type": self.type.value,
            "content": self.content,
            "url": self.url,
            "tags": list(self.tags),
            "author": self.author,
            "stats": self.stats,
            "difficulty": self.difficulty,
            "language": self.language,
            "framework": self.framework,
            "lastUpdated": self.last_updated,
            "featured": self.featured,
        }
        return {k: v for k, v in data.items() if v is not None or k not in _OMIT_IF_NONE}


_OMIT_IF_NONE = frozenset(["title", "content", "url", "language", "framework"])
