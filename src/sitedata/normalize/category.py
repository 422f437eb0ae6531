"""Category table and category passthrough.

The table maps the human-readable ``category`` string authored on a record
to a stable category id. Lookup is exact and case-sensitive; an unmapped name
resolves to the table's default id.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from sitedata.normalize.models import RecordError


@dataclass(frozen=True)
class CategoryTable:
    """Ordered display-name → category-id mapping with a fallback id."""

    mapping: Mapping[str, str]
    default_id: str

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str], default_id: str) -> CategoryTable:
        return cls(mapping=MappingProxyType(dict(mapping)), default_id=default_id)

    def resolve(self, name: Any) -> str:
        if isinstance(name, str) and name in self.mapping:
            return self.mapping[name]
        return self.default_id

    def is_mapped(self, name: Any) -> bool:
        return isinstance(name, str) and name in self.mapping


DEFAULT_CATEGORY_TABLE = CategoryTable.from_mapping(
    {
        "Claude.md Configurations": "claude-configs",
        "Prompt Templates": "prompt-templates",
        "Tools & CLI": "tools-cli",
    },
    default_id="claude-configs",
)


def normalize_category(raw: Any) -> dict[str, Any]:
    """Pass a category descriptor through with ``featured`` always present.

    A falsy or missing ``featured`` becomes ``False``; any other value is kept
    as authored.
    """
    if not isinstance(raw, dict):
        raise RecordError(f"category entry is {type(raw).__name__}, expected an object")
    return {**raw, "featured": raw.get("featured") or False}
