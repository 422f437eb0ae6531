"""Record normalization — raw content records onto the site's output schema."""

from sitedata.normalize.category import DEFAULT_CATEGORY_TABLE, CategoryTable, normalize_category
from sitedata.normalize.models import RecordError, Resource, ResourceDefaults, ResourceType
from sitedata.normalize.resource import derive_tagline, normalize_resource

__all__ = [
    "CategoryTable",
    "DEFAULT_CATEGORY_TABLE",
    "RecordError",
    "Resource",
    "ResourceDefaults",
    "ResourceType",
    "derive_tagline",
    "normalize_category",
    "normalize_resource",
]
