"""Record extractor — find a file's exported data literal and parse it.

Export discovery is a text pattern, not a module parse: the first
``export default`` / ``export const NAME[: Type] =`` that is directly followed
by ``[`` or ``{`` wins. The literal's extent is found by the literal parser
itself, so brackets inside strings, template bodies and comments never end it
early.

Usage:
    records = as_records(extract_literal(source.text))
    categories = as_records(extract_literal(text, declaration_pattern("categories")))
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from sitedata.corpus.literal import LiteralSyntaxError, parse_literal

# Optional TypeScript annotation between the binding name and "=".
_TYPE_ANNOTATION = r"(?:\s*:\s*[^=;]+?)?"
_NAME = r"[A-Za-z_$][\w$]*"

EXPORT_PATTERN: re.Pattern[str] = re.compile(
    r"\bexport\s+(?:default\s*|const\s+" + _NAME + _TYPE_ANNOTATION + r"\s*=\s*)(?=[\[{])"
)


class ExtractionError(ValueError):
    """Raised when a file's data literal cannot be located or parsed."""


def declaration_pattern(name: str) -> re.Pattern[str]:
    """Pattern for a ``const NAME[: Type] = [...]`` declaration, exported or not."""
    return re.compile(
        r"(?:\bexport\s+)?\bconst\s+" + re.escape(name) + _TYPE_ANNOTATION + r"\s*=\s*(?=[\[{])"
    )


def extract_literal(
    text: str,
    pattern: re.Pattern[str] = EXPORT_PATTERN,
    *,
    constants: Mapping[str, Any] | None = None,
) -> Any:
    """Return the parsed value of the first data literal *pattern* locates in *text*.

    Args:
        text: Raw source text of one content file.
        pattern: Regex whose match ends right before the literal's opening
            ``[`` or ``{``.
        constants: Extra identifiers the literal may reference.

    Raises:
        ExtractionError: If nothing matches or the literal cannot be parsed.
    """
    match = pattern.search(text)
    if match is None:
        raise ExtractionError("no exported data literal found")
    try:
        value, _ = parse_literal(text, match.end(), constants=constants)
    except LiteralSyntaxError as exc:
        raise ExtractionError(str(exc)) from exc
    return value


def as_records(value: Any) -> list[Any]:
    """Normalise an extracted literal to a list: a bare object becomes ``[obj]``."""
    if isinstance(value, dict):
        return [value]
    if isinstance(value, list):
        return value
    raise ExtractionError(
        f"exported literal is {type(value).__name__}, expected an object or array"
    )
