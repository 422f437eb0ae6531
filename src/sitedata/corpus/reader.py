"""Module source reader — raw text of content files, no interpretation.

A missing content directory or an unreadable file is fatal: the build's
preconditions are not met. Skipping individual files happens one layer up,
once their text can be reasoned about.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

DEFAULT_SUFFIX = ".ts"


class SourceError(Exception):
    """Base class for fatal source-reading errors."""

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(message)
        self.path = path


class SourceDirectoryError(SourceError):
    """Raised when a content directory does not exist or cannot be listed."""


class SourceReadError(SourceError):
    """Raised when a content file cannot be read or decoded as UTF-8."""


@dataclass(frozen=True)
class SourceFile:
    name: str   # file name, used in skip notices
    path: Path
    text: str


def list_source_files(
    directory: Path,
    suffix: str = DEFAULT_SUFFIX,
    exclude: Iterable[str] = (),
) -> list[str]:
    """Return sorted names of the content files in *directory*.

    Index/barrel modules that only re-export others are named in *exclude*.

    Raises:
        SourceDirectoryError: If *directory* is missing or cannot be listed.
    """
    if not directory.is_dir():
        raise SourceDirectoryError(f"Content directory not found: '{directory}'", directory)
    skip = set(exclude)
    try:
        entries = list(directory.iterdir())
    except OSError as exc:
        raise SourceDirectoryError(
            f"Cannot list content directory '{directory}': {exc.strerror or exc}", directory
        ) from exc
    return sorted(
        p.name for p in entries if p.is_file() and p.name.endswith(suffix) and p.name not in skip
    )


def read_source(path: Path) -> SourceFile:
    """Read one content file as UTF-8 text.

    Raises:
        SourceReadError: If the file cannot be read or decoded.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceReadError(f"Cannot read '{path}': {exc}", path) from exc
    return SourceFile(name=path.name, path=path, text=text)


def read_sources(
    directory: Path,
    suffix: str = DEFAULT_SUFFIX,
    exclude: Iterable[str] = (),
) -> list[SourceFile]:
    """Read every content file in *directory*, in file-name order."""
    return [read_source(directory / name) for name in list_source_files(directory, suffix, exclude)]
