"""sitedata rich error messages — actionable feedback.

Every error shown to the user must contain:
  1. What went wrong (clear cause)
  2. The exact action the user should take to fix it

Usage:
    from sitedata.cli.errors import err_source_dir_missing
    console.print(err_source_dir_missing(exc.path))
    raise typer.Exit(1)
"""

from __future__ import annotations

from pathlib import Path

from rich.markup import escape


def err_source_dir_missing(path: Path) -> str:
    """A configured content directory does not exist."""
    return (
        f"[red]Error:[/] Content directory not found: '{escape(str(path))}'.\n"
        "  Run sitedata from the project root, pass --root, or fix the\n"
        "  collection's 'directory' in sitedata.yaml."
    )


def err_source_unreadable(path: Path, detail: str) -> str:
    """A content file (or the categories file) could not be read."""
    return (
        f"[red]Error:[/] Cannot read '{escape(str(path))}'.\n"
        f"  {escape(detail)}\n"
        "  Check the file exists, is readable and is saved as UTF-8."
    )


def err_output_write(path: Path, detail: str) -> str:
    """The output directory or an artifact could not be written."""
    return (
        f"[red]Error:[/] Cannot write artifacts to '{escape(str(path))}'.\n"
        f"  {escape(detail)}\n"
        "  Check permissions or choose another location with --output."
    )


def err_config(detail: str) -> str:
    """sitedata.yaml is missing (when named explicitly) or invalid."""
    return (
        f"[red]Error:[/] Invalid configuration.\n"
        f"  {escape(detail)}\n"
        "  Run:  sitedata init --force   to regenerate a default sitedata.yaml."
    )


def warn_unmapped_categories(names: list[str], default_id: str) -> str:
    """Some records use a category name missing from the category table."""
    listed = ", ".join(f"'{escape(n)}'" for n in names)
    return (
        f"[yellow]⚠[/] Unmapped categories fell back to '{escape(default_id)}': {listed}\n"
        "  Add them to categories.mapping in sitedata.yaml if that is not intended."
    )
