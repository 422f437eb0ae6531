"""sitedata init — write a default sitedata.yaml.

The written file reproduces the built-in defaults exactly, so a fresh
``sitedata init`` never changes what ``sitedata build`` produces; it only makes
the collection layout and category table visible and editable.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from sitedata.config import PROJECT_CONFIG_NAME, write_default_config

console = Console()

_DEFAULT_PROJECT_DIR = Path(".")


def init_cmd(
    project_dir: Annotated[
        Path,
        typer.Argument(help="Project root to write sitedata.yaml into. Defaults to current directory."),
    ] = _DEFAULT_PROJECT_DIR,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing sitedata.yaml without asking."),
    ] = False,
) -> None:
    """Write sitedata.yaml with the default collections and category table."""
    target = project_dir / PROJECT_CONFIG_NAME

    if target.exists() and not force:
        console.print(f"[yellow]⚠[/]  {escape(str(target))} already exists.", soft_wrap=True)
        if not typer.confirm("Overwrite with defaults?", default=False):
            console.print("[dim]Cancelled.[/]")
            raise typer.Exit(0)

    write_default_config(target)
    console.print(f"  [green]✓[/] {escape(str(target))}", soft_wrap=True)
