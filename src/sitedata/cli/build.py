"""sitedata build — turn the content corpus into the site's JSON artifacts.

Pipeline per collection: read files → extract the exported data literal →
normalize records. Then categories, then one write of:

  <output>/resources.json
  <output>/categories.json
  <output>/stats.json
  <output>/search.json

Files whose literal cannot be extracted or normalized are skipped with a
notice; the run still succeeds. A missing content directory, an unreadable
file or a failed write aborts with exit code 1.

Usage:
  sitedata                  (same as: sitedata build)
  sitedata build --root path/to/site --output public/api
  sitedata build --dry-run
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from sitedata.cli.errors import (
    err_config,
    err_output_write,
    err_source_dir_missing,
    err_source_unreadable,
    warn_unmapped_categories,
)
from sitedata.config import ConfigError, load_config
from sitedata.corpus.reader import SourceDirectoryError, SourceReadError
from sitedata.pipeline import BuildResult, SkippedFile, run_build

console = Console()

_DEFAULT_ROOT = Path(".")


def build_cmd(
    root: Annotated[
        Path,
        typer.Option("--root", "-r", help="Project root holding data/ and sitedata.yaml."),
    ] = _DEFAULT_ROOT,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output directory. Overrides output.directory in sitedata.yaml."),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Config file (default: <root>/sitedata.yaml if present)."),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Read and normalize everything, write nothing."),
    ] = False,
) -> None:
    """Build resources.json, categories.json, stats.json and search.json."""

    # ---- Config ----
    try:
        cfg = load_config(project_dir=root, config_path=config)
    except ConfigError as exc:
        console.print(err_config(str(exc)))
        raise typer.Exit(1)

    console.print("[bold]Transforming data…[/]")

    # ---- Pipeline ----
    try:
        result = run_build(cfg, root, output_dir=output, dry_run=dry_run, on_skip=_print_skip)
    except SourceDirectoryError as exc:
        console.print(err_source_dir_missing(exc.path))
        raise typer.Exit(1)
    except SourceReadError as exc:
        console.print(err_source_unreadable(exc.path, str(exc.__cause__ or exc)))
        raise typer.Exit(1)
    except OSError as exc:
        target = output if output is not None else root / cfg.output.directory
        console.print(err_output_write(target, exc.strerror or str(exc)))
        raise typer.Exit(1)

    # ---- Report ----
    _print_collections(result)

    unmapped = sorted({n for c in result.collections for n in c.unmapped_categories})
    if unmapped:
        console.print(warn_unmapped_categories(unmapped, cfg.categories.table.default_id))

    if dry_run:
        console.print("[dim]Dry run — nothing written.[/]")
        return

    console.print(
        f"[bold green]✓[/] Transformed {len(result.resources)} resources and "
        f"{len(result.categories)} categories → [bold]{escape(str(result.output_dir))}[/]",
        soft_wrap=True,
    )


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------


def _print_skip(skip: SkippedFile) -> None:
    console.print(
        f"  [yellow]↷ Skipping {escape(skip.name)}:[/] {escape(skip.reason)}",
        soft_wrap=True,
    )


def _print_collections(result: BuildResult) -> None:
    for c in result.collections:
        line = f"  [green]✓[/] {c.name}: {len(c.resources)} resources from {c.files} files"
        if c.skipped:
            line += f" [yellow]({len(c.skipped)} skipped)[/]"
        console.print(line)
    line = f"  [green]✓[/] categories: {len(result.categories)}"
    if result.category_skips:
        line += " [yellow](categories file skipped)[/]"
    console.print(line)
