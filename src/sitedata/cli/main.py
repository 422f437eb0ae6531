"""sitedata CLI entry point."""

from __future__ import annotations

import importlib.metadata
from typing import Annotated

import typer

from sitedata.cli.build import build_cmd
from sitedata.cli.init import init_cmd


def _installed_version() -> str:
    try:
        return importlib.metadata.version("sitedata")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"sitedata {_installed_version()}")
        raise typer.Exit()


app = typer.Typer(
    name="sitedata",
    help=(
        "sitedata — build the directory site's JSON artifacts from the content corpus.\n\n"
        "  sitedata          Build with the default layout (same as: sitedata build).\n"
        "  sitedata init     Write a sitedata.yaml with the defaults."
    ),
    add_completion=False,
)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
) -> None:
    """sitedata — content corpus to static JSON."""
    if ctx.invoked_subcommand is None:
        build_cmd()


app.command("build")(build_cmd)
app.command("init")(init_cmd)


@app.command("version")
def version_cmd() -> None:
    """Show the installed sitedata version."""
    typer.echo(f"sitedata {_installed_version()}")


if __name__ == "__main__":
    app()
