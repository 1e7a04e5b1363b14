from __future__ import annotations

import typer

from chartdig import __version__
from chartdig.cli.commands.extract import extract
from chartdig.cli.commands.list_cmd import list_releases

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Recover Helm chart sources from release secrets in a cluster.",
)


app.command()(extract)
app.command("list")(list_releases)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)


def main() -> None:
    app()
