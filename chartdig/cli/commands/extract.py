"""Extract command - rebuild chart directories from release secrets."""

from __future__ import annotations

from pathlib import Path

import typer

from chartdig.cli.commands._helpers import exit_on_error, pick
from chartdig.cli.context import build_context
from chartdig.output.console import Style
from chartdig.services.extract import ExtractOptions, ExtractService
from chartdig.services.source import SecretSource


def extract(
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Destination folder (default: current directory)"
    ),
    kubeconfig: Path | None = typer.Option(
        None, "--kubeconfig", help="Path to the kubeconfig file"
    ),
    context: str | None = typer.Option(None, "--context", help="Kubeconfig context to use"),
    namespace: str | None = typer.Option(
        None, "--namespace", "-n", help="Namespace holding the release secrets"
    ),
    only_latest: bool | None = typer.Option(
        None,
        "--only-latest/--all-versions",
        help="Remove the previous version's directory after extracting a release",
    ),
    strict: bool | None = typer.Option(
        None,
        "--strict/--lenient",
        help="Fail on undecodable chart files or unsafe paths instead of warning",
    ),
    keep_going: bool | None = typer.Option(
        None,
        "--keep-going/--fail-fast",
        help="Continue with the next release when one fails",
    ),
    config: Path | None = typer.Option(None, "--config", help="Path to chartdig.toml"),
) -> None:
    """Recover chart sources of every Helm release in a namespace."""
    ctx = build_context(config)
    defaults = ctx.config.extract
    cluster = ctx.config.cluster

    options = ExtractOptions(
        output_dir=pick(output, defaults.output).expanduser(),
        namespace=pick(namespace, defaults.namespace),
        only_latest=pick(only_latest, defaults.only_latest),
        strict_entries=pick(strict, defaults.strict),
        keep_going=pick(keep_going, defaults.keep_going),
    )
    source = SecretSource(
        kubeconfig=pick(kubeconfig, cluster.kubeconfig),
        context=pick(context, cluster.context),
    )
    service = ExtractService(console=ctx.console, source=source, options=options)

    result = service.run()
    exit_on_error(result, ctx)
    summary = result.unwrap()

    ctx.console.success(f"extracted {len(summary.extracted)} release(s) into {options.output_dir}")
    if summary.pruned:
        ctx.console.print(f"pruned {len(summary.pruned)} previous version(s)", Style.DIM)
    if summary.warnings:
        ctx.console.warning(f"{summary.warnings} warning(s), see above")
