"""List command - show release records without writing anything."""

from __future__ import annotations

from pathlib import Path

import typer

from chartdig.cli.commands._helpers import exit_on_error, pick
from chartdig.cli.context import build_context
from chartdig.output.console import Style
from chartdig.services.extract import ExtractOptions, ExtractService
from chartdig.services.source import SecretSource


def list_releases(
    kubeconfig: Path | None = typer.Option(
        None, "--kubeconfig", help="Path to the kubeconfig file"
    ),
    context: str | None = typer.Option(None, "--context", help="Kubeconfig context to use"),
    namespace: str | None = typer.Option(
        None, "--namespace", "-n", help="Namespace holding the release secrets"
    ),
    config: Path | None = typer.Option(None, "--config", help="Path to chartdig.toml"),
) -> None:
    """List the Helm release records found in a namespace."""
    ctx = build_context(config)
    cluster = ctx.config.cluster

    options = ExtractOptions(
        output_dir=ctx.config.extract.output,
        namespace=pick(namespace, ctx.config.extract.namespace),
    )
    source = SecretSource(
        kubeconfig=pick(kubeconfig, cluster.kubeconfig),
        context=pick(context, cluster.context),
    )
    service = ExtractService(console=ctx.console, source=source, options=options)

    result = service.list_releases()
    exit_on_error(result, ctx)
    listings = result.unwrap()

    if not listings:
        ctx.console.print(f"No release records in namespace '{options.namespace}'", Style.DIM)
        return

    ctx.console.header(f"Releases in namespace '{options.namespace}'")
    # One tab-separated row per record on stdout
    for item in listings:
        version = f"v{item.version}" if item.version is not None else "?"
        typer.echo(f"{item.record_id}\t{version}\t{item.type_tag}")
