from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from chartdig.core.config import DEFAULT_CONFIG_NAME, Config, load_config
from chartdig.core.errors import ErrorCode
from chartdig.core.result import Err
from chartdig.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    console: ConsoleProtocol
    config_path: Path | None = None


def build_context(config_path: Path | None = None) -> CLIContext:
    """Load configuration and set up console output.

    An explicit ``--config`` must exist. Without one, ``./chartdig.toml`` is
    used when present and built-in defaults otherwise.
    """
    path = config_path
    if path is None and Path(DEFAULT_CONFIG_NAME).is_file():
        path = Path(DEFAULT_CONFIG_NAME)

    config = Config()
    if path is not None:
        config_result = load_config(path.expanduser())
        if isinstance(config_result, Err):
            typer.echo(f"error: {config_result.error.message}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
        config = config_result.value

    return CLIContext(config=config, console=RichConsole(), config_path=path)
