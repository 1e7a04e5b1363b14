"""Typed configuration loading and access.

This module provides dataclasses for the chartdig.toml structure with
full type safety and validation. Command-line flags override every value
loaded here.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_table

__all__ = [
    "Config",
    "ClusterConfig",
    "ExtractConfig",
    "ConfigError",
    "load_config",
    "DEFAULT_CONFIG_NAME",
    "DEFAULT_NAMESPACE",
]

DEFAULT_CONFIG_NAME = "chartdig.toml"
DEFAULT_NAMESPACE = "default"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class ClusterConfig:
    """How to reach the cluster.

    None means "let kubectl decide" (KUBECONFIG, then ~/.kube/config, and the
    current context).
    """

    kubeconfig: Path | None = None
    context: str | None = None


@dataclass(frozen=True, slots=True)
class ExtractConfig:
    """Defaults for the extract command."""

    output: Path = Path(".")
    namespace: str = DEFAULT_NAMESPACE
    only_latest: bool = False
    strict: bool = False
    keep_going: bool = False


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    extract: ExtractConfig = field(default_factory=ExtractConfig)
    cluster: ClusterConfig = field(default_factory=ClusterConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML).

        Raises:
            TypeError: A section is not a table, or an option has the wrong type.
        """
        extract = _section(data, "extract")
        cluster = _section(data, "cluster")

        output = _text(extract, "output")
        kubeconfig = _text(cluster, "kubeconfig")

        return cls(
            extract=ExtractConfig(
                output=Path(output).expanduser() if output else Path("."),
                namespace=_text(extract, "namespace") or DEFAULT_NAMESPACE,
                only_latest=_flag(extract, "only_latest"),
                strict=_flag(extract, "strict"),
                keep_going=_flag(extract, "keep_going"),
            ),
            cluster=ClusterConfig(
                kubeconfig=Path(kubeconfig).expanduser() if kubeconfig else None,
                context=_text(cluster, "context"),
            ),
        )


def _section(data: Mapping[str, object], key: str) -> StrDict:
    if key not in data:
        return {}
    table = get_table(data, key)
    if table is None:
        raise TypeError(f"[{key}] must be a table, got {data[key]!r}")
    return table


def _text(table: Mapping[str, object], key: str) -> str | None:
    if key in table and not isinstance(table[key], str):
        raise TypeError(f"'{key}' must be a string, got {table[key]!r}")
    return get_str(table, key)


def _flag(table: Mapping[str, object], key: str) -> bool:
    value = table.get(key, False)
    if not isinstance(value, bool):
        raise TypeError(f"'{key}' must be true or false, got {value!r}")
    return value


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling import and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to chartdig.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))

