"""Enumerate Helm release records stored as Kubernetes secrets.

The cluster is reached through ``kubectl`` so that every credential plugin,
proxy and context setting that works for the operator works here too.
Listing is a single ``kubectl get secrets -o json`` round trip; no timeout is
applied on our side.
"""

from __future__ import annotations

import base64
import binascii
import json
import shutil
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Protocol

from chartdig.core.result import Err, Ok, Result
from chartdig.core.structured import as_obj_list, as_str_dict, get_str, get_table
from chartdig.platform.process import run as run_process

__all__ = [
    "RELEASE_KEY",
    "RELEASE_TYPE_PREFIX",
    "RawRecord",
    "RecordSource",
    "SecretSource",
    "SourceError",
    "is_release_record",
    "parse_secret_list",
]

RELEASE_TYPE_PREFIX = "helm.sh/release."
RELEASE_KEY = "release"


@dataclass(frozen=True, slots=True)
class SourceError:
    kind: Literal["kubectl_missing", "connection", "invalid_response"]
    message: str
    hint: str | None = None


def _empty_data() -> dict[str, bytes]:
    return {}


@dataclass(frozen=True, slots=True)
class RawRecord:
    """A secret as read from the store.

    ``data`` holds the secret values with the API transport encoding already
    removed; the ``release`` value is still Helm's own base64 + gzip blob.
    """

    name: str
    type_tag: str
    namespace: str = ""
    data: Mapping[str, bytes] = field(default_factory=_empty_data)

    @property
    def payload(self) -> bytes:
        return self.data.get(RELEASE_KEY, b"")


def is_release_record(record: RawRecord) -> bool:
    """True only for Helm release secrets that carry a payload."""
    return record.type_tag.startswith(RELEASE_TYPE_PREFIX) and len(record.payload) > 0


class RecordSource(Protocol):
    def list_candidates(self, namespace: str) -> Result[tuple[RawRecord, ...], SourceError]: ...


class SecretSource:
    """Read secrets from a cluster through kubectl."""

    def __init__(self, *, kubeconfig: Path | None = None, context: str | None = None) -> None:
        self._kubeconfig = kubeconfig
        self._context = context

    def command(self, namespace: str) -> list[str]:
        cmd = ["kubectl", "get", "secrets", "--namespace", namespace, "--output", "json"]
        if self._kubeconfig is not None:
            cmd += ["--kubeconfig", str(self._kubeconfig)]
        if self._context:
            cmd += ["--context", self._context]
        return cmd

    def list_candidates(self, namespace: str) -> Result[tuple[RawRecord, ...], SourceError]:
        if shutil.which("kubectl") is None:
            return Err(
                SourceError(
                    kind="kubectl_missing",
                    message="kubectl: missing",
                    hint="Install kubectl: https://kubernetes.io/docs/tasks/tools/",
                )
            )

        result = run_process(self.command(namespace))
        if isinstance(result, Err):
            error = result.error
            return Err(
                SourceError(
                    kind="connection",
                    message=f"cannot list secrets in namespace '{namespace}'",
                    hint=error.stderr.strip() or str(error),
                )
            )

        return parse_secret_list(result.value)


def parse_secret_list(text: str) -> Result[tuple[RawRecord, ...], SourceError]:
    """Parse ``kubectl get secrets -o json`` output, keeping API order."""
    try:
        doc: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(
            SourceError(kind="invalid_response", message=f"kubectl returned invalid JSON: {e}")
        )

    root = as_str_dict(doc)
    items = as_obj_list(root.get("items")) if root is not None else None
    if items is None:
        return Err(
            SourceError(kind="invalid_response", message="kubectl output has no 'items' list")
        )

    records: list[RawRecord] = []
    for index, item_obj in enumerate(items):
        item = as_str_dict(item_obj)
        if item is None:
            return Err(
                SourceError(kind="invalid_response", message=f"items[{index}] is not an object")
            )

        metadata = get_table(item, "metadata") or {}
        name = get_str(metadata, "name")
        if name is None:
            return Err(
                SourceError(kind="invalid_response", message=f"items[{index}] has no metadata.name")
            )

        data = _decode_data(get_table(item, "data") or {})
        if data is None:
            return Err(
                SourceError(
                    kind="invalid_response",
                    message=f"secret '{name}' has data that is not valid base64",
                )
            )

        records.append(
            RawRecord(
                name=name,
                type_tag=get_str(item, "type") or "",
                namespace=get_str(metadata, "namespace") or "",
                data=data,
            )
        )

    return Ok(tuple(records))


def _decode_data(raw: Mapping[str, object]) -> dict[str, bytes] | None:
    out: dict[str, bytes] = {}
    for key, value in raw.items():
        if not isinstance(value, str):
            return None
        try:
            out[key] = base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError):
            return None
    return out
