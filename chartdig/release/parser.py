"""Parse a decoded Helm release document into a ReleaseRecord.

The release JSON carries much more than a chart (deployment info, status,
hooks, rendered notes, the user-supplied config). Only the fields in
ReleaseRecord are extracted and everything else is ignored, so newer Helm
versions that add fields still parse. Missing fields fall back to empty
values; fields present with the wrong type are an error.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass

from chartdig.core.result import Err, Ok, Result
from chartdig.core.structured import as_obj_list, as_str_dict

from .model import ChartDependency, ChartFile, ReleaseRecord

__all__ = ["ParseError", "parse"]


@dataclass(frozen=True, slots=True)
class ParseError:
    """The release document is not valid JSON or has an unexpected shape."""

    message: str
    hint: str | None = None


def parse(data: bytes) -> Result[ReleaseRecord, ParseError]:
    """Parse raw release bytes.

    Args:
        data: UTF-8 JSON produced by the payload codec.

    Returns:
        Ok(ReleaseRecord), or Err(ParseError) on bad syntax or shape.
    """
    try:
        doc: object = json.loads(data.decode("utf-8"))
    except UnicodeDecodeError as e:
        return Err(ParseError(message=f"release document is not UTF-8: {e}"))
    except json.JSONDecodeError as e:
        return Err(ParseError(message=f"release document is not valid JSON: {e}"))

    root = as_str_dict(doc)
    if root is None:
        return Err(ParseError(message="release document root must be a JSON object"))

    try:
        return Ok(_build_record(root))
    except TypeError as e:
        return Err(ParseError(message=f"unexpected release document shape: {e}"))


def _build_record(root: Mapping[str, object]) -> ReleaseRecord:
    chart = _table(root, "chart")
    return ReleaseRecord(
        name=_string(root, "name"),
        metadata=chart.get("metadata"),
        templates=tuple(_chart_files(chart, "templates")),
        values=chart.get("values"),
        files=tuple(_chart_files(chart, "files")),
        dependencies=tuple(_dependencies(chart)),
        manifest=_string(root, "manifest"),
        namespace=_string(root, "namespace"),
    )


def _string(table: Mapping[str, object], key: str, where: str = "release") -> str:
    value = table.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"{where}.{key} must be a string, got {type(value).__name__}")
    return value


def _table(table: Mapping[str, object], key: str) -> Mapping[str, object]:
    value = table.get(key)
    if value is None:
        return {}
    out = as_str_dict(value)
    if out is None:
        raise TypeError(f"{key} must be an object, got {type(value).__name__}")
    return out


def _items(table: Mapping[str, object], key: str) -> list[Mapping[str, object]]:
    value = table.get(key)
    if value is None:
        return []
    items = as_obj_list(value)
    if items is None:
        raise TypeError(f"chart.{key} must be a list, got {type(value).__name__}")

    out: list[Mapping[str, object]] = []
    for index, item in enumerate(items):
        entry = as_str_dict(item)
        if entry is None:
            raise TypeError(f"chart.{key}[{index}] must be an object")
        out.append(entry)
    return out


def _chart_files(chart: Mapping[str, object], key: str) -> list[ChartFile]:
    files: list[ChartFile] = []
    for index, entry in enumerate(_items(chart, key)):
        where = f"chart.{key}[{index}]"
        files.append(
            ChartFile(
                name=_string(entry, "name", where),
                data=_string(entry, "data", where),
            )
        )
    return files


def _dependencies(chart: Mapping[str, object]) -> list[ChartDependency]:
    deps: list[ChartDependency] = []
    for index, entry in enumerate(_items(chart, "dependencies")):
        where = f"chart.dependencies[{index}]"
        deps.append(
            ChartDependency(
                name=_string(entry, "name", where),
                version=_string(entry, "version", where),
                repository=_string(entry, "repository", where),
            )
        )
    return deps
