"""Tests for chartdig.services.extract module."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
import yaml

from chartdig.core.result import Err, Ok, Result
from chartdig.output.console import MockConsole
from chartdig.services import extract as extract_mod
from chartdig.services.errors import PartialFailure, RecordFailure
from chartdig.services.extract import ExtractOptions, ExtractService
from chartdig.services.source import RawRecord, SourceError

RELEASE_TYPE = "helm.sh/release.v1"


class FakeSource:
    def __init__(self, records: list[RawRecord] | SourceError) -> None:
        self._records = records
        self.namespaces: list[str] = []

    def list_candidates(self, namespace: str) -> Result[tuple[RawRecord, ...], SourceError]:
        self.namespaces.append(namespace)
        if isinstance(self._records, SourceError):
            return Err(self._records)
        return Ok(tuple(self._records))


def _record(name: str, payload: bytes, type_tag: str = RELEASE_TYPE) -> RawRecord:
    return RawRecord(name=name, type_tag=type_tag, namespace="default", data={"release": payload})


def _service(
    tmp_path: Path,
    records: list[RawRecord] | SourceError,
    console: MockConsole | None = None,
    **options: bool,
) -> ExtractService:
    return ExtractService(
        console=console or MockConsole(),
        source=FakeSource(records),
        options=ExtractOptions(output_dir=tmp_path, **options),
    )


def test_end_to_end_myapp(
    tmp_path: Path,
    myapp_doc: dict[str, object],
    release_payload: Callable[[object], bytes],
) -> None:
    service = _service(tmp_path, [_record("myapp.v3", release_payload(myapp_doc))])

    result = service.run()

    assert isinstance(result, Ok)
    assert result.value.extracted == ("myapp.v3",)
    dest = tmp_path / "myapp.v3"
    assert yaml.safe_load((dest / "Chart.yaml").read_text()) == {"name": "myapp", "version": "1.0"}
    assert yaml.safe_load((dest / "values.yaml").read_text()) == {"replicas": 1}
    assert (dest / "templates" / "deploy.yaml").read_bytes() == b"kind: Deployment"


def test_filtered_records_never_decoded(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    myapp_doc: dict[str, object],
    release_payload: Callable[[object], bytes],
) -> None:
    decoded: list[bytes] = []
    real_decode = extract_mod.decode

    def spy_decode(blob: bytes):
        decoded.append(blob)
        return real_decode(blob)

    monkeypatch.setattr(extract_mod, "decode", spy_decode)
    payload = release_payload(myapp_doc)
    records = [
        _record("cfg", b"not a release", type_tag="other.kind"),
        _record("empty.v1", b""),
        _record("myapp.v1", payload),
    ]

    result = _service(tmp_path, records).run()

    assert isinstance(result, Ok)
    assert decoded == [payload]
    assert sorted(p.name for p in tmp_path.iterdir()) == ["myapp.v1"]


def test_stops_on_first_error(
    tmp_path: Path,
    myapp_doc: dict[str, object],
    release_payload: Callable[[object], bytes],
) -> None:
    records = [
        _record("a.v1", release_payload(myapp_doc)),
        _record("broken.v1", b"%%% corrupt %%%"),
        _record("c.v1", release_payload(myapp_doc)),
    ]

    result = _service(tmp_path, records).run()

    assert isinstance(result, Err)
    assert isinstance(result.error, RecordFailure)
    assert result.error.record_id == "broken.v1"
    assert (tmp_path / "a.v1").is_dir()
    assert not (tmp_path / "c.v1").exists()


def test_keep_going_extracts_the_rest(
    tmp_path: Path,
    myapp_doc: dict[str, object],
    release_payload: Callable[[object], bytes],
) -> None:
    console = MockConsole()
    records = [
        _record("broken.v1", release_payload(["not", "an", "object"])),
        _record("c.v1", release_payload(myapp_doc)),
    ]

    result = _service(tmp_path, records, console, keep_going=True).run()

    assert isinstance(result, Err)
    assert isinstance(result.error, PartialFailure)
    assert result.error.extracted == 1
    assert [f.record_id for f in result.error.failures] == ["broken.v1"]
    assert (tmp_path / "c.v1" / "Chart.yaml").exists()
    assert console.find("broken.v1")


def test_only_latest_prunes_previous_version(
    tmp_path: Path,
    myapp_doc: dict[str, object],
    release_payload: Callable[[object], bytes],
) -> None:
    payload = release_payload(myapp_doc)
    records = [_record("myapp.v1", payload), _record("myapp.v2", payload)]

    result = _service(tmp_path, records, only_latest=True).run()

    assert isinstance(result, Ok)
    assert result.value.extracted == ("myapp.v1", "myapp.v2")
    assert result.value.pruned == (tmp_path / "myapp.v1",)
    assert sorted(p.name for p in tmp_path.iterdir()) == ["myapp.v2"]


def test_all_versions_kept_by_default(
    tmp_path: Path,
    myapp_doc: dict[str, object],
    release_payload: Callable[[object], bytes],
) -> None:
    payload = release_payload(myapp_doc)
    records = [_record("myapp.v1", payload), _record("myapp.v2", payload)]

    result = _service(tmp_path, records).run()

    assert isinstance(result, Ok)
    assert sorted(p.name for p in tmp_path.iterdir()) == ["myapp.v1", "myapp.v2"]


def test_unversioned_name_warns_instead_of_pruning(
    tmp_path: Path,
    myapp_doc: dict[str, object],
    release_payload: Callable[[object], bytes],
) -> None:
    console = MockConsole()

    result = _service(
        tmp_path, [_record("myapp", release_payload(myapp_doc))], console, only_latest=True
    ).run()

    assert isinstance(result, Ok)
    assert result.value.warnings == 1
    assert console.has_warning()
    assert (tmp_path / "myapp" / "Chart.yaml").exists()


def test_entry_diagnostics_reported(
    tmp_path: Path,
    myapp_doc: dict[str, object],
    release_payload: Callable[[object], bytes],
) -> None:
    console = MockConsole()
    doc = dict(myapp_doc)
    doc["chart"] = {"templates": [{"name": "templates/bad.yaml", "data": "%%%"}]}

    result = _service(tmp_path, [_record("myapp.v1", release_payload(doc))], console).run()

    assert isinstance(result, Ok)
    assert result.value.warnings == 1
    assert console.find("templates/bad.yaml")


def test_source_error_propagates(tmp_path: Path) -> None:
    error = SourceError(kind="connection", message="cannot list secrets")

    result = _service(tmp_path, error).run()

    assert result == Err(error)


def test_list_releases(tmp_path: Path) -> None:
    records = [
        _record("sh.helm.release.v1.web.v7", b"x"),
        _record("legacy", b"x"),
        _record("cfg", b"x", type_tag="Opaque"),
    ]

    result = _service(tmp_path, records).list_releases()

    assert isinstance(result, Ok)
    assert [(r.record_id, r.release, r.version) for r in result.value] == [
        ("sh.helm.release.v1.web.v7", "sh.helm.release.v1.web", 7),
        ("legacy", None, None),
    ]
    assert list(tmp_path.iterdir()) == []
