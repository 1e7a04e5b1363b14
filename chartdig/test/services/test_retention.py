"""Tests for chartdig.services.retention module."""

from __future__ import annotations

from pathlib import Path

import pytest

from chartdig.core.result import Err, Ok
from chartdig.services import retention
from chartdig.services.retention import ReleaseName, prune


def _mkdirs(root: Path, *names: str) -> None:
    for name in names:
        (root / name).mkdir(parents=True)
        (root / name / "Chart.yaml").write_text("name: x\n")


class TestReleaseName:
    def test_parse_helm_secret_name(self) -> None:
        result = ReleaseName.parse("sh.helm.release.v1.myapp.v12")
        assert result == Ok(ReleaseName(base="sh.helm.release.v1.myapp", version=12))

    def test_sibling_uses_same_template(self) -> None:
        name = ReleaseName(base="name", version=5)
        assert name.sibling(4) == "name.v4"
        assert str(name) == "name.v5"

    def test_parse_rejects_missing_suffix(self) -> None:
        for record_id in ("myapp", "myapp.v", "myapp.vX", "myapp-v3", ".v3"):
            result = ReleaseName.parse(record_id)
            assert isinstance(result, Err), record_id
            assert result.error.kind == "invalid_version"

    def test_parse_rejects_trailing_newline_and_non_ascii_digits(self) -> None:
        for record_id in ("myapp.v3\n", "myapp.v٣", "myapp.v1٢"):
            result = ReleaseName.parse(record_id)
            assert isinstance(result, Err), repr(record_id)


class TestPrune:
    def test_deletes_previous_version_only(self, tmp_path: Path) -> None:
        _mkdirs(tmp_path, "name.v4", "name.v5", "name.v6", "name.v3")

        result = prune("name.v5", tmp_path, enabled=True)

        assert result == Ok(tmp_path / "name.v4")
        assert not (tmp_path / "name.v4").exists()
        assert (tmp_path / "name.v5" / "Chart.yaml").exists()
        assert (tmp_path / "name.v6").is_dir()
        assert (tmp_path / "name.v3").is_dir()

    def test_no_previous_version_is_noop(self, tmp_path: Path) -> None:
        _mkdirs(tmp_path, "name.v5")

        assert prune("name.v5", tmp_path, enabled=True) == Ok(None)
        assert (tmp_path / "name.v5").is_dir()

    def test_disabled_keeps_everything(self, tmp_path: Path) -> None:
        _mkdirs(tmp_path, "name.v4", "name.v5")

        assert prune("name.v5", tmp_path, enabled=False) == Ok(None)
        assert (tmp_path / "name.v4").is_dir()

    def test_other_release_untouched(self, tmp_path: Path) -> None:
        _mkdirs(tmp_path, "other.v4")

        assert prune("name.v5", tmp_path, enabled=True) == Ok(None)
        assert (tmp_path / "other.v4").is_dir()

    def test_previous_is_a_file(self, tmp_path: Path) -> None:
        (tmp_path / "name.v4").write_text("not a directory")

        assert prune("name.v5", tmp_path, enabled=True) == Ok(None)
        assert (tmp_path / "name.v4").is_file()

    def test_version_zero_has_no_predecessor(self, tmp_path: Path) -> None:
        assert prune("name.v0", tmp_path, enabled=True) == Ok(None)

    def test_invalid_suffix_is_explicit(self, tmp_path: Path) -> None:
        result = prune("name", tmp_path, enabled=True)

        assert isinstance(result, Err)
        assert result.error.kind == "invalid_version"

    def test_delete_failure_reported(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _mkdirs(tmp_path, "name.v1")

        def fail_rmtree(path: Path) -> None:
            raise PermissionError("read-only filesystem")

        monkeypatch.setattr(retention.shutil, "rmtree", fail_rmtree)

        result = prune("name.v2", tmp_path, enabled=True)

        assert isinstance(result, Err)
        assert result.error.kind == "delete_failed"
