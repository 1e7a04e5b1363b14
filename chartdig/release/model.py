"""Structured release record.

Only the fields needed to rebuild a chart directory are modeled. ``metadata``
and ``values`` stay opaque JSON documents until they are rendered to YAML.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ChartFile:
    """A template or auxiliary file of a chart.

    Attributes:
        name: Path relative to the chart root (e.g. ``templates/deploy.yaml``).
        data: base64 content, decoded only when the file is written.
    """

    name: str
    data: str


@dataclass(frozen=True, slots=True)
class ChartDependency:
    name: str
    version: str
    repository: str


@dataclass(frozen=True, slots=True)
class ReleaseRecord:
    name: str
    metadata: object = None
    templates: tuple[ChartFile, ...] = ()
    values: object = None
    files: tuple[ChartFile, ...] = ()
    dependencies: tuple[ChartDependency, ...] = ()
    manifest: str = ""
    namespace: str = ""

    @property
    def chart_version(self) -> str | None:
        """Version declared in Chart metadata, if any."""
        if isinstance(self.metadata, dict):
            version = self.metadata.get("version")
            if isinstance(version, str):
                return version
        return None
