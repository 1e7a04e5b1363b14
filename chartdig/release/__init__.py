"""Helm release documents: model and parser."""

from .model import ChartDependency, ChartFile, ReleaseRecord
from .parser import ParseError, parse

__all__ = [
    "ChartDependency",
    "ChartFile",
    "ParseError",
    "ReleaseRecord",
    "parse",
]
