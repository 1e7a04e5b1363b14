from __future__ import annotations

import base64
import json
from collections.abc import Callable

import pytest

from chartdig.codec.payload import encode


def _b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


@pytest.fixture
def b64() -> Callable[[str], str]:
    """base64 of a UTF-8 string, as Helm stores chart file data."""
    return _b64


@pytest.fixture
def myapp_doc() -> dict[str, object]:
    """Release document of a minimal single-template chart."""
    return {
        "name": "myapp",
        "chart": {
            "metadata": {"name": "myapp", "version": "1.0"},
            "templates": [{"name": "templates/deploy.yaml", "data": _b64("kind: Deployment")}],
            "values": {"replicas": 1},
            "files": [],
        },
    }


@pytest.fixture
def release_payload() -> Callable[[object], bytes]:
    """Encode a release document the way Helm stores it."""

    def _payload(doc: object) -> bytes:
        return encode(json.dumps(doc).encode("utf-8"))

    return _payload
