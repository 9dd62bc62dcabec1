"""Pytest configuration and test helpers."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

# Make the package importable without an editable install.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from replaytv.exceptions import TransportError  # noqa: E402


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO tests to run on asyncio without requiring trio."""

    return "asyncio"


class FakeGetter:
    """Getter returning canned payloads and recording requested URLs."""

    def __init__(self, responses: dict[str, bytes | Exception] | None = None):
        self.responses = responses or {}
        self.calls: list[str] = []

    async def get(self, url: str) -> bytes:
        self.calls.append(url)
        if url not in self.responses:
            raise TransportError(url, "Unexpected status 404")
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        return response


def dumps(data) -> bytes:
    return json.dumps(data).encode("utf-8")


@pytest.fixture
def fake_getter() -> FakeGetter:
    return FakeGetter()
