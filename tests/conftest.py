# tests/conftest.py
from __future__ import annotations

import asyncio

import pytest

from chainmeta.contracts.accessor import (
    AccessorUnavailable,
    FailureReason,
    RemoteAccessor,
    URIFound,
)


class FakeAccessor(RemoteAccessor):
    """In-memory accessor: ids in ``uris`` answer, everything else is unavailable."""

    def __init__(
        self,
        uris: dict[str, str] | None = None,
        *,
        delays: dict[str, float] | None = None,
        raising: set[str] | None = None,
    ):
        self.uris = dict(uris or {})
        self.delays = dict(delays or {})
        self.raising = set(raising or ())
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_seen_in_flight = 0

    async def read_metadata_uri(self, identifier):
        self.calls.append(identifier)
        self.in_flight += 1
        self.max_seen_in_flight = max(self.max_seen_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(identifier, 0))
            if identifier in self.raising:
                raise RuntimeError(f"boom {identifier}")
            if identifier in self.uris:
                return URIFound(self.uris[identifier])
            return AccessorUnavailable(FailureReason.NOT_IMPLEMENTED, "no contractURI()")
        finally:
            self.in_flight -= 1


@pytest.fixture
def fake_accessor() -> FakeAccessor:
    return FakeAccessor()
