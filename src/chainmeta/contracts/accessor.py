# chainmeta/contracts/accessor.py
"""
Remote accessor contracts.

A remote accessor reads the metadata URI an entity exposes. Reads never
raise for per-entity conditions: the outcome is an explicit
``AccessorResult`` that the fetcher matches on.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Union

from chainmeta.contracts.record import EntityIdentifier


class FailureReason(str, Enum):
    """Why a remote read produced no URI."""

    NOT_IMPLEMENTED = "not_implemented"
    REVERTED = "reverted"
    TRANSPORT = "transport"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class URIFound:
    """The entity answered with a metadata URI."""

    uri: str


@dataclass(frozen=True)
class AccessorUnavailable:
    """The entity is unreachable or does not implement the accessor.

    Attributes:
        reason: Coarse failure category.
        detail: Human readable context for logs.
    """

    reason: FailureReason
    detail: str = ""


AccessorResult = Union[URIFound, AccessorUnavailable]


class RemoteAccessor(ABC):
    """Capability exposing ``readMetadataURI`` for an entity."""

    @abstractmethod
    async def read_metadata_uri(self, identifier: EntityIdentifier) -> AccessorResult: ...

    async def aclose(self) -> None:
        """Release transport resources. No-op unless the accessor owns any."""
