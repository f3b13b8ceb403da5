# chainmeta/contracts/decoder.py
"""
Decode collaborator contracts.

Turns an extracted embedded payload into the schema fields of a
``MetadataRecord``. The fetcher does not call a decoder; this is the seam a
decoding component plugs into.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


class DecodeError(ValueError):
    """Raised when a payload cannot be decoded into metadata fields."""


@dataclass(frozen=True)
class DecodedMetadata:
    """Schema fields recovered from an embedded payload.

    Attributes:
        name: Collection name.
        symbol: Collection symbol.
        description: Free-form description.
        image: Collection image URI.
        banner_image: Banner image URI.
        featured_image: Featured image URI.
        external_link: Project website.
        collaborators: Addresses allowed to manage the collection.
    """

    name: str = ""
    symbol: str = ""
    description: str = ""
    image: str = ""
    banner_image: str = ""
    featured_image: str = ""
    external_link: str = ""
    collaborators: tuple[str, ...] = ()


class MetadataDecoder(ABC):
    """Bytes in, structured fields (or ``DecodeError``) out."""

    @abstractmethod
    def decode(self, payload: bytes) -> DecodedMetadata: ...
