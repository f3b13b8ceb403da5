# chainmeta/contracts/record.py
"""
Metadata record contracts.

A record is the unit of output of a batch fetch: exactly one per queried
entity, in input order. The schema-shaped fields are reserved for a decode
step that the fetcher does not perform, so they always hold their zero value
when produced by ``BatchMetadataFetcher``.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, NewType

EntityIdentifier = NewType("EntityIdentifier", str)


@dataclass(frozen=True)
class MetadataRecord:
    """Normalized metadata for a single remote entity.

    Attributes:
        identifier: The entity that was queried.
        uri: Raw URI returned by the remote accessor, empty if none.
        is_embedded: Whether ``uri`` carries an inline JSON payload.
        has_accessor: Whether the remote read succeeded and returned a value.
        name, symbol, description, image, banner_image, featured_image,
        external_link, collaborators: Reserved for a decode collaborator.
    """

    identifier: EntityIdentifier
    uri: str = ""
    is_embedded: bool = False
    has_accessor: bool = False

    name: str = ""
    symbol: str = ""
    description: str = ""
    image: str = ""
    banner_image: str = ""
    featured_image: str = ""
    external_link: str = ""
    collaborators: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.is_embedded and not self.has_accessor:
            raise ValueError(
                f"Record for '{self.identifier}' cannot be embedded without an accessor"
            )
        if not self.has_accessor and self.uri:
            raise ValueError(
                f"Record for '{self.identifier}' has a URI but no accessor"
            )

    @classmethod
    def unavailable(cls, identifier: EntityIdentifier) -> MetadataRecord:
        return cls(identifier=identifier)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["collaborators"] = list(self.collaborators)
        return data
