"""Public contracts for contract metadata retrieval."""
from chainmeta.contracts.record import EntityIdentifier, MetadataRecord
from chainmeta.contracts.accessor import (
    AccessorResult,
    AccessorUnavailable,
    FailureReason,
    RemoteAccessor,
    URIFound,
)
from chainmeta.contracts.decoder import DecodedMetadata, DecodeError, MetadataDecoder

__all__ = [
    "EntityIdentifier", "MetadataRecord",
    "AccessorResult", "AccessorUnavailable", "FailureReason", "RemoteAccessor", "URIFound",
    "DecodedMetadata", "DecodeError", "MetadataDecoder",
]
