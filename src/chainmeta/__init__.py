"""Best-effort retrieval of contract-level metadata URIs."""
from chainmeta.contracts import EntityIdentifier, MetadataRecord
from chainmeta.core.classifier import InvalidEmbeddedURI, extract_payload, is_embedded
from chainmeta.core.fetcher import BatchCancelled, BatchMetadataFetcher, PartialBatch

__all__ = [
    "EntityIdentifier",
    "MetadataRecord",
    "InvalidEmbeddedURI",
    "extract_payload",
    "is_embedded",
    "BatchCancelled",
    "BatchMetadataFetcher",
    "PartialBatch",
]
