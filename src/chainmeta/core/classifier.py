# chainmeta/core/classifier.py
"""
Embedded metadata URI classification.

An embedded ("on-chain") URI inlines its JSON payload directly after a fixed
scheme marker. Matching is byte-for-byte on the UTF-8 encoding of the URI:
no case folding, no whitespace tolerance.
"""
from __future__ import annotations

MARKER = b"data:application/json;utf8,"
MARKER_LENGTH = len(MARKER)
_MARKER_TEXT = MARKER.decode("ascii")


class InvalidEmbeddedURI(ValueError):
    """Raised when extracting a payload from a URI that is not embedded."""


def _as_bytes(uri: str | bytes) -> bytes:
    # lone surrogates (e.g. from json.loads) encode instead of raising
    return uri.encode("utf-8", "surrogatepass") if isinstance(uri, str) else bytes(uri)


def is_embedded(uri: str | bytes) -> bool:
    """Return True iff ``uri`` starts with the embedded-JSON marker."""
    if isinstance(uri, str):
        # ASCII marker: a str prefix match equals a byte prefix match of its UTF-8 form
        return uri.startswith(_MARKER_TEXT)
    raw = bytes(uri)
    if len(raw) < MARKER_LENGTH:
        return False
    return raw[:MARKER_LENGTH] == MARKER


def extract_payload(uri: str | bytes) -> bytes:
    """Return the bytes following the marker, unmodified.

    A URI consisting of the marker alone yields ``b""``.

    Raises:
        InvalidEmbeddedURI: If ``uri`` is not embedded.
    """
    raw = _as_bytes(uri)
    if not is_embedded(raw):
        preview = raw[:40].decode("utf-8", errors="replace")
        raise InvalidEmbeddedURI(f"URI is not an embedded JSON payload: '{preview}'")
    return raw[MARKER_LENGTH:]
