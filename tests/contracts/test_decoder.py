# tests/contracts/test_decoder.py
from __future__ import annotations

import dataclasses
import json

import pytest

from chainmeta.contracts.decoder import DecodedMetadata, DecodeError, MetadataDecoder
from chainmeta.core.classifier import extract_payload


class JsonNameDecoder(MetadataDecoder):
    def decode(self, payload: bytes) -> DecodedMetadata:
        try:
            data = json.loads(payload)
        except ValueError as exc:
            raise DecodeError(str(exc)) from exc
        return DecodedMetadata(name=data.get("name", ""))


def test_decoder_composes_with_extracted_payload():
    payload = extract_payload('data:application/json;utf8,{"name":"Foo"}')

    decoded = JsonNameDecoder().decode(payload)

    assert decoded.name == "Foo"
    assert decoded.collaborators == ()


def test_decode_error_is_value_error():
    with pytest.raises(ValueError):
        JsonNameDecoder().decode(b"{not json")


def test_decoded_fields_match_record_schema_fields():
    from chainmeta.contracts.record import MetadataRecord

    decoded = {f.name for f in dataclasses.fields(DecodedMetadata)}
    record = {f.name for f in dataclasses.fields(MetadataRecord)}

    assert decoded <= record


def test_abstract_decoder_cannot_be_instantiated():
    with pytest.raises(TypeError):
        MetadataDecoder()  # type: ignore[abstract]
