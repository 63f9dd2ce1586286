import pytest

from imgproof.models.attestation import AttestationRecord
from imgproof.services.attestation_service import (
    PUBLIC_VALUES_LENGTH, build_record, decode_public_values, encode_public_values, encode_record,
)
from imgproof.exceptions import InvalidAttestationError

ORIGINAL = bytes(range(32))
TRANSFORMED = bytes(range(100, 132))
ADDRESS = bytes.fromhex("2c7536e3605d9c16a7a3d7b1898e529396a65c23")


def test_layout_with_signer():
    encoded = encode_public_values(ORIGINAL, TRANSFORMED, ADDRESS, True)
    assert len(encoded) == PUBLIC_VALUES_LENGTH == 128
    assert encoded[0:32] == ORIGINAL
    assert encoded[32:64] == TRANSFORMED
    assert encoded[64:76] == bytes(12)
    assert encoded[76:96] == ADDRESS
    assert encoded[96:128] == bytes(31) + b"\x01"


def test_layout_without_signer():
    encoded = encode_public_values(ORIGINAL, TRANSFORMED, None, False)
    assert encoded[64:128] == bytes(64)


def test_decode_restores_record():
    record = build_record(ORIGINAL, TRANSFORMED, ADDRESS, True)
    decoded = decode_public_values(encode_record(record))
    assert decoded == record
    assert decoded.signer_address == ADDRESS


def test_decode_rejects_wrong_length():
    with pytest.raises(InvalidAttestationError):
        decode_public_values(bytes(127))


def test_decode_rejects_non_boolean_flag():
    with pytest.raises(InvalidAttestationError):
        decode_public_values(bytes(127) + b"\x02")


def test_record_hex_rendering():
    record = AttestationRecord(ORIGINAL, TRANSFORMED, bytes(32), False)
    rendered = record.to_dict()
    assert rendered["original_image_hash"] == "0x" + ORIGINAL.hex()
    assert rendered["signer_public_key"] == "0x" + "00" * 32
    assert rendered["has_signature"] is False
    assert record.signer_address is None
