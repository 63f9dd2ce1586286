"""
Attestation encoder.

Public values are the Solidity ABI encoding of

    (bytes32 original_image_hash,
     bytes32 transformed_image_hash,
     bytes32 signer_public_key,
     bool    has_signature)

i.e. four static 32-byte words, 128 bytes in total. The on-chain verifier
contract decodes exactly this layout.
"""
from __future__ import annotations

from typing import Optional

from ..models.attestation import DIGEST_LENGTH, AttestationRecord
from ..exceptions import InvalidAttestationError

WORD_SIZE = 32
PUBLIC_VALUES_LENGTH = 4 * WORD_SIZE


def _word(value: bytes) -> bytes:
    """Left-pad to one 32-byte word (bytes longer than a word are cut to their low 32 bytes)."""
    return bytes(value)[-WORD_SIZE:].rjust(WORD_SIZE, b"\x00")


def build_record(
    original_hash: bytes,
    transformed_hash: bytes,
    identity: Optional[bytes],
    has_signature: bool,
) -> AttestationRecord:
    return AttestationRecord(
        original_image_hash=_word(original_hash),
        transformed_image_hash=_word(transformed_hash),
        signer_identity=_word(identity or b""),
        has_signature=bool(has_signature),
    )


def encode_record(record: AttestationRecord) -> bytes:
    return b"".join((
        _word(record.original_image_hash),
        _word(record.transformed_image_hash),
        _word(record.signer_identity),
        int(record.has_signature).to_bytes(WORD_SIZE, "big"),
    ))


def encode_public_values(
    original_hash: bytes,
    transformed_hash: bytes,
    identity: Optional[bytes],
    has_signature: bool,
) -> bytes:
    """Pure packing; consistency of the inputs is the caller's job."""
    return encode_record(build_record(original_hash, transformed_hash, identity, has_signature))


def decode_public_values(data: bytes) -> AttestationRecord:
    """Parse 128 bytes of public values back into a record."""
    if len(data) != PUBLIC_VALUES_LENGTH:
        raise InvalidAttestationError(
            f"Public values must be {PUBLIC_VALUES_LENGTH} bytes, got {len(data)}"
        )
    words = [bytes(data[i:i + WORD_SIZE]) for i in range(0, PUBLIC_VALUES_LENGTH, WORD_SIZE)]
    flag = int.from_bytes(words[3], "big")
    if flag not in (0, 1):
        raise InvalidAttestationError(f"has_signature word is not a boolean: 0x{words[3].hex()}")
    return AttestationRecord(
        original_image_hash=words[0][:DIGEST_LENGTH],
        transformed_image_hash=words[1][:DIGEST_LENGTH],
        signer_identity=words[2],
        has_signature=bool(flag),
    )
