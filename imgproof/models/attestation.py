from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict

DIGEST_LENGTH = 32
ZERO_IDENTITY = bytes(32)


@dataclass(frozen=True)
class AttestationRecord:
    """
    The four public facts committed for one run.
    signer_identity is always 32 bytes: the 20-byte address left-padded with
    zeros, or all zeros when no signature verified.
    """
    original_image_hash: bytes
    transformed_image_hash: bytes
    signer_identity: bytes
    has_signature: bool

    @property
    def signer_address(self) -> bytes | None:
        if not self.has_signature:
            return None
        return self.signer_identity[-20:]

    def to_dict(self) -> Dict[str, Any]:
        """Hex rendering handed to attestation consumers."""
        return {
            "original_image_hash": "0x" + self.original_image_hash.hex(),
            "transformed_image_hash": "0x" + self.transformed_image_hash.hex(),
            "signer_public_key": "0x" + self.signer_identity.hex(),
            "has_signature": self.has_signature,
        }
