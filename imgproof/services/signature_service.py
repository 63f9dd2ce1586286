"""
Authorship check for the original image.

The author signs the hex string of the original image's SHA-256 digest with
an Ethereum personal-message signature. We recover the public key from that
signature, derive its address, and compare it with the claimed address.
"""
from __future__ import annotations

from typing import Optional
import logging

from coincurve import PublicKey
from Crypto.Hash import keccak

from ..models.signature import ADDRESS_LENGTH, SIGNATURE_LENGTH, SignatureData

logger = logging.getLogger(__name__)

PERSONAL_MESSAGE_PREFIX = b"\x19Ethereum Signed Message:\n"
ETH_RECOVERY_OFFSET = 27


def keccak256(data: bytes) -> bytes:
    """Original Keccak-256 (pre-NIST padding), not hashlib's sha3_256."""
    return keccak.new(digest_bits=256, data=data).digest()


def eth_message_prehash(message_digest: bytes) -> bytes:
    """keccak256("\\x19Ethereum Signed Message:\\n" + len(hex) + hex) over the digest's hex string."""
    hex_message = message_digest.hex().encode("ascii")
    return keccak256(PERSONAL_MESSAGE_PREFIX + str(len(hex_message)).encode("ascii") + hex_message)


def address_from_public_key(public_key: PublicKey) -> bytes:
    """Low 20 bytes of keccak256(X || Y)."""
    uncompressed = public_key.format(compressed=False)  # 0x04 || X || Y
    return keccak256(uncompressed[1:])[-ADDRESS_LENGTH:]


class SignatureService:
    """
    Recovers signer addresses from 65-byte recoverable signatures.
    Every failure mode resolves to "not verified" (None); nothing raises.
    """

    @staticmethod
    def _normalize(signature: bytes) -> Optional[bytes]:
        if len(signature) != SIGNATURE_LENGTH:
            return None
        recovery_id = signature[64]
        if recovery_id >= ETH_RECOVERY_OFFSET:
            recovery_id -= ETH_RECOVERY_OFFSET
        if recovery_id > 3:
            return None
        return signature[:64] + bytes([recovery_id])

    def recover_address(self, message_digest: bytes, signature: bytes) -> Optional[bytes]:
        """Address of whoever signed message_digest, or None if recovery fails."""
        compact = self._normalize(bytes(signature))
        if compact is None:
            logger.warning(f"Rejecting signature of {len(signature)} bytes / bad recovery id")
            return None

        prehash = eth_message_prehash(message_digest)
        try:
            public_key = PublicKey.from_signature_and_message(compact, prehash, hasher=None)
        except ValueError as err:
            logger.warning(f"Public key recovery failed: {err}")
            return None
        return address_from_public_key(public_key)

    def verify(self, message_digest: bytes, signature_data: SignatureData) -> Optional[bytes]:
        """
        Returns the verified 20-byte address when the signature over
        message_digest recovers to the claimed address, else None.
        """
        recovered = self.recover_address(message_digest, signature_data.signature)
        if recovered is None:
            return None
        if recovered != bytes(signature_data.address):
            logger.warning(
                f"Recovered signer 0x{recovered.hex()} does not match "
                f"claimed 0x{bytes(signature_data.address).hex()}"
            )
            return None
        logger.info(f"Signature verified for 0x{recovered.hex()}")
        return recovered
