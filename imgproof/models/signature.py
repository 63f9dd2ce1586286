from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict

from ..exceptions import InvalidSignatureError

SIGNATURE_LENGTH = 65  # r (32) || s (32) || v (1)
ADDRESS_LENGTH = 20


@dataclass(frozen=True)
class SignatureData:
    """
    Authorship claim over the original image.

    signature: recoverable secp256k1 signature, r || s || recovery byte.
    address:   claimed signer identity (Ethereum-style 20-byte address).
    """
    signature: bytes
    address: bytes

    @classmethod
    def from_hex(cls, raw: Dict[str, Any]) -> "SignatureData":
        """
        Build from the hex JSON payload sent by the editor:
        {"signature": "0x...", "public_key": "0x..."}.
        """
        try:
            signature_hex = raw["signature"]
            address_hex = raw.get("address", raw.get("public_key"))
            if address_hex is None:
                raise KeyError("public_key")
            return cls(
                signature=bytes.fromhex(_strip_0x(signature_hex)),
                address=bytes.fromhex(_strip_0x(address_hex)),
            )
        except (KeyError, TypeError, ValueError) as err:
            raise InvalidSignatureError(f"Invalid signature_data payload: {err}") from err


def _strip_0x(value: str) -> str:
    return value[2:] if value[:2] in ("0x", "0X") else value
