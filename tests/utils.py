from io import BytesIO

import numpy as np
from coincurve import PrivateKey
from PIL import Image as PILImage

from imgproof.services.signature_service import eth_message_prehash

# well-known Ethereum test account
PRIVATE_KEY = bytes.fromhex("4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318")
ADDRESS = bytes.fromhex("2c7536e3605d9c16a7a3d7b1898e529396a65c23")
OTHER_PRIVATE_KEY = bytes.fromhex("11" * 32)


def sign_digest(digest: bytes, private_key: bytes = PRIVATE_KEY, eth_v: bool = False) -> bytes:
    """65-byte personal-message signature over the hex of digest."""
    signature = PrivateKey(private_key).sign_recoverable(eth_message_prehash(digest), hasher=None)
    if eth_v:
        signature = signature[:64] + bytes([signature[64] + 27])
    return signature


def flip_bit(data: bytes, byte_index: int, bit: int = 0) -> bytes:
    mutated = bytearray(data)
    mutated[byte_index] ^= 1 << bit
    return bytes(mutated)


def encode_png(pixels: np.ndarray, **save_kwargs) -> bytes:
    buffer = BytesIO()
    PILImage.fromarray(np.ascontiguousarray(pixels)).save(buffer, format="PNG", **save_kwargs)
    return buffer.getvalue()


def gradient_pixels(width: int = 4, height: int = 3) -> np.ndarray:
    """Distinct RGBA value per pixel, so any geometric change is visible."""
    idx = np.arange(width * height, dtype=np.uint16).reshape(height, width)
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[..., 0] = (idx * 17) % 256
    pixels[..., 1] = (idx * 29 + 7) % 256
    pixels[..., 2] = (idx * 53 + 11) % 256
    pixels[..., 3] = 255
    return pixels
