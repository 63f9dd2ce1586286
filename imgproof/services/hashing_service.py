"""
Canonical image hasher.

Plain SHA-256 (FIPS 180-4) written out block by block, so the digest of an
image is produced by exactly the same sequence of 32-bit word operations
wherever it runs. No accelerated library path is involved.
"""
import struct
from typing import List

_IV = (
    0x6a09e667, 0xbb67ae85, 0x3c6ef372, 0xa54ff53a,
    0x510e527f, 0x9b05688c, 0x1f83d9ab, 0x5be0cd19,
)

_K = (
    0x428a2f98, 0x71374491, 0xb5c0fbcf, 0xe9b5dba5, 0x3956c25b, 0x59f111f1, 0x923f82a4, 0xab1c5ed5,
    0xd807aa98, 0x12835b01, 0x243185be, 0x550c7dc3, 0x72be5d74, 0x80deb1fe, 0x9bdc06a7, 0xc19bf174,
    0xe49b69c1, 0xefbe4786, 0x0fc19dc6, 0x240ca1cc, 0x2de92c6f, 0x4a7484aa, 0x5cb0a9dc, 0x76f988da,
    0x983e5152, 0xa831c66d, 0xb00327c8, 0xbf597fc7, 0xc6e00bf3, 0xd5a79147, 0x06ca6351, 0x14292967,
    0x27b70a85, 0x2e1b2138, 0x4d2c6dfc, 0x53380d13, 0x650a7354, 0x766a0abb, 0x81c2c92e, 0x92722c85,
    0xa2bfe8a1, 0xa81a664b, 0xc24b8b70, 0xc76c51a3, 0xd192e819, 0xd6990624, 0xf40e3585, 0x106aa070,
    0x19a4c116, 0x1e376c08, 0x2748774c, 0x34b0bcb5, 0x391c0cb3, 0x4ed8aa4a, 0x5b9cca4f, 0x682e6ff3,
    0x748f82ee, 0x78a5636f, 0x84c87814, 0x8cc70208, 0x90befffa, 0xa4506ceb, 0xbef9a3f7, 0xc67178f2,
)

_MASK = 0xFFFFFFFF
BLOCK_SIZE = 64


def _rotr(x: int, n: int) -> int:
    return ((x >> n) | (x << (32 - n))) & _MASK


def _extend(block: bytes) -> List[int]:
    """Message schedule: 16 big-endian words expanded to 64."""
    w = list(struct.unpack(">16I", block))
    for t in range(16, 64):
        s0 = _rotr(w[t - 15], 7) ^ _rotr(w[t - 15], 18) ^ (w[t - 15] >> 3)
        s1 = _rotr(w[t - 2], 17) ^ _rotr(w[t - 2], 19) ^ (w[t - 2] >> 10)
        w.append((w[t - 16] + s0 + w[t - 7] + s1) & _MASK)
    return w


def _compress(state: List[int], block: bytes) -> List[int]:
    w = _extend(block)
    a, b, c, d, e, f, g, h = state

    for t in range(64):
        s1 = _rotr(e, 6) ^ _rotr(e, 11) ^ _rotr(e, 25)
        ch = (e & f) ^ (~e & g)
        temp1 = (h + s1 + ch + _K[t] + w[t]) & _MASK
        s0 = _rotr(a, 2) ^ _rotr(a, 13) ^ _rotr(a, 22)
        maj = (a & b) ^ (a & c) ^ (b & c)
        temp2 = (s0 + maj) & _MASK

        h, g, f = g, f, e
        e = (d + temp1) & _MASK
        d, c, b = c, b, a
        a = (temp1 + temp2) & _MASK

    return [(x + y) & _MASK for x, y in zip(state, (a, b, c, d, e, f, g, h))]


def _final_blocks(data: bytes) -> List[bytes]:
    """
    Padding for the trailing partial block: 0x80, zeros, 64-bit bit length.
    The length shares the last block only if fewer than 56 bytes remain.
    """
    remaining = len(data) % BLOCK_SIZE
    tail = data[len(data) - remaining:] + b"\x80"
    bit_length = struct.pack(">Q", (len(data) * 8) & 0xFFFFFFFFFFFFFFFF)

    if remaining < 56:
        return [tail.ljust(56, b"\x00") + bit_length]
    return [tail.ljust(BLOCK_SIZE, b"\x00"), bytes(56) + bit_length]


def sha256(data: bytes) -> bytes:
    """32-byte SHA-256 digest of the whole buffer."""
    data = bytes(data)
    state = list(_IV)

    full = len(data) - len(data) % BLOCK_SIZE
    view = memoryview(data)
    for offset in range(0, full, BLOCK_SIZE):
        state = _compress(state, view[offset:offset + BLOCK_SIZE].tobytes())

    for block in _final_blocks(data):
        state = _compress(state, block)

    return struct.pack(">8I", *state)


def sha256_hex(data: bytes) -> str:
    return sha256(data).hex()
