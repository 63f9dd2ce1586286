"""
imgproof: verifiable image-edit attestations.

Replays a declared list of edits over an image, hashes the image before and
after, optionally authenticates the author of the original, and emits the
fixed 128-byte public values an on-chain verifier consumes.
"""

__version__ = "1.0.0"
