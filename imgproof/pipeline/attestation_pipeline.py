"""
Attestation Pipeline
Hashes the original image, replays the declared edits, hashes the result,
optionally authenticates the author, and packs the public values.

Stages run strictly in order and any failure aborts the whole run:

    INIT -> HASH_ORIGINAL -> APPLY_TRANSFORMATIONS -> HASH_RESULT
         -> VERIFY_SIGNATURE (only with signature data) -> ENCODE -> DONE
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Union
import logging

from ..models.attestation import AttestationRecord
from ..models.image import Image
from ..models.signature import SIGNATURE_LENGTH, SignatureData
from ..models.transformation import Transformation, parse_transformations
from ..repositories.image_repository import ImageRepository
from ..services.attestation_service import build_record, encode_record
from ..services.hashing_service import sha256
from ..services.signature_service import SignatureService
from ..services.transformation_service import TransformationService
from ..exceptions import InvalidSignatureError

logger = logging.getLogger(__name__)

HASH_FORMAT = "png"


class PipelineStage(Enum):
    INIT = "init"
    HASH_ORIGINAL = "hash_original"
    APPLY_TRANSFORMATIONS = "apply_transformations"
    HASH_RESULT = "hash_result"
    VERIFY_SIGNATURE = "verify_signature"
    ENCODE = "encode"
    DONE = "done"


@dataclass(frozen=True)
class AttestationResult:
    """
    Everything a finished run hands to the attestation consumer.
    final_image is the PNG whose hash is committed in record.
    """
    record: AttestationRecord
    public_values: bytes
    final_image: bytes
    image: Image


def _enter(stage: PipelineStage) -> None:
    logger.info(f"Stage: {stage.value}")


def attest_image(
    image_data: bytes,
    transformations: Union[Sequence[Transformation], str, bytes],
    signature_data: Optional[SignatureData] = None,
    *,
    image_repository: Optional[ImageRepository] = None,
    transformation_service: Optional[TransformationService] = None,
    signature_service: Optional[SignatureService] = None,
) -> AttestationResult:
    """
    Run the full attestation for one request.

    Args:
        image_data: Encoded source image (PNG, JPEG, WebP ...).
        transformations: Ordered edits, or their JSON wire form.
        signature_data: Optional authorship claim over the original image.

    Returns:
        AttestationResult with the record, its 128-byte public values and
        the final PNG bytes.
    """
    # every run owns its collaborators and a private copy of the input
    image_repository = image_repository or ImageRepository()
    transformation_service = transformation_service or TransformationService()
    signature_service = signature_service or SignatureService()
    image_data = bytes(image_data)

    _enter(PipelineStage.INIT)
    if isinstance(transformations, (str, bytes)):
        transformations = parse_transformations(transformations)
    transformations = list(transformations)
    if signature_data is not None and len(signature_data.signature) != SIGNATURE_LENGTH:
        raise InvalidSignatureError(
            f"Signature must be {SIGNATURE_LENGTH} bytes, got {len(signature_data.signature)}"
        )
    logger.info(f"Image data size: {len(image_data)} bytes")
    logger.info(f"Number of transformations: {len(transformations)}")

    _enter(PipelineStage.HASH_ORIGINAL)
    original_hash = sha256(image_data)

    _enter(PipelineStage.APPLY_TRANSFORMATIONS)
    image = image_repository.decode(image_data)
    transformation_service.apply_all(image, transformations)

    _enter(PipelineStage.HASH_RESULT)
    final_image = image_repository.encode(image, HASH_FORMAT)
    transformed_hash = sha256(final_image)

    identity = None
    if signature_data is not None:
        _enter(PipelineStage.VERIFY_SIGNATURE)
        identity = signature_service.verify(original_hash, signature_data)
        if identity is None:
            logger.warning("Signature did not verify; attesting without signer")

    _enter(PipelineStage.ENCODE)
    record = build_record(original_hash, transformed_hash, identity, identity is not None)
    public_values = encode_record(record)

    _enter(PipelineStage.DONE)
    return AttestationResult(
        record=record,
        public_values=public_values,
        final_image=final_image,
        image=image,
    )


def export_image(
    result: AttestationResult,
    fmt: str = "png",
    quality: Optional[float] = None,
    *,
    image_repository: Optional[ImageRepository] = None,
) -> bytes:
    """
    Re-encode the attested image for delivery. Only the PNG form is what the
    record's transformed hash covers; JPEG/WebP exports are lossy copies.
    """
    if fmt.lower() == HASH_FORMAT:
        return result.final_image
    image_repository = image_repository or ImageRepository()
    return image_repository.encode(result.image, fmt, quality)
