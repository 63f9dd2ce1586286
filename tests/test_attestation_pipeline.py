import json
import logging

import numpy as np
import pytest

from imgproof.models.region import Region
from imgproof.models.signature import SignatureData
from imgproof.models.transformation import Brighten, Crop, FlipHorizontal, Grayscale, Rotate90
from imgproof.pipeline.attestation_pipeline import attest_image, export_image
from imgproof.services.hashing_service import sha256
from imgproof.exceptions import InvalidImageError, InvalidRegionError, InvalidSignatureError

from utils import ADDRESS, OTHER_PRIVATE_KEY, sign_digest


def test_unsigned_attestation_of_black_square(black_png):
    result = attest_image(black_png, [Grayscale(), Rotate90()])
    record = result.record

    assert result.image.pixels.shape == (2, 2, 4)
    assert record.original_image_hash == sha256(black_png)
    assert record.transformed_image_hash == sha256(result.final_image)
    assert record.original_image_hash != record.transformed_image_hash
    assert record.has_signature is False
    assert record.signer_identity == bytes(32)
    assert len(result.public_values) == 128
    assert result.public_values[64:] == bytes(64)


def test_no_transformations_keeps_png_hash(gradient_png):
    result = attest_image(gradient_png, [])
    assert result.final_image == gradient_png
    assert result.record.original_image_hash == result.record.transformed_image_hash


def test_signed_attestation_commits_signer(gradient_png):
    signature = SignatureData(sign_digest(sha256(gradient_png)), ADDRESS)
    result = attest_image(gradient_png, [FlipHorizontal()], signature)

    assert result.record.has_signature is True
    assert result.record.signer_address == ADDRESS
    assert result.public_values[76:96] == ADDRESS
    assert result.public_values[-1] == 1


def test_signature_over_transformed_image_is_rejected(gradient_png):
    # authors sign the original, not the edited output
    first = attest_image(gradient_png, [Rotate90()])
    signature = SignatureData(sign_digest(sha256(first.final_image)), ADDRESS)
    result = attest_image(gradient_png, [Rotate90()], signature)
    assert result.record.has_signature is False


def test_mismatched_signer_attests_without_identity(gradient_png):
    signature = SignatureData(sign_digest(sha256(gradient_png), OTHER_PRIVATE_KEY), ADDRESS)
    result = attest_image(gradient_png, [], signature)
    assert result.record.has_signature is False
    assert result.public_values[64:] == bytes(64)


def test_wrong_length_signature_aborts(gradient_png):
    with pytest.raises(InvalidSignatureError):
        attest_image(gradient_png, [], SignatureData(bytes(64), ADDRESS))


def test_region_outside_image_aborts(gradient_png):
    with pytest.raises(InvalidRegionError):
        attest_image(gradient_png, [Crop(Region(2, 2, 10, 10))])


@pytest.mark.parametrize("payload", [b"", b"not an image at all"])
def test_unreadable_input_aborts(payload):
    with pytest.raises(InvalidImageError):
        attest_image(payload, [])


def test_accepts_editor_json(gradient_png):
    payload = json.dumps(["Rotate90", {"Brighten": {"value": 30, "region": None}}])
    from_json = attest_image(gradient_png, payload)
    from_objects = attest_image(gradient_png, [Rotate90(), Brighten(30)])
    assert from_json.public_values == from_objects.public_values


def test_split_run_matches_single_run(image_repository, gradient_png):
    t1 = [Grayscale(Region(0, 0, 2, 2)), Rotate90()]
    t2 = [Brighten(-40), FlipHorizontal()]
    single = attest_image(gradient_png, t1 + t2)
    intermediate = attest_image(gradient_png, t1)
    chained = attest_image(intermediate.final_image, t2)
    np.testing.assert_array_equal(single.image.pixels, chained.image.pixels)
    assert single.final_image == chained.final_image


def test_repeat_runs_are_deterministic(gradient_png):
    transformations = [Grayscale(), Rotate90(), Brighten(12)]
    first = attest_image(gradient_png, transformations)
    second = attest_image(gradient_png, transformations)
    assert first.record == second.record
    assert first.final_image == second.final_image


def test_export_formats(gradient_png):
    result = attest_image(gradient_png, [Rotate90()])
    assert export_image(result) == result.final_image
    assert export_image(result, "jpeg").startswith(b"\xff\xd8")
    webp = export_image(result, "webp", quality=50)
    assert webp[:4] == b"RIFF" and webp[8:12] == b"WEBP"


def test_stages_are_logged(caplog, gradient_png):
    with caplog.at_level(logging.INFO, logger="imgproof"):
        attest_image(gradient_png, [])
    messages = [r.getMessage() for r in caplog.records]
    assert "Stage: hash_original" in messages
    assert "Stage: verify_signature" not in messages
    assert messages[-1] == "Stage: done"
