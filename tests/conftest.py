import numpy as np
import pytest

from imgproof.logging_config import configure_logging
from imgproof.models.image import Image
from imgproof.repositories.image_repository import ImageRepository
from imgproof.services.transformation_service import TransformationService

from utils import encode_png, gradient_pixels


@pytest.fixture(scope="session", autouse=True)
def _logging():
    configure_logging("DEBUG")


@pytest.fixture
def image_repository():
    return ImageRepository()


@pytest.fixture
def transformation_service():
    return TransformationService()


@pytest.fixture
def black_pixels():
    pixels = np.zeros((2, 2, 4), dtype=np.uint8)
    pixels[..., 3] = 255
    return pixels


@pytest.fixture
def black_png(black_pixels):
    # written at a different zlib level than the repository uses
    return encode_png(black_pixels, compress_level=9)


@pytest.fixture
def gradient_image():
    return Image(pixels=gradient_pixels())


@pytest.fixture
def gradient_png(image_repository):
    return image_repository.encode(Image(pixels=gradient_pixels()))
