from io import BytesIO
from typing import Optional
import logging
import os

import numpy as np
from PIL import Image as PILImage
from dotenv import load_dotenv

from ..models.image import Image
from ..exceptions import InvalidImageError, InvalidParameterError

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = {"png": "PNG", "jpeg": "JPEG", "jpg": "JPEG", "webp": "WEBP"}


class ImageRepository:
    """
    Codec boundary: turns container bytes into Image entities and back.
    PNG is lossless and is the format every hash is taken over.
    """
    def __init__(self):
        self.JPEG_QUALITY = float(os.getenv("JPEG_QUALITY", "90"))
        self.WEBP_QUALITY = float(os.getenv("WEBP_QUALITY", "80"))
        self.MAX_IMAGE_PIXELS = int(os.getenv("MAX_IMAGE_PIXELS", "50000000"))

    @staticmethod
    def create_empty(width: int, height: int) -> Image:
        """Fully transparent black RGBA buffer."""
        if width <= 0 or height <= 0:
            raise InvalidParameterError(f"Invalid image dimensions {width}x{height}")
        return Image(pixels=np.zeros((height, width, 4), dtype=np.uint8))

    @staticmethod
    def set_pixels(image: Image, new_pixels: np.ndarray) -> None:
        image.pixels = new_pixels

    def decode(self, data: bytes) -> Image:
        if not data:
            raise InvalidImageError("Image payload is empty")

        try:
            with PILImage.open(BytesIO(data)) as pil_img:
                width, height = pil_img.size
                too_large = width * height > self.MAX_IMAGE_PIXELS
                rgba = None if too_large else pil_img.convert("RGBA")
        except (PILImage.DecompressionBombError, OSError, EOFError, SyntaxError, ValueError) as err:
            raise InvalidImageError(f"Failed to load image: {err}") from err

        if too_large:
            raise InvalidImageError(
                f"Image of {width}x{height} exceeds the {self.MAX_IMAGE_PIXELS} pixel limit"
            )

        pixels = np.array(rgba, dtype=np.uint8)
        logger.debug(f"Decoded {len(data)} bytes into {width}x{height} RGBA image")
        return Image(pixels=pixels)

    def encode(self, image: Image, fmt: str = "png", quality: Optional[float] = None) -> bytes:
        """
        Encode to PNG (lossless), JPEG or WebP.
        quality is clamped to [0, 100] and ignored for PNG.
        """
        pil_format = SUPPORTED_FORMATS.get(fmt.lower())
        if pil_format is None:
            raise InvalidParameterError(f"Unsupported image format: {fmt}")

        np_img = image.pixels
        if not np_img.flags['C_CONTIGUOUS']:
            np_img = np.ascontiguousarray(np_img)
        pil_obj = PILImage.fromarray(np_img)

        if pil_format == "PNG":
            save_kwargs = {}
        elif pil_format == "JPEG":
            pil_obj = pil_obj.convert("RGB")
            save_kwargs = {"quality": int(round(self._clamp_quality(quality, self.JPEG_QUALITY)))}
        else:
            save_kwargs = {"quality": self._clamp_quality(quality, self.WEBP_QUALITY)}

        buffer = BytesIO()
        try:
            pil_obj.save(buffer, format=pil_format, **save_kwargs)
        except (OSError, ValueError) as err:
            raise InvalidImageError(f"Failed to encode image: {err}") from err

        return buffer.getvalue()

    @staticmethod
    def _clamp_quality(quality: Optional[float], default: float) -> float:
        if quality is None:
            return default
        if not np.isfinite(quality):
            raise InvalidParameterError(f"Invalid quality: {quality}")
        return float(min(max(quality, 0.0), 100.0))
