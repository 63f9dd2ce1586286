from __future__ import annotations

from functools import partial
from typing import Callable, Iterable, Optional, Tuple
import logging
import math
import re

import cv2
import numpy as np

from ..models.image import Image
from ..models.glyph import Glyph
from ..models.region import Region
from ..models.transformation import (
    Blur, Brighten, Contrast, Crop, FlipHorizontal, FlipVertical, Grayscale,
    Rotate90, Rotate180, Rotate270, TextOverlay, Transformation,
)
from ..repositories.font_repository import FontRepository
from ..repositories.image_repository import ImageRepository
from ..exceptions import (
    InvalidColorError, InvalidParameterError, InvalidRegionError, InvalidTransformationError,
)

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"[0-9a-fA-F]{6}")

_LUMA_WEIGHTS = np.array([2126, 7152, 722], dtype=np.uint32)
_LUMA_DIVISOR = 10000

PixelOp = Callable[[np.ndarray], np.ndarray]


def parse_hex_color(color: str) -> Tuple[int, int, int]:
    """'#RRGGBB' or 'RRGGBB' -> (r, g, b)."""
    hex_str = color[1:] if color.startswith("#") else color
    if not _HEX_COLOR.fullmatch(hex_str):
        raise InvalidColorError(f"Invalid hex color: {color!r}")
    return int(hex_str[0:2], 16), int(hex_str[2:4], 16), int(hex_str[4:6], 16)


class TransformationService:
    """
    Transformation engine. Every op is a pure function of (pixels, parameters);
    the Image only ever sees the finished result of each op.
    """

    def __init__(self, font_repository: Optional[FontRepository] = None):
        self.font_repository = font_repository or FontRepository()
        self.image_repository = ImageRepository()

    # ─── Public API ────────────────────────────────────────────────
    def apply(self, image: Image, transformation: Transformation) -> Image:
        """Apply one transformation and replace the image pixels with the result."""
        try:
            new_pixels = self.transform_pixels(image.pixels, transformation)
        except (cv2.error, OverflowError, FloatingPointError) as err:
            raise InvalidParameterError(
                f"Failed to apply {type(transformation).__name__}: {err}"
            ) from err
        self.image_repository.set_pixels(image, new_pixels)
        return image

    def apply_all(self, image: Image, transformations: Iterable[Transformation]) -> Image:
        """Apply transformations strictly in the given order."""
        for i, transformation in enumerate(transformations):
            logger.debug(f"Transformation {i}: {transformation!r}")
            self.apply(image, transformation)
        return image

    def transform_pixels(self, pixels: np.ndarray, t: Transformation) -> np.ndarray:
        if not pixels.flags['C_CONTIGUOUS']:
            pixels = np.ascontiguousarray(pixels)

        if isinstance(t, Crop):
            return self._crop(pixels, t.region)
        if isinstance(t, Rotate90):
            return cv2.rotate(pixels, cv2.ROTATE_90_CLOCKWISE)
        if isinstance(t, Rotate180):
            return cv2.rotate(pixels, cv2.ROTATE_180)
        if isinstance(t, Rotate270):
            return cv2.rotate(pixels, cv2.ROTATE_90_COUNTERCLOCKWISE)
        if isinstance(t, Grayscale):
            return self._scoped(pixels, t.region, self._grayscale)
        if isinstance(t, FlipVertical):
            return self._scoped(pixels, t.region, partial(cv2.flip, flipCode=0))
        if isinstance(t, FlipHorizontal):
            return self._scoped(pixels, t.region, partial(cv2.flip, flipCode=1))
        if isinstance(t, Brighten):
            return self._scoped(pixels, t.region, partial(self._brighten, value=t.value))
        if isinstance(t, Contrast):
            return self._scoped(pixels, t.region, partial(self._contrast, factor=t.contrast))
        if isinstance(t, Blur):
            return self._scoped(pixels, t.region, partial(self._blur, sigma=t.sigma))
        if isinstance(t, TextOverlay):
            return self._text_overlay(pixels, t)
        raise InvalidTransformationError(f"Unsupported transformation: {t!r}")

    # ─── Region handling ───────────────────────────────────────────
    @staticmethod
    def _check_region(pixels: np.ndarray, region: Region) -> None:
        height, width = pixels.shape[:2]
        if not region.fits(width, height):
            raise InvalidRegionError(
                f"Region ({region.x},{region.y},{region.width}x{region.height}) "
                f"is outside the {width}x{height} image"
            )

    def _crop(self, pixels: np.ndarray, region: Region) -> np.ndarray:
        self._check_region(pixels, region)
        return pixels[region.y:region.y + region.height, region.x:region.x + region.width].copy()

    def _scoped(self, pixels: np.ndarray, region: Optional[Region], op: PixelOp) -> np.ndarray:
        """
        Run op on the whole image, or on the extracted sub-image only and
        paste the result back at the same offset.
        """
        if region is None:
            return op(pixels)

        self._check_region(pixels, region)
        rows = slice(region.y, region.y + region.height)
        cols = slice(region.x, region.x + region.width)
        out = pixels.copy()
        out[rows, cols] = op(np.ascontiguousarray(pixels[rows, cols]))
        return out

    # ─── Pixel ops ─────────────────────────────────────────────────
    @staticmethod
    def _grayscale(pixels: np.ndarray) -> np.ndarray:
        # Rec. 709 integer luma, truncated
        rgb = pixels[..., :3].astype(np.uint32)
        luma = ((rgb * _LUMA_WEIGHTS).sum(axis=2) // _LUMA_DIVISOR).astype(np.uint8)
        out = pixels.copy()
        out[..., 0] = luma
        out[..., 1] = luma
        out[..., 2] = luma
        return out

    @staticmethod
    def _brighten(pixels: np.ndarray, value: int) -> np.ndarray:
        # anything past +-255 saturates identically
        delta = max(-255, min(255, int(value)))
        out = pixels.copy()
        rgb = out[..., :3].astype(np.int16) + delta
        out[..., :3] = np.clip(rgb, 0, 255).astype(np.uint8)
        return out

    @staticmethod
    def _contrast(pixels: np.ndarray, factor: float) -> np.ndarray:
        if not math.isfinite(factor):
            raise InvalidParameterError(f"Invalid contrast factor: {factor}")
        out = pixels.copy()
        rgb = out[..., :3].astype(np.float64)
        scaled = np.rint((rgb - 128.0) * factor + 128.0)
        out[..., :3] = np.clip(scaled, 0, 255).astype(np.uint8)
        return out

    @staticmethod
    def _blur(pixels: np.ndarray, sigma: float) -> np.ndarray:
        if not math.isfinite(sigma) or sigma <= 0:
            raise InvalidParameterError(f"Invalid blur sigma: {sigma}")
        return cv2.GaussianBlur(
            pixels, (0, 0), sigmaX=sigma, sigmaY=sigma, borderType=cv2.BORDER_REPLICATE
        )

    # ─── Text ──────────────────────────────────────────────────────
    def _text_overlay(self, pixels: np.ndarray, t: TextOverlay) -> np.ndarray:
        rgb = parse_hex_color(t.color)
        if t.size <= 0:
            raise InvalidParameterError(f"Invalid font size: {t.size}")

        glyphs = [self.font_repository.rasterize(ch, t.size) for ch in t.text]
        max_ascent = max((glyph.ascent for glyph in glyphs), default=0.0)

        out = pixels.copy()
        pen_x = float(t.x)
        baseline = float(t.y) + max_ascent
        for glyph in glyphs:
            self._draw_glyph(out, glyph, pen_x, baseline, rgb)
            pen_x += glyph.advance
        return out

    @staticmethod
    def _draw_glyph(
        out: np.ndarray,
        glyph: Glyph,
        pen_x: float,
        baseline: float,
        rgb: Tuple[int, int, int],
    ) -> None:
        """
        Replace-if-visible: a covered pixel becomes (r, g, b, round(v * 255))
        when that alpha is non-zero. No blending with the background.
        """
        if glyph.coverage.size == 0:
            return

        alpha = np.rint(glyph.coverage * 255.0).astype(np.int64)
        rows, cols = np.nonzero(alpha > 0)
        px = np.floor(np.maximum(cols + glyph.left + pen_x, 0.0)).astype(np.int64)
        py = np.floor(np.maximum(rows + glyph.top + baseline, 0.0)).astype(np.int64)

        height, width = out.shape[:2]
        inside = (px < width) & (py < height)
        px, py = px[inside], py[inside]
        out[py, px, 0] = rgb[0]
        out[py, px, 1] = rgb[1]
        out[py, px, 2] = rgb[2]
        out[py, px, 3] = alpha[rows[inside], cols[inside]].astype(np.uint8)
