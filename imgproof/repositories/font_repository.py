from typing import Dict, Optional
import logging
import os

import numpy as np
from PIL import Image as PILImage, ImageDraw, ImageFont
from dotenv import load_dotenv

from ..models.glyph import Glyph
from ..exceptions import InvalidParameterError

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class FontRepository:
    """
    Glyph rasterizer boundary. Wraps Pillow's FreeType fonts and hands out
    coverage masks measured from the baseline.
    """

    def __init__(self, font_path: Optional[str] = None):
        self.font_path = font_path or os.getenv("IMGPROOF_FONT_PATH") or None
        self._fonts: Dict[int, ImageFont.FreeTypeFont] = {}

    def _font(self, size: int):
        if size not in self._fonts:
            try:
                if self.font_path:
                    font = ImageFont.truetype(self.font_path, size)
                else:
                    font = ImageFont.load_default(size=size)
            except OSError as err:
                raise InvalidParameterError(f"Failed to load font: {err}") from err
            logger.debug(f"Loaded font {self.font_path or '<pillow default>'} at {size}px")
            self._fonts[size] = font
        return self._fonts[size]

    def rasterize(self, char: str, size: int) -> Glyph:
        if size <= 0:
            raise InvalidParameterError(f"Invalid font size: {size}")

        font = self._font(size)
        ascent, descent = font.getmetrics()
        left, top, right, bottom = font.getbbox(char, anchor="ls")
        advance = float(font.getlength(char))
        width, height = right - left, bottom - top
        if width <= 0 or height <= 0:
            # whitespace: nothing to draw, only advance the pen
            return Glyph(
                coverage=np.zeros((0, 0)), left=0, top=0,
                advance=advance, ascent=float(ascent), descent=float(descent),
            )

        mask = PILImage.new("L", (width, height), 0)
        ImageDraw.Draw(mask).text((-left, -top), char, font=font, fill=255, anchor="ls")
        coverage = np.asarray(mask, dtype=np.float64) / 255.0
        return Glyph(
            coverage=coverage, left=int(left), top=int(top),
            advance=advance, ascent=float(ascent), descent=float(descent),
        )
