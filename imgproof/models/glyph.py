from __future__ import annotations
from dataclasses import dataclass
import numpy as np


@dataclass(frozen=True)
class Glyph:
    """
    Rasterized glyph as handed over by the font repository.

    coverage: float array (h, w), values in [0, 1].
    left/top: offset of coverage[0, 0] from the pen position on the baseline
              (top is negative for anything drawn above the baseline).
    advance:  horizontal pen advance in pixels.
    ascent/descent: font line metrics above/below the baseline.
    """
    coverage: np.ndarray
    left: int
    top: int
    advance: float
    ascent: float
    descent: float

    def coverage_at(self, dx: int, dy: int) -> float:
        """Coverage at (dx, dy) relative to the glyph origin, 0.0 outside the mask."""
        row, col = dy - self.top, dx - self.left
        h, w = self.coverage.shape[:2]
        if 0 <= row < h and 0 <= col < w:
            return float(self.coverage[row, col])
        return 0.0
