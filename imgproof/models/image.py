from __future__ import annotations
from dataclasses import dataclass
import numpy as np


@dataclass
class Image:
    """
    Simple data object: RGBA pixels owned by exactly one layer at a time.
    No codec logic outside the image repository.
    """
    pixels: np.ndarray  # Shape (H, W, 4), dtype uint8, RGBA order.

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])
