from __future__ import annotations
from dataclasses import dataclass, field
from typing import List

from .image import Image


@dataclass
class Layer:
    """A single editable layer. Owns its image exclusively."""
    image: Image


@dataclass
class ImageProject:
    """Ordered stack of layers being edited together."""
    layers: List[Layer] = field(default_factory=list)
