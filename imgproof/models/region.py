from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..exceptions import InvalidTransformationError


def strict_int(value: Any, name: str, minimum: Optional[int] = None) -> int:
    """JSON integer field; floats, bools and numeric strings are rejected, not truncated."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidTransformationError(f"Field {name!r} must be an integer, got {value!r}")
    if minimum is not None and value < minimum:
        raise InvalidTransformationError(f"Field {name!r} must be >= {minimum}, got {value}")
    return value


@dataclass(frozen=True)
class Region:
    """Rectangular sub-area of an image, origin top-left, in pixels."""
    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Region":
        return cls(**{key: strict_int(raw[key], key, minimum=0) for key in ("x", "y", "width", "height")})

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    def fits(self, width: int, height: int) -> bool:
        """True when the region is non-empty and lies inside a width x height image."""
        if min(self.x, self.y) < 0 or self.width <= 0 or self.height <= 0:
            return False
        return self.x + self.width <= width and self.y + self.height <= height
