"""
Transformation variants consumed by the transformation engine.

Every variant is an immutable value object. On the wire they use the
externally tagged enum shape produced by the editor front end:

    "Rotate90"
    {"Grayscale": {"region": null}}
    {"Brighten": {"value": 10, "region": {"x": 0, "y": 0, "width": 4, "height": 4}}}
    {"Crop": {"x": 0, "y": 0, "width": 1, "height": 1}}

Older payloads omit ``region`` entirely (and send region-less unit variants
such as ``"Grayscale"``); those parse with ``region = None``.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from .region import Region, strict_int
from ..exceptions import InvalidTransformationError


@dataclass(frozen=True)
class Crop:
    region: Region


@dataclass(frozen=True)
class Grayscale:
    region: Optional[Region] = None


@dataclass(frozen=True)
class Rotate90:
    pass


@dataclass(frozen=True)
class Rotate180:
    pass


@dataclass(frozen=True)
class Rotate270:
    pass


@dataclass(frozen=True)
class FlipVertical:
    region: Optional[Region] = None


@dataclass(frozen=True)
class FlipHorizontal:
    region: Optional[Region] = None


@dataclass(frozen=True)
class Brighten:
    value: int
    region: Optional[Region] = None


@dataclass(frozen=True)
class Contrast:
    contrast: float
    region: Optional[Region] = None


@dataclass(frozen=True)
class Blur:
    sigma: float
    region: Optional[Region] = None


@dataclass(frozen=True)
class TextOverlay:
    text: str
    x: int
    y: int
    size: int
    color: str  # "#RRGGBB" or "RRGGBB"


Transformation = Union[
    Crop, Grayscale, Rotate90, Rotate180, Rotate270, FlipVertical,
    FlipHorizontal, Brighten, Contrast, Blur, TextOverlay,
]

_UNIT_VARIANTS = {
    "Rotate90": Rotate90,
    "Rotate180": Rotate180,
    "Rotate270": Rotate270,
    # legacy region-less shapes
    "Grayscale": Grayscale,
    "FlipVertical": FlipVertical,
    "FlipHorizontal": FlipHorizontal,
}


def _optional_region(params: Dict[str, Any]) -> Optional[Region]:
    raw = params.get("region")
    return None if raw is None else Region.from_dict(raw)


def _build(tag: str, params: Dict[str, Any]) -> Transformation:
    if tag == "Crop":
        return Crop(Region.from_dict(params))
    if tag == "Grayscale":
        return Grayscale(_optional_region(params))
    if tag == "FlipVertical":
        return FlipVertical(_optional_region(params))
    if tag == "FlipHorizontal":
        return FlipHorizontal(_optional_region(params))
    if tag == "Brighten":
        return Brighten(strict_int(params["value"], "value"), _optional_region(params))
    if tag == "Contrast":
        return Contrast(float(params["contrast"]), _optional_region(params))
    if tag == "Blur":
        return Blur(float(params["sigma"]), _optional_region(params))
    if tag == "TextOverlay":
        return TextOverlay(
            text=str(params["text"]),
            x=strict_int(params["x"], "x", minimum=0),
            y=strict_int(params["y"], "y", minimum=0),
            size=strict_int(params["size"], "size", minimum=0),
            color=str(params["color"]),
        )
    if tag in _UNIT_VARIANTS:
        return _UNIT_VARIANTS[tag]()
    raise InvalidTransformationError(f"Unknown transformation: {tag!r}")


def transformation_from_dict(raw: Union[str, Dict[str, Any]]) -> Transformation:
    """Parse one externally tagged transformation value."""
    if isinstance(raw, str):
        if raw not in _UNIT_VARIANTS:
            raise InvalidTransformationError(f"Transformation {raw!r} requires parameters")
        return _UNIT_VARIANTS[raw]()

    if not isinstance(raw, dict) or len(raw) != 1:
        raise InvalidTransformationError(f"Expected a single-key object, got {raw!r}")

    tag, params = next(iter(raw.items()))
    if params is None:
        params = {}
    if not isinstance(params, dict):
        raise InvalidTransformationError(f"Parameters for {tag!r} must be an object")
    try:
        return _build(tag, params)
    except InvalidTransformationError:
        raise
    except (KeyError, TypeError, ValueError) as err:
        raise InvalidTransformationError(f"Invalid parameters for {tag!r}: {err}") from err


def parse_transformations(payload: Union[str, bytes, List[Any]]) -> List[Transformation]:
    """Parse a JSON array (or an already decoded list) of transformations."""
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except ValueError as err:
            raise InvalidTransformationError(f"Invalid transformations JSON format: {err}") from err
    if not isinstance(payload, list):
        raise InvalidTransformationError("Transformations must be a JSON array")
    return [transformation_from_dict(item) for item in payload]


def transformation_to_dict(transformation: Transformation) -> Union[str, Dict[str, Any]]:
    """Inverse of ``transformation_from_dict``."""
    tag = type(transformation).__name__
    if isinstance(transformation, (Rotate90, Rotate180, Rotate270)):
        return tag
    if isinstance(transformation, Crop):
        return {tag: transformation.region.to_dict()}
    if isinstance(transformation, TextOverlay):
        return {tag: {
            "text": transformation.text,
            "x": transformation.x,
            "y": transformation.y,
            "size": transformation.size,
            "color": transformation.color,
        }}

    params: Dict[str, Any] = {}
    if isinstance(transformation, Brighten):
        params["value"] = transformation.value
    elif isinstance(transformation, Contrast):
        params["contrast"] = transformation.contrast
    elif isinstance(transformation, Blur):
        params["sigma"] = transformation.sigma
    region = transformation.region
    params["region"] = None if region is None else region.to_dict()
    return {tag: params}
