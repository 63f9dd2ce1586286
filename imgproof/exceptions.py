class ImageProofError(Exception):
    """Base class for every failure raised by imgproof."""


class InputError(ImageProofError, ValueError):
    """
    The caller supplied something the core cannot work with.
    Aborts the whole run; no partial attestation is ever produced.
    """


class InvalidImageError(InputError):
    """Empty, corrupt or undecodable image payload."""


class InvalidRegionError(InputError):
    """Region does not fit inside the image it targets."""


class InvalidColorError(InputError):
    """Hex color string is not #RRGGBB / RRGGBB."""


class InvalidSignatureError(InputError):
    """Signature payload is malformed (wrong length, bad hex)."""


class InvalidParameterError(InputError):
    """Numeric or format parameter outside its accepted domain."""


class InvalidTransformationError(InputError):
    """Transformation payload could not be parsed."""


class InvalidAttestationError(InputError):
    """Encoded public values do not have the attestation layout."""


class LayerIndexError(InputError, IndexError):
    """Layer index out of bounds."""
