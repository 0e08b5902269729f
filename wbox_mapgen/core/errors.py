# ========================
# file: wbox_mapgen/core/errors.py
# ========================
class MapGenError(Exception):
    """Base error for the map generator."""


class ValidationError(MapGenError):
    """Raised when input data or configuration fails validation."""


class SizeTooSmallError(ValidationError):
    """Raised when the image is smaller than one block after cropping."""


class ColorTableError(ValidationError):
    """Raised when a color table is missing, empty or cannot be read."""


class ConfigError(ValidationError):
    """Raised when a stats configuration is invalid."""


class ResourceError(MapGenError):
    """Raised when an input cannot be read or an output cannot be produced."""


class ImageReadError(ResourceError):
    """Raised when the source image bytes cannot be decoded."""


class CompressionError(ResourceError):
    """Raised when the save document cannot be compressed."""
