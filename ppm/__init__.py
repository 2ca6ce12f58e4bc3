"""Reading, writing and building ASCII PPM (P3) images."""

from ppm.colour import Rgb
from ppm.error import (
    FormatError,
    ImageError,
    ImageIOError,
    InvalidCoordinates,
    InvalidDimensions,
    UnexpectedEndOfInput,
)
from ppm.image import Image, decode_from, load
from ppm.util import RGB_MAX, byte_to_float, float_to_byte

__version__ = "0.1.0"

__all__ = [
    "FormatError",
    "Image",
    "ImageError",
    "ImageIOError",
    "InvalidCoordinates",
    "InvalidDimensions",
    "RGB_MAX",
    "Rgb",
    "UnexpectedEndOfInput",
    "byte_to_float",
    "decode_from",
    "float_to_byte",
    "load",
]
