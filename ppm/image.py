import io
import logging
import re

import numpy as np
from PIL import Image as PILImage

from ppm.colour import Rgb
from ppm.error import (
    FormatError,
    ImageIOError,
    InvalidCoordinates,
    InvalidDimensions,
    UnexpectedEndOfInput,
)
from ppm.util import MAXVAL_LIMIT, RGB_MAX

logger = logging.getLogger(__name__)

MAGIC = b"P3"

# A comment runs from '#' to the end of the line, anything else up to
# whitespace is a token
_TOKEN = re.compile(rb"#[^\r\n]*|[^\s#]+")
_UNSIGNED = re.compile(rb"[0-9]+")


def _check_maxval(maxval):
    if not 1 <= maxval <= MAXVAL_LIMIT:
        raise FormatError(f"Invalid maxval {maxval}, expected a value in 1..{MAXVAL_LIMIT}")


def _check_dimensions(width, height):
    if width < 1 or height < 1:
        raise InvalidDimensions(width, height)


class _Tokens:
    """
    Walks the whitespace separated tokens of a P3 body, skipping comments.
    Keeps byte offsets so errors can point at the offending position.
    """

    def __init__(self, data, start):
        self.end = len(data)
        self._matches = _TOKEN.finditer(data, start)

    def next_int(self, expected):
        for match in self._matches:
            token = match.group()
            if token.startswith(b"#"):
                continue
            if not _UNSIGNED.fullmatch(token):
                raise FormatError(
                    f"Expected an unsigned integer for {expected} at byte {match.start()}, found {token!r}"
                )
            return int(token)
        raise UnexpectedEndOfInput(self.end, expected)


class Image:
    """
    A width x height grid of Rgb values stored row-major, pixel (x, y)
    living at index y * width + x.
    """

    def __init__(self, width, height, maxval=RGB_MAX):
        _check_dimensions(width, height)
        _check_maxval(maxval)
        self._width = width
        self._height = height
        self._maxval = maxval
        self._values = [Rgb.black() for _ in range(width * height)]

    @classmethod
    def with_values(cls, width, height, maxval, values):
        """
        Builds an image around a sequence of colours in row-major order.
        The colours are copied, the image owns its pixels.
        """
        _check_dimensions(width, height)
        _check_maxval(maxval)
        values = [Rgb(*colour) for colour in values]
        if len(values) != width * height:
            raise InvalidDimensions(width, height)
        return cls._wrap(width, height, maxval, values)

    @classmethod
    def _wrap(cls, width, height, maxval, values):
        image = cls.__new__(cls)
        image._width = width
        image._height = height
        image._maxval = maxval
        image._values = values
        return image

    @property
    def width(self):
        return self._width

    @property
    def height(self):
        return self._height

    @property
    def maxval(self):
        return self._maxval

    def dimensions(self):
        return self._width, self._height

    def values(self):
        return [colour.copy() for colour in self._values]

    def _index(self, x, y):
        if not 0 <= x < self._width or not 0 <= y < self._height:
            raise InvalidCoordinates(x, y)
        return y * self._width + x

    def get(self, x, y):
        return self._values[self._index(x, y)].copy()

    def get_mut(self, x, y):
        """
        Returns the stored colour itself, changing its channels changes the image.
        """
        return self._values[self._index(x, y)]

    def set(self, x, y, colour):
        self._values[self._index(x, y)] = Rgb(*colour)

    def _rows(self):
        for y in range(self._height):
            yield self._values[y * self._width:(y + 1) * self._width]

    @staticmethod
    def _emit(writer, text):
        payload = text if isinstance(writer, io.TextIOBase) else text.encode("ascii")
        try:
            writer.write(payload)
        except OSError as err:
            raise ImageIOError(err) from err

    def write(self, writer):
        """
        Writes the image as ASCII PPM (P3): magic, "width height", maxval,
        then one line of channel values per row.
        """
        self._emit(writer, f"P3\n{self._width} {self._height}\n{self._maxval}\n")
        for row in self._rows():
            channels = (str(value) for colour in row for value in colour.as_bytes(self._maxval))
            self._emit(writer, " ".join(channels) + "\n")
        logger.debug(f"Encoded {self._width}x{self._height} image, maxval {self._maxval}")

    def save(self, path):
        try:
            with open(path, "wb") as f:
                self.write(f)
        except OSError as err:
            raise ImageIOError(err) from err
        logger.debug(f"Saved image to {path}")

    @classmethod
    def from_reader(cls, reader):
        """
        Decodes an ASCII PPM (P3) image from a readable stream.

        Raises:
            FormatError: bad magic, a malformed token or a channel above maxval.
            UnexpectedEndOfInput: the stream ends before every field was read.
            InvalidDimensions: the header declares a zero width or height.
            ImageIOError: reading the stream failed.
        """
        try:
            data = reader.read()
        except OSError as err:
            raise ImageIOError(err) from err
        if isinstance(data, str):
            data = data.encode("utf-8")

        # Read PPM header
        magic = data[:len(MAGIC)]
        if magic != MAGIC[:len(magic)]:
            raise FormatError(f"Expected magic number {MAGIC!r}, found {magic!r}")
        if len(magic) < len(MAGIC):
            raise UnexpectedEndOfInput(len(data), "magic number")
        if len(data) > len(MAGIC) and not data[len(MAGIC):len(MAGIC) + 1].isspace():
            raise FormatError(f"Expected whitespace after magic number, found {data[:len(MAGIC) + 1]!r}")

        tokens = _Tokens(data, len(MAGIC))
        width = tokens.next_int("width")
        height = tokens.next_int("height")
        maxval = tokens.next_int("maxval")
        _check_dimensions(width, height)
        _check_maxval(maxval)

        # Read pixel data, row 0 first and column 0 first within a row
        values = []
        for _ in range(width * height):
            channels = []
            for name in ("red channel", "green channel", "blue channel"):
                value = tokens.next_int(name)
                if value > maxval:
                    raise FormatError(f"Channel value {value} exceeds maxval {maxval}")
                channels.append(value)
            values.append(Rgb.from_bytes(*channels, maxval=maxval))

        logger.debug(f"Decoded {width}x{height} image, maxval {maxval}")
        return cls._wrap(width, height, maxval, values)

    def to_array(self):
        """
        Returns the channels scaled to maxval as an array of shape
        (height, width, 3), uint8 up to maxval 255 and uint16 above.
        """
        dtype = np.uint8 if self._maxval <= RGB_MAX else np.uint16
        channels = [colour.as_bytes(self._maxval) for colour in self._values]
        return np.array(channels, dtype=dtype).reshape(self._height, self._width, 3)

    @classmethod
    def from_array(cls, array, maxval=RGB_MAX):
        """
        Builds an image from an (height, width, 3) array. Floating point
        arrays hold normalized channels, integer arrays hold values in
        0..maxval.
        """
        _check_maxval(maxval)
        array = np.asarray(array)
        if array.ndim != 3 or array.shape[2] != 3:
            raise FormatError(f"Expected an array of shape (height, width, 3), got {array.shape}")
        height, width = array.shape[:2]
        _check_dimensions(width, height)

        pixels = array.reshape(-1, 3)
        if np.issubdtype(array.dtype, np.floating):
            values = [Rgb(*pixel) for pixel in pixels.tolist()]
        elif np.issubdtype(array.dtype, np.integer):
            if pixels.min() < 0 or pixels.max() > maxval:
                raise FormatError(f"Array values must lie in 0..{maxval}")
            values = [Rgb.from_bytes(*pixel, maxval=maxval) for pixel in pixels.tolist()]
        else:
            raise FormatError(f"Unsupported array dtype {array.dtype}")
        return cls.with_values(width, height, maxval, values)

    def to_pil(self):
        # Pillow RGB images are 8 bit, rescale whatever maxval we carry
        channels = [colour.as_bytes(RGB_MAX) for colour in self._values]
        array = np.array(channels, dtype=np.uint8).reshape(self._height, self._width, 3)
        return PILImage.fromarray(array)

    @classmethod
    def from_pil(cls, pil_image):
        return cls.from_array(np.asarray(pil_image.convert("RGB")), maxval=RGB_MAX)

    def __eq__(self, other):
        if not isinstance(other, Image):
            return NotImplemented
        if (self.dimensions(), self._maxval) != (other.dimensions(), other._maxval):
            return False
        return all(
            mine.as_bytes(self._maxval) == theirs.as_bytes(self._maxval)
            for mine, theirs in zip(self._values, other._values)
        )

    def __repr__(self):
        return f"Image({self._width}x{self._height}, maxval={self._maxval})"


def decode_from(reader):
    return Image.from_reader(reader)


def load(path):
    """Opens a P3 file and decodes it."""
    try:
        f = open(path, "rb")
    except OSError as err:
        raise ImageIOError(err) from err
    with f:
        logger.debug(f"Loading image from {path}")
        return Image.from_reader(f)
