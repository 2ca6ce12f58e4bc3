"""
Errors raised while building, reading or writing an image.

Every error is an ``ImageError``; the concrete classes also derive from the
closest builtin so callers can catch either.
"""


class ImageError(Exception):
    pass


class InvalidDimensions(ImageError, ValueError):
    def __init__(self, width, height):
        super().__init__(f"Invalid image dimensions: {width}x{height}")
        self.width = width
        self.height = height


class InvalidCoordinates(ImageError, IndexError):
    def __init__(self, x, y):
        super().__init__(f"Invalid image coordinates: ({x}, {y})")
        self.x = x
        self.y = y


class UnexpectedEndOfInput(ImageError, EOFError):
    def __init__(self, position, expected):
        super().__init__(f"Unexpected end of input at byte {position} while reading {expected}")
        self.position = position
        self.expected = expected


class FormatError(ImageError, ValueError):
    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ImageIOError(ImageError):
    # Wraps the OSError raised by the underlying stream or file
    def __init__(self, error):
        super().__init__(str(error))
        self.error = error
