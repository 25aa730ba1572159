### BMP codec exception classes ###
class BmpError(Exception):
    """Base class for BMP codec errors."""
    pass


class InvalidFormatError(BmpError):
    """Stream is not a BMP file (bad signature, impossible header values)"""
    pass


class UnsupportedFormatError(BmpError):
    """Valid BMP, but a variant this codec does not handle."""
    def __init__(self, field, value, message=""):
        self.field = field
        self.value = value
        self.message = message or f"Unsupported {field}: {value}"
        super().__init__(self.message)


class EmptyImageError(BmpError):
    """Cannot encode an image with zero width or height"""
    pass


class BmpIOError(BmpError, OSError):
    """Reading or writing the underlying file failed."""
    pass


class TruncatedDataError(BmpIOError):
    """Stream ended before the header's promised byte count"""
    def __init__(self, expected, actual, what="pixel data"):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Truncated {what}: expected {expected} bytes, got {actual}")


class OutOfRangeError(BmpError, IndexError):
    """Pixel coordinates outside the buffer extent."""
    def __init__(self, x, y, width, height):
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        super().__init__(f"Pixel ({x}, {y}) out of bounds for {width}x{height} image")
