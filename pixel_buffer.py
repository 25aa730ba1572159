from dataclasses import dataclass

from errors import OutOfRangeError


@dataclass(frozen=True)
class RGBPixel:
    """8-bit RGB colour; arithmetic saturates instead of wrapping."""
    r: int = 0
    g: int = 0
    b: int = 0

    def __post_init__(self):
        for name in ("r", "g", "b"):
            value = getattr(self, name)
            if not isinstance(value, int):
                raise TypeError(f"Channel {name} must be an int, got {type(value).__name__}")
            if not 0 <= value <= 255:
                raise ValueError(f"Channel {name} must be in 0..255, got {value}")

    @classmethod
    def gray(cls, value):
        return cls(value, value, value)

    def __add__(self, other):
        if not isinstance(other, RGBPixel):
            return NotImplemented
        return RGBPixel(
            min(255, self.r + other.r),
            min(255, self.g + other.g),
            min(255, self.b + other.b),
        )

    def __mul__(self, factor):
        if not isinstance(factor, (int, float)):
            return NotImplemented
        return RGBPixel(*(_saturate(c * factor) for c in self.as_tuple()))

    __rmul__ = __mul__

    def luminance(self):
        # ITU-R BT.601 weights
        return int(0.299 * self.r + 0.587 * self.g + 0.114 * self.b)

    def as_tuple(self):
        return (self.r, self.g, self.b)


def _saturate(value):
    return max(0, min(255, int(round(value))))


BLACK = RGBPixel(0, 0, 0)


# Pixels are one bytearray of width * height * 3 bytes, R, G, B, row-major
class PixelBuffer:
    def __init__(self, width=0, height=0, fill_color=BLACK):
        if width < 0 or height < 0:
            raise ValueError(f"Image dimensions must be non-negative, got {width}x{height}")
        self._width = width
        self._height = height
        self._data = bytearray(bytes(fill_color.as_tuple()) * (width * height))

    @classmethod
    def create(cls, width, height, fill_color=BLACK):
        return cls(width, height, fill_color)

    @property
    def width(self):
        return self._width

    @property
    def height(self):
        return self._height

    @property
    def pixel_count(self):
        return self._width * self._height

    def is_empty(self):
        return self._width == 0 or self._height == 0

    def _offset(self, x, y):
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise OutOfRangeError(x, y, self._width, self._height)
        return (y * self._width + x) * 3

    def get_pixel(self, x, y):
        i = self._offset(x, y)
        r, g, b = self._data[i:i + 3]
        return RGBPixel(r, g, b)

    def set_pixel(self, x, y, value):
        i = self._offset(x, y)
        self._data[i:i + 3] = bytes(value.as_tuple())

    # Raw RGB bytes, writes go through to the image. Goes stale after resize.
    def get_data(self):
        return self._data

    def resize(self, new_width, new_height, preserve_content=True):
        if new_width < 0 or new_height < 0:
            raise ValueError(f"Image dimensions must be non-negative, got {new_width}x{new_height}")
        if new_width == self._width and new_height == self._height:
            return

        new_data = bytearray(new_width * new_height * 3)
        if preserve_content and not self.is_empty():
            # copy the overlapping top-left rectangle row by row
            copy_bytes = min(self._width, new_width) * 3
            for y in range(min(self._height, new_height)):
                src = y * self._width * 3
                dst = y * new_width * 3
                new_data[dst:dst + copy_bytes] = self._data[src:src + copy_bytes]

        self._data = new_data
        self._width = new_width
        self._height = new_height

    def clear(self, color=BLACK):
        self._data[:] = bytes(color.as_tuple()) * self.pixel_count

    def clone(self):
        copy = PixelBuffer()
        copy._width = self._width
        copy._height = self._height
        copy._data = bytearray(self._data)
        return copy

    # copying always means a deep copy of the pixels
    def __copy__(self):
        return self.clone()

    def __deepcopy__(self, memo):
        return self.clone()

    def __eq__(self, other):
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return (self._width == other._width and self._height == other._height
                and self._data == other._data)

    def __repr__(self):
        return f"PixelBuffer({self._width}x{self._height})"
