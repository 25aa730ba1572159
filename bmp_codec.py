"""Reader and writer for uncompressed 24-bit BMP files.

Only the classic 54-byte layout (14-byte file header + 40-byte
BITMAPINFOHEADER) with BGR pixel rows is handled. Rows are padded to a
multiple of 4 bytes; a positive height means rows are stored bottom-up.

Decoding accepts both row orders. Encoding always writes bottom-up.
"""
import io
import os
import stat
import tempfile
from dataclasses import dataclass, asdict

from errors import (
    BmpIOError, EmptyImageError, InvalidFormatError, TruncatedDataError,
    UnsupportedFormatError,
)
from logger import logger
from pixel_buffer import PixelBuffer

HEADER_SIZE = 54
INFO_HEADER_SIZE = 40
SIGNATURE = 0x4D42  # b'BM' read little-endian
BITS_PER_PIXEL = 24
PIXELS_PER_METER = 2835  # 72 DPI

# (field, size in bytes, signed) in on-disk order
_HEADER_LAYOUT = (
    ("signature", 2, False),
    ("file_size", 4, False),
    ("reserved", 4, False),
    ("data_offset", 4, False),
    ("header_size", 4, False),
    ("width", 4, True),
    ("height", 4, True),
    ("planes", 2, False),
    ("bits_per_pixel", 2, False),
    ("compression", 4, False),
    ("image_size", 4, False),
    ("x_pixels_per_meter", 4, True),
    ("y_pixels_per_meter", 4, True),
    ("colors_used", 4, False),
    ("important_colors", 4, False),
)


def row_padding(width):
    """Zero bytes appended to each row so its length is a multiple of 4."""
    return (4 - (width * 3) % 4) % 4


@dataclass
class BmpHeader:
    signature: int
    file_size: int
    reserved: int
    data_offset: int
    header_size: int
    width: int
    height: int
    planes: int
    bits_per_pixel: int
    compression: int
    image_size: int
    x_pixels_per_meter: int
    y_pixels_per_meter: int
    colors_used: int
    important_colors: int

    @classmethod
    def from_bytes(cls, data):
        if len(data) < HEADER_SIZE:
            raise TruncatedDataError(HEADER_SIZE, len(data), "header")
        values = {}
        pos = 0
        for name, size, signed in _HEADER_LAYOUT:
            values[name] = int.from_bytes(data[pos:pos + size], "little", signed=signed)
            pos += size
        return cls(**values)

    @classmethod
    def for_buffer(cls, width, height):
        """Canonical header written by the encoder (bottom-up rows)."""
        image_size = (width * 3 + row_padding(width)) * height
        return cls(
            signature=SIGNATURE,
            file_size=HEADER_SIZE + image_size,
            reserved=0,
            data_offset=HEADER_SIZE,
            header_size=INFO_HEADER_SIZE,
            width=width,
            height=height,
            planes=1,
            bits_per_pixel=BITS_PER_PIXEL,
            compression=0,
            image_size=image_size,
            x_pixels_per_meter=PIXELS_PER_METER,
            y_pixels_per_meter=PIXELS_PER_METER,
            colors_used=0,
            important_colors=0,
        )

    def to_bytes(self):
        return b"".join(
            getattr(self, name).to_bytes(size, "little", signed=signed)
            for name, size, signed in _HEADER_LAYOUT
        )

    def to_dict(self):
        return asdict(self)

    @property
    def is_top_down(self):
        return self.height < 0

    @property
    def abs_width(self):
        return abs(self.width)

    @property
    def abs_height(self):
        return abs(self.height)

    @property
    def row_size(self):
        return self.abs_width * 3 + row_padding(self.abs_width)


def _swap_red_blue(src, dst, offset, count):
    # copy `count` bytes of 3-byte pixels into dst[offset:], reversing channel order
    end = offset + count
    dst[offset:end:3] = src[2:count:3]
    dst[offset + 1:end:3] = src[1:count:3]
    dst[offset + 2:end:3] = src[0:count:3]


def read_header(stream):
    """Read and validate the 54-byte header at the current stream position."""
    header = BmpHeader.from_bytes(stream.read(HEADER_SIZE))

    if header.signature != SIGNATURE:
        raise InvalidFormatError("Not a BMP file (signature is not 'BM')")
    if header.bits_per_pixel != BITS_PER_PIXEL:
        raise UnsupportedFormatError(
            "bits_per_pixel", header.bits_per_pixel,
            f"Only 24-bit BMP files are supported, got {header.bits_per_pixel}-bit")
    if header.compression != 0:
        raise UnsupportedFormatError(
            "compression", header.compression,
            "Compressed BMP files are not supported")
    if header.width < 0:
        raise InvalidFormatError(f"Negative image width: {header.width}")

    # tolerated, but worth knowing about
    if header.reserved != 0:
        logger.warning("BMP reserved field is %d, expected 0", header.reserved)
    if header.header_size != INFO_HEADER_SIZE:
        logger.warning("BMP info header size is %d, expected %d",
                       header.header_size, INFO_HEADER_SIZE)
    if header.planes != 1:
        logger.warning("BMP planes is %d, expected 1", header.planes)

    return header


def read_bmp(stream):
    """Decode a 24-bit BMP from a seekable binary stream into a PixelBuffer.

    ``data_offset`` is taken relative to the stream position on entry, so a
    BMP embedded in a larger stream can be read in place.

    Raises:
        InvalidFormatError: bad signature or negative width.
        UnsupportedFormatError: not 24-bit or compressed.
        TruncatedDataError: fewer bytes than the header promises.
    """
    start = stream.tell()
    header = read_header(stream)

    width = header.abs_width
    height = header.abs_height
    row_size = header.row_size
    stride = width * 3

    data_start = start + header.data_offset
    expected = row_size * height

    # Check the promised size against what the stream holds before
    # requesting any row, so a lying header cannot trigger a huge read
    end = stream.seek(0, io.SEEK_END)
    available = max(0, end - data_start)
    if expected > available:
        raise TruncatedDataError(expected, available)
    stream.seek(data_start)

    # Read everything before allocating the image so a short file never
    # produces a half-filled buffer
    rows = []
    if row_size:
        for _ in range(height):
            row = stream.read(row_size)
            if len(row) < row_size:
                raise TruncatedDataError(expected, row_size * len(rows) + len(row))
            rows.append(row)

    buffer = PixelBuffer.create(width, height)
    data = buffer.get_data()
    for y, row in enumerate(rows):
        # Bottom-up files store the last image row first
        target = y if header.is_top_down else height - 1 - y
        _swap_red_blue(row, data, target * stride, stride)

    logger.debug("Decoded %dx%d BMP (%s)", width, height,
                 "top-down" if header.is_top_down else "bottom-up")
    return buffer


def decode(data):
    """Decode BMP file bytes."""
    return read_bmp(io.BytesIO(data))


def load(path):
    """Decode the BMP file at ``path``."""
    with open(path, "rb") as f:
        return read_bmp(f)


def _write_all(stream, chunk):
    # a raw stream may take only part of the chunk; None means no count reported
    n = stream.write(chunk)
    if n is not None and n < len(chunk):
        raise BmpIOError(f"Short write: {n} of {len(chunk)} bytes")
    return len(chunk)


def write_bmp(buffer, stream):
    """Encode ``buffer`` as a bottom-up 24-bit BMP into ``stream``.

    ``stream`` is a binary file object. Returns the number of bytes written.
    """
    if buffer.is_empty():
        raise EmptyImageError(f"Cannot encode empty image ({buffer.width}x{buffer.height})")

    width, height = buffer.width, buffer.height
    header = BmpHeader.for_buffer(width, height)
    stride = width * 3
    data = buffer.get_data()

    written = _write_all(stream, header.to_bytes())
    for y in range(height - 1, -1, -1):
        # trailing padding bytes stay zero
        row = bytearray(header.row_size)
        _swap_red_blue(data[y * stride:(y + 1) * stride], row, 0, stride)
        written += _write_all(stream, row)

    logger.debug("Encoded %dx%d BMP, %d bytes", width, height, written)
    return written


def encode(buffer):
    """Encode ``buffer`` and return the BMP file bytes."""
    out = io.BytesIO()
    write_bmp(buffer, out)
    return out.getvalue()


def _target_mode(path):
    # keep an existing file's permissions, otherwise what open() would give
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def save(buffer, path):
    """Write ``buffer`` to ``path`` as a BMP file.

    The image is encoded in memory, written to a temporary file next to the
    target and then moved over it, so on any failure ``path`` is either
    untouched or absent, never half-written.
    """
    data = encode(buffer)
    directory = os.path.dirname(os.path.abspath(path))

    try:
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".", suffix=".bmp.tmp")
    except OSError as e:
        raise BmpIOError(f"Error writing {path}: {e}") from e

    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.chmod(tmp_path, _target_mode(path))
        os.replace(tmp_path, path)
    except OSError as e:
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass
        raise BmpIOError(f"Error writing {path}: {e}") from e

    logger.debug("Saved %s (%d bytes)", path, len(data))
