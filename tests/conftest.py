# tests/conftest.py
import pytest


def _u(value, size):
    return value.to_bytes(size, "little")


def _s(value, size):
    return value.to_bytes(size, "little", signed=True)


@pytest.fixture
def make_bmp():
    """Build BMP bytes by hand, independent of the encoder.

    ``file_rows`` are given in file order, each a list of (B, G, R) triples.
    """
    def _make(width, file_rows, *, height=None, signature=b"BM", bpp=24,
              compression=0, data_offset=54, gap=b"", pad_byte=0):
        if height is None:
            height = len(file_rows)
        padding = (4 - (width * 3) % 4) % 4
        pixels = b"".join(
            bytes(c for bgr in row for c in bgr) + bytes([pad_byte]) * padding
            for row in file_rows
        )
        header = (
            signature
            + _u(data_offset + len(pixels), 4)
            + _u(0, 4)
            + _u(data_offset, 4)
            + _u(40, 4)
            + _s(width, 4)
            + _s(height, 4)
            + _u(1, 2)
            + _u(bpp, 2)
            + _u(compression, 4)
            + _u(len(pixels), 4)
            + _s(2835, 4)
            + _s(2835, 4)
            + _u(0, 4)
            + _u(0, 4)
        )
        assert len(header) == 54
        return header + gap + pixels
    return _make
