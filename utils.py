from PyQt5.QtGui import QImage, qRgb

from pixel_buffer import PixelBuffer, RGBPixel


# Apply brightness and R/G/B toggles to a copy of the image
def adjust(buffer, brightness=1.0, channels=(True, True, True)):
    r_on, g_on, b_on = channels
    result = buffer.clone()
    if brightness == 1.0 and all(channels):
        return result

    for y in range(result.height):
        for x in range(result.width):
            pixel = result.get_pixel(x, y)
            pixel = RGBPixel(
                pixel.r if r_on else 0,
                pixel.g if g_on else 0,
                pixel.b if b_on else 0,
            )
            result.set_pixel(x, y, pixel * brightness)
    return result


# Size of the displayed image; a non-empty image never scales below 1x1
def scaled_size(width, height, scale):
    if width == 0 or height == 0:
        return 0, 0
    return max(1, int(width * scale)), max(1, int(height * scale))


# Convert a PixelBuffer to a QImage, nearest-neighbour scaled
def to_qimage(buffer: PixelBuffer, scale=1.0) -> QImage:
    new_w, new_h = scaled_size(buffer.width, buffer.height, scale)
    image = QImage(new_w, new_h, QImage.Format_RGB32)

    for y in range(new_h):
        src_y = min(buffer.height - 1, int(y / scale))
        for x in range(new_w):
            src_x = min(buffer.width - 1, int(x / scale))
            R, G, B = buffer.get_pixel(src_x, src_y).as_tuple()
            image.setPixel(x, y, qRgb(R, G, B))
    return image


# Text for the metadata panel, one "field: value" per line
def format_metadata(header):
    meta_text = ""
    for k, v in header.to_dict().items():
        if k == "signature":
            v = v.to_bytes(2, "little").decode("latin-1")
        meta_text += f"{k}: {v}\n"
    if header.height != 0:
        meta_text += f"orientation: {'top-down' if header.is_top_down else 'bottom-up'}\n"
    return meta_text
