from io import BytesIO
from typing import Optional

from PIL import Image, ImageDraw, ImageFont

from seenai.errors import InvalidArgument

DEFAULT_WIDTH = 1280
DEFAULT_HEIGHT = 720
DEFAULT_FONT_SIZE = 48
DEFAULT_COLOR = "white"

# Largest canvas and font size a preview may use
MAX_DIMENSION = 4096
MAX_FONT_SIZE = 1024


def _positive_int(name: str, value, maximum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidArgument(f"{name} must be a positive integer, got {value!r}")
    if value > maximum:
        raise InvalidArgument(f"{name} must be at most {maximum}, got {value}")
    return value


def _load_font(font_size: int, font_path: Optional[str]):
    if font_path:
        try:
            return ImageFont.truetype(font_path, font_size)
        except OSError as e:
            raise InvalidArgument(f"Cannot load font {font_path}: {e}") from e
    return ImageFont.load_default(size=font_size)


def render_text_image(
    text: str,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    font_size: int = DEFAULT_FONT_SIZE,
    color: str = DEFAULT_COLOR,
    font_path: Optional[str] = None,
) -> bytes:
    """Renders `text` at the top-left corner of a transparent PNG.

    No wrapping: text wider than the canvas is clipped.
    """
    width = _positive_int("width", width, MAX_DIMENSION)
    height = _positive_int("height", height, MAX_DIMENSION)
    font_size = _positive_int("font_size", font_size, MAX_FONT_SIZE)

    image = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    draw = ImageDraw.Draw(image)
    font = _load_font(font_size, font_path)
    try:
        draw.text((0, 0), text, fill=color, font=font)
    except ValueError as e:
        raise InvalidArgument(f"Invalid color {color!r}: {e}") from e

    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()
