from pdf_marker.core.types import TextStyle

# Fixed marker text style; not user-settable per drop.
DEFAULT_FONT_NAME = "Helvetica"
DEFAULT_FONT_SIZE = 12.0
DEFAULT_COLOR = (0.0, 0.0, 0.0)
DEFAULT_LABEL = "Hello, World!"

DEFAULT_STYLE = TextStyle(font_name=DEFAULT_FONT_NAME, size=DEFAULT_FONT_SIZE, color=DEFAULT_COLOR)


def make_style(font_name: str = DEFAULT_FONT_NAME, size: float = DEFAULT_FONT_SIZE, color=DEFAULT_COLOR) -> TextStyle:
    size = float(size)
    if size <= 0:
        raise ValueError(f"Font size must be positive, got {size}")
    r, g, b = (float(c) for c in color)
    for c in (r, g, b):
        if not 0.0 <= c <= 1.0:
            raise ValueError(f"Color components must be within 0..1, got {color}")
    return TextStyle(font_name=font_name, size=size, color=(r, g, b))
