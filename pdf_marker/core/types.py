from typing import Any, NamedTuple, Optional, Tuple

# base64 text of a whole PDF or of a single page
EncodedDocument = str


class Page(NamedTuple):
    number: int            # 1-based, matches the source document ordering
    data: EncodedDocument  # exactly one single-page PDF


PageCollection = Tuple[Page, ...]


class Annotation(NamedTuple):
    page: int
    pos_x: float  # render space: origin top-left, y down
    pos_y: float


class DropEvent(NamedTuple):
    target_page_index: int  # 0-based index into the PageCollection
    render_x: float
    render_y: float
    template: Annotation
    label: Optional[str] = None


class RenderedPage(NamedTuple):
    surface: Any
    width_px: float
    height_px: float


class TextStyle(NamedTuple):
    font_name: str
    size: float
    color: Tuple[float, float, float]  # RGB, 0..1
