"""Drop-commit pipeline: write a text marker into one page of a PageCollection."""
import logging
from typing import Optional

from pdf_marker.backends.fonts import BUILTIN_FONT, FontResource
from pdf_marker.backends.pypdf2_backend import page_size, stamp_label
from pdf_marker.core.codec import decode, encode
from pdf_marker.core.coords import render_to_document
from pdf_marker.core.errors import PageNotFoundError
from pdf_marker.core.style import DEFAULT_STYLE
from pdf_marker.core.types import Page, PageCollection, TextStyle

logger = logging.getLogger(__name__)


def resolve_page(pages: PageCollection, target_page_index: int) -> Page:
    if not pages or not 0 <= target_page_index < len(pages):
        count = len(pages) if pages else 0
        raise PageNotFoundError(f"Page index {target_page_index} out of range (0-{count - 1})")
    return pages[target_page_index]


def commit(
    pages: PageCollection,
    target_page_index: int,
    render_x: float,
    render_y: float,
    label: str,
    style: Optional[TextStyle] = None,
    fonts: Optional[FontResource] = None,
) -> PageCollection:
    """Stamp `label` at a render-space point on one page and return the new collection.

    The page's own height drives the render-to-document mapping. `pages` is
    never modified; on any failure the caller still holds the old collection.
    """
    style = style or DEFAULT_STYLE
    fonts = fonts or BUILTIN_FONT

    target = resolve_page(pages, target_page_index)
    raw = decode(target.data)
    _, height = page_size(target.data)
    doc_x, doc_y = render_to_document(height, render_x, render_y)
    font_name = fonts.require(label)

    stamped = stamp_label(raw, doc_x, doc_y, label, style, font_name)
    updated = Page(number=target.number, data=encode(stamped))
    logger.info(f"Committed {label!r} on page {target.number} at document ({doc_x:g}, {doc_y:g})")

    new_pages = list(pages)
    new_pages[target_page_index] = updated
    return tuple(new_pages)
