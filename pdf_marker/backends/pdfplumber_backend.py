import io
import logging
from typing import Dict, List

import pdfplumber
from pdfminer.pdfparser import PDFSyntaxError
from pdfplumber.utils.exceptions import PdfminerException

from pdf_marker.core.codec import decode
from pdf_marker.core.errors import DecodingError
from pdf_marker.core.types import EncodedDocument, RenderedPage

logger = logging.getLogger(__name__)

# Render scale 1: one render pixel is one PDF point.
RENDER_RESOLUTION = 72


def _open(page_doc: EncodedDocument) -> "pdfplumber.PDF":
    raw = decode(page_doc)
    try:
        return pdfplumber.open(io.BytesIO(raw))
    except (PdfminerException, PDFSyntaxError, ValueError, TypeError, KeyError) as e:
        logger.error(f"pdfplumber could not open page: {e}")
        raise DecodingError(f"Page data is not a readable PDF: {e}") from e


class PlumberRenderAdapter:
    """Render adapter backed by pdfplumber (pypdfium2 rasterisation).

    `render` returns the PageImage as the surface and the page size in
    render-space pixels. Dimensions come from the page geometry, so the same
    page always reports the same size.
    """

    def __init__(self, rasterize: bool = True):
        self.rasterize = rasterize

    def render(self, page_doc: EncodedDocument) -> RenderedPage:
        with _open(page_doc) as pdf:
            if not pdf.pages:
                raise DecodingError("Page data contains no page")
            page = pdf.pages[0]
            width, height = float(page.width), float(page.height)
            surface = None
            if self.rasterize:
                surface = page.to_image(resolution=RENDER_RESOLUTION)
        logger.debug(f"Rendered page {width}x{height}px")
        return RenderedPage(surface=surface, width_px=width, height_px=height)


# --- Text read-back ---

def extract_words(page_doc: EncodedDocument) -> List[Dict]:
    """Words on the page with render-space boxes (x0, top, x1, bottom)."""
    with _open(page_doc) as pdf:
        words = pdf.pages[0].extract_words() or []
    return [
        {
            "text": w["text"],
            "x0": float(w["x0"]),
            "top": float(w["top"]),
            "x1": float(w["x1"]),
            "bottom": float(w["bottom"]),
        }
        for w in words
    ]


def extract_text(page_doc: EncodedDocument) -> str:
    with _open(page_doc) as pdf:
        return (pdf.pages[0].extract_text() or "").strip()
