import io
import logging
from typing import Iterable, List, Tuple

import PyPDF2
from PyPDF2.errors import PdfReadError
from PyPDF2.generic import ArrayObject, NameObject
from reportlab.pdfgen import canvas

from pdf_marker.core.codec import decode, encode
from pdf_marker.core.errors import DecodingError, SplitError
from pdf_marker.core.types import EncodedDocument, Page, PageCollection, TextStyle

logger = logging.getLogger(__name__)

# What PyPDF2 raises on damaged input besides PdfReadError.
_PARSE_ERRORS = (PdfReadError, ValueError, KeyError, TypeError, AttributeError, IndexError, OSError)


def _open(raw: bytes) -> PyPDF2.PdfReader:
    reader = PyPDF2.PdfReader(io.BytesIO(raw))
    if reader.is_encrypted and not reader.decrypt(""):
        raise PdfReadError("Document is encrypted")
    return reader


def _write(pages: Iterable[PyPDF2.PageObject]) -> bytes:
    writer = PyPDF2.PdfWriter()
    for page in pages:
        writer.add_page(page)
    out = io.BytesIO()
    writer.write(out)
    return out.getvalue()


def _link_target(annot):
    """The page reference an internal link jumps to, or None for other annotations."""
    dest = annot.get("/Dest")
    if dest is None:
        action = annot.get("/A")
        action = action.get_object() if action is not None else None
        if action is None or action.get("/S") != "/GoTo":
            return None
        dest = action.get("/D")
    dest = dest.get_object() if dest is not None else None
    if isinstance(dest, ArrayObject) and dest:
        return dest[0]
    return None


def _drop_foreign_links(page: PyPDF2.PageObject) -> int:
    """Remove links whose destination is another page.

    Cloning such a link would drag the target page, its content and its
    resources into this single-page output.
    """
    annots = page.get("/Annots")
    annots = annots.get_object() if annots is not None else None
    if not annots:
        return 0
    own = getattr(page.indirect_reference, "idnum", None)
    kept = ArrayObject()
    for ref in annots:
        target = _link_target(ref.get_object())
        if target is not None and getattr(target, "idnum", None) != own:
            continue
        kept.append(ref)
    dropped = len(annots) - len(kept)
    if dropped:
        page[NameObject("/Annots")] = kept
    return dropped


def split_document(doc: EncodedDocument) -> PageCollection:
    """Split an encoded PDF into one self-contained single-page PDF per page.

    Each page object is copied into its own writer together with everything it
    references (fonts, images, form XObjects), so every output renders alone.
    """
    try:
        raw = decode(doc)
    except DecodingError as e:
        raise SplitError(f"Cannot split: {e}") from e

    try:
        reader = _open(raw)
        total = len(reader.pages)
        if total == 0:
            raise SplitError("Document has no pages")
        pages: List[Page] = []
        for page_index in range(total):
            page = reader.pages[page_index]
            dropped = _drop_foreign_links(page)
            if dropped:
                logger.debug(f"Page {page_index + 1}: dropped {dropped} link(s) to other pages")
            data = encode(_write([page]))
            pages.append(Page(number=page_index + 1, data=data))
    except SplitError:
        raise
    except _PARSE_ERRORS as e:
        logger.error(f"PyPDF2 split failed: {e}")
        raise SplitError(f"Cannot parse document as PDF: {e}") from e

    logger.info(f"Split document into {len(pages)} page(s)")
    return tuple(pages)


def _first_page(raw: bytes) -> Tuple[PyPDF2.PdfReader, PyPDF2.PageObject]:
    try:
        reader = _open(raw)
        return reader, reader.pages[0]
    except _PARSE_ERRORS as e:
        logger.error(f"PyPDF2 could not open page: {e}")
        raise DecodingError(f"Page data is not a readable PDF: {e}") from e


def page_size(page_doc: EncodedDocument) -> Tuple[float, float]:
    """(width, height) of the single page in `page_doc`, in PDF points."""
    _, page = _first_page(decode(page_doc))
    return float(page.mediabox.width), float(page.mediabox.height)


def _text_overlay(width: float, height: float, x: float, y: float, label: str,
                  style: TextStyle, font_name: str) -> PyPDF2.PageObject:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=(width, height))
    c.setFont(font_name, style.size)
    c.setFillColorRGB(*style.color)
    c.drawString(x, y, label)
    c.save()
    return PyPDF2.PdfReader(io.BytesIO(buf.getvalue())).pages[0]


def stamp_label(raw: bytes, doc_x: float, doc_y: float, label: str,
                style: TextStyle, font_name: str) -> bytes:
    """Burn `label` into the first page of `raw` at a document-space point.

    Returns the bytes of a new single-page PDF; `raw` itself is not touched.
    """
    _, page = _first_page(raw)
    width, height = float(page.mediabox.width), float(page.mediabox.height)
    page.merge_page(_text_overlay(width, height, doc_x, doc_y, label, style, font_name))
    return _write([page])


def merge_pages(pages: PageCollection, indices: Iterable[int]) -> bytes:
    """Reassemble the selected pages (0-based indices) into one PDF."""
    selected = []
    for i in indices:
        page = pages[i]
        _, pdf_page = _first_page(decode(page.data))
        selected.append(pdf_page)
    if not selected:
        raise ValueError("No pages selected for export")
    return _write(selected)
