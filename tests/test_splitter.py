from __future__ import annotations

import io
import re

import pdfplumber
import PyPDF2
import pytest
from reportlab.pdfgen import canvas

from pdf_marker.backends.pypdf2_backend import merge_pages, page_size, split_document
from pdf_marker.core.codec import decode, encode
from pdf_marker.core.errors import DecodingError, SplitError


def _reader(doc: str) -> PyPDF2.PdfReader:
    return PyPDF2.PdfReader(io.BytesIO(decode(doc)))


def test_split_yields_one_numbered_page_per_source_page(encoded_pdf: str) -> None:
    pages = split_document(encoded_pdf)
    assert isinstance(pages, tuple)
    assert len(pages) == 3
    assert [p.number for p in pages] == [1, 2, 3]


def test_each_page_is_a_standalone_single_page_pdf(encoded_pdf: str) -> None:
    pages = split_document(encoded_pdf)
    for page in pages:
        assert len(_reader(page.data).pages) == 1
        with pdfplumber.open(io.BytesIO(decode(page.data))) as pdf:
            assert f"Page{page.number}" in pdf.pages[0].extract_text()


def test_split_preserves_page_sizes(encoded_pdf: str) -> None:
    pages = split_document(encoded_pdf)
    assert [page_size(p.data) for p in pages] == [(612.0, 800.0), (500.0, 700.0), (400.0, 600.0)]


def test_split_keeps_page_local_images(encoded_pdf: str) -> None:
    pages = split_document(encoded_pdf)
    resources = _reader(pages[1].data).pages[0]["/Resources"]
    assert "/XObject" in resources
    with pdfplumber.open(io.BytesIO(decode(pages[1].data))) as pdf:
        assert len(pdf.pages[0].images) == 1


def test_single_page_document(pdf_factory) -> None:
    pages = split_document(encode(pdf_factory([(300.0, 300.0)], with_image_on=None)))
    assert len(pages) == 1
    assert pages[0].number == 1


def test_corrupted_bytes_raise_split_error(pdf_bytes: bytes) -> None:
    with pytest.raises(SplitError):
        split_document(encode(b"definitely not a pdf"))
    with pytest.raises(SplitError):
        split_document(encode(pdf_bytes[: len(pdf_bytes) // 3]))


def test_undecodable_input_raises_split_error() -> None:
    with pytest.raises(SplitError) as info:
        split_document("%%% not base64 %%%")
    assert isinstance(info.value.__cause__, DecodingError)


def test_merge_pages_reassembles_selection(encoded_pdf: str) -> None:
    pages = split_document(encoded_pdf)
    merged = merge_pages(pages, [2, 0])
    reader = PyPDF2.PdfReader(io.BytesIO(merged))
    assert len(reader.pages) == 2
    assert float(reader.pages[0].mediabox.height) == 600.0
    assert float(reader.pages[1].mediabox.height) == 800.0


def test_page_size_rejects_garbage() -> None:
    with pytest.raises(DecodingError):
        page_size(encode(b"garbage"))


def _linked_pdf() -> bytes:
    """Three pages, each linking to the other two and to a web page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=(400, 400))
    for number in (1, 2, 3):
        c.bookmarkPage(f"p{number}")
        c.setFont("Helvetica", 14)
        c.drawString(40, 340, f"Page{number}")
        others = [n for n in (1, 2, 3) if n != number]
        for slot, other in enumerate(others):
            c.linkAbsolute(f"to {other}", f"p{other}", Rect=(40, 40 + slot * 30, 120, 60 + slot * 30))
        c.linkURL("https://example.com", (200, 40, 300, 60))
        c.showPage()
    c.save()
    return buf.getvalue()


def test_links_to_other_pages_do_not_pull_them_in() -> None:
    pages = split_document(encode(_linked_pdf()))
    assert len(pages) == 3
    for page in pages:
        raw = decode(page.data)
        assert len(re.findall(rb"/Type\s*/Page(?![s\w])", raw)) == 1
        with pdfplumber.open(io.BytesIO(raw)) as pdf:
            text = pdf.pages[0].extract_text()
        assert f"Page{page.number}" in text
        assert all(f"Page{n}" not in text for n in (1, 2, 3) if n != page.number)

        annots = _reader(page.data).pages[0].get("/Annots")
        kinds = [a.get_object()["/A"]["/S"] for a in annots.get_object()]
        assert kinds == ["/URI"]
