from __future__ import annotations

import io

import pytest
from PIL import Image
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from pdf_marker.core.codec import encode

# (width, height) per page; heights differ so per-page mapping matters
PAGE_SIZES = [(612.0, 800.0), (500.0, 700.0), (400.0, 600.0)]


def make_pdf(sizes=PAGE_SIZES, with_image_on: int | None = 2) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=sizes[0])
    for number, (width, height) in enumerate(sizes, start=1):
        c.setPageSize((width, height))
        c.setFont("Helvetica", 14)
        c.drawString(40, height - 60, f"Page{number}")
        if with_image_on == number:
            img = Image.new("RGB", (8, 8), (200, 30, 30))
            c.drawImage(ImageReader(img), 40, 40, 32, 32)
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture
def pdf_bytes() -> bytes:
    return make_pdf()


@pytest.fixture
def encoded_pdf(pdf_bytes) -> str:
    return encode(pdf_bytes)


class FakeRenderAdapter:
    """Reports page sizes without rasterising; records every call."""

    def __init__(self, log=None):
        self.calls = []
        self.log = log if log is not None else []

    def render(self, page_doc):
        from pdf_marker.backends.pypdf2_backend import page_size
        from pdf_marker.core.types import RenderedPage

        width, height = page_size(page_doc)
        self.calls.append(page_doc)
        self.log.append("render")
        return RenderedPage(surface=None, width_px=width, height_px=height)


@pytest.fixture
def fake_renderer() -> FakeRenderAdapter:
    return FakeRenderAdapter()


@pytest.fixture
def pdf_factory():
    return make_pdf
