"""Viewer session: the event-handling boundary between a user surface and the core.

The session owns the current ViewerState and the annotation store. Every
blocking PDF operation runs off the event loop; state is only swapped after
the operation has fully succeeded.
"""
import asyncio
import logging
from typing import Dict, Optional, Tuple

from pdf_marker.backends.fonts import BUILTIN_FONT, FontResource
from pdf_marker.backends.pdfplumber_backend import PlumberRenderAdapter, extract_words
from pdf_marker.backends.pypdf2_backend import merge_pages, split_document
from pdf_marker.core.codec import encode, encode_file
from pdf_marker.core.drop import drag_payload, parse_drop
from pdf_marker.core.errors import DocumentNotLoadedError, MalformedDropPayloadError, StaleCommitError
from pdf_marker.core.page_range import parse_page_range
from pdf_marker.core.store import AnnotationStore
from pdf_marker.core.style import DEFAULT_LABEL, DEFAULT_STYLE
from pdf_marker.core.types import Annotation, EncodedDocument, RenderedPage, TextStyle
from pdf_marker.core.viewer import (
    EMPTY,
    Committed,
    Converted,
    NextPage,
    PrevPage,
    Uploaded,
    ViewerState,
    annotatable,
    reduce,
)
from pdf_marker.pipeline import commit, resolve_page

logger = logging.getLogger(__name__)


class ViewerSession:
    def __init__(
        self,
        render_adapter=None,
        style: Optional[TextStyle] = None,
        fonts: Optional[FontResource] = None,
        default_label: str = DEFAULT_LABEL,
    ):
        self.render_adapter = render_adapter or PlumberRenderAdapter()
        self.fonts = fonts or BUILTIN_FONT
        self.style = style or DEFAULT_STYLE._replace(font_name=self.fonts.font_name)
        self.default_label = default_label
        self.state: ViewerState = EMPTY
        self.store = AnnotationStore()
        # (index, page data) -> render result; stale entries miss on data change
        self._renders: Dict[Tuple[int, EncodedDocument], RenderedPage] = {}

    # --- document lifecycle ---

    def upload(self, binary) -> ViewerState:
        self.state = reduce(self.state, Uploaded(encode(binary)))
        self._renders.clear()
        return self.state

    def upload_file(self, path) -> ViewerState:
        self.state = reduce(self.state, Uploaded(encode_file(path)))
        self._renders.clear()
        logger.info(f"Loaded {path}")
        return self.state

    async def convert(self) -> ViewerState:
        if self.state.base is None:
            raise DocumentNotLoadedError("Upload a document before converting it")
        pages = await asyncio.to_thread(split_document, self.state.base)
        self.state = reduce(self.state, Converted(pages))
        self.store.clear()
        self._renders.clear()
        return self.state

    # --- navigation ---

    def next_page(self) -> ViewerState:
        self.state = reduce(self.state, NextPage())
        return self.state

    def prev_page(self) -> ViewerState:
        self.state = reduce(self.state, PrevPage())
        return self.state

    # --- rendering ---

    def _require_pages(self):
        if not annotatable(self.state):
            raise DocumentNotLoadedError("No pages yet; convert a document first")
        return self.state.pages

    async def render_page(self, page_index: int) -> RenderedPage:
        pages = self._require_pages()
        page = resolve_page(pages, page_index)
        key = (page_index, page.data)
        cached = self._renders.get(key)
        if cached is not None:
            return cached
        rendered = await asyncio.to_thread(self.render_adapter.render, page.data)
        self._renders = {k: v for k, v in self._renders.items() if k[0] != page_index}
        self._renders[key] = rendered
        return rendered

    async def render_current(self) -> RenderedPage:
        return await self.render_page(self.state.current_page - 1)

    def markers_on(self, page_number: int):
        return self.store.list_for(page_number)

    # --- drag and drop ---

    def drag_start(self, page_number: int = 1, pos_x: float = 0.0, pos_y: float = 0.0,
                   label: Optional[str] = None) -> str:
        """Build a marker template and return the payload the drag carries."""
        return drag_payload(AnnotationStore.place(page_number, pos_x, pos_y), label)

    async def drop(self, payload, target_page_index: int, render_x: float, render_y: float,
                   label: Optional[str] = None) -> Optional[Annotation]:
        """Commit a dropped marker; returns the recorded annotation.

        A malformed payload is logged and ignored (returns None). Any other
        failure propagates and leaves pages and markers as they were.
        """
        pages = self._require_pages()
        try:
            event = parse_drop(payload, target_page_index, render_x, render_y)
        except MalformedDropPayloadError as e:
            logger.warning(f"Ignoring drop with malformed payload: {e}")
            return None

        target = resolve_page(pages, event.target_page_index)
        await self.render_page(event.target_page_index)

        text = label or event.label or self.default_label
        new_pages = await asyncio.to_thread(
            commit, pages, event.target_page_index, event.render_x, event.render_y,
            text, self.style, self.fonts,
        )
        if self.state.pages is not pages:
            # a convert or another drop swapped the collection while this commit ran
            logger.warning(f"Discarding marker for page {target.number}; pages changed during commit")
            raise StaleCommitError("The pages changed while the marker was being committed; drop it again")
        self.state = reduce(self.state, Committed(new_pages))
        return self.store.record(AnnotationStore.place(target.number, event.render_x, event.render_y))

    # --- read-back and export ---

    def page_words(self, page_number: int):
        pages = self._require_pages()
        return extract_words(resolve_page(pages, page_number - 1).data)

    def export(self, page_range: Optional[str] = None) -> bytes:
        pages = self._require_pages()
        indices = parse_page_range(len(pages), page_range)
        return merge_pages(pages, indices)

    def status(self) -> dict:
        return {
            "loaded": self.state.base is not None,
            "page_count": self.state.page_count,
            "current_page": self.state.current_page,
            "markers": len(self.store),
        }
