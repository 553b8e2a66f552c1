"""Viewer state as a plain value plus a pure reducer.

States: Empty (nothing uploaded), Loaded (base document, no pages yet) and
Split (pages present, current page within 1..len(pages)). Only Split accepts
drops.
"""
from typing import NamedTuple, Optional, Union

from pdf_marker.core.types import EncodedDocument, PageCollection


class ViewerState(NamedTuple):
    current_page: int = 1
    pages: Optional[PageCollection] = None
    base: Optional[EncodedDocument] = None

    @property
    def page_count(self) -> int:
        return len(self.pages) if self.pages else 0


EMPTY = ViewerState()


class Uploaded(NamedTuple):
    base: EncodedDocument


class Converted(NamedTuple):
    pages: PageCollection


class NextPage(NamedTuple):
    pass


class PrevPage(NamedTuple):
    pass


class Committed(NamedTuple):
    pages: PageCollection


ViewerEvent = Union[Uploaded, Converted, NextPage, PrevPage, Committed]


def annotatable(state: ViewerState) -> bool:
    return bool(state.pages)


def reduce(state: ViewerState, event: ViewerEvent) -> ViewerState:
    """Return the state that follows `event`. Never mutates `state`."""
    if isinstance(event, Uploaded):
        return ViewerState(current_page=1, pages=None, base=event.base)
    if isinstance(event, Converted):
        return state._replace(pages=tuple(event.pages), current_page=1)
    if isinstance(event, NextPage):
        if not state.pages:
            return state
        return state._replace(current_page=min(state.current_page + 1, len(state.pages)))
    if isinstance(event, PrevPage):
        if not state.pages:
            return state
        return state._replace(current_page=max(state.current_page - 1, 1))
    if isinstance(event, Committed):
        if not state.pages:
            return state
        if len(event.pages) != len(state.pages):
            raise ValueError("A commit must keep the page count unchanged")
        return state._replace(pages=tuple(event.pages))
    raise TypeError(f"Unknown viewer event: {event!r}")
