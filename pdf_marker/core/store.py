from typing import Iterator, List

from pdf_marker.core.types import Annotation


class AnnotationStore:
    """In-memory set of placed markers, in render-space coordinates.

    Markers from every page live in one list; `list_for` filters by page and
    keeps insertion order within that page. Positions are not bounds-checked:
    a drop outside the canvas is still a valid placement.
    """

    def __init__(self) -> None:
        self._items: List[Annotation] = []

    @staticmethod
    def place(page_number: int, render_x: float, render_y: float) -> Annotation:
        return Annotation(page=int(page_number), pos_x=float(render_x), pos_y=float(render_y))

    def record(self, annotation: Annotation) -> Annotation:
        self._items.append(annotation)
        return annotation

    def list_for(self, page_number: int) -> List[Annotation]:
        return [a for a in self._items if a.page == page_number]

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Annotation]:
        return iter(list(self._items))
