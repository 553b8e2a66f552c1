from pdf_marker.core.store import AnnotationStore
from pdf_marker.core.types import Annotation


def test_place_is_pure_construction() -> None:
    store = AnnotationStore()
    marker = store.place(2, 10, 20.5)
    assert marker == Annotation(page=2, pos_x=10.0, pos_y=20.5)
    assert len(store) == 0


def test_place_accepts_off_canvas_positions() -> None:
    marker = AnnotationStore.place(1, -40, 5000)
    assert (marker.pos_x, marker.pos_y) == (-40.0, 5000.0)


def test_list_for_filters_by_page_in_insertion_order() -> None:
    store = AnnotationStore()
    a = store.record(store.place(1, 1, 1))
    b = store.record(store.place(2, 2, 2))
    c = store.record(store.place(1, 3, 3))
    assert store.list_for(1) == [a, c]
    assert store.list_for(2) == [b]
    assert store.list_for(3) == []
    assert list(store) == [a, b, c]


def test_clear_empties_the_store() -> None:
    store = AnnotationStore()
    store.record(store.place(1, 1, 1))
    store.clear()
    assert len(store) == 0
    assert store.list_for(1) == []
