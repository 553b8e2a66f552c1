from typing import Tuple

# --- Coordinate helpers ---
# Render space: origin top-left, y down (what the viewer reports on drop).
# Document space: PDF user space, origin bottom-left, y up.


def render_to_document(page_height: float, render_x: float, render_y: float) -> Tuple[float, float]:
    """Map a render-space point onto the page's document space.

    `page_height` is the page's native height at render scale 1 and must be
    taken from the page being written, since page sizes vary within a document.
    """
    return float(render_x), float(page_height) - float(render_y)


def document_to_render(page_height: float, doc_x: float, doc_y: float) -> Tuple[float, float]:
    return float(doc_x), float(page_height) - float(doc_y)

