import json
import logging
from typing import Optional

from mcp.server.fastmcp import FastMCP

from pdf_marker.core.errors import PDFMarkerError
from pdf_marker.core.paths import find_file, resolve_output_path
from pdf_marker.session import ViewerSession

logger = logging.getLogger(__name__)

mcp = FastMCP("PDF Marker")

_session = ViewerSession()


def configure(session: ViewerSession) -> None:
    """Swap in the session the tools drive (main.py does this after parsing args)."""
    global _session
    _session = session


def get_session() -> ViewerSession:
    return _session


def _error(action: str, e: Exception) -> str:
    logger.error(f"{action} failed: {e}")
    return f"Error: {e}"


def _status_json(**extra) -> str:
    info = _session.status()
    info.update(extra)
    return json.dumps(info, indent=2, ensure_ascii=False)


# ---------- Document lifecycle ----------
@mcp.tool()
async def open_document(file_path: str) -> str:
    """Load a PDF so it can be converted into pages.

    Parameters
    ----------
    file_path: str
        Filename (relative) or absolute path to the PDF. The file must reside within the configured accessible directories.
    """
    path = find_file(file_path)
    if not path:
        return (
            "Error: Could not find file '{file}'. Provide an absolute path or place the file within the configured accessible directories."
        ).format(file=file_path)
    try:
        _session.upload_file(path)
    except PDFMarkerError as e:
        return _error("open_document", e)
    return _status_json(file_name=path.name, path=str(path))


@mcp.tool()
async def convert_document() -> str:
    """Split the loaded PDF into single pages and go to page 1. Clears all placed markers."""
    try:
        await _session.convert()
    except PDFMarkerError as e:
        return _error("convert_document", e)
    return _status_json()


# ---------- Navigation ----------
@mcp.tool()
async def next_page() -> str:
    """Move to the next page (stays on the last page)."""
    _session.next_page()
    return _status_json()


@mcp.tool()
async def previous_page() -> str:
    """Move to the previous page (stays on page 1)."""
    _session.prev_page()
    return _status_json()


@mcp.tool()
async def show_page() -> str:
    """Render the current page and report its size (render-space pixels) and markers."""
    try:
        rendered = await _session.render_current()
    except PDFMarkerError as e:
        return _error("show_page", e)
    number = _session.state.current_page
    result = {
        "page": number,
        "width_px": rendered.width_px,
        "height_px": rendered.height_px,
        "markers": [m._asdict() for m in _session.markers_on(number)],
    }
    return json.dumps(result, indent=2, ensure_ascii=False)


# ---------- Markers ----------
@mcp.tool()
async def start_drag(page: int = 1, pos_x: float = 0.0, pos_y: float = 0.0, label: Optional[str] = None) -> str:
    """Pick up a marker template; returns the payload to hand to `drop_marker`."""
    return _session.drag_start(page, pos_x, pos_y, label)


@mcp.tool()
async def drop_marker(payload: str, x: float, y: float, page: Optional[int] = None, label: Optional[str] = None) -> str:
    """Drop a marker and burn its label into the page.

    Parameters
    ----------
    payload: str
        The JSON returned by `start_drag`.
    x, y: float
        Drop position in render space (pixels from the page's top-left corner).
    page: Optional[int]
        1-based page to drop on; defaults to the current page.
    label: Optional[str]
        Text to stamp; falls back to the payload's label, then the configured default.
    """
    target = (page if page is not None else _session.state.current_page) - 1
    try:
        marker = await _session.drop(payload, target, x, y, label)
    except PDFMarkerError as e:
        return _error("drop_marker", e)
    if marker is None:
        return "Error: Drop ignored; the payload is not a marker from `start_drag`."
    return _status_json(placed=marker._asdict())


# ---------- Read-back and export ----------
@mcp.tool()
async def read_page_text(page: Optional[int] = None) -> str:
    """List the words on a page with their render-space boxes, including stamped markers."""
    number = page if page is not None else _session.state.current_page
    try:
        words = _session.page_words(number)
    except PDFMarkerError as e:
        return _error("read_page_text", e)
    return json.dumps({"page": number, "words": words}, indent=2, ensure_ascii=False)


@mcp.tool()
async def export_pages(output_name: str, page_range: Optional[str] = None) -> str:
    """Merge pages (with their markers) into one PDF inside the first accessible directory.

    `page_range` accepts `first`, `last`, `N`, `S-E` and comma-joined combinations; `None` exports all pages.
    """
    target = resolve_output_path(output_name)
    if not target:
        return f"Error: Cannot write '{output_name}' outside the configured accessible directories."
    try:
        data = _session.export(page_range)
    except (PDFMarkerError, ValueError) as e:
        return _error("export_pages", e)
    try:
        target.write_bytes(data)
    except (OSError, ValueError) as e:
        return _error("export_pages", e)
    logger.info(f"Exported {output_name} -> {target}")
    return json.dumps({"path": str(target), "size_bytes": len(data)}, indent=2, ensure_ascii=False)


@mcp.tool()
async def viewer_status() -> str:
    """Return whether a document is loaded, the page count, the current page and the marker count."""
    return _status_json()
