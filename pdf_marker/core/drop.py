import json
import logging
import math
from typing import Any, Dict, Optional

from pdf_marker.core.errors import MalformedDropPayloadError
from pdf_marker.core.types import Annotation, DropEvent

logger = logging.getLogger(__name__)


def drag_payload(template: Annotation, label: Optional[str] = None) -> str:
    """Serialize a marker template the way a drag start carries it."""
    data: Dict[str, Any] = {"page": template.page, "posX": template.pos_x, "posY": template.pos_y}
    if label is not None:
        data["label"] = label
    return json.dumps(data)


def _number(data: Dict[str, Any], key: str) -> float:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedDropPayloadError(f"'{key}' must be a number, got {value!r}")
    if not math.isfinite(value):
        raise MalformedDropPayloadError(f"'{key}' must be finite, got {value!r}")
    return float(value)


def parse_drop(payload, target_page_index: int, render_x: float, render_y: float) -> DropEvent:
    """Validate a raw drag payload and build the typed drop event.

    `payload` is the JSON text (or already-decoded mapping) set at drag start.
    """
    if isinstance(payload, (bytes, bytearray)):
        payload = payload.decode("utf-8", errors="replace")
    if isinstance(payload, str):
        if not payload.strip():
            raise MalformedDropPayloadError("No data found in drag payload")
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as e:
            raise MalformedDropPayloadError(f"Drag payload is not JSON: {e}") from e
    if not isinstance(payload, dict):
        raise MalformedDropPayloadError(f"Drag payload must be an object, got {type(payload).__name__}")

    page = payload.get("page")
    if isinstance(page, bool) or not isinstance(page, int) or page < 1:
        raise MalformedDropPayloadError(f"'page' must be a positive integer, got {page!r}")
    template = Annotation(page=page, pos_x=_number(payload, "posX"), pos_y=_number(payload, "posY"))

    label = payload.get("label")
    if label is not None and not isinstance(label, str):
        raise MalformedDropPayloadError(f"'label' must be a string, got {label!r}")

    for name, value in (("render_x", render_x), ("render_y", render_y)):
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise MalformedDropPayloadError(f"{name} must be a finite number, got {value!r}")
    if isinstance(target_page_index, bool) or not isinstance(target_page_index, int):
        raise MalformedDropPayloadError(f"target_page_index must be an integer, got {target_page_index!r}")

    logger.debug(f"Drop on index {target_page_index} at ({render_x}, {render_y}) from template {template}")
    return DropEvent(
        target_page_index=target_page_index,
        render_x=float(render_x),
        render_y=float(render_y),
        template=template,
        label=label,
    )
