from typing import List, Optional

from pdf_marker.core.errors import PageNotFoundError


def _one_part(total_pages: int, part: str) -> List[int]:
    if part == "first":
        return [0]
    if part == "last":
        return [total_pages - 1]
    if "-" in part:
        s, e = part.split("-", 1)
        s_i = int(s) if s else 1
        e_i = int(e) if e else total_pages
        if s_i < 1 or e_i < s_i or s_i > total_pages:
            raise PageNotFoundError(f"Invalid page range: {part} (1-{total_pages})")
        return list(range(s_i - 1, min(e_i, total_pages)))
    p = int(part)
    if p < 1 or p > total_pages:
        raise PageNotFoundError(f"Page {p} out of range (1-{total_pages})")
    return [p - 1]


def parse_page_range(total_pages: int, page_range: Optional[str]) -> List[int]:
    """Return zero-based page indices for a page selection.
    Supports: None(all), "first", "last", "N", "S-E" and comma-joined
    combinations such as "1,3-4,last". Duplicates keep their first position.
    """
    if total_pages <= 0:
        return []
    if page_range is None or not str(page_range).strip():
        return list(range(total_pages))

    out: List[int] = []
    for part in str(page_range).strip().lower().split(","):
        part = part.strip()
        if not part:
            continue
        try:
            idxs = _one_part(total_pages, part)
        except ValueError as e:
            raise ValueError(f"Invalid page range: {page_range}") from e
        out.extend(i for i in idxs if i not in out)
    return out
