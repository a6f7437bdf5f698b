#!/usr/bin/env python3
"""
Terminal output helpers: aligned tables, JSON, and small value formatters.
"""

import json
from typing import Any, Iterable, List, Optional, Sequence

COLUMN_GAP = 2


def truncate(text: str, max_len: int) -> str:
    """Shorten text to max_len characters, ending in '...' when cut."""
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def format_size(size: int) -> str:
    """Format a byte count as B, KB, MB or GB."""
    kb = 1024
    mb = 1024 * kb
    gb = 1024 * mb

    if size >= gb:
        return f"{size / gb:.1f} GB"
    if size >= mb:
        return f"{size / mb:.1f} MB"
    if size >= kb:
        return f"{size / kb:.1f} KB"
    return f"{size} B"


def short_date(timestamp: Optional[str]) -> str:
    """Keep only the YYYY-MM-DD part of an ISO timestamp."""
    if not timestamp:
        return "-"
    return timestamp[:10]


def status_string(completed: bool) -> str:
    return "Completed" if completed else "Open"


def or_dash(value: Optional[str]) -> str:
    return value if value else "-"


def format_table(headers: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    """
    Render rows as left-aligned columns under a header and a dashes row.

    Example:
        print(format_table(["GID", "NAME"], [["1", "Write docs"]]))
        # GID  NAME
        # ---  ----
        # 1    Write docs
    """
    lines: List[List[str]] = [list(headers), ["-" * len(h) for h in headers]]
    lines.extend([str(cell) for cell in row] for row in rows)

    widths = [max(len(line[i]) for line in lines) for i in range(len(headers))]

    rendered = []
    for line in lines:
        cells = [cell.ljust(widths[i]) for i, cell in enumerate(line[:-1])]
        cells.append(line[-1])
        rendered.append((" " * COLUMN_GAP).join(cells))
    return "\n".join(rendered)


def _to_jsonable(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, dict):
        return {k: _to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    return value


def format_json(value: Any) -> str:
    """Indent records, lists of records, or dicts of them as JSON."""
    return json.dumps(_to_jsonable(value), indent=2, ensure_ascii=False)


def print_json(value: Any) -> None:
    print(format_json(value))
