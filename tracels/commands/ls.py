"""Trace listing command."""
from __future__ import annotations

import os
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable

from tracels.trace import TraceEntry, discover_traces, folder_size, printable


class SortOrder(Enum):
    BY_NAME = "name"
    BY_AGE = "age"


def _name_key(t: TraceEntry) -> bytes:
    return os.fsencode(t.name)


def _age_key(t: TraceEntry) -> float:
    # Unreadable markers sort as oldest
    mtime = t.marker_mtime()
    return 0.0 if mtime is None else mtime


def sort_traces(traces: list[TraceEntry], order: SortOrder = SortOrder.BY_NAME,
                reverse: bool = False) -> list[TraceEntry]:
    """Sort ascending by ``order`` in place, then optionally reverse."""
    key = _age_key if order is SortOrder.BY_AGE else _name_key
    traces.sort(key=key)
    if reverse:
        traces.reverse()
    return traces


def cmd_ls(traces: list[TraceEntry], long_listing: bool = False,
           size_query: Callable[[Path], str] | None = None) -> list[dict]:
    """Return the trace listing as canonical dicts, in the given order."""
    if not long_listing:
        return [{"name": t.name} for t in traces]

    size_query = size_query or folder_size
    result = []
    for t in traces:
        start = t.marker_mtime()
        result.append({
            "name": t.name,
            "path": str(t.reader.storage_path()),
            "start": datetime.fromtimestamp(start) if start is not None else None,
            "duration": t.duration_estimate(),
            "size": size_query(t.reader.storage_path()),
            "command_line": t.reader.initial_command_line(),
        })
    return result


def run_ls(trace_dir: Path | str, order: SortOrder = SortOrder.BY_NAME,
           reverse: bool = False, long_listing: bool = False, fmt: str = "human",
           size_query: Callable[[Path], str] | None = None) -> int:
    """List the traces under ``trace_dir``. Returns a process exit status."""
    from tracels.formatters.human import print_error

    try:
        traces = discover_traces(trace_dir)
    except OSError as e:
        print_error(f"Cannot open {printable(str(trace_dir))}: {e.strerror or e}")
        return 1

    sort_traces(traces, order, reverse)
    data = cmd_ls(traces, long_listing=long_listing, size_query=size_query)

    if fmt == "json":
        from tracels.formatters.json import format_json
        format_json(data)
    elif long_listing:
        from tracels.formatters.human import format_ls_long
        format_ls_long(data)
    else:
        from tracels.formatters.human import format_ls
        format_ls(data)
    return 0
