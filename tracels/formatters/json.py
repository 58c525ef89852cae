"""JSON formatter — structured listing output to stdout."""
from __future__ import annotations

import json
import sys
from datetime import datetime

from tracels.trace import printable

# Fields holding raw file-system or argv text
TEXT_FIELDS = ("name", "path", "command_line")


def _default_serializer(obj):
    if isinstance(obj, datetime):
        return obj.isoformat(timespec="seconds")
    # Paths and anything else unknown
    return str(obj)


def _clean(row: dict) -> dict:
    return {k: printable(v) if k in TEXT_FIELDS else v for k, v in row.items()}


def format_json(data: list[dict]) -> None:
    """Write the canonical listing as JSON to stdout."""
    json.dump([_clean(row) for row in data], sys.stdout, indent=2,
              ensure_ascii=False, default=_default_serializer)
    sys.stdout.write("\n")
