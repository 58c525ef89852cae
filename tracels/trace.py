"""Trace discovery, trace handles, and core data model."""
from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path
from typing import Mapping


# ── Paths ─────────────────────────────────────────────────────────────

TRACE_DIR_ENV = "_RR_TRACE_DIR"
NESTED_SESSION_ENV = "RUNNING_UNDER_RR"

VERSION_FILE = "version"
DATA_FILE = "data"
CMDLINE_FILE = "cmdline"

SIZE_ERROR = "ERROR"
PLACEHOLDER = "?"


def trace_save_dir(environ: Mapping[str, str] | None = None) -> Path:
    """Return the directory new traces are saved to."""
    env = os.environ if environ is None else environ
    explicit = env.get(TRACE_DIR_ENV)
    if explicit:
        return Path(explicit)
    xdg = env.get("XDG_DATA_HOME")
    data_home = Path(xdg) if xdg else Path.home() / ".local" / "share"
    default = data_home / "rr"
    if default.exists():
        return default
    # Older releases saved everything under ~/.rr
    legacy = Path.home() / ".rr"
    if legacy.exists():
        return legacy
    return default


class Context:
    """Process-wide settings resolved once at startup."""

    __slots__ = ("trace_save_dir", "nested")

    def __init__(self, trace_save_dir: Path, nested: bool = False):
        self.trace_save_dir = trace_save_dir
        self.nested = nested

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> "Context":
        env = os.environ if environ is None else environ
        return cls(
            trace_save_dir=trace_save_dir(env),
            nested=NESTED_SESSION_ENV in env,
        )


# ── TraceReader ───────────────────────────────────────────────────────

class TraceReader:
    """Thin handle over a trace directory. Opening never validates it."""

    __slots__ = ("dir",)

    def __init__(self, dir: Path | str):
        self.dir = Path(dir)

    def storage_path(self) -> Path:
        return self.dir

    @property
    def version_path(self) -> Path:
        return self.dir / VERSION_FILE

    @property
    def data_path(self) -> Path:
        return self.dir / DATA_FILE

    def initial_command_line(self) -> str:
        """Return the recorded command line, or '?' if it can't be read."""
        try:
            raw = (self.dir / CMDLINE_FILE).read_bytes()
        except OSError:
            return PLACEHOLDER
        args = [a for a in raw.replace(b"\0", b"\n").split(b"\n") if a]
        if not args:
            return PLACEHOLDER
        return " ".join(os.fsdecode(a) for a in args)


# ── TraceEntry ────────────────────────────────────────────────────────

def stat_mtime(path: Path) -> float | None:
    try:
        return path.stat().st_mtime
    except OSError:
        return None


class TraceEntry:
    __slots__ = ("name", "reader")

    def __init__(self, name: str, reader: TraceReader):
        self.name = name
        self.reader = reader

    def marker_mtime(self) -> float | None:
        return stat_mtime(self.reader.version_path)

    def data_mtime(self) -> float | None:
        return stat_mtime(self.reader.data_path)

    def duration_estimate(self) -> int | None:
        """Seconds between the marker and data file mtimes; may be <= 0."""
        start = self.marker_mtime()
        end = self.data_mtime()
        if start is None or end is None:
            return None
        return int(end) - int(start)

    def __repr__(self) -> str:
        return f"TraceEntry({self.name!r})"


# ── Discovery ─────────────────────────────────────────────────────────

def discover_traces(root: Path | str) -> list[TraceEntry]:
    """Open every subdirectory of ``root`` as a trace.

    Raises OSError if ``root`` can't be scanned.
    """
    root = Path(root)
    traces = []
    with os.scandir(root) as it:
        for entry in it:
            if entry.name in (".", ".."):
                continue
            try:
                is_dir = entry.is_dir()
            except OSError:
                continue
            if not is_dir:
                continue
            traces.append(TraceEntry(entry.name, TraceReader(root / entry.name)))
    return traces


# ── Folder size ───────────────────────────────────────────────────────

def folder_size(path: Path | str) -> str:
    """Return du's human-readable summary for ``path``, or 'ERROR'."""
    du = shutil.which("du")
    if not du:
        return SIZE_ERROR
    try:
        proc = subprocess.run(
            [du, "-sh", str(path)],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            errors="replace",
            check=False,
        )
    except OSError:
        return SIZE_ERROR
    if proc.returncode != 0:
        return SIZE_ERROR
    size = proc.stdout.split("\t", 1)[0].strip()
    return size or SIZE_ERROR


# ── Formatting helpers ────────────────────────────────────────────────

def printable(text: str) -> str:
    """Make a file name or command line safe to write to any stream.

    Undecodable bytes become U+FFFD and control characters (tabs and
    newlines included) become '?', so one name always fills one column.
    """
    text = os.fsencode(text).decode("utf-8", "replace")
    return "".join(ch if ch.isprintable() else "?" for ch in text)
