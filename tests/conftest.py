"""Shared fixtures for tracels tests."""
from __future__ import annotations

import os
import pytest
from pathlib import Path

# A fixed instant well away from any DST edge
BASE_TS = 1_767_268_800  # 2026-01-01T12:00:00Z


@pytest.fixture(autouse=True)
def plain_consoles(monkeypatch):
    """Rebuild the Rich consoles without any inherited color forcing."""
    for var in ("FORCE_COLOR", "TTY_COMPATIBLE", "TTY_INTERACTIVE"):
        monkeypatch.delenv(var, raising=False)
    from tracels.formatters.human import init
    init()
    yield
    init()


@pytest.fixture
def traces_root(tmp_path):
    root = tmp_path / "traces"
    root.mkdir()
    return root


@pytest.fixture
def make_trace(traces_root):
    """Factory: create a trace directory with controlled file mtimes."""
    def _make(name: str, start: float | None = BASE_TS, end: float | None = BASE_TS,
              cmdline: list[str] | None = None, root: Path | None = None) -> Path:
        d = (root or traces_root) / name
        d.mkdir()
        if start is not None:
            version = d / "version"
            version.write_text("85\n")
            os.utime(version, (start, start))
        if end is not None:
            data = d / "data"
            data.write_bytes(b"\0" * 64)
            os.utime(data, (end, end))
        if cmdline is not None:
            (d / "cmdline").write_bytes(b"\0".join(a.encode() for a in cmdline) + b"\0")
        return d
    return _make


@pytest.fixture
def abc_traces(make_trace):
    """Traces a, b, c whose markers were written in the order b, a, c."""
    make_trace("a", start=BASE_TS + 100, end=BASE_TS + 130)
    make_trace("b", start=BASE_TS, end=BASE_TS + 5)
    make_trace("c", start=BASE_TS + 200, end=BASE_TS + 200)


@pytest.fixture
def undecodable_trace(traces_root):
    """A trace directory whose name is not valid UTF-8 (b'bad\\xff')."""
    path = os.fsencode(traces_root) + b"/bad\xff"
    try:
        os.mkdir(path)
    except OSError:
        pytest.skip("file system rejects non-UTF-8 names")
    return path
