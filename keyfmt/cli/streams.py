"""Whole-buffer input and output for the command line."""

import sys
from pathlib import Path

from keyfmt.core.errors import InputIOError, OutputIOError


def read_input(path: str | None) -> bytes:
    """Read the whole input file, or stdin when ``path`` is None."""
    try:
        if path is None:
            return sys.stdin.buffer.read()
        return Path(path).read_bytes()
    except OSError as exc:
        raise InputIOError(f"Cannot read {path or 'stdin'}: {exc}") from exc


def write_output(path: str | None, data: bytes) -> None:
    """Write ``data`` in one call to the file, or stdout when ``path`` is None."""
    try:
        if path is None:
            sys.stdout.buffer.write(data)
            sys.stdout.buffer.flush()
        else:
            Path(path).write_bytes(data)
    except OSError as exc:
        raise OutputIOError(f"Cannot write {path or 'stdout'}: {exc}") from exc
