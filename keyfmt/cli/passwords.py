"""Password arguments of the form ``pass:<value>`` or ``file:<path>``."""

from pathlib import Path

from keyfmt.core.errors import BadPasswordArgError, InputIOError


def read_password_file(path: str) -> str:
    """First line of ``path``, without its line terminator."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise InputIOError(f"Cannot read password file {path}: {exc}") from exc
    lines = text.splitlines()
    return lines[0] if lines else ""


def parse_password_arg(value: str | None) -> str | None:
    if value is None:
        return None
    source, sep, rest = value.partition(":")
    if not sep:
        raise BadPasswordArgError(
            f"Password argument must be pass:<value> or file:<path>, got {value!r}"
        )
    source = source.lower()
    if source == "pass":
        return rest
    if source == "file":
        return read_password_file(rest)
    raise BadPasswordArgError(f"Unknown password source {source!r}")
