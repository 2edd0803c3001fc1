"""
statechain.logging — structured log output for the runtime and its CLI.

Fields reach a log line from two places:

* the *context*: values bound with `bind()` / `trace_scope()`, stored in a
  `contextvars.ContextVar` so they follow the current thread or task;
* the *record*: `extra={...}` passed at the call site, e.g. the runtime's
  `log.warning("extrinsic failed", extra={"height": 3, "code": ...})`.

Context wins over record extras on a key clash. Both formatters render the same
merged field set: `JSONFormatter` as one JSON object per line, `TextFormatter` as
`ts | LEVEL | logger | k=v ... | message`.

Only the standard library is used. Runtime modules keep calling
`logging.getLogger(__name__)`; `configure()` decides how their records look.

    from statechain import logging as slog

    slog.configure(json=False, level="INFO")
    with slog.trace_scope():
        slog.bind(component="apply_blocks")
        slog.get_logger(__name__).info("blocks applied", extra={"blocks": 3})

Environment:
    STATECHAIN_LOG_LEVEL    default level when configure(level=None)
    STATECHAIN_LOG_FORMAT   json | text when configure(json=None); otherwise JSON
                            unless the stream is a terminal
"""

from __future__ import annotations

import datetime as _dt
import json
import logging
import os
import sys
import traceback
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional, TextIO

# Keys rendered first (in this order) by the text formatter.
DEFAULT_CONTEXT_KEYS = ("trace_id", "component", "height")

_FIELDS: ContextVar[Mapping[str, Any]] = ContextVar("statechain_log_fields", default={})

# Attributes every LogRecord carries; anything else on a record came from `extra`.
_RESERVED = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


# ------------------------------------------------------------------------------
# Context
# ------------------------------------------------------------------------------


def context() -> Dict[str, Any]:
    """Copy of the fields bound in the current context."""
    return dict(_FIELDS.get())


def bind(**fields: Any) -> None:
    """Add (or replace) context fields."""
    merged = dict(_FIELDS.get())
    for k, v in fields.items():
        merged[k] = _jsonable(v)
    _FIELDS.set(merged)


def unbind(*keys: str) -> None:
    _FIELDS.set({k: v for k, v in _FIELDS.get().items() if k not in keys})


def clear_context() -> None:
    _FIELDS.set({})


def new_trace_id() -> str:
    return uuid.uuid4().hex[:12]


@contextmanager
def trace_scope(trace_id: Optional[str] = None) -> Iterator[str]:
    """
    Bind a trace id (fresh unless given) for the body of the `with` block. Every
    field bound inside the block is dropped on exit.
    """
    token = _FIELDS.set(dict(_FIELDS.get()))
    tid = trace_id or new_trace_id()
    bind(trace_id=tid)
    try:
        yield tid
    finally:
        _FIELDS.reset(token)


# ------------------------------------------------------------------------------
# Formatting
# ------------------------------------------------------------------------------


def _jsonable(v: Any) -> Any:
    if v is None or isinstance(v, (bool, int, float, str, list, dict)):
        return v
    if isinstance(v, (bytes, bytearray)):
        return bytes(v).hex()
    if isinstance(v, Path):
        return v.as_posix()
    return str(v)


def _fields(record: logging.LogRecord) -> Dict[str, Any]:
    out = context()
    for k, v in vars(record).items():
        if k in _RESERVED or k.startswith("_") or k in out:
            continue
        out[k] = _jsonable(v)
    return out


def _timestamp(record: logging.LogRecord) -> str:
    ts = _dt.datetime.fromtimestamp(record.created, tz=_dt.timezone.utc)
    return ts.isoformat(timespec="milliseconds")


def _traceback(record: logging.LogRecord) -> Optional[str]:
    if not record.exc_info:
        return None
    return "".join(traceback.format_exception(*record.exc_info)).rstrip()


class JSONFormatter(logging.Formatter):
    """One JSON object per record: ts, level, logger, msg, then fields."""

    def format(self, record: logging.LogRecord) -> str:
        doc: Dict[str, Any] = {
            "ts": _timestamp(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for k, v in _fields(record).items():
            doc.setdefault(k, v)
        tb = _traceback(record)
        if tb:
            doc["err"] = tb
        return json.dumps(doc, default=str, separators=(",", ":"))


_ANSI = {
    "reset": "\x1b[0m",
    "dim": "\x1b[90m",
    "name": "\x1b[36m",
    logging.DEBUG: "\x1b[90m",
    logging.INFO: "\x1b[32m",
    logging.WARNING: "\x1b[33m",
    logging.ERROR: "\x1b[31m",
    logging.CRITICAL: "\x1b[1;35m",
}


def _is_tty(stream: Any) -> bool:
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty()) and "NO_COLOR" not in os.environ
    except ValueError:  # closed stream
        return False


class TextFormatter(logging.Formatter):
    """
    `ts | LEVEL | logger | k=v ... | message`, colored on a terminal:

      2026-01-05T12:34:56.789+00:00 | WARNING | statechain.runtime.executor | height=1 extrinsic=0 code=INSUFFICIENT_FUNDS | extrinsic failed
    """

    def __init__(self, stream: Any = None) -> None:
        super().__init__()
        self._color = _is_tty(stream)

    def _paint(self, text: str, key: Any) -> str:
        if not self._color:
            return text
        return f"{_ANSI.get(key, '')}{text}{_ANSI['reset']}"

    def format(self, record: logging.LogRecord) -> str:
        fields = _fields(record)
        keys = [k for k in DEFAULT_CONTEXT_KEYS if k in fields]
        keys += sorted(k for k in fields if k not in DEFAULT_CONTEXT_KEYS)

        parts = [
            self._paint(_timestamp(record), "dim"),
            self._paint(f"{record.levelname:<5}", record.levelno),
            self._paint(record.name, "name"),
        ]
        if keys:
            parts.append(" ".join(f"{k}={fields[k]}" for k in keys))
        parts.append(record.getMessage())
        line = " | ".join(parts)

        tb = _traceback(record)
        return f"{line}\n{tb}" if tb else line


# ------------------------------------------------------------------------------
# Setup
# ------------------------------------------------------------------------------


def _level(level: str | int | None) -> int:
    if level is None:
        level = os.environ.get("STATECHAIN_LOG_LEVEL", "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _want_json(json_flag: Optional[bool], stream: Any) -> bool:
    if json_flag is not None:
        return json_flag
    fmt = os.environ.get("STATECHAIN_LOG_FORMAT", "").strip().lower()
    if fmt in ("json", "text"):
        return fmt == "json"
    return not _is_tty(stream)


def configure(
    *,
    json: Optional[bool] = None,
    level: str | int | None = None,
    stream: Optional[TextIO] = None,
    keep_handlers: bool = False,
) -> logging.Handler:
    """
    Route all records through one stream handler on the root logger.

    Parameters
    ----------
    json : bool | None
        Force JSON (True) or text (False); None consults STATECHAIN_LOG_FORMAT,
        then falls back to text on a terminal and JSON elsewhere.
    level : str | int | None
        Minimum level; None reads STATECHAIN_LOG_LEVEL (default INFO).
    stream : TextIO | None
        Output stream; None means the current `sys.stderr`.
    keep_handlers : bool
        Leave handlers already on the root logger in place.

    Returns the installed handler.
    """
    out = stream if stream is not None else sys.stderr
    lvl = _level(level)

    handler = logging.StreamHandler(out)
    handler.setLevel(lvl)
    handler.setFormatter(JSONFormatter() if _want_json(json, out) else TextFormatter(out))

    root = logging.getLogger()
    if not keep_handlers:
        for h in root.handlers[:]:
            root.removeHandler(h)
    root.setLevel(lvl)
    root.addHandler(handler)
    return handler


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or "statechain")


__all__ = [
    "DEFAULT_CONTEXT_KEYS",
    "context",
    "bind",
    "unbind",
    "clear_context",
    "new_trace_id",
    "trace_scope",
    "JSONFormatter",
    "TextFormatter",
    "configure",
    "get_logger",
]
