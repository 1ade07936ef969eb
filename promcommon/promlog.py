"""Standard leveled key/value loggers writing logfmt or JSON."""

from __future__ import annotations

import inspect
import json
import os
import sys
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Protocol, TextIO

import yaml

LEVEL_KEY = "level"
_MISSING_VALUE = "(MISSING)"
_NULL_TAG = "tag:yaml.org,2002:null"
_HTML_ESCAPES = (("<", "\\u003c"), (">", "\\u003e"), ("&", "\\u0026"))
_THIS_FILE = os.path.normcase(os.path.abspath(__file__))


class Level(str, Enum):
    """Severity of a log entry."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value

    @property
    def rank(self) -> int:
        return _RANKS[self]


_RANKS = {Level.DEBUG: 0, Level.INFO: 1, Level.WARN: 2, Level.ERROR: 3}


class _KeyvalLogger(Protocol):
    def log(self, *args: Any) -> None: ...


def _yaml_scalar(text: str | bytes) -> str:
    try:
        node = yaml.compose(text, Loader=yaml.SafeLoader)
    except yaml.YAMLError as exc:
        raise ValueError(f"invalid YAML: {exc}") from exc
    if node is None:
        return ""
    if not isinstance(node, yaml.ScalarNode):
        raise ValueError("cannot unmarshal a YAML collection into a string")
    if node.tag == _NULL_TAG:
        return ""
    return node.value


class AllowedLevel:
    """The minimum level an entry must have to be logged."""

    def __init__(self, value: str = "") -> None:
        self._value = ""
        self.level: Level | None = None
        if value:
            self.set(value)

    def set(self, value: str) -> None:
        """Set the level by name: debug, info, warn or error."""
        try:
            level = Level(value)
        except ValueError:
            raise ValueError(f"unrecognized log level {json.dumps(value)}") from None
        self.level = level
        self._value = level.value

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"AllowedLevel({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AllowedLevel):
            return NotImplemented
        return self._value == other._value

    @classmethod
    def from_yaml(cls, text: str | bytes) -> "AllowedLevel":
        """Read a level from a YAML scalar; an empty document gives no level."""
        result = cls()
        raw = _yaml_scalar(text)
        if raw:
            result.set(raw)
        return result


class AllowedFormat:
    """The output format of a logger: logfmt or json."""

    def __init__(self, value: str = "") -> None:
        self._value = ""
        if value:
            self.set(value)

    def set(self, value: str) -> None:
        """Set the format by name."""
        if value not in ("logfmt", "json"):
            raise ValueError(f"unrecognized log format {json.dumps(value)}")
        self._value = value

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"AllowedFormat({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AllowedFormat):
            return NotImplemented
        return self._value == other._value


@dataclass
class Config:
    """Settings for a logger."""

    level: AllowedLevel | None = None
    format: AllowedFormat | None = None


def _format_timestamp(moment: datetime) -> str:
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return f"{moment:%Y-%m-%dT%H:%M:%S}.{moment.microsecond // 1000:03d}Z"


def _in_this_module(frame: Any) -> bool:
    return os.path.normcase(os.path.abspath(frame.f_code.co_filename)) == _THIS_FILE


def _caller() -> str:
    frame = inspect.currentframe()
    while frame is not None and _in_this_module(frame):
        frame = frame.f_back
    if frame is None:
        return ""
    return f"{os.path.basename(frame.f_code.co_filename)}:{frame.f_lineno}"


def _stringify(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _needs_quote(char: str) -> bool:
    return char <= " " or char in '="\ufffd' or "\ud800" <= char <= "\udfff"


def _quote(text: str) -> str:
    parts = ['"']
    for char in text:
        if char in '\\"':
            parts.append("\\" + char)
        elif char == "\n":
            parts.append("\\n")
        elif char == "\r":
            parts.append("\\r")
        elif char == "\t":
            parts.append("\\t")
        elif char < " ":
            parts.append(f"\\u{ord(char):04x}")
        elif "\ud800" <= char <= "\udfff":
            parts.append("\ufffd")
        else:
            parts.append(char)
    parts.append('"')
    return "".join(parts)


def _logfmt_key(key: Any) -> str:
    if key is None:
        raise ValueError("nil key")
    text = _stringify(key)
    if not text or any(_needs_quote(char) for char in text):
        raise ValueError(f"invalid key {text!r}")
    return text


def _encode_logfmt(keyvals: list) -> str:
    fields = []
    for key, value in zip(keyvals[::2], keyvals[1::2]):
        text = _stringify(value)
        if text and any(_needs_quote(char) for char in text):
            text = _quote(text)
        fields.append(f"{_logfmt_key(key)}={text}")
    return " ".join(fields) + "\n"


def _json_value(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str, list, dict)):
        return value
    return str(value)


def _encode_json(keyvals: list) -> str:
    record: dict[str, Any] = {}
    for key, value in zip(keyvals[::2], keyvals[1::2]):
        name = "<nil>" if key is None else key if isinstance(key, str) else str(key)
        record[name] = _json_value(value)
    text = json.dumps(
        record, sort_keys=True, separators=(",", ":"), ensure_ascii=False, allow_nan=False
    )
    for char, escape in _HTML_ESCAPES:
        text = text.replace(char, escape)
    return text + "\n"


class Logger:
    """Writes key/value entries stamped with a UTC time and the caller."""

    def __init__(
        self,
        stream: TextIO | None = None,
        output_format: str = "logfmt",
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if output_format not in ("logfmt", "json"):
            raise ValueError(f"unrecognized log format {json.dumps(output_format)}")
        self._stream = stream
        self._json = output_format == "json"
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._lock = threading.Lock()

    def log(self, *args: Any) -> None:
        """Write one entry made of alternating keys and values."""
        keyvals = ["ts", _format_timestamp(self._clock()), "caller", _caller(), *args]
        if len(keyvals) % 2:
            keyvals.append(_MISSING_VALUE)
        line = _encode_json(keyvals) if self._json else _encode_logfmt(keyvals)
        stream = self._stream if self._stream is not None else sys.stderr
        with self._lock:
            stream.write(line)


class _LevelFilter:
    def __init__(self, nxt: _KeyvalLogger, allowed: Level) -> None:
        self._next = nxt
        self._allowed = allowed

    def log(self, *args: Any) -> None:
        for value in args[1::2]:
            if isinstance(value, Level):
                if value.rank < self._allowed.rank:
                    return
                break
        self._next.log(*args)


class _Leveled:
    def __init__(self, logger: _KeyvalLogger, level: Level) -> None:
        self._logger = logger
        self._level = level

    def log(self, *args: Any) -> None:
        self._logger.log(LEVEL_KEY, self._level, *args)


def with_level(logger: _KeyvalLogger, level: Level | str) -> _Leveled:
    """Return a logger that tags every entry with the given level."""
    return _Leveled(logger, Level(level))


class DynamicLogger:
    """A leveled logger whose level can be changed while in use."""

    def __init__(self, base: _KeyvalLogger) -> None:
        self.base = base
        self._leveled: _KeyvalLogger = base
        self._current: AllowedLevel | None = None
        self._lock = threading.Lock()

    def log(self, *args: Any) -> None:
        """Log an entry through the current level filter."""
        with self._lock:
            self._leveled.log(*args)

    def set_level(self, level: AllowedLevel) -> None:
        """Change the minimum level, noting the change in the log."""
        if level is None:
            raise TypeError("log level must not be None")
        if level.level is None:
            raise ValueError("log level is not set")
        with self._lock:
            if self._current is not None and str(self._current) != str(level):
                self.base.log("msg", "Log level changed", "prev", self._current, "current", level)
            self._current = level
            self._leveled = _LevelFilter(self.base, level.level)


def _base_logger(config: Config, stream: TextIO | None) -> Logger:
    fmt = "json" if config.format is not None and str(config.format) == "json" else "logfmt"
    return Logger(stream, fmt)


def new(config: Config, stream: TextIO | None = None) -> _KeyvalLogger:
    """Return a logger configured by config, writing to stream or stderr."""
    logger = _base_logger(config, stream)
    if config.level is not None and config.level.level is not None:
        return _LevelFilter(logger, config.level.level)
    return logger


def new_dynamic(config: Config, stream: TextIO | None = None) -> DynamicLogger:
    """Return a logger whose level can be changed later."""
    logger = DynamicLogger(_base_logger(config, stream))
    if config.level is not None:
        logger.set_level(config.level)
    return logger