import io
import json
from datetime import datetime, timezone

import pytest

from promcommon.promlog import (
    AllowedFormat,
    AllowedLevel,
    Config,
    DynamicLogger,
    Level,
    Logger,
    new,
    new_dynamic,
    with_level,
)


class _Recorder:
    def __init__(self):
        self.count = 0
        self.entries = []

    def log(self, *args):
        self.entries.append(args)
        if any(str(value) == "Log level changed" for value in args):
            return
        self.count += 1


def _fixed_clock():
    return datetime(2021, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)


def test_default_config():
    stream = io.StringIO()
    new(Config(), stream).log("hello", "world")
    out = stream.getvalue()
    assert out.startswith("ts=")
    assert out.endswith("hello=world\n")


def test_unmarshal_level():
    assert str(AllowedLevel.from_yaml("debug")) == "debug"


def test_unmarshal_empty_level():
    assert str(AllowedLevel.from_yaml("")) == ""


def test_unmarshal_bad_level():
    with pytest.raises(ValueError, match='unrecognized log level "debugg"'):
        AllowedLevel.from_yaml("debugg")


def test_dynamic():
    logger = new_dynamic(Config(), io.StringIO())
    recorder = _Recorder()
    logger = DynamicLogger(recorder)
    logger.set_level(AllowedLevel("debug"))
    with_level(logger, "debug").log("hello", "world")
    assert recorder.count == 1

    recorder.count = 0
    logger.set_level(AllowedLevel("info"))
    with_level(logger, "debug").log("hello", "world")
    assert recorder.count == 0
    with_level(logger, "info").log("hello", "world")
    assert recorder.count == 1
    with_level(logger, "debug").log("hello", "world")
    assert recorder.count == 1


def test_dynamic_notes_level_change():
    recorder = _Recorder()
    logger = DynamicLogger(recorder)
    debug, info = AllowedLevel("debug"), AllowedLevel("info")
    logger.set_level(debug)
    logger.set_level(debug)
    assert recorder.entries == []
    logger.set_level(info)
    assert recorder.entries == [("msg", "Log level changed", "prev", debug, "current", info)]


def test_dynamic_rejects_empty_level():
    with pytest.raises(ValueError):
        DynamicLogger(_Recorder()).set_level(AllowedLevel())


def test_level_filter_from_config():
    stream = io.StringIO()
    logger = new(Config(level=AllowedLevel("info")), stream)
    with_level(logger, "debug").log("a", "b")
    assert stream.getvalue() == ""
    with_level(logger, "warn").log("a", "b")
    assert "level=warn a=b" in stream.getvalue()


def test_json_logger():
    stream = io.StringIO()
    Logger(stream, "json", clock=_fixed_clock).log("msg", "hi", "n", 3)
    record = json.loads(stream.getvalue())
    assert record["ts"] == "2021-01-02T03:04:05.678Z"
    assert record["msg"] == "hi"
    assert record["n"] == 3
    assert record["caller"].startswith("test_promlog.py:")


def test_new_dynamic_json_format():
    stream = io.StringIO()
    logger = new_dynamic(Config(level=AllowedLevel("error"), format=AllowedFormat("json")), stream)
    with_level(logger, "warn").log("msg", "dropped")
    with_level(logger, "error").log("msg", "kept")
    lines = stream.getvalue().splitlines()
    assert len(lines) == 1
    assert json.loads(lines[0])["level"] == "error"


def test_logfmt_timestamp_caller_and_quoting():
    stream = io.StringIO()
    Logger(stream, clock=_fixed_clock).log("msg", "hello world", "empty", "")
    fields = stream.getvalue()
    assert fields.startswith("ts=2021-01-02T03:04:05.678Z caller=test_promlog.py:")
    assert fields.endswith('msg="hello world" empty=\n')


def test_logfmt_missing_value():
    stream = io.StringIO()
    Logger(stream).log("lonely")
    assert stream.getvalue().endswith("lonely=(MISSING)\n")


def test_logfmt_invalid_key():
    with pytest.raises(ValueError):
        Logger(io.StringIO()).log("bad key", "value")


def test_bad_format():
    with pytest.raises(ValueError, match='unrecognized log format "xml"'):
        AllowedFormat().set("xml")


def test_allowed_level_holds_level():
    level = AllowedLevel()
    level.set("warn")
    assert level.level is Level.WARN
    assert str(level) == "warn"