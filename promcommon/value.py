"""Sample values, samples, vectors, matrices and their JSON forms."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from enum import IntEnum
from functools import cmp_to_key
from typing import Any

from promcommon.metric import Metric
from promcommon.timestamps import EARLIEST, Time, format_float

_INF_WORDS = frozenset({"inf", "+inf", "-inf", "infinity", "+infinity", "-infinity"})
_HTML_ESCAPES = (
    ("<", "\\u003c"),
    (">", "\\u003e"),
    ("&", "\\u0026"),
    ("\u2028", "\\u2028"),
    ("\u2029", "\\u2029"),
)


class _RawNumber(str):
    """A JSON number kept as its source text."""


def _load_json(text: str | bytes) -> Any:
    if isinstance(text, bytes):
        text = text.decode("utf-8")
    return json.loads(text, parse_float=_RawNumber, parse_int=_RawNumber)


def _dump_json(obj: Any) -> str:
    text = json.dumps(obj, ensure_ascii=False, separators=(",", ":"))
    for char, escape in _HTML_ESCAPES:
        text = text.replace(char, escape)
    return text


def _is_json_string(value: Any) -> bool:
    return isinstance(value, str) and not isinstance(value, _RawNumber)


def _parse_float(text: str) -> float:
    if not text or text != text.strip() or "_" in text:
        raise ValueError(f"invalid syntax: {json.dumps(text)}")
    lowered = text.lower()
    try:
        if lowered.lstrip("+-").startswith("0x"):
            value = float.fromhex(text)
        else:
            value = float(text)
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"invalid syntax: {json.dumps(text)}") from exc
    if math.isinf(value) and lowered not in _INF_WORDS:
        raise ValueError(f"value out of range: {json.dumps(text)}")
    return value


def _decode_time(element: Any) -> Time:
    if not isinstance(element, _RawNumber):
        raise ValueError(f"invalid timestamp {json.dumps(element)}")
    return Time.from_json(element)


def _decode_sample_value(element: Any) -> "SampleValue":
    if not _is_json_string(element):
        raise ValueError("sample value must be a quoted string")
    return SampleValue(_parse_float(element))


class SampleValue(float):
    """The value of a sample at a given time."""

    def equal(self, other: float) -> bool:
        """Return True if both values are equal or both are NaN."""
        if float(self) == float(other):
            return True
        return math.isnan(self) and math.isnan(other)

    def __str__(self) -> str:
        return format_float(self)

    def __repr__(self) -> str:
        return f"SampleValue({format_float(self)})"


@dataclass(frozen=True)
class SamplePair:
    """A sample value paired with its timestamp."""

    timestamp: Time = Time(0)
    value: SampleValue = SampleValue(0.0)

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", Time(self.timestamp))
        object.__setattr__(self, "value", SampleValue(self.value))

    def equal(self, other: "SamplePair") -> bool:
        """Return True if values (NaN-aware) and timestamps are equal."""
        return self is other or (
            self.value.equal(other.value) and self.timestamp.equal(other.timestamp)
        )

    def __str__(self) -> str:
        return f"{self.value!s} @[{self.timestamp!s}]"

    def to_json(self) -> str:
        """Encode as ``[seconds,"value"]``."""
        return f"[{self.timestamp.to_json()},{_dump_json(str(self.value))}]"

    @classmethod
    def from_json(cls, text: str | bytes) -> "SamplePair":
        """Decode from ``[seconds,"value"]``."""
        return _pair_from_data(_load_json(text))


def _pair_from_data(data: Any) -> SamplePair:
    if data is None:
        return SamplePair()
    if not isinstance(data, list):
        raise ValueError("sample pair must be a JSON array")
    timestamp = _decode_time(data[0]) if len(data) > 0 else Time(0)
    value = _decode_sample_value(data[1]) if len(data) > 1 else SampleValue(0.0)
    return SamplePair(timestamp, value)


def _metric_from_data(data: Any) -> Metric:
    if data is None:
        return Metric()
    if not isinstance(data, dict):
        raise ValueError("metric must be a JSON object")
    for value in data.values():
        if not _is_json_string(value):
            raise ValueError(f"label value must be a string, not {json.dumps(value)}")
    return Metric(data)


def _metric_json(metric: Metric) -> str:
    from promcommon.labelset import _byte_key

    return _dump_json({name: metric[name] for name in sorted(metric, key=_byte_key)})


@dataclass
class Sample:
    """A sample pair associated with a metric."""

    metric: Metric = field(default_factory=Metric)
    value: SampleValue = SampleValue(0.0)
    timestamp: Time = Time(0)

    def __post_init__(self) -> None:
        self.metric = Metric(self.metric or {})
        self.value = SampleValue(self.value)
        self.timestamp = Time(self.timestamp)

    def equal(self, other: "Sample") -> bool:
        """Compare metrics, then timestamps, then values (NaN-aware)."""
        if self is other:
            return True
        return (
            self.metric.equal(other.metric)
            and self.timestamp.equal(other.timestamp)
            and self.value.equal(other.value)
        )

    def __str__(self) -> str:
        return f"{self.metric!s} => {SamplePair(self.timestamp, self.value)!s}"

    def to_json(self) -> str:
        """Encode as ``{"metric":{...},"value":[seconds,"value"]}``."""
        pair = SamplePair(self.timestamp, self.value)
        return f'{{"metric":{_metric_json(self.metric)},"value":{pair.to_json()}}}'

    @classmethod
    def from_json(cls, text: str | bytes) -> "Sample":
        """Decode from ``{"metric":{...},"value":[seconds,"value"]}``."""
        return _sample_from_data(_load_json(text))


def _sample_from_data(data: Any) -> Sample:
    if data is None:
        return Sample()
    if not isinstance(data, dict):
        raise ValueError("sample must be a JSON object")
    metric = _metric_from_data(data.get("metric"))
    pair = _pair_from_data(data.get("value"))
    return Sample(metric=metric, value=pair.value, timestamp=pair.timestamp)


def _sample_cmp(a: Sample, b: Sample) -> int:
    if a.metric.before(b.metric):
        return -1
    if b.metric.before(a.metric):
        return 1
    if a.timestamp.before(b.timestamp):
        return -1
    if b.timestamp.before(a.timestamp):
        return 1
    return 0


def _samples_equal(mine: list, other: list) -> bool:
    if len(mine) != len(other):
        return False
    return all(a.equal(b) for a, b in zip(mine, other))


class Samples(list):
    """A list of samples ordered by metric, then timestamp."""

    def sort(self) -> None:  # type: ignore[override]
        """Sort in place by metric, then timestamp."""
        super().sort(key=cmp_to_key(_sample_cmp))

    def equal(self, other: list) -> bool:
        """Return True if both lists hold equal samples in the same order."""
        return _samples_equal(self, other)


@dataclass
class SampleStream:
    """A series of sample pairs belonging to one metric."""

    metric: Metric = field(default_factory=Metric)
    values: list = field(default_factory=list)

    def __post_init__(self) -> None:
        self.metric = Metric(self.metric or {})
        self.values = list(self.values)

    def __str__(self) -> str:
        lines = "\n".join(str(pair) for pair in self.values)
        return f"{self.metric!s} =>\n{lines}"


class ValueType(IntEnum):
    """The kind of value a query evaluates to."""

    NONE = 0
    SCALAR = 1
    VECTOR = 2
    MATRIX = 3
    STRING = 4

    def __str__(self) -> str:
        return _VALUE_TYPE_NAMES[self]

    def to_json(self) -> str:
        """Encode the type name as a JSON string."""
        return _dump_json(str(self))

    @classmethod
    def from_json(cls, text: str | bytes) -> "ValueType":
        """Decode a type name from a JSON string."""
        name = json.loads(text)
        if not isinstance(name, str):
            raise ValueError(f"value type must be a JSON string, not {json.dumps(name)}")
        for member, member_name in _VALUE_TYPE_NAMES.items():
            if member_name == name:
                return member
        raise ValueError(f"unknown value type {json.dumps(name, ensure_ascii=False)}")


_VALUE_TYPE_NAMES = {
    ValueType.NONE: "<ValNone>",
    ValueType.SCALAR: "scalar",
    ValueType.VECTOR: "vector",
    ValueType.MATRIX: "matrix",
    ValueType.STRING: "string",
}


@dataclass(frozen=True)
class Scalar:
    """A scalar value evaluated at a timestamp."""

    value: SampleValue = SampleValue(0.0)
    timestamp: Time = Time(0)
    value_type = ValueType.SCALAR

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", SampleValue(self.value))
        object.__setattr__(self, "timestamp", Time(self.timestamp))

    def __str__(self) -> str:
        return f"scalar: {self.value!s} @[{self.timestamp!s}]"

    def to_json(self) -> str:
        """Encode as ``[seconds,"value"]``."""
        return f"[{self.timestamp.to_json()},{_dump_json(format_float(self.value))}]"

    @classmethod
    def from_json(cls, text: str | bytes) -> "Scalar":
        """Decode from ``[seconds,"value"]``."""
        data = _load_json(text)
        if not isinstance(data, list):
            raise ValueError("scalar must be a JSON array")
        timestamp = _decode_time(data[0]) if len(data) > 0 else Time(0)
        raw = data[1] if len(data) > 1 else ""
        if not _is_json_string(raw):
            raise ValueError("scalar value must be a JSON string")
        try:
            value = _parse_float(raw)
        except ValueError as exc:
            raise ValueError(f"error parsing sample value: {exc}") from exc
        return cls(SampleValue(value), timestamp)


@dataclass(frozen=True)
class String:
    """A string value evaluated at a timestamp."""

    value: str = ""
    timestamp: Time = Time(0)
    value_type = ValueType.STRING

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", Time(self.timestamp))

    def __str__(self) -> str:
        return self.value

    def to_json(self) -> str:
        """Encode as ``[seconds,"text"]``."""
        return f"[{self.timestamp.to_json()},{_dump_json(self.value)}]"

    @classmethod
    def from_json(cls, text: str | bytes) -> "String":
        """Decode from ``[seconds,"text"]``."""
        data = _load_json(text)
        if not isinstance(data, list):
            raise ValueError("string value must be a JSON array")
        timestamp = _decode_time(data[0]) if len(data) > 0 else Time(0)
        value = data[1] if len(data) > 1 else ""
        if not _is_json_string(value):
            raise ValueError("string value must be a JSON string")
        return cls(value, timestamp)


class Vector(list):
    """Samples that all share the same timestamp."""

    value_type = ValueType.VECTOR

    def __str__(self) -> str:
        return "\n".join(str(sample) for sample in self)

    def sort(self) -> None:  # type: ignore[override]
        """Sort in place by metric, then timestamp."""
        super().sort(key=cmp_to_key(_sample_cmp))

    def equal(self, other: list) -> bool:
        """Return True if both vectors hold equal samples in the same order."""
        return _samples_equal(self, other)

    def to_json(self) -> str:
        """Encode as a JSON array of samples."""
        return "[" + ",".join(sample.to_json() for sample in self) + "]"

    @classmethod
    def from_json(cls, text: str | bytes) -> "Vector":
        """Decode from a JSON array of samples."""
        data = _load_json(text)
        if data is None:
            return cls()
        if not isinstance(data, list):
            raise ValueError("vector must be a JSON array")
        return cls(_sample_from_data(item) for item in data)


def _stream_cmp(a: SampleStream, b: SampleStream) -> int:
    if a.metric.before(b.metric):
        return -1
    if b.metric.before(a.metric):
        return 1
    return 0


class Matrix(list):
    """A list of sample streams."""

    value_type = ValueType.MATRIX

    def __str__(self) -> str:
        ordered = sorted(self, key=cmp_to_key(_stream_cmp))
        return "\n".join(str(stream) for stream in ordered)


ZERO_SAMPLE_PAIR = SamplePair(EARLIEST, SampleValue(0.0))
"""A sample pair marking a missing sample: timestamp EARLIEST, value 0."""

ZERO_SAMPLE = Sample(timestamp=EARLIEST)
"""A sample marking a missing sample: timestamp EARLIEST, value 0, empty metric."""