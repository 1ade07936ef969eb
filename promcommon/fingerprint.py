"""FNV-1a based fingerprints and signatures for label sets."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

OFFSET64 = 14695981039346656037
PRIME64 = 1099511628211
_MASK64 = (1 << 64) - 1

SEPARATOR_BYTE = 255
"""A byte that cannot occur in valid UTF-8, used to separate hashed strings."""

EMPTY_LABEL_SIGNATURE = OFFSET64
"""The signature of an empty label set."""

_HEX_RE = re.compile(r"[0-9a-fA-F]+\Z")


def _to_bytes(text: str | bytes) -> bytes:
    if isinstance(text, bytes):
        return text
    try:
        return text.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError:
        return text.encode("utf-8", "surrogatepass")


def _hash_add(h: int, data: bytes) -> int:
    for byte in data:
        h ^= byte
        h = (h * PRIME64) & _MASK64
    return h


def _hash_add_byte(h: int, byte: int) -> int:
    return ((h ^ byte) * PRIME64) & _MASK64


def _hash_pairs(names: Iterable[str], lookup: Mapping) -> int:
    total = OFFSET64
    for name in names:
        total = _hash_add(total, _to_bytes(name))
        total = _hash_add_byte(total, SEPARATOR_BYTE)
        total = _hash_add(total, _to_bytes(lookup.get(name, "")))
        total = _hash_add_byte(total, SEPARATOR_BYTE)
    return total


class Fingerprint(int):
    """A 64-bit unsigned hash identifying a label set."""

    def __new__(cls, value: int = 0) -> "Fingerprint":
        value = int(value)
        if not 0 <= value <= _MASK64:
            raise ValueError(f"fingerprint {value} out of 64-bit unsigned range")
        return super().__new__(cls, value)

    @classmethod
    def from_string(cls, s: str) -> "Fingerprint":
        """Parse a hexadecimal representation into a fingerprint."""
        if not isinstance(s, str) or not _HEX_RE.match(s):
            raise ValueError(f"invalid fingerprint syntax: {s!r}")
        value = int(s, 16)
        if value > _MASK64:
            raise ValueError(f"fingerprint out of range: {s!r}")
        return cls(value)

    def __str__(self) -> str:
        return f"{int(self):016x}"

    def __repr__(self) -> str:
        return f"Fingerprint(0x{int(self):016x})"


class FingerprintSet(set):
    """A set of fingerprints."""

    def equal(self, other: Iterable[int]) -> bool:
        """Return True if both sets contain exactly the same elements."""
        other_set = other if isinstance(other, (set, frozenset)) else set(other)
        if len(self) != len(other_set):
            return False
        return all(item in other_set for item in self)

    def intersection(self, other: Iterable[int]) -> "FingerprintSet":  # type: ignore[override]
        """Return the elements contained in both sets."""
        other_set = other if isinstance(other, (set, frozenset)) else set(other)
        if not self or not other_set:
            return FingerprintSet()
        small, large = (other_set, self) if len(other_set) < len(self) else (self, other_set)
        return FingerprintSet(item for item in small if item in large)


def fingerprint_from_string(s: str) -> Fingerprint:
    """Transform a hexadecimal string into a Fingerprint."""
    return Fingerprint.from_string(s)


def parse_fingerprint(s: str) -> Fingerprint:
    """Parse a hexadecimal string into a Fingerprint."""
    return Fingerprint.from_string(s)


def labels_to_signature(labels: Mapping[str, str] | None) -> int:
    """Return a quasi-unique signature for a label mapping."""
    if not labels:
        return EMPTY_LABEL_SIGNATURE
    return _hash_pairs(sorted(labels, key=_to_bytes), labels)


def label_set_to_fingerprint(labels: Mapping[str, str] | None) -> Fingerprint:
    """Compute the fingerprint of a label set."""
    return Fingerprint(labels_to_signature(labels))


def label_set_to_fast_fingerprint(labels: Mapping[str, str] | None) -> Fingerprint:
    """Compute an order-independent XOR fingerprint of a label set.

    It is cheaper than the sorted variant but more prone to collisions.
    """
    if not labels:
        return Fingerprint(EMPTY_LABEL_SIGNATURE)
    result = 0
    for name, value in labels.items():
        h = _hash_add(OFFSET64, _to_bytes(name))
        h = _hash_add_byte(h, SEPARATOR_BYTE)
        h = _hash_add(h, _to_bytes(value))
        result ^= h
    return Fingerprint(result)


def signature_for_labels(metric: Mapping[str, str], *args: str) -> int:
    """Return the signature of a metric restricted to the given label names.

    Names absent from the metric hash with an empty value.
    """
    if not args:
        return EMPTY_LABEL_SIGNATURE
    return _hash_pairs(sorted(args, key=_to_bytes), metric)


def signature_without_labels(
    metric: Mapping[str, str], labels: Iterable[str] | None
) -> int:
    """Return the signature of a metric excluding the given label names."""
    if not metric:
        return EMPTY_LABEL_SIGNATURE
    excluded = set(labels or ())
    names = [name for name in metric if name not in excluded]
    if not names:
        return EMPTY_LABEL_SIGNATURE
    return _hash_pairs(sorted(names, key=_to_bytes), metric)