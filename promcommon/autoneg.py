"""Content-type negotiation driven by an HTTP Accept header."""

from __future__ import annotations

import math
import struct
from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass
class Accept:
    """One clause of an Accept header."""

    type: str
    sub_type: str
    q: float = 1.0
    params: dict[str, str] = field(default_factory=dict)


def _accept_less(a: Accept, b: Accept) -> bool:
    if a.q > b.q:
        return True
    if a.type != "*" and b.type == "*":
        return True
    if a.sub_type != "*" and b.sub_type == "*":
        return True
    return False


def _sort_clauses(clauses: list[Accept]) -> None:
    # The ordering is not a strict weak order, so the exact algorithm matters.
    for i in range(1, len(clauses)):
        j = i
        while j > 0 and _accept_less(clauses[j], clauses[j - 1]):
            clauses[j], clauses[j - 1] = clauses[j - 1], clauses[j]
            j -= 1


def _parse_q(text: str) -> float:
    """Parse a quality value at single precision; unparsable text gives 0."""
    if not text or text != text.strip() or "_" in text:
        return 0.0
    try:
        value = float(text)
    except ValueError:
        return 0.0
    if math.isnan(value) or math.isinf(value):
        return value
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def parse_accept(header: str) -> list[Accept]:
    """Parse an Accept header into clauses, most preferred first."""
    clauses: list[Accept] = []
    for part in header.split(","):
        part = part.strip(" ")
        media_range, *params = part.split(";")
        pieces = media_range.split("/")
        main_type = pieces[0].strip(" ")
        if len(pieces) == 1 and main_type == "*":
            sub_type = "*"
        elif len(pieces) == 2:
            sub_type = pieces[1].strip(" ")
        else:
            continue
        clause = Accept(main_type, sub_type)
        for param in params:
            param_name, sep, param_value = param.partition("=")
            if not sep:
                continue
            param_name = param_name.strip(" ")
            if param_name == "q":
                clause.q = _parse_q(param_value)
            else:
                clause.params[param_name] = param_value.strip(" ")
        clauses.append(clause)
    _sort_clauses(clauses)
    return clauses


def negotiate(header: str, alternatives: Iterable[str]) -> str:
    """Return the alternative that best fits the header, or "" if none does."""
    options = [(alt, alt.split("/", 1)) for alt in alternatives]
    for clause in parse_accept(header):
        for alt, parts in options:
            if clause.type == parts[0]:
                if len(parts) < 2:
                    raise ValueError(f"malformed content type {alt!r}")
                if clause.sub_type in (parts[1], "*"):
                    return alt
            if clause.type == "*" and clause.sub_type == "*":
                return alt
    return ""