"""Label sets: mappings of label names to label values."""

from __future__ import annotations

import json
from collections.abc import Mapping

from promcommon.fingerprint import (
    Fingerprint,
    label_set_to_fast_fingerprint,
    label_set_to_fingerprint,
)
from promcommon.labels import is_valid_label_name, is_valid_label_value, parse_label_name

_ESCAPES = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\\": "\\\\",
    '"': '\\"',
}


def _byte_key(text: str) -> bytes:
    try:
        return text.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError:
        return text.encode("utf-8", "surrogatepass")


def quote_label_value(text: str) -> str:
    """Return text in double quotes with non-printable characters escaped."""
    parts = ['"']
    for char in text:
        code = ord(char)
        if char in _ESCAPES:
            parts.append(_ESCAPES[char])
        elif 0xDC80 <= code <= 0xDCFF:
            parts.append(f"\\x{code - 0xDC00:02x}")
        elif code < 0x20 or code == 0x7F:
            parts.append(f"\\x{code:02x}")
        elif not char.isprintable():
            parts.append(f"\\u{code:04x}" if code <= 0xFFFF else f"\\U{code:08x}")
        else:
            parts.append(char)
    parts.append('"')
    return "".join(parts)


class LabelSet(dict):
    """A mapping of label names to label values."""

    def validate(self) -> None:
        """Raise ValueError if any name or value in the set is invalid."""
        for name, value in self.items():
            if not is_valid_label_name(name):
                raise ValueError(f"invalid name {quote_label_value(name)}")
            if not is_valid_label_value(value):
                raise ValueError(f"invalid value {quote_label_value(value)}")

    def equal(self, other: Mapping[str, str]) -> bool:
        """Return True if both sets hold exactly the same pairs."""
        if len(self) != len(other):
            return False
        for name, value in self.items():
            if name not in other or other[name] != value:
                return False
        return True

    def before(self, other: Mapping[str, str]) -> bool:
        """Return True if this set orders before other.

        Fewer labels come first; otherwise the first differing pair, in
        sorted order of all names, decides. Equal sets are not before.
        """
        if len(self) < len(other):
            return True
        if len(self) > len(other):
            return False
        names = sorted([*self, *other], key=_byte_key)
        for name in names:
            if name not in self:
                return True
            if name not in other:
                return False
            mine, theirs = _byte_key(self[name]), _byte_key(other[name])
            if mine < theirs:
                return True
            if mine > theirs:
                return False
        return False

    def clone(self) -> "LabelSet":
        """Return a copy of the label set."""
        return type(self)(self)

    def merge(self, other: Mapping[str, str]) -> "LabelSet":
        """Return a new set with other's pairs laid over this one's."""
        result = type(self)(self)
        result.update(other)
        return result

    def __str__(self) -> str:
        pairs = sorted(
            (f"{name}={quote_label_value(value)}" for name, value in self.items()),
            key=_byte_key,
        )
        return "{" + ", ".join(pairs) + "}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict.__repr__(self)})"

    def fingerprint(self) -> Fingerprint:
        """Return the fingerprint of the set."""
        return label_set_to_fingerprint(self)

    def fast_fingerprint(self) -> Fingerprint:
        """Return the cheaper, collision-prone fingerprint of the set."""
        return label_set_to_fast_fingerprint(self)

    @classmethod
    def from_json(cls, text: str | bytes) -> "LabelSet":
        """Decode a JSON object into a label set, checking label names."""
        data = json.loads(text)
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError("label set must be a JSON object")
        for value in data.values():
            if not isinstance(value, str):
                raise ValueError(f"label value must be a string, not {json.dumps(value)}")
        for name in data:
            parse_label_name(name)
        return cls(data)