"""Label matchers and silences."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from datetime import datetime

from promcommon.labels import is_valid_label_name, is_valid_label_value
from promcommon.labelset import quote_label_value


@dataclass
class Matcher:
    """Matches the value of one label, literally or by regular expression."""

    name: str
    value: str
    is_regex: bool = False

    def validate(self) -> None:
        """Raise ValueError if any field holds an invalid value."""
        if not is_valid_label_name(self.name):
            raise ValueError(f"invalid name {quote_label_value(self.name)}")
        if self.is_regex:
            try:
                re.compile(self.value)
            except re.error:
                raise ValueError(
                    f"invalid regular expression {quote_label_value(self.value)}"
                ) from None
        elif not is_valid_label_value(self.value) or not self.value:
            raise ValueError(f"invalid value {quote_label_value(self.value)}")

    @classmethod
    def from_json(cls, text: str | bytes) -> "Matcher":
        """Decode a matcher from a JSON object with name, value and isRegex."""
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("matcher must be a JSON object")
        name = data.get("name") or ""
        value = data.get("value") or ""
        is_regex = data.get("isRegex") or False
        if not isinstance(name, str) or not isinstance(value, str):
            raise ValueError("matcher name and value must be strings")
        if not isinstance(is_regex, bool):
            raise ValueError("matcher isRegex must be a boolean")
        if not name:
            raise ValueError("label name in matcher must not be empty")
        if is_regex:
            try:
                re.compile(value)
            except re.error as exc:
                raise ValueError(str(exc)) from exc
        return cls(name, value, is_regex)


@dataclass
class Silence:
    """A silence definition: matchers, an active interval and its provenance."""

    matchers: list[Matcher] = field(default_factory=list)
    starts_at: datetime | None = None
    ends_at: datetime | None = None
    created_at: datetime | None = None
    created_by: str = ""
    comment: str = ""
    id: int = 0

    def validate(self) -> None:
        """Raise ValueError if any field holds an invalid value."""
        if not self.matchers:
            raise ValueError("at least one matcher required")
        for matcher in self.matchers:
            try:
                matcher.validate()
            except ValueError as exc:
                raise ValueError(f"invalid matcher: {exc}") from exc
        if self.starts_at is None:
            raise ValueError("start time missing")
        if self.ends_at is None:
            raise ValueError("end time missing")
        if self.ends_at < self.starts_at:
            raise ValueError("start time must be before end time")
        if not self.created_by:
            raise ValueError("creator information missing")
        if not self.comment:
            raise ValueError("comment missing")
        if self.created_at is None:
            raise ValueError("creation timestamp missing")