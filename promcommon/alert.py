"""Alerts and lists of alerts."""

from __future__ import annotations

from collections.abc import Callable, MutableSequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import TypeVar

from promcommon.fingerprint import Fingerprint
from promcommon.labels import ALERT_NAME_LABEL
from promcommon.labelset import LabelSet

_T = TypeVar("_T")


class AlertStatus(str, Enum):
    """Whether an alert is still firing or has been resolved."""

    FIRING = "firing"
    RESOLVED = "resolved"

    def __str__(self) -> str:
        return self.value


def _now_like(ts: datetime) -> datetime:
    """Return the current time, aware or naive to match ts."""
    if ts.tzinfo is not None:
        return datetime.now(timezone.utc)
    return datetime.now()


def _before(a: datetime | None, b: datetime | None) -> bool:
    """Compare optional times, taking a missing time as the earliest one."""
    if a is None:
        return b is not None
    if b is None:
        return False
    return a < b


def _insertion_sort(items: MutableSequence[_T], less: Callable[[_T, _T], bool]) -> None:
    for i in range(1, len(items)):
        j = i
        while j > 0 and less(items[j], items[j - 1]):
            items[j], items[j - 1] = items[j - 1], items[j]
            j -= 1


@dataclass
class Alert:
    """An alert: identifying labels, extra annotations and an activity interval."""

    labels: LabelSet = field(default_factory=LabelSet)
    annotations: LabelSet = field(default_factory=LabelSet)
    starts_at: datetime | None = None
    ends_at: datetime | None = None
    generator_url: str = ""

    def __post_init__(self) -> None:
        self.labels = LabelSet(self.labels or {})
        self.annotations = LabelSet(self.annotations or {})

    def name(self) -> str:
        """Return the value of the alertname label."""
        return self.labels.get(ALERT_NAME_LABEL, "")

    def fingerprint(self) -> Fingerprint:
        """Return the fingerprint of the alert's labels."""
        return self.labels.fingerprint()

    def __str__(self) -> str:
        state = "resolved" if self.resolved() else "active"
        return f"{self.name()}[{str(self.fingerprint())[:7]}][{state}]"

    def resolved(self) -> bool:
        """Return True if the activity interval ended in the past."""
        if self.ends_at is None:
            return False
        return self.resolved_at(_now_like(self.ends_at))

    def resolved_at(self, ts: datetime) -> bool:
        """Return True if the activity interval ended at or before ts."""
        if self.ends_at is None:
            return False
        return not self.ends_at > ts

    def status(self) -> AlertStatus:
        """Return whether the alert is firing or resolved."""
        return AlertStatus.RESOLVED if self.resolved() else AlertStatus.FIRING

    def validate(self) -> None:
        """Raise ValueError if the alert data is inconsistent."""
        if self.starts_at is None:
            raise ValueError("start time missing")
        if self.ends_at is not None and self.ends_at < self.starts_at:
            raise ValueError("start time must be before end time")
        try:
            self.labels.validate()
        except ValueError as exc:
            raise ValueError(f"invalid label set: {exc}") from exc
        if not self.labels:
            raise ValueError("at least one label pair required")
        try:
            self.annotations.validate()
        except ValueError as exc:
            raise ValueError(f"invalid annotations: {exc}") from exc


def _alert_less(a: Alert, b: Alert) -> bool:
    if _before(a.starts_at, b.starts_at):
        return True
    if _before(a.ends_at, b.ends_at):
        return True
    return a.fingerprint() < b.fingerprint()


class Alerts(list):
    """A list of alerts that can be put in chronological order."""

    def sort(self) -> None:  # type: ignore[override]
        """Order the alerts by start time, end time, then fingerprint, in place."""
        _insertion_sort(self, _alert_less)

    def has_firing(self) -> bool:
        """Return True if any of the alerts is not resolved."""
        return any(not alert.resolved() for alert in self)

    def status(self) -> AlertStatus:
        """Return FIRING if at least one alert is firing, else RESOLVED."""
        return AlertStatus.FIRING if self.has_firing() else AlertStatus.RESOLVED