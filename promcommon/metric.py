"""Metrics: label sets that identify exactly one series."""

from __future__ import annotations

import re

from promcommon.labels import METRIC_NAME_LABEL
from promcommon.labelset import LabelSet, _byte_key, quote_label_value

METRIC_NAME_RE = re.compile(r"^[a-zA-Z_:][a-zA-Z0-9_:]*\Z")
"""Regular expression matching valid metric names."""


class Metric(LabelSet):
    """A label set that refers to a single stream of samples."""

    def clone(self) -> "Metric":
        """Return a copy of the metric."""
        return Metric(self)

    def __str__(self) -> str:
        has_name = METRIC_NAME_LABEL in self
        metric_name = self.get(METRIC_NAME_LABEL, "")
        pairs = [
            f"{name}={quote_label_value(value)}"
            for name, value in self.items()
            if name != METRIC_NAME_LABEL
        ]
        if not pairs:
            return metric_name if has_name else "{}"
        pairs.sort(key=_byte_key)
        return f"{metric_name}{{{', '.join(pairs)}}}"


def is_valid_metric_name(name: str) -> bool:
    """Return True if name matches ``[a-zA-Z_:][a-zA-Z0-9_:]*``."""
    if not name:
        return False
    for index, char in enumerate(name):
        if not (
            "a" <= char <= "z"
            or "A" <= char <= "Z"
            or char in "_:"
            or ("0" <= char <= "9" and index > 0)
        ):
            return False
    return True