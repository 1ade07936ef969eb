"""Label names, values and pairs shared across monitoring components."""

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from dataclasses import dataclass

ALERT_NAME_LABEL = "alertname"
EXPORTED_LABEL_PREFIX = "exported_"
METRIC_NAME_LABEL = "__name__"
SCHEME_LABEL = "__scheme__"
ADDRESS_LABEL = "__address__"
METRICS_PATH_LABEL = "__metrics_path__"
SCRAPE_INTERVAL_LABEL = "__scrape_interval__"
SCRAPE_TIMEOUT_LABEL = "__scrape_timeout__"
RESERVED_LABEL_PREFIX = "__"
META_LABEL_PREFIX = "__meta_"
TMP_LABEL_PREFIX = "__tmp_"
PARAM_LABEL_PREFIX = "__param_"
JOB_LABEL = "job"
INSTANCE_LABEL = "instance"
BUCKET_LABEL = "le"
QUANTILE_LABEL = "quantile"

LABEL_NAME_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*\Z")
"""Regular expression matching valid label names."""


def _sort_key(text: str) -> bytes:
    try:
        return text.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError:
        return text.encode("utf-8", "surrogatepass")


def is_valid_label_name(name: str) -> bool:
    """Return True if name matches ``[a-zA-Z_][a-zA-Z0-9_]*``."""
    if not name:
        return False
    for index, char in enumerate(name):
        if not (
            "a" <= char <= "z"
            or "A" <= char <= "Z"
            or char == "_"
            or ("0" <= char <= "9" and index > 0)
        ):
            return False
    return True


def is_valid_label_value(value: str | bytes) -> bool:
    """Return True if the value is valid UTF-8."""
    try:
        if isinstance(value, bytes):
            value.decode("utf-8")
        else:
            value.encode("utf-8")
    except UnicodeError:
        return False
    return True


def label_names_string(names: Iterable[str]) -> str:
    """Join label names with a comma and a space."""
    return ", ".join(names)


def sort_label_names(names: Iterable[str]) -> list[str]:
    """Return the label names sorted in byte order."""
    return sorted(names, key=_sort_key)


def sort_label_values(values: Iterable[str]) -> list[str]:
    """Return the label values sorted in byte order."""
    return sorted(values, key=_sort_key)


def parse_label_name(raw: str) -> str:
    """Return raw as a label name, raising ValueError if it is not valid."""
    if not isinstance(raw, str):
        raise TypeError(f"label name must be a string, not {type(raw).__name__}")
    if not is_valid_label_name(raw):
        raise ValueError(f"{json.dumps(raw, ensure_ascii=False)} is not a valid label name")
    return raw


@dataclass(frozen=True, order=True)
class LabelPair:
    """A label name with its value; orders by name, then value."""

    name: str
    value: str