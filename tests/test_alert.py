import re
from datetime import datetime, timedelta, timezone

import pytest

from promcommon.alert import Alert, Alerts, AlertStatus
from promcommon.labelset import LabelSet

TS = datetime.now(timezone.utc)


@pytest.mark.parametrize(
    "alert",
    [
        Alert(labels={"a": "b"}, starts_at=TS),
        Alert(labels={"a": "b"}, starts_at=TS, ends_at=TS),
        Alert(labels={"a": "b"}, starts_at=TS, ends_at=TS + timedelta(minutes=1)),
    ],
)
def test_validate_accepts(alert):
    assert alert.validate() is None
    assert alert.labels == {"a": "b"}


@pytest.mark.parametrize(
    "alert, message",
    [
        (Alert(labels={"a": "b"}), "start time missing"),
        (
            Alert(labels={"a": "b"}, starts_at=TS, ends_at=TS - timedelta(minutes=1)),
            "start time must be before end time",
        ),
        (Alert(starts_at=TS), "at least one label pair required"),
        (Alert(labels={"a": "b", "!bad": "label"}, starts_at=TS), "invalid label set: invalid name"),
        (
            Alert(labels={"a": "b", "bad": "\udcfflabel"}, starts_at=TS),
            "invalid label set: invalid value",
        ),
        (
            Alert(labels={"a": "b"}, annotations={"!bad": "label"}, starts_at=TS),
            "invalid annotations: invalid name",
        ),
        (
            Alert(labels={"a": "b"}, annotations={"bad": "\udcfflabel"}, starts_at=TS),
            "invalid annotations: invalid value",
        ),
    ],
)
def test_validate_rejects(alert, message):
    with pytest.raises(ValueError, match=re.escape(message)):
        alert.validate()


def test_active_alert():
    alert = Alert(labels=LabelSet({"foo": "bar", "lorem": "ipsum"}), starts_at=datetime.now(timezone.utc))
    assert str(alert) == "[d181d0f][active]"
    assert alert.status() == AlertStatus.FIRING
    assert alert.status().value == "firing"


def test_resolved_alert():
    ts = datetime.now(timezone.utc)
    alert = Alert(
        labels={"foo": "bar", "lorem": "ipsum"},
        starts_at=ts - timedelta(minutes=2),
        ends_at=ts - timedelta(minutes=1),
    )
    assert str(alert) == "[d181d0f][resolved]"
    assert alert.status() == AlertStatus.RESOLVED
    assert alert.status().value == "resolved"


def test_name_comes_from_alertname_label():
    alert = Alert(labels={"alertname": "DiskFull"})
    assert alert.name() == "DiskFull"
    assert alert.fingerprint() == LabelSet({"alertname": "DiskFull"}).fingerprint()


def test_resolved_at():
    ts = datetime(2020, 1, 1, tzinfo=timezone.utc)
    alert = Alert(labels={"a": "b"}, starts_at=ts, ends_at=ts)
    assert alert.resolved_at(ts) is True
    assert alert.resolved_at(ts - timedelta(minutes=1)) is False
    assert Alert(labels={"a": "b"}, starts_at=ts).resolved_at(ts) is False


def test_sort_alerts():
    ts = datetime.now(timezone.utc)
    alerts = Alerts(
        [
            Alert(
                labels={"alertname": "InternalError", "dev": "sda3"},
                starts_at=ts - timedelta(minutes=6),
                ends_at=ts - timedelta(minutes=3),
            ),
            Alert(
                labels={"alertname": "DiskFull", "dev": "sda1"},
                starts_at=ts - timedelta(minutes=5),
                ends_at=ts - timedelta(minutes=4),
            ),
            Alert(
                labels={"alertname": "OutOfMemory", "dev": "sda1"},
                starts_at=ts - timedelta(minutes=2),
                ends_at=ts - timedelta(minutes=1),
            ),
            Alert(
                labels={"alertname": "DiskFull", "dev": "sda2"},
                starts_at=ts - timedelta(minutes=2),
                ends_at=ts - timedelta(minutes=3),
            ),
            Alert(
                labels={"alertname": "OutOfMemory", "dev": "sda2"},
                starts_at=ts - timedelta(minutes=5),
                ends_at=ts - timedelta(minutes=2),
            ),
        ]
    )
    alerts.sort()
    assert [str(a) for a in alerts] == [
        "DiskFull[5ffe595][resolved]",
        "InternalError[09cfd46][resolved]",
        "OutOfMemory[d43a602][resolved]",
        "DiskFull[5ff4595][resolved]",
        "OutOfMemory[d444602][resolved]",
    ]


def test_alerts_status():
    firing = Alerts(
        [
            Alert(labels={"foo": "bar"}, starts_at=datetime.now(timezone.utc)),
            Alert(labels={"bar": "baz"}, starts_at=datetime.now(timezone.utc)),
        ]
    )
    assert firing.has_firing() is True
    assert firing.status() == AlertStatus.FIRING

    ts = datetime.now(timezone.utc)
    resolved = Alerts(
        [
            Alert(labels={"foo": "bar"}, starts_at=ts - timedelta(minutes=1), ends_at=ts),
            Alert(labels={"bar": "baz"}, starts_at=ts - timedelta(minutes=1), ends_at=ts),
        ]
    )
    assert resolved.has_firing() is False
    assert resolved.status() == AlertStatus.RESOLVED