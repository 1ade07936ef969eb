from datetime import datetime, timedelta

import pytest

from promcommon.silence import Matcher, Silence


@pytest.mark.parametrize(
    "matcher",
    [Matcher("name", "value"), Matcher("name", "value", True)],
)
def test_matcher_valid(matcher):
    assert matcher.validate() is None


@pytest.mark.parametrize(
    "matcher,err",
    [
        (Matcher("name!", "value"), "invalid name"),
        (Matcher("", "value"), "invalid name"),
        (Matcher("name", "value\udcff"), "invalid value"),
        (Matcher("name", ""), "invalid value"),
        (Matcher("name", "(", True), "invalid regular expression"),
    ],
)
def test_matcher_invalid(matcher, err):
    with pytest.raises(ValueError, match=err):
        matcher.validate()


def test_matcher_from_json():
    m = Matcher.from_json('{"name":"job","value":"a.*","isRegex":true}')
    assert m == Matcher("job", "a.*", True)
    with pytest.raises(ValueError, match="must not be empty"):
        Matcher.from_json('{"name":"","value":"x"}')
    with pytest.raises(ValueError):
        Matcher.from_json('{"name":"a","value":"(","isRegex":true}')


TS = datetime(2020, 1, 1, 12, 0, 0)


def _silence(**kw):
    base = dict(
        matchers=[Matcher("name", "value")],
        starts_at=TS,
        ends_at=TS,
        created_at=TS,
        created_by="name",
        comment="comment",
    )
    base.update(kw)
    return Silence(**base)


def test_silence_valid():
    assert _silence().validate() is None
    many = [Matcher("name", "value")] * 3 + [Matcher("name", "value", True)]
    assert _silence(matchers=many).validate() is None


@pytest.mark.parametrize(
    "kw,err",
    [
        ({"ends_at": TS - timedelta(minutes=1)}, "start time must be before end time"),
        ({"ends_at": None}, "end time missing"),
        ({"starts_at": None}, "start time missing"),
        ({"matchers": [Matcher("!name", "value")]}, "invalid matcher"),
        ({"comment": ""}, "comment missing"),
        ({"created_at": None}, "creation timestamp missing"),
        ({"created_by": ""}, "creator information missing"),
        ({"matchers": [], "created_by": ""}, "at least one matcher required"),
    ],
)
def test_silence_invalid(kw, err):
    with pytest.raises(ValueError, match=err):
        _silence(**kw).validate()