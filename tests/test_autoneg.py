import pytest

from promcommon.autoneg import Accept, negotiate, parse_accept

CHROME = (
    "application/xml,application/xhtml+xml,text/html;q=0.9,"
    "text/plain;q=0.8,image/png,*/*;q=0.5"
)


@pytest.mark.parametrize(
    "alternatives, expected",
    [
        (["text/html", "image/png"], "image/png"),
        (["text/html", "text/plain", "text/n3"], "text/html"),
        (["text/n3", "text/plain"], "text/plain"),
        (["text/n3", "application/rdf+xml"], "text/n3"),
    ],
)
def test_negotiate_chrome(alternatives, expected):
    assert negotiate(CHROME, alternatives) == expected


def test_parse_accept_orders_clauses():
    clauses = parse_accept(CHROME)
    assert [f"{c.type}/{c.sub_type}" for c in clauses] == [
        "application/xml",
        "application/xhtml+xml",
        "image/png",
        "text/html",
        "text/plain",
        "*/*",
    ]


def test_parse_accept_quality_and_params():
    clauses = parse_accept("text/html; level=1; q=0.5")
    assert clauses == [Accept("text", "html", 0.5, {"level": "1"})]


def test_parse_accept_single_precision_quality():
    (clause,) = parse_accept("text/html;q=0.9")
    assert clause.q == pytest.approx(0.9, abs=1e-6)


def test_parse_accept_untrimmed_quality_is_zero():
    (clause,) = parse_accept("text/html;q= 0.5")
    assert clause.q == 0.0


def test_parse_accept_lone_star():
    assert parse_accept("*") == [Accept("*", "*")]


def test_parse_accept_skips_malformed():
    assert parse_accept("text, a/b/c, image/png") == [Accept("image", "png")]


def test_parse_accept_empty():
    assert parse_accept("") == []


def test_negotiate_subtype_wildcard():
    assert negotiate("text/*", ["image/png", "text/csv"]) == "text/csv"


def test_negotiate_no_match():
    assert negotiate("application/json", ["text/html"]) == ""


def test_negotiate_malformed_alternative():
    with pytest.raises(ValueError):
        negotiate("text/html", ["text"])


def test_negotiate_any_accepts_malformed_alternative():
    assert negotiate("*/*", ["text"]) == "text"