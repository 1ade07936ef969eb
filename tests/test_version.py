import pytest

from promcommon import version


@pytest.fixture
def build(monkeypatch):
    monkeypatch.setattr(version, "VERSION", "1.2.3")
    monkeypatch.setattr(version, "BRANCH", "main")
    monkeypatch.setattr(version, "REVISION", "abc123")
    monkeypatch.setattr(version, "BUILD_USER", "builder")
    monkeypatch.setattr(version, "BUILD_DATE", "20210101")


def test_info(build):
    assert version.info() == "(version=1.2.3, branch=main, revision=abc123)"


def test_build_context(build):
    text = version.build_context()
    assert text.startswith("(python=" + version.PYTHON_VERSION)
    assert "user=builder" in text
    assert text.endswith("date=20210101)")


def test_print_version_first_line(build):
    lines = version.print_version("prog").splitlines()
    assert lines[0] == "prog, version 1.2.3 (branch: main, revision: abc123)"


def test_print_version_details(build):
    text = version.print_version("prog")
    lines = text.splitlines()
    assert len(lines) == 5
    assert text == text.strip()
    assert lines[1].split() == ["build", "user:", "builder"]
    assert lines[2].split() == ["build", "date:", "20210101"]
    assert lines[3].split()[-1] == version.PYTHON_VERSION
    assert "/" in lines[4]