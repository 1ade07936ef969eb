import pytest
from werkzeug.test import Client

from promcommon.server import static_file_server


@pytest.fixture
def client(tmp_path):
    for name in ["index.html", "test.js", "test.css", "test.png", "test.jpg", "test.gif"]:
        (tmp_path / name).write_bytes(b"content")
    return Client(static_file_server(str(tmp_path)))


@pytest.mark.parametrize(
    "path,content_type",
    [
        ("test.js", "application/javascript"),
        ("test.css", "text/css"),
        ("test.png", "image/png"),
        ("test.jpg", "image/jpeg"),
        ("test.gif", "image/gif"),
    ],
)
def test_content_type(client, path, content_type):
    resp = client.get("/" + path)
    assert resp.status_code == 200
    assert resp.headers["Content-Type"] == content_type
    assert resp.get_data() == b"content"


def test_missing_file(client):
    assert client.get("/nothing.js").status_code == 404


def test_traversal_rejected(client):
    assert client.get("/../etc/passwd").status_code == 404