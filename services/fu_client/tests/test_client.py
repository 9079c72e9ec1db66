import datetime as dt
import io

import httpx
import pytest

from fu_client.client import Client, UploadError
from fu_client.schemas import RemoteFile

FILE_JSON = {
    "id": 1,
    "name": "Ab3de.txt",
    "created_at": "2024-01-01T12:00:00Z",
    "expires_at": "2024-01-01T13:00:00Z",
}


def test_addr_must_be_url():
    with pytest.raises(ValueError):
        Client("localhost:8080")
    with pytest.raises(ValueError):
        Client("")


def test_addr_gets_trailing_slash():
    assert Client("https://fu.example.com").addr == "https://fu.example.com/"
    assert Client("https://fu.example.com/x").addr == "https://fu.example.com/x/"
    assert Client("https://fu.example.com/").addr == "https://fu.example.com/"


def test_upload_sends_form_and_token():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["headers"] = request.headers
        seen["body"] = request.read()
        return httpx.Response(200, json=FILE_JSON)

    c = Client("http://fu.test", "tok", transport=httpx.MockTransport(handler))
    remote = c.upload(io.BytesIO(b"hello"), "note.txt", dt.timedelta(minutes=90))

    assert seen["method"] == "POST"
    assert seen["url"] == "http://fu.test/"
    assert seen["headers"]["authentication"] == "fu token=tok"
    assert seen["headers"]["user-agent"] == "fu"
    assert seen["headers"]["content-type"].startswith("multipart/form-data")
    assert b'filename="note.txt"' in seen["body"]
    assert b"hello" in seen["body"]
    assert b"1h30m0s" in seen["body"]

    assert remote.name == "Ab3de.txt"
    assert remote.expires_at - remote.created_at == dt.timedelta(hours=1)
    assert c.url(remote) == "http://fu.test/Ab3de.txt"


def test_upload_error_carries_body():
    transport = httpx.MockTransport(lambda r: httpx.Response(403, text="Forbidden\n"))
    c = Client("http://fu.test", transport=transport)
    with pytest.raises(UploadError, match="Forbidden"):
        c.upload(io.BytesIO(b"x"), "x", dt.timedelta(hours=1))


def test_connection_error_is_upload_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    c = Client("http://fu.test", transport=httpx.MockTransport(handler))
    with pytest.raises(UploadError):
        c.upload(io.BytesIO(b"x"), "x", dt.timedelta(hours=1))


def test_url_uses_name():
    c = Client("http://fu.test/files")
    assert c.url(RemoteFile(**FILE_JSON)) == "http://fu.test/files/Ab3de.txt"
