import pytest

from fileserver.http_request import parse_request, request_line

@pytest.mark.parametrize("path", ["/", "/x", "/site/index.html", "relative/file.txt", "../up", "/a/b/c"])
def test_path_between_get_and_http(path):
    assert parse_request(f"GET {path} HTTP".encode()) == path

def test_escaped_spaces_are_decoded():
    assert parse_request(b"GET /a%20b HTTP") == "/a b"

def test_other_escapes_are_kept():
    assert parse_request(b"GET /a%2Fb%21 HTTP") == "/a%2Fb%21"

def test_version_and_headers_are_ignored():
    assert parse_request(b"GET /x HTTP/1.1") == "/x"
    assert parse_request(b"GET /x HTTP/1.0\r\nHost: localhost\r\n\r\n") == "/x"

@pytest.mark.parametrize("raw", [
    b"GET HTTP",
    b"GETHTTP",
    b"PUT /x HTTP",
    b"GET /x ",
    b"GET /x HTP",
    b"a b c",
    b"",
    b"GET  /x HTTP",
    b"GET /x  HTTP",
    b"GET /a b HTTP",
    b"get /x HTTP",
])
def test_rejected(raw):
    assert parse_request(raw) is None

def test_invalid_utf8_is_replaced_not_rejected():
    assert parse_request(b"GET /caf\xe9 HTTP/1.0") == "/caf\ufffd"

def test_zero_padded_buffer():
    raw = b"GET /x HTTP\r\n" + b"\x00" * 100
    assert parse_request(raw) == "/x"

def test_request_line():
    assert request_line(b"GET /x HTTP/1.0\r\nHost: a\r\n\r\n") == "GET /x HTTP/1.0"
    assert request_line(b"a b c") == "a b c"
    assert request_line(b"") == ""
