import io
import urllib.error
import urllib.request

import pytest

from w3.rpctest import Server

REQUEST = b'{"jsonrpc":"2.0","id":1,"method":"eth_chainId"}'
RESPONSE = b'{"jsonrpc":"2.0","id":1,"result":"0x1"}'

GOLDEN = (
    "// Comments and empty lines will be ignored.\n"
    "\n"
    "// Request starts with \">\".\n"
    "> " + REQUEST.decode() + "\n"
    "// Response starts with \"<\".\n"
    "< " + RESPONSE.decode() + "\n"
)


def _post(url, body):
    req = urllib.request.Request(
        url, data=body, method="POST", headers={"Content-Type": "application/json"}
    )
    with urllib.request.urlopen(req, timeout=5) as resp:
        return resp.status, resp.headers["Content-Type"], resp.read()


def test_serves_golden_response():
    with Server(GOLDEN) as srv:
        status, content_type, body = _post(srv.url, REQUEST)
    assert status == 200
    assert content_type == "application/json"
    assert body == RESPONSE


def test_serves_repeatedly():
    with Server(io.StringIO(GOLDEN)) as srv:
        first = _post(srv.url, REQUEST)[2]
        second = _post(srv.url, REQUEST)[2]
    assert first == second == RESPONSE


def test_crlf_and_bytes_golden():
    golden = GOLDEN.replace("\n", "\r\n").encode()
    with Server(golden) as srv:
        assert _post(srv.url, REQUEST)[2] == RESPONSE


def test_markers_trimmed_from_both_ends():
    with Server(">> abc >\n<  xyz <\n") as srv:
        assert _post(srv.url, b"abc")[2] == b"xyz"


def test_wrong_body_fails_on_close():
    srv = Server(GOLDEN)
    assert srv.url.startswith("http://")
    with pytest.raises(urllib.error.HTTPError) as exc:
        _post(srv.url, b"{}")
    assert exc.value.code == 500
    exc.value.close()
    with pytest.raises(AssertionError) as err:
        srv.close()
    assert "Invalid request body" in str(err.value)


def test_invalid_line():
    with pytest.raises(ValueError, match="Invalid line"):
        Server("x {}\n")


def test_from_file(tmp_path):
    path = tmp_path / "chain_id.golden"
    path.write_text(GOLDEN)
    with Server.from_file(path) as srv:
        assert _post(srv.url, REQUEST)[2] == RESPONSE


def test_close_is_idempotent():
    srv = Server(GOLDEN)
    url = srv.url
    assert url.startswith("http://")
    assert srv.close() is None
    assert srv.close() is None
    with pytest.raises(urllib.error.URLError):
        _post(url, REQUEST)