import base64
import hashlib
import json

import httpx
import pytest

from cryptohelper.errors import ConfigError, TsaMarshalError, TsaNetworkError, TsaUpstreamError
from cryptohelper.tsa.forwarder import TimestampForwarder, make_nonce

TSA_URL = "http://tsa.test/api/v1/timestamp"


def _forwarder(handler):
    return TimestampForwarder(TSA_URL, client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_nonce_is_non_negative_63_bit():
    for _ in range(50):
        n = make_nonce()
        assert 0 <= n < 2**63


def test_build_request_hashes_signature():
    fw = _forwarder(lambda r: httpx.Response(200))
    req = fw.build_request(b"signature-bytes")
    expected = base64.b64encode(hashlib.sha256(b"signature-bytes").digest()).decode()
    assert req.artifact_hash == expected
    assert req.certificates is True
    assert req.hash_algorithm == "sha256"
    dumped = json.loads(req.model_dump_json(by_alias=True))
    assert set(dumped) == {"artifactHash", "certificates", "hashAlgorithm", "nonce"}


def test_empty_url_is_config_error():
    with pytest.raises(ConfigError):
        TimestampForwarder("")


def test_forward_returns_reply_bytes():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, content=b"\x30\x82token")

    reply = _forwarder(handler).forward(b"sig")
    assert reply.content == b"\x30\x82token"
    assert reply.status_code == 200
    assert len(seen) == 1
    assert seen[0].method == "POST"
    assert seen[0].headers["content-type"] == "application/json"


def test_forward_upstream_failure():
    fw = _forwarder(lambda r: httpx.Response(404, text="no such tsa"))
    with pytest.raises(TsaUpstreamError) as exc:
        fw.forward(b"sig")
    assert exc.value.upstream_status == 404
    assert exc.value.status_code == 502
    assert "no such tsa" in str(exc.value)


def test_forward_network_failure():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TsaNetworkError) as exc:
        _forwarder(handler).forward(b"sig")
    assert "network error" in str(exc.value)


def test_close_leaves_injected_client_open():
    client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
    TimestampForwarder(TSA_URL, client=client).close()
    assert client.is_closed is False


def test_forward_reports_created_status():
    reply = _forwarder(lambda r: httpx.Response(201, content=b"tsr")).forward(b"sig")
    assert reply.status_code == 201


class Unserializable:
    def model_dump_json(self, by_alias=False):
        raise ValueError("nonce out of range")


def test_marshal_failure_is_500_without_network_call(monkeypatch):
    seen = []
    fw = _forwarder(lambda r: seen.append(r) or httpx.Response(200))
    monkeypatch.setattr(fw, "build_request", lambda signature: Unserializable())
    with pytest.raises(TsaMarshalError) as exc:
        fw.forward(b"sig")
    assert exc.value.status_code == 500
    assert "marshalling TSA request" in str(exc.value)
    assert seen == []
