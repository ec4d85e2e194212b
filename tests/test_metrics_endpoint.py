import httpx
from starlette.testclient import TestClient

from cryptohelper.app import create_app
from cryptohelper.config import HelperConfig


def test_metrics_exposes_helper_counters():
    tsa = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(201, content=b"X")))
    client = TestClient(create_app(HelperConfig(tsa_url="http://tsa.test/ts"), tsa_client=tsa))
    client.get("/generate-payloads")
    client.post("/get-timestamp", content=b"sig")
    r = client.get("/metrics")
    assert r.status_code == 200
    text = r.text
    assert 'cryptohelper_payloads_total{result="ok"}' in text
    assert "cryptohelper_tsa_forward_total" in text
    assert "cryptohelper_tsa_latency_ms_bucket" in text


def test_tsa_forward_metric_carries_upstream_code():
    tsa = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(201, content=b"X")))
    client = TestClient(create_app(HelperConfig(tsa_url="http://tsa.test/ts"), tsa_client=tsa))
    assert client.post("/get-timestamp", content=b"sig").status_code == 200
    text = client.get("/metrics").text
    assert 'cryptohelper_tsa_forward_total{code="201",result="ok"}' in text or \
        'cryptohelper_tsa_forward_total{result="ok",code="201"}' in text
