import time

from webapp.api import testing


async def test_root_serves_html_listing_endpoints(api_client) -> None:
    resp = await api_client.get("/")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert "/api/users/:id" in resp.text
    assert "/metrics" in resp.text


async def test_health_reports_ok(api_client) -> None:
    resp = await api_client.get("/api/health")
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["status"] == "ok"
    assert payload["uptime"] >= 0
    assert payload["version"] == "1.0.0"
    assert payload["timestamp"].endswith("Z")


async def test_error_endpoint_always_fails(api_client) -> None:
    for _ in range(5):
        resp = await api_client.get("/api/error")
        assert resp.status_code == 500
        payload = resp.json()
        assert payload["error"] == "This is an intentional error for testing"
        assert set(payload) == {"error", "timestamp"}


async def test_slow_endpoint_waits_for_reported_delay(api_client, monkeypatch) -> None:
    monkeypatch.setattr(testing, "_pick_delay_ms", lambda: 1000)

    start = time.perf_counter()
    resp = await api_client.get("/api/slow")
    elapsed = time.perf_counter() - start

    assert resp.status_code == 200
    payload = resp.json()
    assert payload["message"] == "This was intentionally slow"
    assert payload["delay"] == 1000
    assert 1.0 <= elapsed < 4.0


def test_slow_delay_stays_in_range() -> None:
    delays = {testing._pick_delay_ms() for _ in range(500)}
    assert min(delays) >= 1000
    assert max(delays) < 4000


async def test_unknown_path_returns_404(api_client) -> None:
    resp = await api_client.get("/api/nope")
    assert resp.status_code == 404
