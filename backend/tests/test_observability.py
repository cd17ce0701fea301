import pytest

from brewcalc.services.observability import UNMATCHED_ROUTE, ObservabilityTracker


def test_requests_are_grouped_by_route_template() -> None:
    tracker = ObservabilityTracker()
    tracker.record(method="GET", route_template="/api/v1/batches/{batch_id}", status_code=200, duration_ms=10.0)
    tracker.record(method="GET", route_template="/api/v1/batches/{batch_id}", status_code=404, duration_ms=30.0)
    tracker.record(method="PATCH", route_template="/api/v1/batches/{batch_id}", status_code=200, duration_ms=5.0)

    snapshot = tracker.snapshot()
    routes = {(route["method"], route["path"]): route for route in snapshot["routes"]}

    detail = routes[("GET", "/api/v1/batches/{batch_id}")]
    assert detail["count"] == 2
    assert detail["avg_latency_ms"] == 20.0
    assert detail["min_latency_ms"] == 10.0
    assert detail["max_latency_ms"] == 30.0
    assert detail["status_codes"] == {"200": 1, "404": 1}
    assert detail["client_errors"] == 1
    assert detail["error_rate"] == 0.5
    assert routes[("PATCH", "/api/v1/batches/{batch_id}")]["count"] == 1
    assert snapshot["total_requests"] == 3
    assert snapshot["total_client_errors"] == 1


def test_unmatched_requests_share_one_bucket() -> None:
    tracker = ObservabilityTracker()
    for _ in range(3):
        tracker.record(method="GET", route_template=None, status_code=404, duration_ms=1.0)
    tracker.record(method="GET", route_template=None, status_code=500, duration_ms=1.0)

    snapshot = tracker.snapshot()

    assert len(snapshot["routes"]) == 1
    route = snapshot["routes"][0]
    assert route["path"] == UNMATCHED_ROUTE
    assert route["count"] == 4
    assert route["server_errors"] == 1
    assert route["error_rate"] == pytest.approx(1.0)
    assert snapshot["total_server_errors"] == 1


def test_reset_clears_routes() -> None:
    tracker = ObservabilityTracker()
    tracker.record(method="POST", route_template="/api/v1/batches", status_code=201, duration_ms=2.0)

    tracker.reset()
    snapshot = tracker.snapshot()

    assert snapshot["routes"] == []
    assert snapshot["total_requests"] == 0
    assert snapshot["uptime_seconds"] >= 0
