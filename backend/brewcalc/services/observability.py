from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from threading import Lock

# Requests that matched no route share one bucket so stray URLs cannot grow the table.
UNMATCHED_ROUTE = "<unmatched>"


@dataclass
class RouteStats:
    method: str
    route: str
    count: int = 0
    total_latency_ms: float = 0.0
    min_latency_ms: float | None = None
    max_latency_ms: float = 0.0
    status_codes: Counter[int] = field(default_factory=Counter)

    def record(self, duration_ms: float, status_code: int) -> None:
        self.count += 1
        self.total_latency_ms += duration_ms
        self.min_latency_ms = duration_ms if self.min_latency_ms is None else min(self.min_latency_ms, duration_ms)
        self.max_latency_ms = max(self.max_latency_ms, duration_ms)
        self.status_codes[status_code] += 1

    @property
    def client_errors(self) -> int:
        return sum(n for code, n in self.status_codes.items() if 400 <= code <= 499)

    @property
    def server_errors(self) -> int:
        return sum(n for code, n in self.status_codes.items() if code >= 500)

    @property
    def avg_latency_ms(self) -> float:
        return self.total_latency_ms / self.count if self.count else 0.0

    @property
    def error_rate(self) -> float:
        return (self.client_errors + self.server_errors) / self.count if self.count else 0.0

    def as_dict(self) -> dict[str, object]:
        return {
            "method": self.method,
            "path": self.route,
            "count": self.count,
            "avg_latency_ms": round(self.avg_latency_ms, 2),
            "min_latency_ms": round(self.min_latency_ms or 0.0, 2),
            "max_latency_ms": round(self.max_latency_ms, 2),
            "client_errors": self.client_errors,
            "server_errors": self.server_errors,
            "error_rate": round(self.error_rate, 4),
            "status_codes": {str(code): n for code, n in sorted(self.status_codes.items())},
        }


class ObservabilityTracker:
    """In-process request counters keyed by method and route template.

    ``/batches/1`` and ``/batches/2`` land in the same ``/batches/{batch_id}``
    bucket; requests no route matched are counted under ``UNMATCHED_ROUTE``.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._started_at = datetime.utcnow()
        self._routes: dict[tuple[str, str], RouteStats] = {}

    def reset(self) -> None:
        with self._lock:
            self._started_at = datetime.utcnow()
            self._routes = {}

    def record(
        self,
        *,
        method: str,
        route_template: str | None,
        status_code: int,
        duration_ms: float,
    ) -> None:
        key = (method, route_template or UNMATCHED_ROUTE)
        with self._lock:
            stats = self._routes.get(key)
            if stats is None:
                stats = self._routes[key] = RouteStats(method=key[0], route=key[1])
            stats.record(duration_ms=duration_ms, status_code=status_code)

    def snapshot(self) -> dict[str, object]:
        with self._lock:
            now = datetime.utcnow()
            routes = sorted(self._routes.values(), key=lambda item: (item.route, item.method))
            return {
                "generated_at": now,
                "uptime_seconds": int((now - self._started_at).total_seconds()),
                "total_requests": sum(stats.count for stats in routes),
                "total_client_errors": sum(stats.client_errors for stats in routes),
                "total_server_errors": sum(stats.server_errors for stats in routes),
                "routes": [stats.as_dict() for stats in routes],
            }


observability_tracker = ObservabilityTracker()
