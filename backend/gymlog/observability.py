"""Lightweight observability helpers (logging + metrics)."""

from __future__ import annotations

import json
import logging
import time
import uuid
from collections import defaultdict
from contextvars import ContextVar
from threading import Lock
from typing import Iterable, Protocol

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from gymlog.core.config import get_settings

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once for the process."""
    level = (level or get_settings().log_level).upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("gymlog").setLevel(level)


def get_request_id() -> str | None:
    """Return the current request id if set by middleware."""
    return request_id_ctx.get()


class MetricsBackend(Protocol):
    """Metrics backend interface."""

    def observe_request(
        self,
        method: str,
        path: str,
        status_code: int,
        duration_ms: float,
    ) -> None:
        ...

    def observe_transaction(
        self,
        operation: str,
        success: bool,
        duration_ms: float,
    ) -> None:
        ...

    def render_prometheus(self) -> str:
        ...


class MetricsCollector:
    """In-process metrics collector with Prometheus text output."""

    def __init__(self, buckets_ms: Iterable[int] | None = None) -> None:
        self._lock = Lock()
        self._request_counts: dict[tuple[str, str, str], int] = defaultdict(int)
        self._duration_sum_ms: dict[tuple[str, str], float] = defaultdict(float)
        self._duration_count: dict[tuple[str, str], int] = defaultdict(int)
        self._duration_buckets: dict[tuple[str, str], dict[str, int]] = defaultdict(
            lambda: defaultdict(int)
        )
        self._transaction_counts: dict[tuple[str, str], int] = defaultdict(int)
        self._transaction_duration_sum_ms: dict[str, float] = defaultdict(float)
        self._buckets_ms = list(buckets_ms or [5, 10, 25, 50, 100, 250, 500, 1000])

    def observe_request(
        self,
        method: str,
        path: str,
        status_code: int,
        duration_ms: float,
    ) -> None:
        """Record a single request observation."""
        count_key = (method, path, str(status_code))
        duration_key = (method, path)
        bucket_key = self._bucket_for(duration_ms)

        with self._lock:
            self._request_counts[count_key] += 1
            self._duration_sum_ms[duration_key] += duration_ms
            self._duration_count[duration_key] += 1
            self._duration_buckets[duration_key][bucket_key] += 1

    def observe_transaction(
        self,
        operation: str,
        success: bool,
        duration_ms: float,
    ) -> None:
        """Record the outcome of one store transaction."""
        status = "success" if success else "error"
        with self._lock:
            self._transaction_counts[(operation, status)] += 1
            self._transaction_duration_sum_ms[operation] += duration_ms

    def transaction_count(self, operation: str, success: bool = True) -> int:
        status = "success" if success else "error"
        with self._lock:
            return self._transaction_counts.get((operation, status), 0)

    def render_prometheus(self) -> str:
        """Render collected metrics in Prometheus text exposition format."""
        lines: list[str] = []
        with self._lock:
            lines.append("# TYPE http_requests_total counter")
            for (method, path, status), count in sorted(self._request_counts.items()):
                lines.append(
                    f'http_requests_total{{method="{method}",path="{path}",status="{status}"}} {count}'
                )

            lines.append("# TYPE http_request_duration_ms histogram")
            for (method, path), buckets in sorted(self._duration_buckets.items()):
                cumulative = 0
                for bound in self._buckets_ms:
                    cumulative += buckets.get(str(bound), 0)
                    lines.append(
                        f'http_request_duration_ms_bucket{{method="{method}",path="{path}",le="{bound}"}} {cumulative}'
                    )
                cumulative += buckets.get("+Inf", 0)
                lines.append(
                    f'http_request_duration_ms_bucket{{method="{method}",path="{path}",le="+Inf"}} {cumulative}'
                )
                lines.append(
                    f'http_request_duration_ms_sum{{method="{method}",path="{path}"}} '
                    f"{self._duration_sum_ms[(method, path)]:.3f}"
                )
                lines.append(
                    f'http_request_duration_ms_count{{method="{method}",path="{path}"}} '
                    f"{self._duration_count[(method, path)]}"
                )

            lines.append("# TYPE store_transactions_total counter")
            for (operation, status), count in sorted(self._transaction_counts.items()):
                lines.append(
                    f'store_transactions_total{{operation="{operation}",status="{status}"}} {count}'
                )
            lines.append("# TYPE store_transaction_duration_ms_sum counter")
            for operation, total in sorted(self._transaction_duration_sum_ms.items()):
                lines.append(
                    f'store_transaction_duration_ms_sum{{operation="{operation}"}} {total:.3f}'
                )

        return "\n".join(lines) + "\n"

    def _bucket_for(self, duration_ms: float) -> str:
        for bound in self._buckets_ms:
            if duration_ms <= bound:
                return str(bound)
        return "+Inf"


class NullMetrics:
    """Metrics backend that records nothing."""

    def observe_request(self, method: str, path: str, status_code: int, duration_ms: float) -> None:
        pass

    def observe_transaction(self, operation: str, success: bool, duration_ms: float) -> None:
        pass

    def render_prometheus(self) -> str:
        return ""


_metrics_backend: MetricsBackend | None = None


def get_metrics_backend() -> MetricsBackend:
    """Return a cached metrics backend instance."""
    global _metrics_backend
    if _metrics_backend is None:
        settings = get_settings()
        _metrics_backend = MetricsCollector() if settings.metrics_enabled else NullMetrics()
    return _metrics_backend


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Attach request_id, log request/response, and emit metrics."""

    def __init__(
        self,
        app: ASGIApp,
        metrics: MetricsBackend | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(app)
        self.metrics = metrics or get_metrics_backend()
        self.logger = logger or logging.getLogger("gymlog.request")

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = request_id_ctx.set(request_id)
        request.state.request_id = request_id

        start = time.perf_counter()
        response: Response | None = None
        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            status_code = response.status_code if response else 500

            if response is not None:
                response.headers["X-Request-ID"] = request_id

            route = request.scope.get("route")
            route_path = getattr(route, "path", None)
            # Normalize unmatched paths to avoid label cardinality explosion
            path = route_path or "/__unknown__"

            if self.metrics:
                self.metrics.observe_request(
                    request.method,
                    path,
                    status_code,
                    duration_ms,
                )

            log_payload = {
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "route": route_path,
                "status_code": status_code,
                "elapsed_ms": round(duration_ms, 2),
                "client": request.client.host if request.client else None,
            }
            self.logger.info(json.dumps(log_payload))
            request_id_ctx.reset(token)
