"""
Performance monitoring middleware for request timing and metrics collection.
Timings are kept in a PerformanceMetrics collector that the /metrics endpoint reads.
"""

from typing import Callable, Dict, Any, List, Optional
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
from collections import defaultdict, deque
from datetime import datetime, timezone
import logging
import time
import psutil

logger = logging.getLogger(__name__)

UNMATCHED_ROUTE = "<unmatched>"


def system_snapshot() -> Dict[str, Any]:
    """Current CPU and memory usage of the host and this process."""
    memory = psutil.virtual_memory()
    process = psutil.Process()
    process_memory = process.memory_info()
    return {
        "system": {
            "cpu_percent": psutil.cpu_percent(interval=None),
            "memory_percent": memory.percent,
            "memory_total": memory.total,
            "memory_available": memory.available,
            "memory_used": memory.used,
        },
        "process": {
            "memory_rss": process_memory.rss,
            "memory_vms": process_memory.vms,
            "cpu_percent": process.cpu_percent(),
            "num_threads": process.num_threads(),
            "create_time": process.create_time(),
        },
    }


class PerformanceMetrics:
    """Per-endpoint timing statistics with a bounded history of recent requests."""

    def __init__(self, slow_request_threshold: float = 1.0, metrics_window_size: int = 1000):
        self.slow_request_threshold = slow_request_threshold
        self.request_metrics: Dict[str, deque] = defaultdict(lambda: deque(maxlen=metrics_window_size))
        self.endpoint_stats: Dict[str, Dict[str, Any]] = defaultdict(lambda: {
            "total_requests": 0,
            "total_time": 0.0,
            "min_time": float('inf'),
            "max_time": 0.0,
            "error_count": 0,
            "last_request": None
        })
        self.started_at = datetime.now(timezone.utc)
        self.total_requests = 0
        self.total_errors = 0

    def record(self, method: str, path: str, status_code: int, processing_time: float, cpu_time: float) -> None:
        endpoint = f"{method} {path}"
        now = datetime.now(timezone.utc)

        self.request_metrics[endpoint].append({
            "timestamp": now,
            "processing_time": processing_time,
            "cpu_time": cpu_time,
            "status_code": status_code,
        })

        stats = self.endpoint_stats[endpoint]
        stats["total_requests"] += 1
        stats["total_time"] += processing_time
        stats["min_time"] = min(stats["min_time"], processing_time)
        stats["max_time"] = max(stats["max_time"], processing_time)
        stats["last_request"] = now

        self.total_requests += 1
        if status_code >= 400:
            stats["error_count"] += 1
            self.total_errors += 1

    def summary(self) -> Dict[str, Any]:
        endpoints = {}
        for endpoint, stats in self.endpoint_stats.items():
            if stats["total_requests"] == 0:
                continue
            endpoints[endpoint] = {
                "total_requests": stats["total_requests"],
                "average_time": round(stats["total_time"] / stats["total_requests"], 3),
                "min_time": round(stats["min_time"], 3),
                "max_time": round(stats["max_time"], 3),
                "error_count": stats["error_count"],
                "error_rate": round(stats["error_count"] / stats["total_requests"], 3),
                "last_request": stats["last_request"].isoformat() if stats["last_request"] else None
            }

        return {
            "total_requests": self.total_requests,
            "total_errors": self.total_errors,
            "uptime_seconds": round((datetime.now(timezone.utc) - self.started_at).total_seconds(), 1),
            "endpoints": endpoints,
        }

    def recent_slow_requests(self, limit: int = 10) -> List[Dict[str, Any]]:
        """Slowest requests over the threshold, slowest first."""
        slow_requests = [
            {
                "endpoint": endpoint,
                "timestamp": metric["timestamp"].isoformat(),
                "processing_time": round(metric["processing_time"], 3),
                "status_code": metric["status_code"],
            }
            for endpoint, metrics in self.request_metrics.items()
            for metric in metrics
            if metric["processing_time"] > self.slow_request_threshold
        ]
        slow_requests.sort(key=lambda item: item["processing_time"], reverse=True)
        return slow_requests[:limit]

    def reset(self) -> None:
        self.request_metrics.clear()
        self.endpoint_stats.clear()
        self.total_requests = 0
        self.total_errors = 0


class PerformanceMonitoringMiddleware(BaseHTTPMiddleware):
    """
    Times every request, adds X-Processing-Time and feeds the metrics collector.
    Requests slower than the collector's threshold are logged at WARNING.
    """

    def __init__(
        self,
        app: ASGIApp,
        metrics: Optional[PerformanceMetrics] = None,
        enable_detailed_logging: bool = True
    ):
        super().__init__(app)
        self.metrics = metrics or PerformanceMetrics()
        self.enable_detailed_logging = enable_detailed_logging

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        start_cpu_time = time.process_time()
        request_id = getattr(request.state, "request_id", "unknown")

        try:
            response = await call_next(request)
        except Exception as exc:
            processing_time = time.perf_counter() - start_time
            logger.error(
                f"Request error [{request_id}]: {type(exc).__name__} - {exc} "
                f"(processing_time: {processing_time:.3f}s)",
                extra={"request_id": request_id, "path": request.url.path, "method": request.method},
                exc_info=True
            )
            self.metrics.record(request.method, self._route_path(request), 500, processing_time, 0.0)
            raise

        processing_time = time.perf_counter() - start_time
        cpu_time = time.process_time() - start_cpu_time

        self.metrics.record(request.method, self._route_path(request), response.status_code, processing_time, cpu_time)
        self._log(request, response, request_id, processing_time)

        response.headers["X-Processing-Time"] = f"{processing_time:.3f}"
        response.headers["X-CPU-Time"] = f"{cpu_time:.3f}"
        return response

    @staticmethod
    def _route_path(request: Request) -> str:
        """
        Path template of the matched route, e.g. /api/v1/properties/{identifier}.
        The router fills scope["route"] while handling the request, so this is
        read after call_next. Requests that matched no route share one key.
        """
        route = request.scope.get("route")
        return getattr(route, "path", None) or UNMATCHED_ROUTE

    def _log(self, request: Request, response: Response, request_id: str, processing_time: float) -> None:
        endpoint = f"{request.method} {request.url.path}"
        if processing_time > self.metrics.slow_request_threshold:
            logger.warning(
                f"SLOW REQUEST [{request_id}]: {endpoint} - {processing_time:.3f}s",
                extra={"request_id": request_id, "status_code": response.status_code}
            )
        elif self.enable_detailed_logging:
            logger.debug(f"Request [{request_id}]: {endpoint} - {processing_time:.3f}s")


# Shared by the middleware registered in app.main and the monitoring endpoints
performance_metrics = PerformanceMetrics(slow_request_threshold=2.0)
