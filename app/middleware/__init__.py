"""
Middleware package: request validation and performance monitoring.
"""

from .validation import ValidationMiddleware
from .performance import PerformanceMonitoringMiddleware, PerformanceMetrics, performance_metrics

__all__ = [
    "ValidationMiddleware",
    "PerformanceMonitoringMiddleware",
    "PerformanceMetrics",
    "performance_metrics",
]
