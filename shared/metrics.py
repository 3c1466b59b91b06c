"""
Shared metrics configuration for the Condition Layout service.
"""

from prometheus_client import Counter, Histogram, Info, CollectorRegistry
from typing import Dict, Any, Optional


class MetricsCollector:
    """Centralized metrics collector for services."""
    
    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()
    
    def _setup_metrics(self):
        """Set up common metrics for the service."""
        
        # Service info
        self._metrics["service_info"] = Info(
            "service_info",
            "Service information",
            registry=self.registry
        )
        self._metrics["service_info"].info({
            "service": self.service_name,
            "version": "1.0.0"
        })
        
        # HTTP metrics
        self._metrics["http_requests_total"] = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status_code"],
            registry=self.registry
        )
        
        self._metrics["http_request_duration_seconds"] = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "endpoint"],
            registry=self.registry
        )
        
        # Health check metrics
        self._metrics["health_check_total"] = Counter(
            "health_check_total",
            "Total health check requests",
            ["status"],
            registry=self.registry
        )
        
        # Error metrics
        self._metrics["errors_total"] = Counter(
            "errors_total",
            "Total errors",
            ["error_type", "service"],
            registry=self.registry
        )
        
        self._setup_condition_metrics()
    
    def _setup_condition_metrics(self):
        """Set up condition evaluation metrics."""
        self._metrics["condition_evaluations_total"] = Counter(
            "condition_evaluations_total",
            "Total condition evaluations",
            ["match_type", "result"],
            registry=self.registry
        )
        
        self._metrics["condition_evaluation_duration_seconds"] = Histogram(
            "condition_evaluation_duration_seconds",
            "Condition evaluation duration in seconds",
            ["match_type"],
            registry=self.registry
        )
        
        self._metrics["not_ready_decisions_total"] = Counter(
            "not_ready_decisions_total",
            "Decisions skipped because the product context was not ready",
            registry=self.registry
        )
    
    def get_metric(self, name: str):
        """Get a metric by name."""
        return self._metrics.get(name)
    
    def record_http_request(self, method: str, endpoint: str, status_code: int, duration: float):
        """Record HTTP request metrics."""
        self._metrics["http_requests_total"].labels(
            method=method,
            endpoint=endpoint,
            status_code=str(status_code)
        ).inc()
        
        self._metrics["http_request_duration_seconds"].labels(
            method=method,
            endpoint=endpoint
        ).observe(duration)
    
    def record_health_check(self, status: str):
        """Record health check metrics."""
        self._metrics["health_check_total"].labels(status=status).inc()
    
    def record_error(self, error_type: str, service: Optional[str] = None):
        """Record error metrics."""
        service_name = service or self.service_name
        self._metrics["errors_total"].labels(error_type=error_type, service=service_name).inc()
    
    def record_evaluation(self, match_type: str, result: bool, duration: float):
        """Record a completed condition evaluation."""
        self._metrics["condition_evaluations_total"].labels(
            match_type=match_type,
            result=str(result).lower()
        ).inc()
        self._metrics["condition_evaluation_duration_seconds"].labels(
            match_type=match_type
        ).observe(duration)
    
    def record_not_ready(self):
        """Record a decision skipped on an incomplete context."""
        self._metrics["not_ready_decisions_total"].inc()


def get_metrics_collector(service_name: str, registry: Optional[CollectorRegistry] = None) -> MetricsCollector:
    """Get a metrics collector for a service."""
    return MetricsCollector(service_name, registry)
