from prometheus_client import Counter, Histogram, Gauge
from fastapi import Request
from fastapi.routing import APIRoute
import time
import logging

logger = logging.getLogger(__name__)

# ============================================================================
# HTTP Metrics
# ============================================================================

# Request counter by method, endpoint, and status
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status_code']
)

# Request duration histogram
http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request latency in seconds',
    ['method', 'endpoint'],
    buckets=(0.01, 0.025, 0.05, 0.075, 0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0, 7.5, 10.0)
)

# Request size
http_request_size_bytes = Histogram(
    'http_request_size_bytes',
    'HTTP request size in bytes',
    ['method', 'endpoint']
)

# Active requests gauge
http_requests_in_progress = Gauge(
    'http_requests_in_progress',
    'Number of HTTP requests in progress',
    ['method', 'endpoint']
)

# ============================================================================
# Application-Specific Metrics
# ============================================================================

# Record store operations
db_operations_total = Counter(
    'db_operations_total',
    'Total record store operations',
    ['operation_type', 'collection', 'status']
)

db_operation_duration_seconds = Histogram(
    'db_operation_duration_seconds',
    'Record store operation duration in seconds',
    ['operation_type', 'collection']
)

# Name lookups
name_lookups_total = Counter(
    'name_lookups_total',
    'Total name lookups',
    ['outcome', 'matched_by']  # outcome: eligible, history, none, invalid, error
)

# Quiz submissions
quiz_submissions_total = Counter(
    'quiz_submissions_total',
    'Total quiz result submissions',
    ['outcome', 'passed']  # outcome: saved, invalid, error
)

# ============================================================================
# Middleware Class
# ============================================================================

class PrometheusMiddleware:
    """
    FastAPI middleware to collect Prometheus metrics
    """

    async def __call__(self, request: Request, call_next):
        # Extract route pattern (e.g., /api/v1/safety-training/check-name)
        route = request.url.path
        for route_obj in request.app.routes:
            if isinstance(route_obj, APIRoute):
                match = route_obj.path_regex.match(route)
                if match:
                    route = route_obj.path
                    break

        method = request.method

        http_requests_in_progress.labels(method=method, endpoint=route).inc()

        request_size = int(request.headers.get('content-length', 0))
        http_request_size_bytes.labels(method=method, endpoint=route).observe(request_size)

        start_time = time.time()

        try:
            response = await call_next(request)

            duration = time.time() - start_time
            http_requests_total.labels(
                method=method,
                endpoint=route,
                status_code=response.status_code
            ).inc()

            http_request_duration_seconds.labels(
                method=method,
                endpoint=route
            ).observe(duration)

            return response

        except Exception as e:
            http_requests_total.labels(
                method=method,
                endpoint=route,
                status_code=500
            ).inc()

            logger.error(f"Request failed: {str(e)}")
            raise

        finally:
            http_requests_in_progress.labels(method=method, endpoint=route).dec()


# ============================================================================
# Helper Functions for Application Metrics
# ============================================================================

def track_db_operation(operation_type: str, collection: str, duration: float, success: bool):
    """Track record store operation metrics"""
    status = "success" if success else "error"
    db_operations_total.labels(
        operation_type=operation_type,
        collection=collection,
        status=status
    ).inc()

    db_operation_duration_seconds.labels(
        operation_type=operation_type,
        collection=collection
    ).observe(duration)


def track_name_lookup(outcome: str, matched_by: str = "none"):
    """Track name lookups"""
    name_lookups_total.labels(outcome=outcome, matched_by=matched_by).inc()


def track_quiz_submission(outcome: str, passed: bool = None):
    """Track quiz submissions"""
    passed_label = "unknown" if passed is None else str(passed).lower()
    quiz_submissions_total.labels(outcome=outcome, passed=passed_label).inc()
