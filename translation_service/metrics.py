import time
from functools import wraps

from flask import Response, request
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest

# API Metrics
api_request_duration_seconds = Histogram(
    "translation_service_api_request_duration_seconds", "API request duration", ["endpoint", "method"]
)

api_requests_total = Counter(
    "translation_service_api_requests_total", "Total API requests", ["endpoint", "method", "status_code"]
)

# Database Metrics
db_query_duration_seconds = Histogram(
    "translation_service_db_query_duration_seconds", "Database query duration", ["operation"]
)

db_query_total = Counter("translation_service_db_queries_total", "Total database queries", ["operation", "status"])

db_translations_total = Gauge("translation_service_translations_total", "Total number of translations")
db_tags_total = Gauge("translation_service_tags_total", "Total number of tags")

# Export cache lookups: hit, miss or error (backend failure, served uncached)
export_cache_lookups_total = Counter(
    "translation_service_export_cache_lookups_total", "Export cache lookups", ["result"]
)

export_cache_invalidations_total = Counter(
    "translation_service_export_cache_invalidations_total", "Export cache slice invalidations"
)


def init_metrics(app, count_records=None):
    """
    Register /api/metrics and request timing hooks.

    `count_records` returns (translations, tags) and refreshes the row gauges
    on each scrape.
    """

    @app.route("/api/metrics")
    def metrics():
        if count_records is not None:
            update_db_metrics(count_records)
        return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)

    @app.before_request
    def before_request():
        request.start_time = time.time()

    @app.after_request
    def after_request(response):
        duration = time.time() - getattr(request, "start_time", time.time())
        api_request_duration_seconds.labels(endpoint=request.endpoint or "unknown", method=request.method).observe(
            duration
        )
        api_requests_total.labels(
            endpoint=request.endpoint or "unknown", method=request.method, status_code=response.status_code
        ).inc()
        return response

    app.logger.info("Prometheus metrics initialized at /api/metrics")


def update_db_metrics(count_records):
    translations, tags = count_records()
    db_translations_total.set(translations)
    db_tags_total.set(tags)


def track_db_query(operation):
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                result = func(*args, **kwargs)
                db_query_total.labels(operation=operation, status="success").inc()
                return result
            except Exception:
                db_query_total.labels(operation=operation, status="error").inc()
                raise
            finally:
                duration = time.time() - start_time
                db_query_duration_seconds.labels(operation=operation).observe(duration)

        return wrapper

    return decorator
