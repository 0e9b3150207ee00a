"""Prometheus metrics for monitoring"""
from prometheus_client import Counter, Histogram, CollectorRegistry

registry = CollectorRegistry()

request_count = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status'],
    registry=registry
)

request_duration = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint'],
    registry=registry
)

quotes_computed = Counter(
    'quotes_computed_total',
    'Total priced quotes',
    ['service_type'],
    registry=registry
)

quotes_incomplete = Counter(
    'quotes_incomplete_total',
    'Quote requests answered with the zero result',
    registry=registry
)

quote_monthly_price = Histogram(
    'quote_monthly_price',
    'Monthly price of computed quotes',
    ['service_type'],
    buckets=(500, 750, 1000, 1250, 1500, 2000, 3000, 5000, 10000),
    registry=registry
)


def record_quote(service_type, monthly_price: int) -> None:
    """Count a quote outcome; a zero price means the answers were incomplete."""
    if monthly_price <= 0 or service_type is None:
        quotes_incomplete.inc()
        return
    label = str(service_type)
    quotes_computed.labels(service_type=label).inc()
    quote_monthly_price.labels(service_type=label).observe(monthly_price)


def get_metrics_text() -> str:
    """Generate Prometheus metrics in text format"""
    from prometheus_client import generate_latest
    return generate_latest(registry).decode('utf-8')
