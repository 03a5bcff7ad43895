# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Prometheus metrics: single source of truth for all metric objects.
Imported by stores, services and middleware. Never instantiated in controllers.
"""

from prometheus_client import Counter, Gauge, Histogram

# ── HTTP Metrics (used by middleware) ──
REQUEST_COUNT = Counter(
    "webring_requests_total",
    "Total HTTP requests to the webring service",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "webring_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)
HTTP_ERRORS = Counter(
    "webring_http_errors_total",
    "Total HTTP error responses",
    ["method", "endpoint", "status"],
)

# ── Storage Metrics ──
STORE_OPERATIONS = Counter(
    "webring_store_operations_total",
    "Backing store reads and writes",
    ["store", "operation", "outcome"],
)
CACHE_LOOKUPS = Counter(
    "webring_cache_lookups_total",
    "Document cache lookups",
    ["document", "result"],
)

# ── Business Metrics (updated by service layer only) ──
NAVIGATIONS = Counter(
    "webring_navigations_total",
    "Ring navigation requests",
    ["direction", "resolved"],
)
APPLICATIONS_SUBMITTED = Counter(
    "webring_applications_submitted_total",
    "Total applications submitted",
)
APPLICATIONS_REVIEWED = Counter(
    "webring_applications_reviewed_total",
    "Total applications approved or rejected",
    ["outcome"],
)
RING_MEMBERS = Gauge(
    "webring_members",
    "Number of participants in the ring",
)
