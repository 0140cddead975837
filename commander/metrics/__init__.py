# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Prometheus metrics — single source of truth for all metric objects.
Imported by stores, services and middleware. Never instantiated in controllers.
"""

from prometheus_client import Counter, Histogram

# ── HTTP Metrics (used by middleware) ──
REQUEST_COUNT = Counter(
    "commander_requests_total",
    "Total HTTP requests to the commander backend",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "commander_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)
HTTP_ERRORS = Counter(
    "commander_http_errors_total",
    "Total HTTP error responses",
    ["method", "endpoint", "status"],
)

# ── Business Metrics ──
STORE_INITIALIZATIONS = Counter(
    "commander_store_initializations_total",
    "Lazy store initialisations (table creation / seeding) that ran to completion",
    ["backend"],
)
PROFESSIONAL_UPDATES = Counter(
    "commander_professional_updates_total",
    "Professional update attempts by outcome",
    ["outcome"],
)
DRILLS_STARTED = Counter(
    "commander_drills_started_total",
    "Drills set as the active drill",
)
