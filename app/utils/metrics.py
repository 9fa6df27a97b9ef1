"""
Prometheus-based metrics for production monitoring.
Provides /metrics endpoint for scraping.
"""
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import APIRouter, Response


# Counters
script_deliveries_total = Counter(
    "script_deliveries_total",
    "Script loader requests by outcome",
    ["outcome"],  # delivered, invalid, not_found, identity_required, not_whitelisted, expired, store_error, error
)

whitelist_deactivations_total = Counter(
    "whitelist_deactivations_total",
    "Expired whitelist entries deactivated on access",
)

store_errors_total = Counter(
    "store_errors_total",
    "Database operation failures",
    ["operation"],
)

# Histograms
script_delivery_duration_seconds = Histogram(
    "script_delivery_duration_seconds",
    "Script loader request duration",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5],
)


# Metrics endpoint router
router = APIRouter()


@router.get("/metrics")
def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint for scraping."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
