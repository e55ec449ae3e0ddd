"""Prometheus metrics for travel providers and itinerary transfers."""

from prometheus_client import Counter, Histogram

# Travel provider metrics (geocoders, routing)
travel_provider_latency_ms = Histogram(
    "travel_provider_latency_ms",
    "Travel provider call latency in milliseconds",
    ["provider", "outcome"],
    buckets=[10, 50, 100, 200, 500, 1000, 2000, 4000, 8000],
)

travel_provider_errors_total = Counter(
    "travel_provider_errors_total",
    "Total travel provider errors",
    ["provider", "reason"],
)

# Export/import
itinerary_transfers_total = Counter(
    "itinerary_transfers_total",
    "Total itinerary exports and imports",
    ["direction", "outcome"],
)


class PrometheusTravelMetrics:
    """Prometheus-based travel provider metrics."""

    def record_latency(self, provider: str, outcome: str, latency_ms: float) -> None:
        """Record provider call latency."""
        travel_provider_latency_ms.labels(provider=provider, outcome=outcome).observe(latency_ms)

    def inc_error(self, provider: str, reason: str) -> None:
        """Increment error counter."""
        travel_provider_errors_total.labels(provider=provider, reason=reason).inc()


def record_transfer(direction: str, outcome: str) -> None:
    """Count one export or import attempt."""
    itinerary_transfers_total.labels(direction=direction, outcome=outcome).inc()
