"""Prometheus metrics for slot admission and generation dispatch."""

from prometheus_client import Counter, Histogram

SLOT_REQUESTS = Counter(
    "generation_slot_requests_total",
    "Calls to the remote generation slot allocator",
    ["outcome"],
)

SLOT_WAIT_SECONDS = Histogram(
    "generation_slot_wait_seconds",
    "Time spent waiting for a generation slot",
    buckets=[0.1, 0.5, 1, 2, 5, 10, 30, 60, 120, 300],
)

DISPATCH_ATTEMPTS = Counter(
    "generation_dispatch_attempts_total",
    "Authenticated generation requests sent",
    ["origin", "status"],
)
