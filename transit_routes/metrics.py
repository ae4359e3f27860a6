# File: transit_routes/metrics.py

from prometheus_client import Counter, Gauge, Histogram

METRICS = {
    "entities_total": Gauge(
        "transit_routes_entities_total", "Entities in the most recent planning run"
    ),
    "planning_latency": Histogram(
        "transit_routes_planning_duration_ms",
        "Time taken to build a routing plan in milliseconds",
        buckets=(1, 5, 10, 50, 100, 250, 500, 1000),
    ),
    "plan_actions": Counter(
        "transit_routes_plan_actions_total",
        "Count of routing actions emitted",
        ["action_type"],
    ),
    "planning_failures": Counter(
        "transit_routes_planning_failures_total",
        "Planning runs rejected by the engine",
        ["error"],
    ),
    "api_requests": Counter(
        "transit_routes_api_requests_total",
        "Total REST API requests",
        ["method", "endpoint"],
    ),
}
