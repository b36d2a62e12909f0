"""Prometheus metrics for ledger calls, transaction outcomes, and session actions"""

from prometheus_client import Counter, Histogram

# Ledger RPC metrics
rpc_call_counter = Counter(
    "rusd_rpc_calls_total",
    "Soroban RPC operations issued",
    ["operation", "outcome"],  # ok | error
)

transaction_outcome_counter = Counter(
    "rusd_transaction_outcomes_total",
    "Terminal outcomes of submitted contract calls",
    ["method", "outcome"],  # success | failed | timed_out | rejected
)

finality_poll_histogram = Histogram(
    "rusd_finality_poll_attempts",
    "Status checks needed before a transaction reached a terminal outcome",
    buckets=[1, 2, 3, 5, 8, 13, 20],
)

# Balance metrics
balance_refresh_counter = Counter(
    "rusd_balance_refresh_total",
    "Balance refresh cycles",
    ["outcome"],  # published | failed | discarded
)

# Session metrics
action_counter = Counter(
    "rusd_actions_total",
    "State-changing actions requested",
    ["action", "outcome"],  # succeeded | failed | rejected
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_action(action: str, succeeded: bool, rejected: bool = False) -> None:
    """Record orchestrator action outcome"""
    if rejected:
        outcome = "rejected"
    else:
        outcome = "succeeded" if succeeded else "failed"
    action_counter.labels(action=action, outcome=outcome).inc()
