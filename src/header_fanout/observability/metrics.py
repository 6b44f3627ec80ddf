"""Prometheus metrics for header fan-out.

Metrics include:

- Normalizer passes by outcome (noop, normalized, fanned_out, overflow)
- Values redistributed across case variants
- Values lost to capacity overflow

Examples:
    Recording a pass::

        from header_fanout.observability.metrics import record_pass

        report = normalizer.fanout(headers)
        record_pass(report)
"""

from prometheus_client import Counter

from header_fanout.models import FanoutReport

# Labels: outcome (noop, normalized, fanned_out, overflow)
passes_total = Counter(
    "header_fanout_passes_total",
    "Total number of header collections processed by the normalizer",
    ["outcome"],
)

values_total = Counter(
    "header_fanout_values_total",
    "Total number of target header values redistributed across case variants",
)

# Non-zero only under the "wrap" overflow policy
collisions_total = Counter(
    "header_fanout_collisions_total",
    "Total number of header values overwritten because case variants ran out",
)


def record_pass(report: FanoutReport) -> None:
    """Record a completed normalizer pass.

    Args:
        report: Summary returned by HeaderNormalizer.fanout
    """
    passes_total.labels(outcome=report.outcome.value).inc()
    values_total.inc(report.value_count)
    if report.collisions:
        collisions_total.inc(report.collisions)
