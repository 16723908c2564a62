"""Prometheus metrics for renewal forecasts, portfolio returns and expiry alerts"""

from typing import Sequence

from prometheus_client import Counter, Gauge, Histogram

from domain_portfolio.domain.models import AnnualRenewalCost, ExpiryAlert

# Expiry metrics
expiry_alert_counter = Counter(
    "domain_expiry_alerts_total",
    "Expiry alerts handed to the alert callback",
    ["urgency"],  # critical | urgent | warning
)

expired_holding_counter = Counter(
    "domain_expired_alerts_total",
    "Alerts for holdings already past expiry",
)

# Renewal forecast metrics
renewal_forecast_cost_gauge = Gauge(
    "domain_renewal_forecast_cost",
    "Forecast renewal spend for a target year",
    ["year"],
)

renewal_forecast_due_gauge = Gauge(
    "domain_renewal_forecast_due",
    "Holdings needing renewal in a target year",
    ["year"],
)

lapsed_holding_counter = Counter(
    "domain_lapsed_holdings_total",
    "Active holdings observed past their expiry date",
)

# Computation latency
computation_duration_histogram = Histogram(
    "domain_analytics_duration_seconds",
    "Time spent computing analytics",
    ["operation"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
)


def record_expiry_alerts(alerts: Sequence[ExpiryAlert]) -> None:
    """Count alerts by urgency tier"""
    for alert in alerts:
        expiry_alert_counter.labels(urgency=alert.urgency).inc()
        if alert.is_expired:
            expired_holding_counter.inc()


def record_renewal_forecast(annual: AnnualRenewalCost) -> None:
    """Publish forecast spend and due count for the forecast year"""
    year = str(annual.target_year)
    renewal_forecast_cost_gauge.labels(year=year).set(annual.total_annual_cost)
    renewal_forecast_due_gauge.labels(year=year).set(len(annual.needing_renewal))

    lapsed = sum(1 for info in annual.needing_renewal + annual.not_needing_renewal if info.lapsed)
    if lapsed:
        lapsed_holding_counter.inc(lapsed)
