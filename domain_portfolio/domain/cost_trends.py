"""Renewal cost trend detection and next-cost prediction"""

from typing import List, Optional, Sequence

from domain_portfolio.domain.models import (
    CostTrendSummary,
    Holding,
    RenewalCostAnalysis,
    RenewalCostRecord,
)

TREND_THRESHOLD_PCT = 5.0
OPPORTUNITY_VARIANCE_PCT = 10.0
TOP_EXPENSIVE_COUNT = 5


def predict_next_cost(history: Sequence[RenewalCostRecord]) -> float:
    """
    Predict the next renewal cost with an ordinary least-squares line.

    History is stored newest-first; it is reversed so index 0 is the oldest
    renewal, then the fitted line is evaluated one step past the last index.
    Predictions are clamped to zero.

    Example:
        costs newest-first [12, 11, 10] -> oldest-first [10, 11, 12]
        slope 1.0, intercept 10.0 -> next (x=3) = 13.0
    """
    if not history:
        return 0.0
    if len(history) == 1:
        return history[0].renewal_cost

    costs = [record.renewal_cost for record in reversed(history)]
    n = len(costs)
    sum_x = sum(range(n))
    sum_y = sum(costs)
    sum_xy = sum(x * y for x, y in enumerate(costs))
    sum_xx = sum(x * x for x in range(n))

    slope = (n * sum_xy - sum_x * sum_y) / (n * sum_xx - sum_x * sum_x)
    intercept = (sum_y - slope * sum_x) / n

    return max(0.0, slope * n + intercept)


def classify_trend(costs: Sequence[float]) -> str:
    """
    Compare mean cost of the first half of the series against the second half.

    Costs must be in chronological order. Split is by index (n // 2), so
    spacing between renewal dates plays no part.
    """
    if len(costs) < 2:
        return "stable"

    mid = len(costs) // 2
    first_half = costs[:mid]
    second_half = costs[mid:]

    first_avg = sum(first_half) / len(first_half)
    second_avg = sum(second_half) / len(second_half)

    if first_avg == 0:
        return "stable"

    change_pct = (second_avg - first_avg) / first_avg * 100

    if change_pct > TREND_THRESHOLD_PCT:
        return "increasing"
    if change_pct < -TREND_THRESHOLD_PCT:
        return "decreasing"
    return "stable"


def cost_variance(latest_cost: float, average_cost: float) -> float:
    """Percent by which the latest cost sits above (or below) the average"""
    if average_cost == 0:
        return 0.0
    return (latest_cost - average_cost) / average_cost * 100


def analyze_renewal_costs(holding: Holding, history: Sequence[RenewalCostRecord]) -> RenewalCostAnalysis:
    """Summarize one holding's renewal price history (newest-first)"""
    if not history:
        static_cost = holding.renewal_cost or 0.0
        return RenewalCostAnalysis(
            holding_id=holding.holding_id,
            domain_name=holding.domain_name,
            current_renewal_cost=static_cost,
            average_renewal_cost=static_cost,
            cost_trend="stable",
            cost_variance=0.0,
            renewal_frequency=holding.renewal_cycle,
            next_expected_cost=static_cost,
        )

    costs = [record.renewal_cost for record in history]
    average = sum(costs) / len(costs)
    latest = costs[0]

    return RenewalCostAnalysis(
        holding_id=holding.holding_id,
        domain_name=holding.domain_name,
        current_renewal_cost=latest,
        average_renewal_cost=average,
        cost_trend=classify_trend(costs[::-1]),
        cost_variance=cost_variance(latest, average),
        renewal_frequency=holding.renewal_cycle,
        next_expected_cost=predict_next_cost(history),
        last_renewal_date=history[0].renewal_date,
        cost_history=list(history),
    )


def recommend_renewal_cost_update(
    analysis: RenewalCostAnalysis,
    threshold_pct: float = 10.0,
) -> Optional[float]:
    """Return the predicted cost if it drifts more than threshold_pct from the current one"""
    current = analysis.current_renewal_cost
    if current <= 0:
        return None

    drift_pct = abs(analysis.next_expected_cost - current) / current * 100
    if drift_pct > threshold_pct:
        return analysis.next_expected_cost
    return None


def summarize_cost_trends(analyses: Sequence[RenewalCostAnalysis]) -> CostTrendSummary:
    increasing = [a for a in analyses if a.cost_trend == "increasing"]
    average_increase = (
        sum(a.cost_variance for a in increasing) / len(increasing) if increasing else 0.0
    )

    most_expensive: List[str] = [
        a.domain_name
        for a in sorted(analyses, key=lambda a: a.current_renewal_cost, reverse=True)[:TOP_EXPENSIVE_COUNT]
    ]

    opportunities = [
        f"{a.domain_name} ({a.cost_variance:.1f}% increase)"
        for a in increasing
        if a.cost_variance > OPPORTUNITY_VARIANCE_PCT
    ]

    return CostTrendSummary(
        average_cost_increase=average_increase,
        most_expensive_domains=most_expensive,
        cost_optimization_opportunities=opportunities,
    )
