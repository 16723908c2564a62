"""Annual renewal cost aggregation and optimization suggestions"""

import calendar
import logging
from datetime import datetime
from typing import Dict, List, Mapping, Optional, Sequence

from domain_portfolio.domain.cost_trends import (
    analyze_renewal_costs,
    predict_next_cost,
    summarize_cost_trends,
)
from domain_portfolio.domain.models import (
    AnnualRenewalCost,
    AnnualRenewalCostAnalysis,
    CostTrendSummary,
    Holding,
    RenewalCostRecord,
    RenewalInfo,
)
from domain_portfolio.domain.renewals import renewal_status
from domain_portfolio.utils.date_utils import year_bounds

logger = logging.getLogger(__name__)

# Suggestion thresholds
MONTH_CONCENTRATION_HIGH = 2.5
MONTH_CONCENTRATION_LOW = 1.2
CYCLE_SHARE_HIGH = 0.70
CYCLE_SHARE_LOW = 0.40
COST_TO_VALUE_HIGH = 0.10
COST_TO_VALUE_LOW = 0.02
TOTAL_COST_BULK = 50_000
TOTAL_COST_BATCH = 10_000
COUNT_MANAGEMENT_SYSTEM = 100
COUNT_REMINDERS = 20
HIGH_VALUE_MULTIPLIER = 2


def cycle_label(renewal_cycle: int) -> str:
    return f"{renewal_cycle}-year"


def annual_renewal_cost(
    holdings: Sequence[Holding],
    target_year: int,
    as_of: datetime | None = None,
) -> AnnualRenewalCost:
    """
    Forecast renewal spend for target_year.

    Only active holdings with an expiry date are considered. Each is
    partitioned into needing / not needing renewal; costs of the needing set
    are bucketed by cycle label and by the month of the next renewal date.
    """
    needing: List[RenewalInfo] = []
    not_needing: List[RenewalInfo] = []
    cost_by_cycle: Dict[str, float] = {}
    cost_by_month = [0.0] * 12

    for holding in holdings:
        if holding.status != "active" or holding.expiry_date is None:
            continue

        info = renewal_status(holding, target_year, as_of=as_of)

        if info.needs_renewal_this_year:
            needing.append(info)
            label = cycle_label(info.renewal_cycle)
            cost_by_cycle[label] = cost_by_cycle.get(label, 0.0) + info.renewal_cost
            cost_by_month[info.next_renewal_date.month - 1] += info.renewal_cost
        else:
            not_needing.append(info)

    lapsed = [info.domain_name for info in needing + not_needing if info.lapsed]
    if lapsed:
        logger.warning(
            "Active holdings past their expiry date",
            extra={"target_year": target_year, "lapsed_count": len(lapsed), "domains": lapsed},
        )

    return AnnualRenewalCost(
        target_year=target_year,
        total_annual_cost=sum(info.renewal_cost for info in needing),
        needing_renewal=needing,
        not_needing_renewal=not_needing,
        cost_by_cycle=cost_by_cycle,
        cost_by_month=cost_by_month,
    )


def multi_year_renewal_cost(
    holdings: Sequence[Holding],
    start_year: int,
    years: int = 5,
    as_of: datetime | None = None,
) -> Dict[int, AnnualRenewalCost]:
    """Run annual_renewal_cost for each of the next `years` calendar years"""
    return {
        year: annual_renewal_cost(holdings, year, as_of=as_of)
        for year in range(start_year, start_year + years)
    }


def renewal_optimization_suggestions(
    annual: AnnualRenewalCost,
    estimated_values: Optional[Mapping[str, float]] = None,
) -> List[str]:
    """
    Derive qualitative findings from an annual forecast.

    Thresholds:
    - Month concentration (peak month / average month): >2.5 warn, <1.2 praise
    - Dominant cycle share (only with >1 cycle): >70% concentrated, <40% diversified
    - Renewal-to-value ratio: >0.10 drop low-value names, <0.02 cheap to hold
    - Total cost: >50,000 negotiate bulk pricing, >10,000 batch renewal
    - Holdings due: >100 management system, >20 reminders
    - Any due holding valued above 2x the average valuation is flagged

    The result is never empty.
    """
    needing = annual.needing_renewal
    total = annual.total_annual_cost
    count = len(needing)

    if count == 0:
        return ["No domains need renewal this year - a good time to invest in new domains."]

    suggestions: List[str] = []

    # Month distribution
    if total > 0:
        peak_cost = max(annual.cost_by_month)
        ratio = peak_cost / (total / 12)
        if ratio > MONTH_CONCENTRATION_HIGH:
            peak_month = calendar.month_name[annual.cost_by_month.index(peak_cost) + 1]
            suggestions.append(
                f"Renewal costs are concentrated in {peak_month} ({ratio:.1f}x the monthly average); "
                "consider spreading renewals across the year."
            )
        elif ratio < MONTH_CONCENTRATION_LOW:
            suggestions.append("Renewal costs are evenly distributed across the year.")

    # Cycle distribution
    if len(annual.cost_by_cycle) > 1 and total > 0:
        dominant_label, dominant_cost = max(annual.cost_by_cycle.items(), key=lambda item: item[1])
        share = dominant_cost / total
        if share > CYCLE_SHARE_HIGH:
            suggestions.append(
                f"{share * 100:.1f}% of renewal cost is on {dominant_label} cycles; "
                "consider longer cycles for names you plan to keep."
            )
        elif share < CYCLE_SHARE_LOW:
            suggestions.append("Renewal cycles are well diversified.")

    # Cost relative to portfolio value
    valued = {hid: value for hid, value in (estimated_values or {}).items() if value and value > 0}
    if valued:
        avg_value = sum(valued.values()) / len(valued)
        value_ratio = total / (avg_value * count)
        if value_ratio > COST_TO_VALUE_HIGH:
            suggestions.append(
                f"Renewal cost is {value_ratio * 100:.1f}% of estimated value; "
                "consider dropping low-value domains instead of renewing them."
            )
        elif value_ratio < COST_TO_VALUE_LOW:
            suggestions.append("Renewal cost is small relative to estimated value; these domains are cheap to hold.")

    # Absolute spend
    if total > TOTAL_COST_BULK:
        suggestions.append("Annual renewal cost is very high; negotiate bulk renewal pricing with your registrar.")
    elif total > TOTAL_COST_BATCH:
        suggestions.append("Annual renewal cost is significant; evaluate batch renewal discounts or a cheaper registrar.")

    # Portfolio size
    if count > COUNT_MANAGEMENT_SYSTEM:
        suggestions.append(f"{count} domains need renewal; use a dedicated portfolio management system.")
    elif count > COUNT_REMINDERS:
        suggestions.append(f"{count} domains need renewal; set up renewal reminders to avoid missed deadlines.")

    # High-value holdings coming due
    if valued:
        avg_value = sum(valued.values()) / len(valued)
        due_ids = {info.holding_id: info for info in needing}
        for holding_id, value in valued.items():
            info = due_ids.get(holding_id)
            if info is not None and value > HIGH_VALUE_MULTIPLIER * avg_value:
                suggestions.append(
                    f"High-value domain {info.domain_name} is due for renewal on "
                    f"{info.next_renewal_date.isoformat()}; renew it early."
                )

    if not suggestions:
        suggestions.append("Renewal costs look reasonable; keep reviewing your portfolio regularly.")

    return suggestions


def _empty_annual_analysis(year: int) -> AnnualRenewalCostAnalysis:
    return AnnualRenewalCostAnalysis(
        year=year,
        total_estimated_cost=0.0,
        total_actual_cost=0.0,
        cost_accuracy=0.0,
        domains_needing_renewal=0,
        cost_by_month=[0.0] * 12,
        cost_by_registrar={},
        cost_trends=CostTrendSummary(
            average_cost_increase=0.0,
            most_expensive_domains=[],
            cost_optimization_opportunities=[],
        ),
    )


def annual_renewal_cost_analysis(
    holdings: Sequence[Holding],
    histories: Mapping[str, Sequence[RenewalCostRecord]],
    year: int,
) -> AnnualRenewalCostAnalysis:
    """
    Compare history-based estimated renewal spend against recorded spend for a year.

    Estimated cost uses the predicted next cost per holding (static renewal
    cost when no prediction is available) for active holdings expiring in year.
    """
    active = [h for h in holdings if h.status == "active"]
    if not active:
        return _empty_annual_analysis(year)

    start, end = year_bounds(year)
    actual_cost = sum(
        record.renewal_cost
        for records in histories.values()
        for record in records
        if start <= record.renewal_date <= end
    )

    estimated_cost = 0.0
    due_count = 0
    cost_by_month = [0.0] * 12
    cost_by_registrar: Dict[str, float] = {}

    for holding in active:
        if holding.expiry_date is None or holding.expiry_date.year != year:
            continue

        due_count += 1
        predicted = predict_next_cost(histories.get(holding.holding_id, [])) or holding.renewal_cost or 0.0
        estimated_cost += predicted
        cost_by_month[holding.expiry_date.month - 1] += predicted
        registrar = holding.registrar or "Unknown"
        cost_by_registrar[registrar] = cost_by_registrar.get(registrar, 0.0) + predicted

    accuracy = (1 - abs(estimated_cost - actual_cost) / actual_cost) * 100 if actual_cost > 0 else 0.0

    trends = summarize_cost_trends(
        [analyze_renewal_costs(h, histories.get(h.holding_id, [])) for h in active]
    )

    return AnnualRenewalCostAnalysis(
        year=year,
        total_estimated_cost=estimated_cost,
        total_actual_cost=actual_cost,
        cost_accuracy=accuracy,
        domains_needing_renewal=due_count,
        cost_by_month=cost_by_month,
        cost_by_registrar=cost_by_registrar,
        cost_trends=trends,
    )
