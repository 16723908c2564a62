"""Financial metrics engine - revenue, holding cost, profit and ROI"""

from datetime import date, datetime
from typing import Dict, List, Optional, Sequence, Tuple

from domain_portfolio.domain.models import (
    AdvancedMetrics,
    AnnualMetrics,
    DomainROI,
    ExpiredDomainLoss,
    ExpiredHoldingLoss,
    FinancialMetrics,
    Holding,
    Transaction,
)
from domain_portfolio.utils.date_utils import DAYS_PER_YEAR, year_bounds

SALE_TYPES = ("sell", "installment_payment")
COST_TYPES = ("buy", "renew", "fee")


def net_amount_of(txn: Transaction) -> float:
    """Explicit net amount, else amount minus platform fee, else amount"""
    if txn.net_amount is not None:
        return txn.net_amount
    return (txn.amount or 0.0) - (txn.platform_fee or 0.0)


def platform_fee_of(txn: Transaction) -> float:
    """
    Platform fee for reporting: the recorded fee, else amount x fee percentage.

    Does not feed net_amount_of, which only trusts recorded fees.
    """
    if txn.platform_fee is not None:
        return txn.platform_fee
    if txn.platform_fee_percentage:
        return (txn.amount or 0.0) * txn.platform_fee_percentage / 100
    return 0.0


def split_transactions(
    transactions: Sequence[Transaction],
) -> Tuple[List[Transaction], List[Transaction]]:
    """Separate sale-type from cost-type transactions; others are ignored"""
    sales = [t for t in transactions if t.type in SALE_TYPES]
    costs = [t for t in transactions if t.type in COST_TYPES]
    return sales, costs


def holding_cost(holding: Holding) -> float:
    """Acquisition cost plus every renewal paid so far"""
    return (holding.acquisition_cost or 0.0) + holding.renewal_count * (holding.renewal_cost or 0.0)


def is_expired(holding: Holding, today: date) -> bool:
    """Marked expired, or past expiry without having been sold"""
    if holding.status == "expired":
        return True
    if holding.expiry_date is not None:
        return holding.expiry_date < today and holding.status != "sold"
    return False


def holding_period_days(holding: Holding, today: date) -> int:
    end = holding.sale_date if holding.status == "sold" and holding.sale_date else today
    return (end - holding.acquisition_date).days


def _percent(numerator: float, denominator: float) -> float:
    return numerator / denominator * 100 if denominator else 0.0


def annual_metrics(transactions: Sequence[Transaction], year: int) -> AnnualMetrics:
    """Sale/cost split restricted to transactions dated within [Jan 1, Dec 31] of year"""
    start, end = year_bounds(year)
    in_year = [t for t in transactions if start <= t.date <= end]
    sales, costs = split_transactions(in_year)

    annual_sales = sum(t.amount or 0.0 for t in sales)
    annual_net_revenue = sum(net_amount_of(t) for t in sales)
    annual_fees = sum(t.platform_fee or 0.0 for t in sales)
    annual_costs = sum(t.amount or 0.0 for t in costs)

    return AnnualMetrics(
        year=year,
        annual_sales=annual_sales,
        annual_net_revenue=annual_net_revenue,
        annual_platform_fees=annual_fees,
        annual_costs=annual_costs,
        annual_profit=annual_net_revenue - annual_costs,
    )


def portfolio_metrics(
    holdings: Sequence[Holding],
    transactions: Sequence[Transaction],
    year: int | None = None,
    as_of: datetime | None = None,
) -> FinancialMetrics:
    """
    Compute portfolio-wide financial metrics.

    Profit tiers:
    - gross profit = net revenue - acquisition cost (renewals excluded)
    - net profit   = net revenue - total holding cost (acquisition + renewals)

    Ratios:
    - ROI           = net profit / holding cost x 100
    - profit margin = net profit / net revenue x 100
    - gross margin  = gross profit / gross sales x 100
    Each ratio is 0 when its denominator is 0.
    """
    if as_of is None:
        as_of = datetime.now()
    if year is None:
        year = as_of.year

    sales, _ = split_transactions(transactions)
    total_sales = sum(t.amount or 0.0 for t in sales)
    net_revenue = sum(net_amount_of(t) for t in sales)
    total_fees = sum(t.platform_fee or 0.0 for t in sales)

    total_investment = sum(h.acquisition_cost or 0.0 for h in holdings)
    total_renewal_cost = sum(h.renewal_count * (h.renewal_cost or 0.0) for h in holdings)
    total_holding_cost = total_investment + total_renewal_cost

    gross_profit = net_revenue - total_investment
    net_profit = net_revenue - total_holding_cost

    total_count = len(holdings)
    active_count = sum(1 for h in holdings if h.status == "active")
    sold_count = sum(1 for h in holdings if h.status == "sold")

    return FinancialMetrics(
        total_sales=total_sales,
        net_revenue=net_revenue,
        total_platform_fees=total_fees,
        total_investment=total_investment,
        total_renewal_cost=total_renewal_cost,
        total_holding_cost=total_holding_cost,
        gross_profit=gross_profit,
        net_profit=net_profit,
        roi=_percent(net_profit, total_holding_cost),
        profit_margin=_percent(net_profit, net_revenue),
        gross_margin=_percent(gross_profit, total_sales),
        annual=annual_metrics(transactions, year),
        total_holdings=total_count,
        active_holdings=active_count,
        sold_holdings=sold_count,
        avg_sale_price=total_sales / sold_count if sold_count else 0.0,
        avg_purchase_price=total_investment / total_count if total_count else 0.0,
    )


def domain_roi(
    holding: Holding,
    transactions: Sequence[Transaction],
    as_of: datetime | None = None,
) -> DomainROI:
    """
    Return metrics for one holding.

    An expired, unsold holding is a complete loss: ROI is forced to -100 and
    gross profit to -total investment regardless of recorded sales.
    """
    if as_of is None:
        as_of = datetime.now()
    today = as_of.date()

    own = [t for t in transactions if t.holding_id == holding.holding_id]
    sales, _ = split_transactions(own)

    total_investment = holding_cost(holding)
    total_sales = sum(t.amount or 0.0 for t in sales)
    net_revenue = sum(net_amount_of(t) for t in sales)

    expired = is_expired(holding, today)
    if expired:
        gross_profit = -total_investment
        roi = -100.0
    else:
        gross_profit = net_revenue - total_investment
        roi = _percent(gross_profit, total_investment)

    sale_date: Optional[date] = holding.sale_date
    if sale_date is None and sales:
        sale_date = min(t.date for t in sales)

    return DomainROI(
        holding_id=holding.holding_id,
        domain_name=holding.domain_name,
        total_investment=total_investment,
        total_sales=total_sales,
        net_revenue=net_revenue,
        gross_profit=gross_profit,
        roi=roi,
        holding_period_days=holding_period_days(holding, today),
        status=holding.status,
        is_expired=expired,
        sale_date=sale_date,
    )


def all_domain_rois(
    holdings: Sequence[Holding],
    transactions: Sequence[Transaction],
    as_of: datetime | None = None,
) -> List[DomainROI]:
    return [domain_roi(h, transactions, as_of=as_of) for h in holdings]


def expired_domain_loss(holdings: Sequence[Holding], as_of: datetime | None = None) -> ExpiredDomainLoss:
    """Sum the investment lost to holdings that lapsed without a sale"""
    if as_of is None:
        as_of = datetime.now()
    today = as_of.date()

    losses: List[ExpiredHoldingLoss] = []
    loss_by_year: Dict[int, float] = {}

    for holding in holdings:
        if not is_expired(holding, today):
            continue

        investment = holding_cost(holding)
        if investment <= 0:
            continue

        loss_year = holding.expiry_date.year if holding.expiry_date else None
        losses.append(
            ExpiredHoldingLoss(
                holding_id=holding.holding_id,
                domain_name=holding.domain_name,
                total_investment=investment,
                expiry_date=holding.expiry_date,
                loss_year=loss_year,
            )
        )
        if loss_year is not None:
            loss_by_year[loss_year] = loss_by_year.get(loss_year, 0.0) + investment

    return ExpiredDomainLoss(
        expired_holdings=losses,
        total_loss=sum(loss.total_investment for loss in losses),
        loss_by_year=dict(sorted(loss_by_year.items())),
    )


def annualized_return(total_investment: float, net_revenue: float, years: float) -> float:
    """
    Compound annual return in percent.

    Example:
        invested 100, returned 121 over 2 years -> 10.0
    """
    if years <= 0 or total_investment <= 0:
        return 0.0
    growth = net_revenue / total_investment
    if growth <= 0:
        return -100.0
    return (growth ** (1 / years) - 1) * 100


def advanced_metrics(
    holdings: Sequence[Holding],
    transactions: Sequence[Transaction],
    as_of: datetime | None = None,
) -> AdvancedMetrics:
    """
    Return statistics that look past the portfolio totals.

    Requirements:
    - Investment period runs from the oldest acquisition to as_of
    - Annualized return compounds net revenue over total holding cost across that period
    - Win rate: sold holdings whose sale price beats their holding cost
    - Average holding period and win rate consider sold holdings only
    - Best / worst domain by per-holding ROI, first holding wins ties
    - Every rate is 0 when its denominator is 0
    """
    if as_of is None:
        as_of = datetime.now()
    today = as_of.date()

    sales, _ = split_transactions(transactions)
    total_investment = sum(holding_cost(h) for h in holdings)
    net_revenue = sum(net_amount_of(t) for t in sales)

    years = 0.0
    if holdings:
        oldest = min(h.acquisition_date for h in holdings)
        years = max(0.0, (today - oldest).days / DAYS_PER_YEAR)

    sold = [h for h in holdings if h.status == "sold"]
    winners = [h for h in sold if (h.sale_price or 0.0) > holding_cost(h)]
    held_days = [((h.sale_date or h.acquisition_date) - h.acquisition_date).days for h in sold]

    rois = all_domain_rois(holdings, transactions, as_of=as_of)
    best = max(rois, key=lambda r: r.roi) if rois else None
    worst = min(rois, key=lambda r: r.roi) if rois else None

    return AdvancedMetrics(
        total_investment=total_investment,
        net_revenue=net_revenue,
        investment_years=years,
        annualized_return=annualized_return(total_investment, net_revenue, years),
        win_rate=_percent(len(winners), len(sold)),
        avg_holding_period_days=sum(held_days) / len(held_days) if held_days else 0.0,
        success_rate=_percent(len(sold), len(holdings)),
        best_performing_domain=best.domain_name if best else None,
        worst_performing_domain=worst.domain_name if worst else None,
    )
