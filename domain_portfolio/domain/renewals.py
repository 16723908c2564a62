"""Renewal scheduling - when each holding next has to be renewed"""

from datetime import date, datetime
from typing import Optional

from domain_portfolio.domain.models import Holding, RenewalInfo
from domain_portfolio.utils.date_utils import add_years, years_between


def next_renewal_date(acquisition_date: date, renewal_cycle: int, renewal_count: int) -> date:
    """Project the next renewal from the acquisition anchor, not from today"""
    return add_years(acquisition_date, (renewal_count + 1) * renewal_cycle)


def last_renewal_date(acquisition_date: date, renewal_cycle: int, renewal_count: int) -> Optional[date]:
    if renewal_count <= 0:
        return None
    return add_years(acquisition_date, renewal_count * renewal_cycle)


def renewal_status(
    holding: Holding,
    target_year: int,
    as_of: datetime | None = None,
) -> RenewalInfo:
    """
    Determine whether a holding is due for renewal within target_year.

    Requirements:
    - Due iff expiry date is on or before Dec 31 of target_year (past expiries count)
    - Next renewal = expiry date when due, else acquisition + (count + 1) x cycle years
    - Years until renewal is measured from as_of and is display-only

    Caller guarantees expiry_date is present (see annual_renewal_cost).
    """
    if as_of is None:
        as_of = datetime.now()

    expiry = holding.expiry_date
    needs_renewal = expiry <= date(target_year, 12, 31)

    if needs_renewal:
        next_date = expiry
    else:
        next_date = next_renewal_date(holding.acquisition_date, holding.renewal_cycle, holding.renewal_count)

    return RenewalInfo(
        holding_id=holding.holding_id,
        domain_name=holding.domain_name,
        renewal_cost=holding.renewal_cost or 0.0,
        renewal_cycle=holding.renewal_cycle,
        next_renewal_date=next_date,
        years_until_renewal=years_between(as_of, next_date),
        needs_renewal_this_year=needs_renewal,
        last_renewal_date=last_renewal_date(holding.acquisition_date, holding.renewal_cycle, holding.renewal_count),
        lapsed=holding.status == "active" and expiry < as_of.date(),
    )


def format_renewal_info(info: RenewalInfo, currency: str = "USD") -> str:
    """One-line description of a renewal position"""
    cost = f"{info.renewal_cost:,.2f} {currency}"
    when = info.next_renewal_date.isoformat()
    if info.needs_renewal_this_year:
        return f"{info.domain_name} - renewal due this year ({when}) - {cost}"
    return f"{info.domain_name} - renewal due in {info.years_until_renewal:.1f} years ({when}) - {cost}"
