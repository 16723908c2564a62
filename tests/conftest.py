"""Pytest fixtures for testing"""

import pytest
from datetime import date, datetime
from domain_portfolio.domain.models import Holding, RenewalCostRecord, Transaction


# All time-dependent tests run against this instant
NOW = datetime(2025, 6, 15, 0, 0, 0)


def make_holding(holding_id: str = "h1", **overrides) -> Holding:
    """Active 1-year-cycle holding with sensible defaults"""
    values = dict(
        holding_id=holding_id,
        domain_name=f"{holding_id}.com",
        acquisition_date=date(2023, 1, 1),
        acquisition_cost=100.0,
        renewal_cost=10.0,
        renewal_cycle=1,
        renewal_count=0,
        expiry_date=date(2026, 1, 1),
        status="active",
    )
    values.update(overrides)
    return Holding(**values)


def make_transaction(transaction_id: str, holding_id: str, type: str, amount: float, **overrides) -> Transaction:
    values = dict(
        transaction_id=transaction_id,
        holding_id=holding_id,
        type=type,
        amount=amount,
        date=date(2025, 3, 1),
    )
    values.update(overrides)
    return Transaction(**values)


def make_history(holding_id: str, costs_newest_first: list[float]) -> list[RenewalCostRecord]:
    """Yearly renewal records, newest first, ending in 2025"""
    return [
        RenewalCostRecord(
            holding_id=holding_id,
            renewal_date=date(2025 - i, 1, 1),
            renewal_cost=cost,
        )
        for i, cost in enumerate(costs_newest_first)
    ]


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def sample_portfolio() -> tuple[list[Holding], list[Transaction]]:
    """Small mixed portfolio: one sold, one held, one lapsed"""
    holdings = [
        make_holding(
            "sold",
            acquisition_cost=200.0,
            renewal_cost=10.0,
            renewal_count=2,
            status="sold",
            sale_date=date(2025, 3, 1),
            sale_price=1000.0,
            expiry_date=date(2025, 1, 1),
        ),
        make_holding("held", acquisition_cost=100.0, renewal_cost=20.0, renewal_count=1),
        make_holding(
            "lapsed",
            acquisition_cost=50.0,
            renewal_cost=10.0,
            renewal_count=0,
            status="expired",
            expiry_date=date(2024, 5, 1),
        ),
    ]
    transactions = [
        make_transaction("t1", "sold", "buy", 200.0, date=date(2022, 1, 1)),
        make_transaction("t2", "sold", "sell", 1000.0, platform_fee=150.0, date=date(2025, 3, 1)),
        make_transaction("t3", "held", "buy", 100.0, date=date(2023, 1, 1)),
        make_transaction("t4", "held", "renew", 20.0, date=date(2025, 1, 1)),
        make_transaction("t5", "held", "marketing", 30.0, date=date(2025, 2, 1)),
    ]
    return holdings, transactions
