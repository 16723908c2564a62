"""Unit tests for portfolio financial metrics and per-domain ROI"""

import pytest
from datetime import date, datetime
from conftest import NOW, make_holding, make_transaction
from domain_portfolio.domain.financials import (
    advanced_metrics,
    all_domain_rois,
    annualized_return,
    annual_metrics,
    domain_roi,
    expired_domain_loss,
    holding_cost,
    net_amount_of,
    platform_fee_of,
    portfolio_metrics,
    split_transactions,
)


def test_net_amount_prefers_explicit_value():
    txn = make_transaction("t", "h1", "sell", 1000.0, platform_fee=100.0, net_amount=875.0)
    assert net_amount_of(txn) == 875.0


def test_net_amount_falls_back_to_amount_minus_fee():
    txn = make_transaction("t", "h1", "sell", 1000.0, platform_fee=100.0)
    assert net_amount_of(txn) == 900.0


def test_net_amount_falls_back_to_amount():
    txn = make_transaction("t", "h1", "sell", 1000.0)
    assert net_amount_of(txn) == 1000.0


def test_platform_fee_of_derives_from_percentage():
    recorded = make_transaction("t", "h1", "sell", 1000.0, platform_fee=120.0, platform_fee_percentage=15.0)
    derived = make_transaction("t", "h1", "sell", 1000.0, platform_fee_percentage=15.0)

    assert platform_fee_of(recorded) == 120.0
    assert platform_fee_of(derived) == pytest.approx(150.0)
    assert platform_fee_of(make_transaction("t", "h1", "sell", 1000.0)) == 0.0


def test_net_amount_ignores_fee_percentage():
    txn = make_transaction("t", "h1", "sell", 1000.0, platform_fee_percentage=15.0)
    assert net_amount_of(txn) == 1000.0


def test_split_transactions_by_type():
    txns = [
        make_transaction("1", "h1", "sell", 10.0),
        make_transaction("2", "h1", "installment_payment", 5.0),
        make_transaction("3", "h1", "buy", 7.0),
        make_transaction("4", "h1", "renew", 3.0),
        make_transaction("5", "h1", "fee", 1.0),
        make_transaction("6", "h1", "transfer", 2.0),
        make_transaction("7", "h1", "marketing", 4.0),
        make_transaction("8", "h1", "advertising", 6.0),
    ]

    sales, costs = split_transactions(txns)

    assert [t.transaction_id for t in sales] == ["1", "2"]
    assert [t.transaction_id for t in costs] == ["3", "4", "5"]


def test_holding_cost_treats_nulls_as_zero():
    assert holding_cost(make_holding(acquisition_cost=100.0, renewal_cost=20.0, renewal_count=3)) == 160.0
    assert holding_cost(make_holding(acquisition_cost=0.0, renewal_cost=None, renewal_count=3)) == 0.0


def test_portfolio_metrics_profit_tiers(sample_portfolio):
    holdings, transactions = sample_portfolio

    metrics = portfolio_metrics(holdings, transactions, as_of=NOW)

    assert metrics.total_sales == 1000.0
    assert metrics.net_revenue == 850.0
    assert metrics.total_platform_fees == 150.0
    # acquisition 200 + 100 + 50, renewals 2x10 + 1x20 + 0
    assert metrics.total_investment == 350.0
    assert metrics.total_renewal_cost == 40.0
    assert metrics.total_holding_cost == 390.0
    assert metrics.gross_profit == 500.0
    assert metrics.net_profit == 460.0
    assert metrics.roi == pytest.approx(460 / 390 * 100)
    assert metrics.profit_margin == pytest.approx(460 / 850 * 100)
    assert metrics.gross_margin == pytest.approx(500 / 1000 * 100)


def test_portfolio_metrics_counts_and_averages(sample_portfolio):
    holdings, transactions = sample_portfolio

    metrics = portfolio_metrics(holdings, transactions, as_of=NOW)

    assert metrics.total_holdings == 3
    assert metrics.active_holdings == 1
    assert metrics.sold_holdings == 1
    assert metrics.avg_sale_price == 1000.0
    assert metrics.avg_purchase_price == pytest.approx(350 / 3)


def test_portfolio_metrics_annual_scope(sample_portfolio):
    holdings, transactions = sample_portfolio

    metrics = portfolio_metrics(holdings, transactions, as_of=NOW)

    # 2025: sell 1000 (net 850), renew 20; marketing is neither sale nor cost
    assert metrics.annual.year == 2025
    assert metrics.annual.annual_sales == 1000.0
    assert metrics.annual.annual_net_revenue == 850.0
    assert metrics.annual.annual_platform_fees == 150.0
    assert metrics.annual.annual_costs == 20.0
    assert metrics.annual.annual_profit == 830.0


def test_portfolio_metrics_empty_inputs_are_zero():
    metrics = portfolio_metrics([], [], as_of=NOW)

    assert metrics.total_sales == 0
    assert metrics.net_revenue == 0
    assert metrics.total_holding_cost == 0
    assert metrics.roi == 0
    assert metrics.profit_margin == 0
    assert metrics.gross_margin == 0
    assert metrics.avg_purchase_price == 0
    assert metrics.avg_sale_price == 0


def test_annual_metrics_inclusive_year_bounds():
    txns = [
        make_transaction("a", "h1", "sell", 100.0, date=date(2024, 1, 1)),
        make_transaction("b", "h1", "sell", 200.0, date=date(2024, 12, 31)),
        make_transaction("c", "h1", "sell", 400.0, date=date(2025, 1, 1)),
        make_transaction("d", "h1", "buy", 50.0, date=date(2023, 12, 31)),
    ]

    annual = annual_metrics(txns, 2024)

    assert annual.annual_sales == 300.0
    assert annual.annual_costs == 0.0
    assert annual.annual_profit == 300.0


def test_domain_roi_sold_holding():
    holding = make_holding(
        acquisition_cost=200.0,
        renewal_cost=10.0,
        renewal_count=2,
        status="sold",
        acquisition_date=date(2024, 1, 1),
        sale_date=date(2025, 1, 1),
        expiry_date=date(2025, 1, 1),
    )
    txns = [
        make_transaction("s", "h1", "sell", 1000.0, platform_fee=150.0),
        make_transaction("x", "other", "sell", 9999.0),
    ]

    roi = domain_roi(holding, txns, as_of=NOW)

    assert roi.total_investment == 220.0
    assert roi.total_sales == 1000.0
    assert roi.net_revenue == 850.0
    assert roi.gross_profit == 630.0
    assert roi.roi == pytest.approx(630 / 220 * 100)
    assert roi.is_expired is False
    assert roi.holding_period_days == 366
    assert roi.sale_date == date(2025, 1, 1)


def test_domain_roi_expired_status_is_total_loss():
    holding = make_holding(acquisition_cost=100.0, renewal_cost=10.0, renewal_count=1, status="expired",
                           expiry_date=date(2030, 1, 1))
    txns = [make_transaction("s", "h1", "installment_payment", 500.0)]

    roi = domain_roi(holding, txns, as_of=NOW)

    assert roi.roi == -100
    assert roi.gross_profit == -110.0
    assert roi.net_revenue == 500.0
    assert roi.is_expired is True


def test_domain_roi_past_expiry_unsold_is_total_loss():
    holding = make_holding(acquisition_cost=80.0, status="for_sale", expiry_date=date(2025, 6, 14))

    roi = domain_roi(holding, [], as_of=NOW)

    assert roi.roi == -100
    assert roi.gross_profit == -80.0


def test_domain_roi_past_expiry_but_sold_is_not_a_loss():
    holding = make_holding(acquisition_cost=80.0, status="sold", expiry_date=date(2024, 1, 1),
                           sale_date=date(2023, 6, 1))
    txns = [make_transaction("s", "h1", "sell", 100.0)]

    roi = domain_roi(holding, txns, as_of=NOW)

    assert roi.is_expired is False
    assert roi.gross_profit == 20.0
    assert roi.roi == pytest.approx(25.0)


def test_domain_roi_unsold_holding_period_runs_to_now():
    holding = make_holding(acquisition_date=date(2025, 6, 1))

    roi = domain_roi(holding, [], as_of=datetime(2025, 6, 15, 18, 0))

    assert roi.holding_period_days == 14
    assert roi.roi == pytest.approx(-100.0)  # no sales yet
    assert roi.is_expired is False


def test_domain_roi_zero_investment_has_zero_roi():
    holding = make_holding(acquisition_cost=0.0, renewal_cost=None)
    assert domain_roi(holding, [], as_of=NOW).roi == 0


def test_all_domain_rois(sample_portfolio):
    holdings, transactions = sample_portfolio

    rois = all_domain_rois(holdings, transactions, as_of=NOW)

    assert [r.holding_id for r in rois] == ["sold", "held", "lapsed"]
    assert rois[2].roi == -100


def test_expired_domain_loss(sample_portfolio):
    holdings, _ = sample_portfolio
    holdings = holdings + [
        make_holding("gone", acquisition_cost=30.0, renewal_cost=5.0, renewal_count=2, expiry_date=date(2025, 2, 1)),
        make_holding("free", acquisition_cost=0.0, renewal_cost=None, status="expired", expiry_date=date(2024, 1, 1)),
    ]

    loss = expired_domain_loss(holdings, as_of=NOW)

    assert [h.holding_id for h in loss.expired_holdings] == ["lapsed", "gone"]
    assert loss.total_loss == 90.0
    assert loss.loss_by_year == {2024: 50.0, 2025: 40.0}
    assert list(loss.loss_by_year) == [2024, 2025]


def test_domain_roi_sale_date_is_earliest_sale():
    holding = make_holding(status="for_sale")
    txns = [
        make_transaction("late", "h1", "installment_payment", 50.0, date=date(2025, 5, 1)),
        make_transaction("early", "h1", "installment_payment", 50.0, date=date(2025, 2, 1)),
    ]

    assert domain_roi(holding, txns, as_of=NOW).sale_date == date(2025, 2, 1)


def test_annualized_return():
    assert annualized_return(100.0, 121.0, 2.0) == pytest.approx(10.0)
    assert annualized_return(100.0, 0.0, 2.0) == -100.0
    assert annualized_return(0.0, 50.0, 2.0) == 0.0
    assert annualized_return(100.0, 150.0, 0.0) == 0.0


def test_advanced_metrics_empty_inputs_are_zero():
    metrics = advanced_metrics([], [], as_of=NOW)

    assert metrics.total_investment == 0
    assert metrics.investment_years == 0
    assert metrics.annualized_return == 0
    assert metrics.win_rate == 0
    assert metrics.avg_holding_period_days == 0
    assert metrics.success_rate == 0
    assert metrics.best_performing_domain is None
    assert metrics.worst_performing_domain is None


def test_advanced_metrics_without_sales():
    holdings = [make_holding("a"), make_holding("b", acquisition_cost=50.0)]

    metrics = advanced_metrics(holdings, [], as_of=NOW)

    assert metrics.total_investment == 150.0
    assert metrics.net_revenue == 0
    assert metrics.annualized_return == -100.0
    assert metrics.win_rate == 0
    assert metrics.avg_holding_period_days == 0
    assert metrics.success_rate == 0
    assert metrics.best_performing_domain == "a.com"


def test_advanced_metrics_mixed_portfolio(sample_portfolio):
    holdings, transactions = sample_portfolio

    metrics = advanced_metrics(holdings, transactions, as_of=NOW)

    # holding cost 220 + 120 + 50, oldest acquisition 2023-01-01 is 896 days before NOW
    years = 896 / 365.25
    assert metrics.total_investment == 390.0
    assert metrics.net_revenue == 850.0
    assert metrics.investment_years == pytest.approx(years)
    assert metrics.annualized_return == pytest.approx(((850 / 390) ** (1 / years) - 1) * 100)
    assert metrics.win_rate == 100.0
    assert metrics.avg_holding_period_days == 790
    assert metrics.success_rate == pytest.approx(100 / 3)
    assert metrics.best_performing_domain == "sold.com"
    assert metrics.worst_performing_domain == "held.com"


def test_advanced_metrics_win_rate_counts_losing_sales():
    holdings = [
        make_holding("win", status="sold", sale_price=500.0, sale_date=date(2024, 1, 1)),
        make_holding("loss", status="sold", sale_price=60.0, sale_date=date(2023, 7, 1)),
    ]

    metrics = advanced_metrics(holdings, [], as_of=NOW)

    assert metrics.win_rate == 50.0
    assert metrics.avg_holding_period_days == pytest.approx((365 + 181) / 2)
    assert metrics.success_rate == 100.0
