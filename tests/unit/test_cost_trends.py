"""Unit tests for renewal cost trend detection and prediction"""

import pytest
from datetime import date
from conftest import make_history, make_holding
from domain_portfolio.domain.cost_trends import (
    analyze_renewal_costs,
    classify_trend,
    cost_variance,
    predict_next_cost,
    recommend_renewal_cost_update,
    summarize_cost_trends,
)


def test_predict_next_cost_empty_history():
    assert predict_next_cost([]) == 0


def test_predict_next_cost_single_record():
    assert predict_next_cost(make_history("h1", [100.0])) == 100.0


def test_predict_next_cost_linear_extrapolation():
    """Newest-first [12, 11, 10] is fitted oldest-first, next = 13"""
    assert predict_next_cost(make_history("h1", [12.0, 11.0, 10.0])) == pytest.approx(13.0)


def test_predict_next_cost_increasing_series_exceeds_last():
    history = make_history("h1", [18.0, 15.0, 11.0, 10.0])

    assert predict_next_cost(history) > history[0].renewal_cost


def test_predict_next_cost_clamped_at_zero():
    """Steep decline [10, 50, 90] oldest-first would extrapolate below zero"""
    history = make_history("h1", [10.0, 50.0, 90.0])

    assert predict_next_cost(history) == 0.0


def test_predict_next_cost_flat_series():
    assert predict_next_cost(make_history("h1", [9.0, 9.0, 9.0, 9.0])) == pytest.approx(9.0)


@pytest.mark.parametrize(
    "costs, expected",
    [
        ([10.0, 10.0, 12.0, 12.0], "increasing"),    # +20%
        ([12.0, 12.0, 10.0, 10.0], "decreasing"),    # -16.7%
        ([10.0, 10.0, 10.4, 10.4], "stable"),        # +4%
        ([10.0, 10.5], "stable"),                    # exactly +5% is not above threshold
        ([10.0], "stable"),
        ([], "stable"),
        ([0.0, 5.0], "stable"),                      # zero baseline
    ],
)
def test_classify_trend(costs, expected):
    assert classify_trend(costs) == expected


def test_classify_trend_odd_length_split_by_index():
    """[10 | 10, 20] -> first half mean 10, second half mean 15"""
    assert classify_trend([10.0, 10.0, 20.0]) == "increasing"


def test_cost_variance():
    assert cost_variance(12.0, 10.0) == pytest.approx(20.0)
    assert cost_variance(8.0, 10.0) == pytest.approx(-20.0)
    assert cost_variance(5.0, 0.0) == 0.0


def test_analyze_renewal_costs_without_history_uses_static_cost():
    holding = make_holding(renewal_cost=15.0, renewal_cycle=2)

    analysis = analyze_renewal_costs(holding, [])

    assert analysis.current_renewal_cost == 15.0
    assert analysis.average_renewal_cost == 15.0
    assert analysis.next_expected_cost == 15.0
    assert analysis.cost_trend == "stable"
    assert analysis.cost_variance == 0.0
    assert analysis.renewal_frequency == 2
    assert analysis.last_renewal_date is None


def test_analyze_renewal_costs_with_history():
    holding = make_holding(renewal_cost=10.0)
    history = make_history("h1", [14.0, 12.0, 10.0, 8.0])

    analysis = analyze_renewal_costs(holding, history)

    assert analysis.current_renewal_cost == 14.0
    assert analysis.average_renewal_cost == 11.0
    assert analysis.cost_trend == "increasing"
    assert analysis.cost_variance == pytest.approx((14 - 11) / 11 * 100)
    assert analysis.next_expected_cost == pytest.approx(16.0)
    assert analysis.last_renewal_date == date(2025, 1, 1)
    assert len(analysis.cost_history) == 4


def test_recommend_renewal_cost_update_above_threshold():
    analysis = analyze_renewal_costs(make_holding(), make_history("h1", [14.0, 12.0, 10.0, 8.0]))

    # predicted 16 vs current 14 -> 14.3% drift
    assert recommend_renewal_cost_update(analysis) == pytest.approx(16.0)
    assert recommend_renewal_cost_update(analysis, threshold_pct=20.0) is None


def test_recommend_renewal_cost_update_no_cost():
    analysis = analyze_renewal_costs(make_holding(renewal_cost=None), [])
    assert recommend_renewal_cost_update(analysis) is None


def test_summarize_cost_trends():
    analyses = [
        analyze_renewal_costs(make_holding("up", domain_name="up.com"), make_history("up", [20.0, 10.0, 10.0, 10.0])),
        analyze_renewal_costs(make_holding("flat", domain_name="flat.com"), make_history("flat", [30.0, 30.0])),
        analyze_renewal_costs(make_holding("none", domain_name="none.com", renewal_cost=5.0), []),
    ]

    summary = summarize_cost_trends(analyses)

    # up.com: average 12.5, latest 20 -> +60%
    assert summary.average_cost_increase == pytest.approx(60.0)
    assert summary.most_expensive_domains == ["flat.com", "up.com", "none.com"]
    assert summary.cost_optimization_opportunities == ["up.com (60.0% increase)"]
