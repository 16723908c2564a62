"""Portfolio analytics facade consumed by the presentation layer"""

import logging
import time
from datetime import datetime
from typing import Callable, Dict, List, Mapping, Sequence

from domain_portfolio.config import Settings, settings as default_settings
from domain_portfolio.domain.cost_trends import analyze_renewal_costs, recommend_renewal_cost_update
from domain_portfolio.domain.expiry_monitor import AlertCallback, ExpiryMonitor
from domain_portfolio.domain.financials import (
    advanced_metrics,
    all_domain_rois,
    expired_domain_loss,
    portfolio_metrics,
)
from domain_portfolio.domain.models import (
    AdvancedMetrics,
    AnnualRenewalCost,
    AnnualRenewalCostAnalysis,
    DomainROI,
    ExpiredDomainLoss,
    ExpiryAlert,
    FinancialMetrics,
    Holding,
    MonitoringSettings,
    RenewalCostRecord,
    RenewalForecast,
    Transaction,
)
from domain_portfolio.domain.renewals import format_renewal_info
from domain_portfolio.domain.renewal_costs import (
    annual_renewal_cost,
    annual_renewal_cost_analysis,
    multi_year_renewal_cost,
    renewal_optimization_suggestions,
)
from domain_portfolio.infrastructure.observability.logging import (
    log_expiry_alerts,
    log_portfolio_metrics,
    log_renewal_forecast,
    setup_logging,
)
from domain_portfolio.infrastructure.observability.metrics import (
    computation_duration_histogram,
    record_expiry_alerts,
    record_renewal_forecast,
)

logger = logging.getLogger(__name__)


class PortfolioAnalytics:
    """
    Entry point wiring the renewal, trend, financial and expiry components.

    Every computation is pure; this class only adds timing, structured logs
    and Prometheus metrics around them, and owns one ExpiryMonitor.
    """

    def __init__(
        self,
        monitor: ExpiryMonitor | None = None,
        clock: Callable[[], datetime] = datetime.now,
        config: Settings = default_settings,
    ):
        self.clock = clock
        self.config = config
        self.monitor = monitor or ExpiryMonitor(MonitoringSettings.from_settings(), clock=clock)

    def renewal_forecast(self, holdings: Sequence[Holding], target_year: int | None = None) -> RenewalForecast:
        """
        Forecast renewal spend for a year and derive optimization suggestions.

        Estimated values recorded on the holdings feed the value-based checks.
        """
        start_time = time.time()
        now = self.clock()
        year = target_year or now.year

        with computation_duration_histogram.labels(operation="renewal_forecast").time():
            annual = annual_renewal_cost(holdings, year, as_of=now)
            estimated_values = {
                h.holding_id: h.estimated_value for h in holdings if h.estimated_value
            }
            suggestions = renewal_optimization_suggestions(annual, estimated_values or None)

        duration_ms = (time.time() - start_time) * 1000
        record_renewal_forecast(annual)
        log_renewal_forecast(year, len(annual.needing_renewal), annual.total_annual_cost, len(suggestions), duration_ms)

        return RenewalForecast(annual=annual, suggestions=suggestions)

    def renewal_summary(self, holdings: Sequence[Holding], target_year: int | None = None) -> List[str]:
        """One formatted line per active holding, due renewals first"""
        now = self.clock()
        annual = annual_renewal_cost(holdings, target_year or now.year, as_of=now)
        return [
            format_renewal_info(info, currency=self.config.default_currency)
            for info in annual.needing_renewal + annual.not_needing_renewal
        ]

    def multi_year_forecast(
        self,
        holdings: Sequence[Holding],
        years: int | None = None,
    ) -> Dict[int, AnnualRenewalCost]:
        now = self.clock()
        return multi_year_renewal_cost(holdings, now.year, years or self.config.forecast_years, as_of=now)

    def renewal_cost_analysis(
        self,
        holdings: Sequence[Holding],
        histories: Mapping[str, Sequence[RenewalCostRecord]],
        year: int | None = None,
    ) -> AnnualRenewalCostAnalysis:
        with computation_duration_histogram.labels(operation="renewal_cost_analysis").time():
            return annual_renewal_cost_analysis(holdings, histories, year or self.clock().year)

    def renewal_cost_updates(
        self,
        holdings: Sequence[Holding],
        histories: Mapping[str, Sequence[RenewalCostRecord]],
    ) -> Dict[str, float]:
        """Holdings whose stored renewal cost should be replaced by the predicted one"""
        updates: Dict[str, float] = {}
        for holding in holdings:
            analysis = analyze_renewal_costs(holding, histories.get(holding.holding_id, []))
            suggested = recommend_renewal_cost_update(analysis, self.config.renewal_cost_update_threshold_pct)
            if suggested is not None:
                updates[holding.holding_id] = suggested

        if updates:
            logger.info("Renewal cost updates recommended", extra={"update_count": len(updates)})
        return updates

    def financial_summary(
        self,
        holdings: Sequence[Holding],
        transactions: Sequence[Transaction],
        year: int | None = None,
    ) -> FinancialMetrics:
        start_time = time.time()

        with computation_duration_histogram.labels(operation="portfolio_metrics").time():
            metrics = portfolio_metrics(holdings, transactions, year=year, as_of=self.clock())

        duration_ms = (time.time() - start_time) * 1000
        log_portfolio_metrics(len(holdings), len(transactions), metrics.net_profit, metrics.roi, duration_ms)
        return metrics

    def domain_rois(self, holdings: Sequence[Holding], transactions: Sequence[Transaction]) -> List[DomainROI]:
        with computation_duration_histogram.labels(operation="domain_roi").time():
            return all_domain_rois(holdings, transactions, as_of=self.clock())

    def advanced_summary(self, holdings: Sequence[Holding], transactions: Sequence[Transaction]) -> AdvancedMetrics:
        with computation_duration_histogram.labels(operation="advanced_metrics").time():
            return advanced_metrics(holdings, transactions, as_of=self.clock())

    def expired_loss(self, holdings: Sequence[Holding]) -> ExpiredDomainLoss:
        return expired_domain_loss(holdings, as_of=self.clock())

    def start_expiry_monitoring(self, holdings: Sequence[Holding], on_alert: AlertCallback) -> None:
        """Start the monitor; every alert batch is counted and logged before reaching on_alert"""

        def dispatch(alerts: List[ExpiryAlert]) -> None:
            record_expiry_alerts(alerts)
            log_expiry_alerts(
                len(alerts),
                sum(1 for a in alerts if a.urgency == "critical"),
                sum(1 for a in alerts if a.is_expired),
            )
            on_alert(alerts)

        self.monitor.start_monitoring(holdings, dispatch)

    def stop_expiry_monitoring(self) -> None:
        self.monitor.stop_monitoring()


def create_analytics(config: Settings = default_settings) -> PortfolioAnalytics:
    """Configure logging and build a PortfolioAnalytics instance"""
    setup_logging(config.log_level)
    monitor = ExpiryMonitor(
        MonitoringSettings(
            critical_days=config.critical_days,
            urgent_days=config.urgent_days,
            warning_days=config.warning_days,
            alert_frequency=config.alert_frequency,
        )
    )
    return PortfolioAnalytics(monitor=monitor, config=config)
