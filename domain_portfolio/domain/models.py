"""Domain models - pure Python dataclasses representing portfolio entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional

from domain_portfolio.config import settings


@dataclass
class Holding:
    """A tracked domain name with acquisition, renewal and sale facts"""

    holding_id: str
    domain_name: str
    acquisition_date: date
    acquisition_cost: float = 0.0
    renewal_cost: Optional[float] = None
    renewal_cycle: int = 1  # years added by one renewal
    renewal_count: int = 0
    expiry_date: Optional[date] = None
    status: str = "active"  # active | for_sale | sold | expired
    estimated_value: Optional[float] = None
    sale_date: Optional[date] = None
    sale_price: Optional[float] = None
    sale_platform_fee: Optional[float] = None
    registrar: Optional[str] = None


@dataclass
class Transaction:
    """Money movement recorded against a holding"""

    transaction_id: str
    holding_id: str
    type: str  # buy | renew | sell | transfer | fee | marketing | advertising | installment_payment
    amount: float
    date: date
    platform_fee: Optional[float] = None
    platform_fee_percentage: Optional[float] = None
    net_amount: Optional[float] = None
    category: Optional[str] = None
    notes: Optional[str] = None
    platform: Optional[str] = None


@dataclass
class RenewalCostRecord:
    """Historical fact: what one renewal of a holding actually cost"""

    holding_id: str
    renewal_date: date
    renewal_cost: float
    currency: str = "USD"
    exchange_rate: float = 1.0
    base_amount: Optional[float] = None
    renewal_cycle: int = 1
    registrar: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class RenewalInfo:
    """Renewal position of one holding relative to a target year"""

    holding_id: str
    domain_name: str
    renewal_cost: float
    renewal_cycle: int
    next_renewal_date: date
    years_until_renewal: float
    needs_renewal_this_year: bool
    last_renewal_date: Optional[date] = None
    lapsed: bool = False  # active, but expiry already passed


@dataclass
class AnnualRenewalCost:
    """Renewal spend forecast for one calendar year"""

    target_year: int
    total_annual_cost: float
    needing_renewal: List[RenewalInfo]
    not_needing_renewal: List[RenewalInfo]
    cost_by_cycle: Dict[str, float]
    cost_by_month: List[float]  # index 0 = January


@dataclass
class RenewalForecast:
    """Annual renewal forecast together with its optimization findings"""

    annual: AnnualRenewalCost
    suggestions: List[str]


@dataclass
class RenewalCostAnalysis:
    """Cost history summary for a single holding"""

    holding_id: str
    domain_name: str
    current_renewal_cost: float
    average_renewal_cost: float
    cost_trend: str  # increasing | decreasing | stable
    cost_variance: float
    renewal_frequency: int
    next_expected_cost: float
    last_renewal_date: Optional[date] = None
    cost_history: List[RenewalCostRecord] = field(default_factory=list)


@dataclass
class CostTrendSummary:
    """Portfolio-wide view of renewal price movement"""

    average_cost_increase: float
    most_expensive_domains: List[str]
    cost_optimization_opportunities: List[str]


@dataclass
class AnnualRenewalCostAnalysis:
    """Estimated vs actual renewal spend for one year"""

    year: int
    total_estimated_cost: float
    total_actual_cost: float
    cost_accuracy: float
    domains_needing_renewal: int
    cost_by_month: List[float]
    cost_by_registrar: Dict[str, float]
    cost_trends: CostTrendSummary


@dataclass
class AnnualMetrics:
    """Sale/cost split restricted to one calendar year"""

    year: int
    annual_sales: float
    annual_net_revenue: float
    annual_platform_fees: float
    annual_costs: float
    annual_profit: float


@dataclass
class FinancialMetrics:
    """Portfolio-wide return metrics"""

    total_sales: float
    net_revenue: float
    total_platform_fees: float
    total_investment: float
    total_renewal_cost: float
    total_holding_cost: float
    gross_profit: float
    net_profit: float
    roi: float
    profit_margin: float
    gross_margin: float
    annual: AnnualMetrics
    total_holdings: int
    active_holdings: int
    sold_holdings: int
    avg_sale_price: float
    avg_purchase_price: float


@dataclass
class DomainROI:
    """Return metrics for a single holding"""

    holding_id: str
    domain_name: str
    total_investment: float
    total_sales: float
    net_revenue: float
    gross_profit: float
    roi: float
    holding_period_days: int
    status: str
    is_expired: bool
    sale_date: Optional[date] = None


@dataclass
class AdvancedMetrics:
    """Time-weighted and per-holding return statistics"""

    total_investment: float
    net_revenue: float
    investment_years: float  # since the oldest acquisition
    annualized_return: float  # percent
    win_rate: float  # percent of sold holdings sold above holding cost
    avg_holding_period_days: float  # sold holdings only
    success_rate: float  # percent of holdings sold
    best_performing_domain: Optional[str] = None
    worst_performing_domain: Optional[str] = None


@dataclass
class ExpiredHoldingLoss:
    """Investment written off for one lapsed holding"""

    holding_id: str
    domain_name: str
    total_investment: float
    expiry_date: Optional[date]
    loss_year: Optional[int]


@dataclass
class ExpiredDomainLoss:
    """Written-off investment across all lapsed holdings"""

    expired_holdings: List[ExpiredHoldingLoss]
    total_loss: float
    loss_by_year: Dict[int, float]


@dataclass
class ExpiryAlert:
    """Derived, per-tick expiry warning for one holding"""

    holding: Holding
    days_until_expiry: int
    urgency: str  # critical | urgent | warning | normal
    is_expired: bool
    is_expiring_soon: bool
    message: str = ""


@dataclass
class MonitoringSettings:
    """Tier thresholds and check cadence for the expiry monitor"""

    critical_days: int = 7
    urgent_days: int = 14
    warning_days: int = 30
    alert_frequency: str = "daily"  # daily | weekly | monthly

    @classmethod
    def from_settings(cls) -> "MonitoringSettings":
        return cls(
            critical_days=settings.critical_days,
            urgent_days=settings.urgent_days,
            warning_days=settings.warning_days,
            alert_frequency=settings.alert_frequency,
        )


@dataclass
class ExpiryStats:
    """Alert counts per urgency tier"""

    total: int
    critical: int
    urgent: int
    warning: int
    expired: int
    last_checked: Optional[datetime] = None
