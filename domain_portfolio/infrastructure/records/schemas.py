"""Pydantic schemas for raw records exported by the portfolio data store"""

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class HoldingRecord(BaseModel):
    """Row from the domains table"""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1, description="Holding identifier")
    domain_name: str = Field(..., min_length=1)
    purchase_date: date
    purchase_cost: Optional[float] = None
    renewal_cost: Optional[float] = None
    renewal_cycle: int = Field(default=1, ge=1, description="Years per renewal")
    renewal_count: int = Field(default=0, ge=0)
    expiry_date: Optional[date] = None
    status: Literal["active", "for_sale", "sold", "expired"] = "active"
    estimated_value: Optional[float] = None
    sale_date: Optional[date] = None
    sale_price: Optional[float] = None
    platform_fee: Optional[float] = None
    registrar: Optional[str] = None

    @field_validator("expiry_date", "sale_date", mode="before")
    @classmethod
    def blank_dates_to_none(cls, value):
        return _blank_to_none(value)

    @field_validator("renewal_cycle", "renewal_count", mode="before")
    @classmethod
    def null_counts_to_default(cls, value, info):
        if value is None:
            return 1 if info.field_name == "renewal_cycle" else 0
        return value


class TransactionRecord(BaseModel):
    """Row from the transactions table"""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1)
    domain_id: str = Field(..., min_length=1)
    type: Literal[
        "buy",
        "renew",
        "sell",
        "transfer",
        "fee",
        "marketing",
        "advertising",
        "installment_payment",
    ]
    amount: float = 0.0
    date: date
    platform_fee: Optional[float] = None
    platform_fee_percentage: Optional[float] = None
    net_amount: Optional[float] = None
    category: Optional[str] = None
    notes: Optional[str] = None
    platform: Optional[str] = None


class RenewalCostHistoryRecord(BaseModel):
    """Row from the renewal_cost_history table"""

    model_config = ConfigDict(extra="ignore")

    domain_id: str = Field(..., min_length=1)
    renewal_date: date
    renewal_cost: float = Field(..., ge=0)
    currency: str = "USD"
    exchange_rate: float = 1.0
    base_amount: Optional[float] = None
    renewal_cycle: int = Field(default=1, ge=1)
    registrar: Optional[str] = None
    notes: Optional[str] = None
