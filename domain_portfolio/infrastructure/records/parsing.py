"""Convert raw data-store rows into domain models"""

from typing import Any, Dict, Iterable, List, Mapping

from pydantic import ValidationError

from domain_portfolio.domain.exceptions import InvalidRecordError
from domain_portfolio.domain.models import Holding, RenewalCostRecord, Transaction
from domain_portfolio.infrastructure.records.schemas import (
    HoldingRecord,
    RenewalCostHistoryRecord,
    TransactionRecord,
)


def parse_holdings(rows: Iterable[Mapping[str, Any]]) -> List[Holding]:
    """
    Validate domain rows and map them onto Holding.

    Raises:
        InvalidRecordError: A row is missing required fields or has bad values
    """
    try:
        records = [HoldingRecord.model_validate(row) for row in rows]
    except ValidationError as e:
        raise InvalidRecordError(f"Invalid holding record: {e}") from e

    return [
        Holding(
            holding_id=r.id,
            domain_name=r.domain_name,
            acquisition_date=r.purchase_date,
            acquisition_cost=r.purchase_cost or 0.0,
            renewal_cost=r.renewal_cost,
            renewal_cycle=r.renewal_cycle,
            renewal_count=r.renewal_count,
            expiry_date=r.expiry_date,
            status=r.status,
            estimated_value=r.estimated_value,
            sale_date=r.sale_date,
            sale_price=r.sale_price,
            sale_platform_fee=r.platform_fee,
            registrar=r.registrar,
        )
        for r in records
    ]


def parse_transactions(rows: Iterable[Mapping[str, Any]]) -> List[Transaction]:
    """
    Validate transaction rows and map them onto Transaction.

    Raises:
        InvalidRecordError: A row is missing required fields or has bad values
    """
    try:
        records = [TransactionRecord.model_validate(row) for row in rows]
    except ValidationError as e:
        raise InvalidRecordError(f"Invalid transaction record: {e}") from e

    return [
        Transaction(
            transaction_id=r.id,
            holding_id=r.domain_id,
            type=r.type,
            amount=r.amount,
            date=r.date,
            platform_fee=r.platform_fee,
            platform_fee_percentage=r.platform_fee_percentage,
            net_amount=r.net_amount,
            category=r.category,
            notes=r.notes,
            platform=r.platform,
        )
        for r in records
    ]


def parse_renewal_history(rows: Iterable[Mapping[str, Any]]) -> Dict[str, List[RenewalCostRecord]]:
    """
    Group renewal cost rows per holding, newest renewal first.

    Raises:
        InvalidRecordError: A row is missing required fields or has bad values
    """
    try:
        records = [RenewalCostHistoryRecord.model_validate(row) for row in rows]
    except ValidationError as e:
        raise InvalidRecordError(f"Invalid renewal cost record: {e}") from e

    histories: Dict[str, List[RenewalCostRecord]] = {}
    for r in records:
        histories.setdefault(r.domain_id, []).append(
            RenewalCostRecord(
                holding_id=r.domain_id,
                renewal_date=r.renewal_date,
                renewal_cost=r.renewal_cost,
                currency=r.currency,
                exchange_rate=r.exchange_rate,
                base_amount=r.base_amount,
                renewal_cycle=r.renewal_cycle,
                registrar=r.registrar,
                notes=r.notes,
            )
        )

    for history in histories.values():
        history.sort(key=lambda record: record.renewal_date, reverse=True)

    return histories
