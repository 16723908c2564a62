"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from domain_portfolio.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.utcnow().isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_renewal_forecast(
    target_year: int,
    needing_count: int,
    total_annual_cost: float,
    suggestion_count: int,
    duration_ms: float,
) -> None:
    """Log structured renewal forecast outcome"""
    logging.info(
        "Renewal forecast completed",
        extra={
            "step": "renewal_forecast",
            "target_year": target_year,
            "needing_renewal": needing_count,
            "total_annual_cost": total_annual_cost,
            "suggestion_count": suggestion_count,
            "duration_ms": duration_ms,
        },
    )


def log_portfolio_metrics(
    holding_count: int,
    transaction_count: int,
    net_profit: float,
    roi: float,
    duration_ms: float,
) -> None:
    """Log structured portfolio metrics outcome"""
    logging.info(
        "Portfolio metrics computed",
        extra={
            "step": "portfolio_metrics",
            "holding_count": holding_count,
            "transaction_count": transaction_count,
            "net_profit": net_profit,
            "roi": roi,
            "duration_ms": duration_ms,
        },
    )


def log_expiry_alerts(alert_count: int, critical_count: int, expired_count: int) -> None:
    """Log one batch of expiry alerts handed to the caller"""
    logging.warning(
        "Expiry alerts raised",
        extra={
            "step": "expiry_check",
            "alert_count": alert_count,
            "critical_count": critical_count,
            "expired_count": expired_count,
        },
    )
