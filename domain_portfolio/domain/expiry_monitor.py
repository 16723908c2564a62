"""Expiry monitoring - urgency tiers and a start/stop periodic check"""

import dataclasses
import logging
import threading
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from domain_portfolio.domain.exceptions import InvalidSettingsError
from domain_portfolio.domain.models import ExpiryAlert, ExpiryStats, Holding, MonitoringSettings
from domain_portfolio.utils.date_utils import days_until
from domain_portfolio.utils.timers import RepeatingTimer

logger = logging.getLogger(__name__)

DAY_SECONDS = 24 * 60 * 60

CHECK_INTERVAL_SECONDS = {
    "daily": DAY_SECONDS,
    "weekly": 7 * DAY_SECONDS,
    "monthly": 30 * DAY_SECONDS,
}

AlertCallback = Callable[[List[ExpiryAlert]], None]


def classify_urgency(days_until_expiry: int, settings: MonitoringSettings) -> str:
    """
    Map days until expiry to an urgency tier (first match wins):
    expired -> critical, <= critical_days -> critical,
    <= urgent_days -> urgent, <= warning_days -> warning, else normal.
    """
    if days_until_expiry < 0:
        return "critical"
    if days_until_expiry <= settings.critical_days:
        return "critical"
    if days_until_expiry <= settings.urgent_days:
        return "urgent"
    if days_until_expiry <= settings.warning_days:
        return "warning"
    return "normal"


def generate_alert_message(alert: ExpiryAlert) -> str:
    """Human-readable alert text, chosen by urgency tier"""
    name = alert.holding.domain_name
    days = alert.days_until_expiry

    if alert.is_expired:
        return f"Domain {name} has expired! Renew it immediately to avoid losing it."
    if alert.urgency == "critical":
        return f"Critical: domain {name} expires in {days} days! Renew it now."
    if alert.urgency == "urgent":
        return f"Important: domain {name} expires in {days} days; renew it soon."
    if alert.urgency == "warning":
        return f"Reminder: domain {name} expires in {days} days."
    return f"Domain {name} expires in {days} days."


def generate_alert_messages(alerts: Sequence[ExpiryAlert]) -> List[str]:
    return [generate_alert_message(alert) for alert in alerts]


class ExpiryMonitor:
    """
    Periodic expiry check over a set of holdings.

    States: idle (no timer) and monitoring (one timer). Starting twice keeps
    the single existing timer; stopping cancels it and drops the handle.
    Settings may change at any time and apply from the next check.
    """

    def __init__(
        self,
        settings: MonitoringSettings | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._settings = settings or MonitoringSettings.from_settings()
        self._clock = clock
        self._lock = threading.RLock()
        self._timer: Optional[RepeatingTimer] = None
        self._holdings: Sequence[Holding] = []
        self._on_alert: Optional[AlertCallback] = None
        self._last_check_time: Optional[datetime] = None

    @property
    def is_monitoring(self) -> bool:
        return self._timer is not None

    @property
    def last_check_time(self) -> Optional[datetime]:
        return self._last_check_time

    def get_settings(self) -> MonitoringSettings:
        return dataclasses.replace(self._settings)

    def update_settings(self, **changes) -> MonitoringSettings:
        """Merge setting changes; unknown keys or frequencies are rejected"""
        known = {f.name for f in dataclasses.fields(MonitoringSettings)}
        unknown = set(changes) - known
        if unknown:
            raise InvalidSettingsError(f"Unknown monitoring settings: {', '.join(sorted(unknown))}")

        frequency = changes.get("alert_frequency", self._settings.alert_frequency)
        if frequency not in CHECK_INTERVAL_SECONDS:
            raise InvalidSettingsError(f"Unsupported alert frequency: {frequency}")

        with self._lock:
            self._settings = dataclasses.replace(self._settings, **changes)
            return self.get_settings()

    def check_interval_seconds(self) -> float:
        return CHECK_INTERVAL_SECONDS.get(self._settings.alert_frequency, DAY_SECONDS)

    def check_expiry(self, holdings: Sequence[Holding]) -> List[ExpiryAlert]:
        """Classify every unsold, unexpired holding with an expiry date; most urgent first"""
        now = self._clock()
        settings = self._settings
        alerts: List[ExpiryAlert] = []

        for holding in holdings:
            if holding.status in ("sold", "expired") or holding.expiry_date is None:
                continue

            days = days_until(holding.expiry_date, now)
            alert = ExpiryAlert(
                holding=holding,
                days_until_expiry=days,
                urgency=classify_urgency(days, settings),
                is_expired=days < 0,
                is_expiring_soon=0 <= days <= settings.warning_days,
            )
            alert.message = generate_alert_message(alert)
            alerts.append(alert)

        self._last_check_time = now
        return sorted(alerts, key=lambda a: a.days_until_expiry)

    def get_expiring_domains(self, holdings: Sequence[Holding]) -> List[ExpiryAlert]:
        """Holdings that are expired or inside the warning window"""
        return [a for a in self.check_expiry(holdings) if a.urgency != "normal"]

    def get_critical_domains(self, holdings: Sequence[Holding]) -> List[ExpiryAlert]:
        return [a for a in self.check_expiry(holdings) if a.urgency == "critical"]

    def get_expired_domains(self, holdings: Sequence[Holding]) -> List[ExpiryAlert]:
        return [a for a in self.check_expiry(holdings) if a.is_expired]

    def expiry_stats(self, holdings: Sequence[Holding]) -> ExpiryStats:
        expiring = self.get_expiring_domains(holdings)
        return ExpiryStats(
            total=len(expiring),
            critical=sum(1 for a in expiring if a.urgency == "critical"),
            urgent=sum(1 for a in expiring if a.urgency == "urgent"),
            warning=sum(1 for a in expiring if a.urgency == "warning"),
            expired=sum(1 for a in expiring if a.is_expired),
            last_checked=self._last_check_time,
        )

    def start_monitoring(self, holdings: Sequence[Holding], on_alert: AlertCallback) -> None:
        """Check now, then keep checking on the configured cadence; no-op if already running"""
        with self._lock:
            if self._timer is not None:
                return

            self._holdings = holdings
            self._on_alert = on_alert

            alerts = self.get_expiring_domains(holdings)
            if alerts:
                on_alert(alerts)

            self._timer = RepeatingTimer(self.check_interval_seconds, self._tick, name="expiry-monitor")
            self._timer.start()

        logger.info(
            "Expiry monitoring started",
            extra={
                "holding_count": len(holdings),
                "alert_frequency": self._settings.alert_frequency,
                "interval_seconds": self.check_interval_seconds(),
            },
        )

    def stop_monitoring(self) -> None:
        """Cancel the periodic check; no-op when idle"""
        with self._lock:
            timer = self._timer
            if timer is None:
                return
            self._timer = None
            self._on_alert = None

        timer.cancel()
        if timer is not threading.current_thread():
            timer.join()

        logger.info("Expiry monitoring stopped")

    def _tick(self) -> None:
        on_alert = self._on_alert
        if on_alert is None:
            return

        alerts = self.get_expiring_domains(self._holdings)
        if not alerts:
            return

        try:
            on_alert(alerts)
        except Exception:
            logger.exception("Expiry alert callback failed", extra={"alert_count": len(alerts)})
