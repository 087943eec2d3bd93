"""
In-memory store of raised sentiment alerts.
"""

import logging
import threading
from typing import List

from .models import Alert

logger = logging.getLogger(__name__)


class AlertStore:
    """
    Append-only, thread-safe list of alerts.

    Alerts are kept in insertion order. With ``max_alerts`` > 0 only the most
    recent ``max_alerts`` alerts are retained; 0 keeps every alert.
    """

    def __init__(self, max_alerts: int = 0):
        if max_alerts < 0:
            raise ValueError("max_alerts cannot be negative")

        self.max_alerts = max_alerts
        self._alerts: List[Alert] = []
        self._lock = threading.Lock()

    def record_alert(self, alert: Alert) -> None:
        with self._lock:
            self._alerts.append(alert)

            if self.max_alerts and len(self._alerts) > self.max_alerts:
                dropped = len(self._alerts) - self.max_alerts
                self._alerts = self._alerts[-self.max_alerts:]
                logger.debug(f"Alert store full, dropped {dropped} oldest alerts")

    def get_user_alerts(self, user_id: str) -> List[Alert]:
        """A user's alerts, newest first."""
        with self._lock:
            alerts = [a for a in self._alerts if a.user_id == user_id]

        # Equal timestamps keep the later-recorded alert first
        return sorted(reversed(alerts), key=lambda a: a.timestamp, reverse=True)

    def get_alerts_for_monitor(self, monitoring_id: str) -> List[Alert]:
        """A job's alerts in the order they were recorded."""
        with self._lock:
            return [a for a in self._alerts if a.monitoring_id == monitoring_id]

    def count(self) -> int:
        with self._lock:
            return len(self._alerts)
