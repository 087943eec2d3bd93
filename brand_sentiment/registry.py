"""
Registry of active monitoring jobs.
"""

import logging
import threading
from typing import Dict, List, Optional

from .models import MonitoringConfig

logger = logging.getLogger(__name__)


class MonitorRegistry:
    """
    Thread-safe map of monitoring id -> MonitoringConfig.

    Only active jobs are registered: a stopped job is removed, so lookups
    never return an inactive configuration. Listing returns a snapshot that
    stays valid while jobs are added or removed concurrently.
    """

    def __init__(self):
        self._monitors: Dict[str, MonitoringConfig] = {}
        self._lock = threading.Lock()

    def add(self, config: MonitoringConfig) -> None:
        with self._lock:
            if config.id in self._monitors:
                raise ValueError(f"Monitor {config.id} is already registered")
            self._monitors[config.id] = config
        logger.info(f"Registered monitor {config.id} for '{config.brand_name}' (user {config.user_id})")

    def get(self, monitoring_id: str) -> Optional[MonitoringConfig]:
        with self._lock:
            return self._monitors.get(monitoring_id)

    def remove(self, monitoring_id: str) -> Optional[MonitoringConfig]:
        """Deactivate and unregister a job; returns it, or None if unknown."""
        with self._lock:
            config = self._monitors.pop(monitoring_id, None)
            if config is not None:
                config.is_active = False

        if config is not None:
            logger.info(f"Unregistered monitor {monitoring_id}")
        return config

    def list(self, user_id: Optional[str] = None) -> List[MonitoringConfig]:
        with self._lock:
            monitors = list(self._monitors.values())

        if user_id is not None:
            monitors = [m for m in monitors if m.user_id == user_id]
        return monitors

    def __len__(self) -> int:
        with self._lock:
            return len(self._monitors)

    def __contains__(self, monitoring_id: str) -> bool:
        with self._lock:
            return monitoring_id in self._monitors
