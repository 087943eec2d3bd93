"""
Per-brand sentiment history and trend analysis.
"""

import threading
from collections import defaultdict, deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Deque, Dict, List, Tuple

from .models import RiskLevel

TREND_WINDOW = 5
TREND_THRESHOLD = 0.1


@dataclass
class HistoryEntry:
    """One recorded sentiment snapshot for a (user, brand) pair."""
    score: float
    volume: int
    risk_level: RiskLevel
    timestamp: datetime = field(default_factory=datetime.utcnow)


class SentimentHistory:
    """
    Bounded history of aggregated scores per (user, brand).

    Each pair keeps at most ``limit`` entries; older entries are dropped.
    """

    def __init__(self, limit: int = 100):
        if limit < 1:
            raise ValueError("History limit must be at least 1")

        self.limit = limit
        self._history: Dict[Tuple[str, str], Deque[HistoryEntry]] = defaultdict(
            lambda: deque(maxlen=self.limit)
        )
        self._lock = threading.Lock()

    def record(self, user_id: str, brand_name: str, entry: HistoryEntry) -> None:
        with self._lock:
            self._history[(user_id, brand_name)].append(entry)

    def entries(self, user_id: str, brand_name: str) -> List[HistoryEntry]:
        with self._lock:
            return list(self._history.get((user_id, brand_name), ()))

    def trends(self, user_id: str, brand_name: str) -> Dict[str, Any]:
        """
        Compare the most recent scores with the ones before them.

        Up to the last five entries are averaged and compared with the same
        number of entries preceding them. With fewer than ten entries both
        windows shrink to half of the history. A change above 0.1 is
        "improving", below -0.1 "declining", anything else "stable".
        """
        history = self.entries(user_id, brand_name)

        if len(history) < 2:
            return {
                'trend': 'insufficient_data',
                'direction': 'stable',
                'change': 0.0,
                'data_points': len(history),
            }

        window = min(TREND_WINDOW, len(history) // 2)
        recent = history[-window:]
        older = history[-2 * window:-window]

        recent_average = sum(e.score for e in recent) / len(recent)
        historical_average = sum(e.score for e in older) / len(older)
        change = recent_average - historical_average

        if change > TREND_THRESHOLD:
            trend = 'improving'
        elif change < -TREND_THRESHOLD:
            trend = 'declining'
        else:
            trend = 'stable'

        if change > 0:
            direction = 'positive'
        elif change < 0:
            direction = 'negative'
        else:
            direction = 'stable'

        return {
            'trend': trend,
            'direction': direction,
            'change': change,
            'recent_average': recent_average,
            'historical_average': historical_average,
            'data_points': len(history),
        }
