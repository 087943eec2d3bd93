"""
Feedback log of single-text analyses and user corrections.
"""

import logging
import threading
from collections import Counter
from datetime import datetime
from typing import Any, Dict, List

from .models import SentimentResult

logger = logging.getLogger(__name__)

TEXT_PREVIEW_LENGTH = 200
RECENT_ENTRIES = 10


class FeedbackLog:
    """
    Records every single-text analysis and any user feedback on it.

    The log feeds ``learning_stats()``; nothing is trained from it, the
    lexicon is static.
    """

    def __init__(self):
        self._entries: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def record_analysis(self, text: str, result: SentimentResult) -> None:
        entry = {
            'text': (text or '')[:TEXT_PREVIEW_LENGTH],
            'prediction': {
                'score': result.score,
                'label': result.label.value,
                'confidence': result.confidence,
                'method': result.method,
            },
            'context': result.context,
            'timestamp': datetime.utcnow(),
        }
        with self._lock:
            self._entries.append(entry)

    def record_feedback(self, text: str, user_feedback: Any) -> Dict[str, Any]:
        """Store a user's correction for a text."""
        entry = {
            'text': (text or '')[:TEXT_PREVIEW_LENGTH],
            'prediction': {'score': 0.0, 'label': 'user_feedback'},
            'user_feedback': user_feedback,
            'timestamp': datetime.utcnow(),
        }
        with self._lock:
            self._entries.append(entry)

        logger.info("Recorded user feedback")
        return {'success': True, 'message': 'Feedback recorded'}

    def learning_stats(self) -> Dict[str, Any]:
        """
        Summary of the log.

        Returns:
            total_analyses: Number of entries (analyses and feedback)
            recent_analyses: The last 10 entries
            average_confidence: Mean confidence over entries that carry one
            method_distribution: Entry count per scoring method
        """
        with self._lock:
            entries = list(self._entries)

        confidences = [
            e['prediction']['confidence'] for e in entries
            if 'confidence' in e['prediction']
        ]
        methods = Counter(e['prediction'].get('method', 'unknown') for e in entries)

        return {
            'total_analyses': len(entries),
            'recent_analyses': entries[-RECENT_ENTRIES:],
            'average_confidence': sum(confidences) / len(confidences) if confidences else 0.0,
            'method_distribution': dict(methods),
        }
