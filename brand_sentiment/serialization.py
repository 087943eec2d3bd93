"""
JSON serialization utilities for sentiment data models.
"""

import json
from dataclasses import fields, is_dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from .models import Alert


class SentimentJSONEncoder(json.JSONEncoder):
    """Custom JSON encoder for sentiment data types."""

    def default(self, obj: Any) -> Any:
        """Convert sentiment objects to JSON-serializable format."""
        if isinstance(obj, datetime):
            return obj.isoformat()
        elif isinstance(obj, Enum):
            return obj.value
        elif isinstance(obj, (set, frozenset)):
            return sorted(obj)
        elif is_dataclass(obj) and not isinstance(obj, type):
            # Shallow conversion so nested enums and datetimes reach this encoder
            return {f.name: getattr(obj, f.name) for f in fields(obj)}
        return super().default(obj)


def serialize_to_json(obj: Any) -> str:
    """Serialize an object to JSON string."""
    try:
        return json.dumps(obj, cls=SentimentJSONEncoder, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Failed to serialize object to JSON: {e}")


def alert_to_json(alert: Alert) -> str:
    """Serialize an Alert to JSON string."""
    return serialize_to_json(alert)
