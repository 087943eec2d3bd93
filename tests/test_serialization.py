"""
Unit tests for JSON serialization utilities.
"""

import json
import pytest
import sys
import os
from datetime import datetime

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from brand_sentiment.models import (
    Alert, AlertSeverity, Mention, MentionSource, OverallSentiment, RiskLevel,
    SentimentLabel, SentimentResult
)
from brand_sentiment.serialization import alert_to_json, serialize_to_json


class TestSerialization:
    """Test JSON serialization functions."""

    def test_datetime_and_enum(self):
        data = {'when': datetime(2024, 1, 2, 3, 4, 5), 'label': SentimentLabel.POSITIVE}

        assert json.loads(serialize_to_json(data)) == {
            'when': '2024-01-02T03:04:05',
            'label': 'positive',
        }

    def test_nested_dataclasses(self):
        result = SentimentResult(score=0.3, label=SentimentLabel.POSITIVE, confidence=0.6)

        plain = json.loads(serialize_to_json(result))

        assert plain['label'] == 'positive'
        assert plain['entities'] == {'organizations': [], 'numbers': []}
        assert isinstance(plain['analyzed_at'], str)

    def test_sets_become_sorted_lists(self):
        assert serialize_to_json({'words': {'b', 'a'}}) == '{"words": ["a", "b"]}'

    def test_non_ascii_is_kept(self):
        assert serialize_to_json({'brand': 'Café'}) == '{"brand": "Café"}'

    def test_unserializable_object(self):
        with pytest.raises(ValueError, match="Failed to serialize"):
            serialize_to_json({'obj': object()})


class TestAlertSerialization:
    """Test alert serialization."""

    def test_alert_json(self):
        alert = Alert(
            monitoring_id="monitor-1",
            user_id="user-1",
            brand_name="Acme",
            severity=AlertSeverity.WARNING,
            sentiment=OverallSentiment(score=-0.4, label=SentimentLabel.NEGATIVE, confidence=0.5),
            risk_level=RiskLevel.HIGH,
            mentions=[Mention(text="meh", source=MentionSource.REVIEW, platform="yelp")]
        )

        plain = json.loads(alert_to_json(alert))

        assert plain['severity'] == 'warning'
        assert plain['risk_level'] == 'high'
        assert plain['alert_type'] == 'sentiment_threshold'
        assert plain['sentiment'] == {'score': -0.4, 'label': 'negative', 'confidence': 0.5}
        assert plain['mentions'][0]['platform'] == 'yelp'
        assert plain['mentions'][0]['source'] == 'review'
        assert plain['id'] == alert.id
