"""
Unit tests for sentiment aggregation.
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from brand_sentiment.aggregator import SentimentAggregator
from brand_sentiment.models import SentimentLabel, SentimentResult


def make_result(score, confidence=0.8, source=None):
    """Build a SentimentResult with a consistent label."""
    return SentimentResult(
        score=score,
        label=SentimentLabel.from_score(score),
        confidence=confidence,
        source=source
    )


class TestSentimentAggregator:
    """Test SentimentAggregator class."""

    def test_empty_input(self):
        """Aggregating nothing yields a neutral, zero-volume summary."""
        aggregated = SentimentAggregator().aggregate([])

        assert aggregated.volume == 0
        assert aggregated.overall.score == 0.0
        assert aggregated.overall.label == SentimentLabel.NEUTRAL
        assert aggregated.overall.confidence == 0.0
        assert aggregated.breakdown == {}
        assert aggregated.sources == {}

    def test_mean_score_and_label(self):
        """Mean of [1, 1, 1, -1, -1] is 0.2, which is still neutral."""
        results = [make_result(s) for s in (1.0, 1.0, 1.0, -1.0, -1.0)]

        aggregated = SentimentAggregator().aggregate(results)

        assert aggregated.overall.score == pytest.approx(0.2)
        assert aggregated.overall.label == SentimentLabel.NEUTRAL
        assert aggregated.volume == 5

    def test_breakdown_has_every_bucket(self):
        results = [make_result(s) for s in (1.0, 1.0, 1.0, -1.0, -1.0)]

        breakdown = SentimentAggregator().aggregate(results).breakdown

        assert breakdown == {
            'very_negative': 2,
            'negative': 0,
            'neutral': 0,
            'positive': 0,
            'very_positive': 3,
        }
        assert sum(breakdown.values()) == 5

    def test_bucket_boundaries(self):
        """Boundary scores land in the bucket the threshold table names."""
        results = [make_result(s) for s in (0.6, 0.2, -0.2, -0.6, 0.61, -0.61)]

        breakdown = SentimentAggregator().aggregate(results).breakdown

        assert breakdown['positive'] == 1
        assert breakdown['neutral'] == 2
        assert breakdown['negative'] == 1
        assert breakdown['very_positive'] == 1
        assert breakdown['very_negative'] == 1

    def test_mean_confidence(self):
        results = [make_result(0.5, confidence=0.6), make_result(-0.5, confidence=1.0)]

        aggregated = SentimentAggregator().aggregate(results)

        assert aggregated.overall.confidence == pytest.approx(0.8)

    def test_sources(self):
        """Per-source stats group results by their mention source."""
        results = [
            make_result(0.4, source='social'),
            make_result(0.2, source='social'),
            make_result(-0.6, source='review'),
            make_result(0.9),
        ]

        sources = SentimentAggregator().aggregate(results).sources

        assert list(sources) == ['review', 'social']
        assert sources['social'].count == 2
        assert sources['social'].average_score == pytest.approx(0.3)
        assert sources['review'].count == 1
        assert sources['review'].average_score == pytest.approx(-0.6)

    def test_idempotent(self):
        """Aggregating the same list twice gives equal summaries."""
        aggregator = SentimentAggregator()
        results = [make_result(s, source='news') for s in (0.3, -0.1, 0.7)]

        assert aggregator.aggregate(results) == aggregator.aggregate(results)

    def test_aggregate_by_type(self):
        aggregator = SentimentAggregator()

        grouped = aggregator.aggregate_by_type({
            'post': [make_result(0.6), make_result(0.4)],
            'ad': [make_result(-0.4)],
        })

        assert set(grouped) == {'post', 'ad'}
        assert grouped['post'].overall.score == pytest.approx(0.5)
        assert grouped['ad'].overall.label == SentimentLabel.NEGATIVE
