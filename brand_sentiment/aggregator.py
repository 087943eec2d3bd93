"""
Sentiment Aggregator.

This module combines many per-mention sentiment results into one brand-level
summary: mean score and confidence, a five-bucket label breakdown and
per-source statistics.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Sequence

from .models import (
    AggregatedSentiment, OverallSentiment, SentimentLabel, SentimentResult,
    SourceStats
)

# Configure logging
logger = logging.getLogger(__name__)


class SentimentAggregator:
    """
    Aggregates sentiment results into an AggregatedSentiment.

    Aggregation is a pure function of its input: the same list always yields
    an equal summary, and the label breakdown always sums to the volume.
    """

    def aggregate(self, results: Sequence[SentimentResult]) -> AggregatedSentiment:
        """
        Aggregate sentiment results.

        Args:
            results: Sentiment results to combine

        Returns:
            AggregatedSentiment; an empty neutral summary for empty input
        """
        if not results:
            return AggregatedSentiment()

        volume = len(results)
        average_score = sum(r.score for r in results) / volume
        average_confidence = sum(r.confidence for r in results) / volume

        # Guard against float drift just outside the valid ranges
        average_score = max(-1.0, min(1.0, average_score))
        average_confidence = max(0.0, min(1.0, average_confidence))

        logger.debug(f"Aggregated {volume} results: score={average_score:.3f}")

        return AggregatedSentiment(
            overall=OverallSentiment(
                score=average_score,
                label=SentimentLabel.from_score(average_score),
                confidence=average_confidence
            ),
            breakdown=self._build_breakdown(results),
            volume=volume,
            sources=self._aggregate_sources(results)
        )

    def aggregate_by_type(self, typed_results: Dict[str, List[SentimentResult]]) -> Dict[str, AggregatedSentiment]:
        """Aggregate each group of results separately (e.g. posts, ads, emails)."""
        return {
            content_type: self.aggregate(results)
            for content_type, results in typed_results.items()
        }

    def _build_breakdown(self, results: Sequence[SentimentResult]) -> Dict[str, int]:
        """Count results per label bucket; every bucket is present."""
        breakdown = {label.value: 0 for label in SentimentLabel}
        for result in results:
            breakdown[SentimentLabel.from_score(result.score).value] += 1
        return breakdown

    def _aggregate_sources(self, results: Sequence[SentimentResult]) -> Dict[str, SourceStats]:
        """Group results by mention source; results without a source are skipped."""
        source_scores: Dict[str, List[float]] = defaultdict(list)
        for result in results:
            if result.source:
                source_scores[result.source].append(result.score)

        return {
            source: SourceStats(
                count=len(scores),
                average_score=sum(scores) / len(scores)
            )
            for source, scores in sorted(source_scores.items())
        }
