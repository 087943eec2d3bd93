"""
Brand sentiment service.

Facade over the scorer, aggregator, risk assessor and monitoring scheduler.
Public operations return plain result dictionaries carrying a ``success``
flag. Invalid arguments give ``{'success': False, 'error': ...}`` instead of
an exception.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from .aggregator import SentimentAggregator
from .alert_store import AlertStore
from .config import MonitorServiceConfig
from .feedback import FeedbackLog
from .history import SentimentHistory
from .metrics import MonitoringMetricsPublisher
from .models import (
    AggregatedSentiment, MentionSource, MonitoringOptions, RiskAssessment,
    SentimentResult
)
from .notifiers import Notifier
from .providers import MentionProvider, MockMentionProvider, parse_timeframe
from .registry import MonitorRegistry
from .risk import RiskAssessor
from .scheduler import MonitoringScheduler
from .scorer import LexiconScorer

logger = logging.getLogger(__name__)

COMPETITOR_TOP_MENTIONS = 10
STRENGTH_SCORE = 0.3
WEAKNESS_SCORE = -0.3
CONTENT_REVISION_SCORE = -0.2


class BrandSentimentService:
    """
    Entry point for scoring, brand analysis and real-time monitoring.

    All state (monitors, alerts, history, feedback) lives in memory for the
    lifetime of the service.
    """

    def __init__(
        self,
        config: Optional[MonitorServiceConfig] = None,
        provider: Optional[MentionProvider] = None,
        notifier: Optional[Notifier] = None,
        metrics: Optional[MonitoringMetricsPublisher] = None,
        scorer: Optional[LexiconScorer] = None
    ):
        self.config = config or MonitorServiceConfig()
        self.provider = provider or MockMentionProvider()
        self.scorer = scorer or LexiconScorer()
        self.aggregator = SentimentAggregator()
        self.risk_assessor = RiskAssessor(
            critical_threshold=self.config.critical_threshold,
            warning_threshold=self.config.warning_threshold
        )

        self.registry = MonitorRegistry()
        self.alert_store = AlertStore(max_alerts=self.config.max_alerts)
        self.history = SentimentHistory(limit=self.config.history_limit)
        self.feedback = FeedbackLog()

        self.scheduler = MonitoringScheduler(
            registry=self.registry,
            alert_store=self.alert_store,
            provider=self.provider,
            scorer=self.scorer,
            aggregator=self.aggregator,
            risk_assessor=self.risk_assessor,
            notifier=notifier,
            history=self.history,
            metrics=metrics,
            config=self.config
        )

    # Scoring

    def analyze_single_content(self, text: str, context: str = "general") -> SentimentResult:
        """Score one text and record the analysis in the feedback log."""
        result = self.scorer.score(text, context=context)
        self.feedback.record_analysis(text if isinstance(text, str) else "", result)
        return result

    async def analyze_brand_sentiment(self, brand_name: str,
                                      options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Gather, score and aggregate current mentions of a brand.

        Args:
            brand_name: Brand to analyze
            options: Optional ``sources`` (default social only), ``keywords``
                and ``timeframe`` (default 7d)

        Returns:
            Result with the aggregate, risk assessment, up to 20 sample
            mentions and the sources queried, or {'success': False, 'error'}
            for an empty brand name, an unknown source or a bad timeframe
        """
        try:
            if not brand_name:
                raise ValueError("Brand name cannot be empty")
            options = options or {}
            sources = [MentionSource(s) if isinstance(s, str) else s
                       for s in options.get('sources') or [MentionSource.SOCIAL]]
            keywords = list(options.get('keywords') or [brand_name])
            timeframe = options.get('timeframe', '7d')
            parse_timeframe(timeframe)
        except ValueError as e:
            return self._rejected('analyze_brand_sentiment', e)

        mentions = await self.provider.fetch_mentions(keywords, sources, timeframe)
        results = await self.scheduler.score_mentions(mentions)
        aggregated = self.aggregator.aggregate(results)
        risk = self.risk_assessor.assess_risk(aggregated)

        logger.info(
            f"Brand analysis for '{brand_name}': {aggregated.volume} mentions, "
            f"score={aggregated.overall.score:.3f}"
        )

        return {
            'success': True,
            'brand_name': brand_name,
            'sentiment': aggregated,
            'risk': risk,
            'mentions': mentions[:self.config.brand_sample_size],
            'data_sources': [s.value for s in sources],
            'generated_at': datetime.utcnow()
        }

    def generate_action_recommendations(self, aggregated: AggregatedSentiment,
                                        risk: RiskAssessment) -> List[Dict[str, Any]]:
        return self.risk_assessor.generate_action_recommendations(aggregated, risk)

    # Monitoring

    async def start_realtime_monitoring(self, user_id: str, brand_name: str,
                                        options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Start a monitoring job for ``brand_name`` on behalf of ``user_id``.

        Returns {'success': False, 'error'} on an empty brand name, an unknown
        option or an invalid option value; no job is started then.
        """
        base = MonitoringOptions(
            alert_threshold=self.config.warning_threshold,
            check_interval=self.config.default_check_interval_seconds
        )
        try:
            monitoring_options = MonitoringOptions.from_dict(options, base=base)
            parse_timeframe(monitoring_options.timeframe)
            config = self.scheduler.start(user_id, brand_name, monitoring_options)
        except (TypeError, ValueError) as e:
            return self._rejected('start_realtime_monitoring', e)

        return {
            'success': True,
            'monitoring_id': config.id,
            'config': config.summary(),
            'status': 'active'
        }

    def stop_monitoring(self, monitoring_id: str) -> Dict[str, Any]:
        return self.scheduler.stop(monitoring_id)

    def get_monitoring_status(self, monitoring_id: str) -> Dict[str, Any]:
        config = self.registry.get(monitoring_id)
        if config is None:
            return {'success': False, 'error': 'Monitor not found'}
        return {'success': True, 'status': config.status()}

    def list_monitors(self, user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """Status of every active job, optionally for one user only."""
        return [config.status() for config in self.registry.list(user_id)]

    def get_user_alerts(self, user_id: str) -> Dict[str, Any]:
        alerts = self.alert_store.get_user_alerts(user_id)
        return {'success': True, 'alerts': alerts, 'count': len(alerts)}

    def get_sentiment_trends(self, user_id: str, brand_name: str) -> Dict[str, Any]:
        return self.history.trends(user_id, brand_name)

    async def shutdown(self) -> None:
        """Stop all monitoring jobs."""
        await self.scheduler.shutdown()

    # Competitor and campaign analysis

    async def analyze_competitor_sentiment(self, brands: Sequence[str],
                                           options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Compare the current sentiment of several brands.

        Each brand gets its aggregate, top mentions, strengths (themes of
        mentions scoring above 0.3) and weaknesses (themes of mentions
        scoring below -0.3). Brands are ranked by score. Returns
        {'success': False, 'error'} when no brand or a bad timeframe is given.
        """
        options = options or {}
        timeframe = options.get('timeframe', '30d')
        try:
            if not brands or not all(brands):
                raise ValueError("At least one non-empty brand name is required")
            parse_timeframe(timeframe)
        except ValueError as e:
            return self._rejected('analyze_competitor_sentiment', e)
        sources = [MentionSource.SOCIAL, MentionSource.REVIEW]

        competitors: Dict[str, Dict[str, Any]] = {}
        for brand in brands:
            mentions = await self.provider.fetch_mentions([brand], sources, timeframe)
            results = await self.scheduler.score_mentions(mentions)
            aggregated = self.aggregator.aggregate(results)

            competitors[brand] = {
                'sentiment': aggregated.overall,
                'volume': aggregated.volume,
                'top_mentions': mentions[:COMPETITOR_TOP_MENTIONS],
                'strengths': self._themes_where(results, lambda score: score > STRENGTH_SCORE),
                'weaknesses': self._themes_where(results, lambda score: score < WEAKNESS_SCORE),
            }

        comparison = self._compare_competitors(competitors)

        insights = []
        leader = comparison['rankings'][0]
        if competitors[leader]['strengths']:
            insights.append(
                f"Market leader {leader} excels in: {', '.join(competitors[leader]['strengths'])}"
            )

        return {
            'success': True,
            'competitors': competitors,
            'comparison': comparison,
            'strategic_insights': insights,
            'timeframe': timeframe,
            'generated_at': datetime.utcnow()
        }

    def analyze_campaign_sentiment(self, campaign_id: str,
                                   content: Dict[str, List[Dict[str, Any]]]) -> Dict[str, Any]:
        """
        Score the posts, ads and emails of a campaign.

        ``content`` may hold ``posts`` and ``ads`` (each item with ``id`` and
        ``text``) and ``emails`` (each with ``id``, ``subject`` and ``body``).
        Items scoring below -0.2 are listed for revision.
        """
        content = content or {}
        analyses = []

        for post in content.get('posts', []):
            analyses.append({
                'type': 'post',
                'id': post.get('id'),
                'sentiment': self.analyze_single_content(post.get('text', ''), 'social_post'),
                'engagement': post.get('engagement', {})
            })

        for ad in content.get('ads', []):
            analyses.append({
                'type': 'ad',
                'id': ad.get('id'),
                'sentiment': self.analyze_single_content(ad.get('text', ''), 'advertisement'),
                'performance': ad.get('performance', {})
            })

        for email in content.get('emails', []):
            text = f"{email.get('subject', '')} {email.get('body', '')}".strip()
            analyses.append({
                'type': 'email',
                'id': email.get('id'),
                'sentiment': self.analyze_single_content(text, 'email'),
                'metrics': email.get('metrics', {})
            })

        by_type: Dict[str, List[SentimentResult]] = {}
        for analysis in analyses:
            by_type.setdefault(analysis['type'], []).append(analysis['sentiment'])

        overall = self.aggregator.aggregate([a['sentiment'] for a in analyses])

        optimizations = []
        flagged = [a['id'] for a in analyses if a['sentiment'].score < CONTENT_REVISION_SCORE]
        if flagged:
            optimizations.append({
                'type': 'content_sentiment',
                'priority': 'high',
                'recommendation': 'Revise negative-sentiment content to be more positive',
                'affected_content': flagged,
                'expected_impact': 'Improved audience reception'
            })

        return {
            'success': True,
            'campaign_id': campaign_id,
            'sentiment': {
                'overall': overall.overall,
                'by_type': self.aggregator.aggregate_by_type(by_type)
            },
            'content_analysis': analyses,
            'optimizations': optimizations,
            'generated_at': datetime.utcnow()
        }

    # Feedback

    def record_feedback(self, text: str, label: Any) -> Dict[str, Any]:
        return self.feedback.record_feedback(text, label)

    def get_learning_stats(self) -> Dict[str, Any]:
        return self.feedback.learning_stats()

    @staticmethod
    def _rejected(operation: str, error: Exception) -> Dict[str, Any]:
        logger.warning(f"{operation} rejected: {error}")
        return {'success': False, 'error': str(error)}

    @staticmethod
    def _themes_where(results: Sequence[SentimentResult], predicate) -> List[str]:
        themes = {
            theme
            for result in results if predicate(result.score)
            for theme in result.themes if theme != 'general'
        }
        return sorted(themes)

    @staticmethod
    def _compare_competitors(competitors: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
        brands = list(competitors)
        rankings = sorted(brands, key=lambda b: competitors[b]['sentiment'].score, reverse=True)

        volume_leader = brands[0]
        for brand in brands[1:]:
            if competitors[brand]['volume'] > competitors[volume_leader]['volume']:
                volume_leader = brand

        return {
            'rankings': rankings,
            'average_sentiment': sum(competitors[b]['sentiment'].score for b in brands) / len(brands),
            'volume_leader': volume_leader
        }
