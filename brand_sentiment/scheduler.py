"""
Monitoring Scheduler.

Runs one asyncio task per active monitoring job. Each task ticks
immediately, then again ``check_interval`` seconds after the start of the
previous tick, until the job is stopped. A tick fetches new mentions, scores
them in parallel, aggregates, assesses risk and raises an alert when the
aggregated score falls below the job's threshold.
"""

import asyncio
import functools
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Callable, Dict, List, Optional

from .aggregator import SentimentAggregator
from .alert_store import AlertStore
from .config import MonitorServiceConfig
from .history import HistoryEntry, SentimentHistory
from .metrics import MonitoringMetricsPublisher
from .models import (
    AggregatedSentiment, Alert, AlertSeverity, Mention, MonitoringConfig,
    MonitoringOptions, RiskAssessment, SentimentResult
)
from .notifiers import Notifier
from .providers import MentionProvider, ProviderError
from .registry import MonitorRegistry
from .risk import RiskAssessor
from .scorer import LexiconScorer

# Configure logging
logger = logging.getLogger(__name__)


class MonitoringScheduler:
    """
    Owns the polling loops of all monitoring jobs.

    A job is either active (registered, looping) or stopped (unregistered,
    terminal). ``stop`` flips the job inactive, removes it from the registry
    and wakes its loop; a tick already in flight finishes but records no
    alert and sends no notification once the job is inactive.

    Attributes:
        registry: Active jobs by monitoring id
        alert_store: Where raised alerts are recorded
        provider: Mention source collaborator
        notifier: Alert sink, optional
        history: Per-brand score history, optional
        metrics: CloudWatch publisher, optional
    """

    def __init__(
        self,
        registry: MonitorRegistry,
        alert_store: AlertStore,
        provider: MentionProvider,
        scorer: Optional[LexiconScorer] = None,
        aggregator: Optional[SentimentAggregator] = None,
        risk_assessor: Optional[RiskAssessor] = None,
        notifier: Optional[Notifier] = None,
        history: Optional[SentimentHistory] = None,
        metrics: Optional[MonitoringMetricsPublisher] = None,
        config: Optional[MonitorServiceConfig] = None,
        executor: Optional[ThreadPoolExecutor] = None,
        clock: Callable[[], datetime] = datetime.utcnow
    ):
        self.config = config or MonitorServiceConfig()
        self.registry = registry
        self.alert_store = alert_store
        self.provider = provider
        self.scorer = scorer or LexiconScorer()
        self.aggregator = aggregator or SentimentAggregator()
        self.risk_assessor = risk_assessor or RiskAssessor(
            critical_threshold=self.config.critical_threshold,
            warning_threshold=self.config.warning_threshold
        )
        self.notifier = notifier
        self.history = history
        self.metrics = metrics
        self.clock = clock

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=self.config.scoring_workers,
            thread_name_prefix='sentiment-scorer'
        )

        self._tasks: Dict[str, asyncio.Task] = {}
        self._stop_events: Dict[str, asyncio.Event] = {}

    def start(self, user_id: str, brand_name: str,
              options: Optional[MonitoringOptions] = None) -> MonitoringConfig:
        """
        Register a new job and start its loop.

        Must be called from a running event loop. The first tick runs as soon
        as the loop gets control.

        Raises:
            ValueError: If the brand name is empty
        """
        options = options or MonitoringOptions(
            alert_threshold=self.config.warning_threshold,
            check_interval=self.config.default_check_interval_seconds
        )
        config = MonitoringConfig.from_options(user_id, brand_name, options)
        self.registry.add(config)

        stop_event = asyncio.Event()
        self._stop_events[config.id] = stop_event

        task = asyncio.create_task(self._run(config.id, stop_event))
        self._tasks[config.id] = task
        task.add_done_callback(functools.partial(self._loop_finished, config.id))

        logger.info(
            f"Started monitoring '{brand_name}' for user {user_id} "
            f"(id={config.id}, every {config.check_interval}s)"
        )
        return config

    def stop(self, monitoring_id: str) -> Dict[str, object]:
        """
        Stop a job. Safe to call repeatedly.

        Returns:
            {'success': True, 'message': ...} when the job was active, else
            {'success': False, 'error': 'Monitor not found'}
        """
        config = self.registry.remove(monitoring_id)

        stop_event = self._stop_events.pop(monitoring_id, None)
        if stop_event is not None:
            stop_event.set()

        if config is None:
            return {'success': False, 'error': 'Monitor not found'}

        logger.info(f"Stopped monitoring '{config.brand_name}' (id={monitoring_id})")
        return {'success': True, 'message': 'Monitoring stopped'}

    def get_task(self, monitoring_id: str) -> Optional[asyncio.Task]:
        """The loop task of a job, or None once it has finished."""
        return self._tasks.get(monitoring_id)

    def active_task_count(self) -> int:
        return len(self._tasks)

    async def shutdown(self) -> None:
        """Stop every job and wait for all loop tasks to finish."""
        for config in self.registry.list():
            self.stop(config.id)

        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

        if self._owns_executor:
            self._executor.shutdown(wait=False)

        logger.info(f"Monitoring scheduler shut down ({len(tasks)} loops cancelled)")

    def _loop_finished(self, monitoring_id: str, task: asyncio.Task) -> None:
        self._tasks.pop(monitoring_id, None)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Monitoring loop {monitoring_id} ended unexpectedly: {error}", exc_info=error)

    async def _run(self, monitoring_id: str, stop_event: asyncio.Event) -> None:
        """Tick until the job is stopped."""
        loop = asyncio.get_running_loop()

        while not stop_event.is_set():
            config = self.registry.get(monitoring_id)
            if config is None or not config.is_active:
                break

            tick_started = loop.time()
            await self._tick_safely(config)

            delay = max(0.0, config.check_interval - (loop.time() - tick_started))
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=delay)
            except asyncio.TimeoutError:
                pass

        logger.debug(f"Monitoring loop {monitoring_id} ended")

    async def _tick_safely(self, config: MonitoringConfig) -> None:
        """Run one tick; any failure is logged and the loop carries on."""
        started = time.perf_counter()
        aggregated = None
        errors = 0

        try:
            aggregated = await self.run_tick(config)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            errors = 1
            logger.error(
                f"Monitoring tick failed for '{config.brand_name}' (id={config.id}): {e}",
                exc_info=True
            )

        if self.metrics:
            try:
                await self.metrics.record_tick(
                    brand_name=config.brand_name,
                    volume=aggregated.volume if aggregated else 0,
                    score=aggregated.overall.score if aggregated else 0.0,
                    duration_ms=(time.perf_counter() - started) * 1000,
                    errors=errors
                )
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Recording tick metrics failed for '{config.brand_name}': {e}", exc_info=True)

    async def run_tick(self, config: MonitoringConfig) -> Optional[AggregatedSentiment]:
        """
        Execute one monitoring tick for ``config``.

        Returns:
            The tick's aggregate, or None when the job was already inactive

        Raises:
            ProviderError: If the mention provider exceeds its overall time limit
        """
        if not config.is_active:
            return None

        tick_time = self.clock()
        mentions = await self._fetch_mentions(config)

        results = await self.score_mentions(mentions)
        aggregated = self.aggregator.aggregate(results)
        risk = self.risk_assessor.assess_risk(aggregated)

        if self.history is not None:
            self.history.record(config.user_id, config.brand_name, HistoryEntry(
                score=aggregated.overall.score,
                volume=aggregated.volume,
                risk_level=risk.level,
                timestamp=tick_time
            ))

        logger.info(
            f"Tick for '{config.brand_name}': {aggregated.volume} mentions, "
            f"score={aggregated.overall.score:.3f}, risk={risk.level.value}"
        )

        if mentions and aggregated.overall.score < config.alert_threshold:
            alert = self._record_alert(config, aggregated, risk, mentions)
            if alert is not None:
                await self._notify(config, alert)

        config.last_check = tick_time
        return aggregated

    async def score_mentions(self, mentions: List[Mention]) -> List[SentimentResult]:
        """Score mentions in the worker pool; returns once all are scored."""
        if not mentions:
            return []

        loop = asyncio.get_running_loop()
        return list(await asyncio.gather(*(
            loop.run_in_executor(self._executor, self.scorer.score_mention, mention)
            for mention in mentions
        )))

    async def _fetch_mentions(self, config: MonitoringConfig) -> List[Mention]:
        # Per-source timeouts are the provider's job; this bounds the whole call
        time_limit = self.config.provider_timeout_seconds * max(1, len(config.sources))
        try:
            return await asyncio.wait_for(
                self.provider.fetch_mentions(
                    config.keywords,
                    config.sources,
                    config.timeframe,
                    since=config.last_check
                ),
                timeout=time_limit
            )
        except asyncio.TimeoutError:
            raise ProviderError(f"Mention provider timed out after {time_limit}s")

    def _record_alert(self, config: MonitoringConfig, aggregated: AggregatedSentiment,
                      risk: RiskAssessment, mentions: List[Mention]) -> Optional[Alert]:
        # No await between this check and the store write
        if not config.is_active:
            logger.debug(f"Monitor {config.id} stopped during tick, alert discarded")
            return None

        score = aggregated.overall.score
        severity = (
            AlertSeverity.CRITICAL if score < self.config.critical_threshold
            else AlertSeverity.WARNING
        )

        alert = Alert(
            monitoring_id=config.id,
            user_id=config.user_id,
            brand_name=config.brand_name,
            severity=severity,
            sentiment=aggregated.overall,
            risk_level=risk.level,
            mentions=list(mentions[:self.config.alert_sample_size])
        )
        self.alert_store.record_alert(alert)

        logger.warning(
            f"Alert {alert.id} [{severity.value}] for '{config.brand_name}': "
            f"score {score:.3f} below threshold {config.alert_threshold}"
        )
        return alert

    async def _notify(self, config: MonitoringConfig, alert: Alert) -> None:
        if self.metrics:
            try:
                await self.metrics.record_alert(config.brand_name, alert.severity)
            except Exception as e:
                logger.error(f"Recording alert metric failed for alert {alert.id}: {e}", exc_info=True)

        if self.notifier is None or not config.is_active:
            return

        try:
            await self.notifier.notify(config.user_id, alert)
        except Exception as e:
            logger.error(f"Notifier failed for alert {alert.id}: {e}", exc_info=True)
