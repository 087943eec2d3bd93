"""
CloudWatch metrics for monitoring ticks and alerts.

The scheduler reports every tick (mention volume, aggregated score, duration,
errors) and every raised alert. Data points are queued in memory and sent to
CloudWatch in batches, either by the periodic flusher or on demand.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .aws import call_with_retries, error_code
from .config import MonitorServiceConfig
from .models import AlertSeverity

logger = logging.getLogger(__name__)


@dataclass
class MetricDatum:
    """One CloudWatch data point."""
    metric_name: str
    value: float
    unit: str = 'Count'
    dimensions: Dict[str, str] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_metric_data(self) -> Dict[str, Any]:
        """Shape expected by ``PutMetricData``."""
        data = {
            'MetricName': self.metric_name,
            'Value': self.value,
            'Unit': self.unit,
            'Timestamp': self.timestamp,
        }
        if self.dimensions:
            data['Dimensions'] = [{'Name': k, 'Value': v} for k, v in self.dimensions.items()]
        return data


class MonitoringMetricsPublisher:
    """
    Queues monitoring metrics and publishes them to CloudWatch.

    Every data point carries a ``BrandName`` dimension so brands can be graphed
    separately. Publishing failures are logged and the affected batch is
    dropped; metrics never interrupt monitoring.
    """

    def __init__(self, config: MonitorServiceConfig, namespace: Optional[str] = None,
                 publish_interval_seconds: Optional[int] = None, max_batch_size: int = 20):
        if max_batch_size < 1:
            raise ValueError("max_batch_size must be at least 1")

        self.namespace = namespace or config.cloudwatch_namespace
        self.publish_interval_seconds = publish_interval_seconds or config.metrics_publish_interval
        self.max_batch_size = max_batch_size
        self.cloudwatch = boto3.client('cloudwatch', region_name=config.aws_region)

        self.pending: List[MetricDatum] = []
        self._lock = asyncio.Lock()
        self._flusher: Optional[asyncio.Task] = None

        logger.info(
            f"MonitoringMetricsPublisher initialized: namespace={self.namespace}, "
            f"region={config.aws_region}, interval={self.publish_interval_seconds}s"
        )

    @property
    def is_running(self) -> bool:
        return self._flusher is not None and not self._flusher.done()

    async def start_publishing(self) -> None:
        """Start flushing the queue every publish interval."""
        if self.is_running:
            logger.warning("Metrics publishing is already running")
            return
        self._flusher = asyncio.create_task(self._flush_periodically())

    async def stop_publishing(self) -> None:
        """Stop the periodic flusher and send whatever is still queued."""
        if self._flusher is not None:
            self._flusher.cancel()
            await asyncio.gather(self._flusher, return_exceptions=True)
            self._flusher = None

        sent = await self.flush_metrics()
        logger.info(f"Stopped metrics publishing ({sent} metrics flushed on stop)")

    async def record_tick(self, brand_name: str, volume: int, score: float,
                          duration_ms: float, errors: int = 0) -> None:
        """
        Queue the metrics of one monitoring tick.

        Args:
            brand_name: Brand the tick ran for
            volume: Number of mentions scored
            score: Aggregated sentiment score of the tick
            duration_ms: Wall time of the tick
            errors: 1 when the tick failed, else 0
        """
        dimensions = {'BrandName': brand_name}
        timestamp = datetime.now(timezone.utc)

        await self._queue([
            MetricDatum('MentionVolume', float(volume), 'Count', dimensions, timestamp),
            MetricDatum('AggregatedSentimentScore', score, 'None', dimensions, timestamp),
            MetricDatum('TickDurationMs', duration_ms, 'Milliseconds', dimensions, timestamp),
            MetricDatum('TickErrors', float(errors), 'Count', dimensions, timestamp),
        ])

    async def record_alert(self, brand_name: str, severity: AlertSeverity) -> None:
        """Queue one SentimentAlerts data point for a raised alert."""
        await self._queue([MetricDatum(
            'SentimentAlerts', 1.0,
            dimensions={'BrandName': brand_name, 'Severity': severity.value}
        )])

    async def flush_metrics(self) -> int:
        """
        Send every queued data point now.

        Returns:
            Number of data points taken from the queue
        """
        async with self._lock:
            batch, self.pending = self.pending, []

        for start in range(0, len(batch), self.max_batch_size):
            await self._send(batch[start:start + self.max_batch_size])
        return len(batch)

    async def _queue(self, metrics: List[MetricDatum]) -> None:
        async with self._lock:
            self.pending.extend(metrics)

    async def _flush_periodically(self) -> None:
        while True:
            await asyncio.sleep(self.publish_interval_seconds)
            try:
                await self.flush_metrics()
            except Exception as e:
                logger.error(f"Periodic metrics flush failed: {e}", exc_info=True)

    async def _send(self, batch: List[MetricDatum]) -> None:
        metric_data = [metric.to_metric_data() for metric in batch]
        try:
            await call_with_retries(
                f"PutMetricData of {len(batch)} metrics",
                lambda: self.cloudwatch.put_metric_data(
                    Namespace=self.namespace,
                    MetricData=metric_data
                )
            )
        except ClientError as e:
            logger.error(
                f"CloudWatch rejected {len(batch)} metrics for namespace "
                f"'{self.namespace}': {error_code(e)} - {e}"
            )
        except BotoCoreError as e:
            logger.error(f"Dropped {len(batch)} metrics, CloudWatch unreachable: {e}")
        else:
            logger.debug(f"Published {len(batch)} metrics to {self.namespace}")
