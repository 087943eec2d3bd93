#!/usr/bin/env python3
"""
Containerized brand sentiment monitor.

Starts a real-time monitoring job for every configured brand, publishes tick
metrics to CloudWatch when enabled, delivers alerts to SNS or the log, and
runs until SIGTERM/SIGINT.
"""

import asyncio
import logging
import os
import signal
import sys
from typing import List, Optional

from brand_sentiment.config import MonitorServiceConfig
from brand_sentiment.metrics import MonitoringMetricsPublisher
from brand_sentiment.notifiers import LoggingNotifier, Notifier, SnsNotifier
from brand_sentiment.providers import MockMentionProvider, MultiSourceMentionProvider
from brand_sentiment.service import BrandSentimentService


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)


def parse_brands(value: Optional[str]) -> List[str]:
    """Split a comma separated brand list, dropping blanks."""
    if not value:
        return []
    return [brand.strip() for brand in value.split(',') if brand.strip()]


class BrandMonitorApp:
    """
    Wires the service to its collaborators and owns its lifecycle.

    Manages:
    - Mention provider and notifier selection
    - CloudWatch metrics publishing
    - One monitoring job per configured brand
    - Graceful shutdown
    """

    def __init__(self, config: MonitorServiceConfig, brands: List[str], user_id: str):
        self.config = config
        self.brands = brands
        self.user_id = user_id
        self.monitoring_ids: List[str] = []

        mock_provider = MockMentionProvider()
        self.provider = MultiSourceMentionProvider(
            mock_provider.as_source_fetchers(),
            timeout_seconds=config.provider_timeout_seconds
        )

        self.notifier: Notifier = (
            SnsNotifier(config.sns_topic_arn, region_name=config.aws_region)
            if config.sns_topic_arn else LoggingNotifier()
        )

        self.metrics: Optional[MonitoringMetricsPublisher] = None
        if config.enable_cloudwatch_metrics:
            self.metrics = MonitoringMetricsPublisher(config)

        self.service = BrandSentimentService(
            config=config,
            provider=self.provider,
            notifier=self.notifier,
            metrics=self.metrics
        )

        logger.info(f"BrandMonitorApp initialized for brands {brands} (user {user_id})")

    async def start(self) -> None:
        """Start metrics publishing and one monitor per brand."""
        if self.metrics:
            await self.metrics.start_publishing()

        for brand in self.brands:
            result = await self.service.start_realtime_monitoring(self.user_id, brand)
            if not result['success']:
                logger.error(f"Could not monitor '{brand}': {result['error']}")
                continue
            self.monitoring_ids.append(result['monitoring_id'])
            logger.info(f"Monitoring '{brand}' as {result['monitoring_id']}: {result['config']}")

    async def stop(self) -> None:
        """Stop all monitors and flush outstanding metrics."""
        logger.info("Stopping brand monitor...")

        for monitoring_id in self.monitoring_ids:
            self.service.stop_monitoring(monitoring_id)
        await self.service.shutdown()

        if self.metrics:
            await self.metrics.stop_publishing()

        alerts = self.service.get_user_alerts(self.user_id)
        logger.info(f"Brand monitor stopped; {alerts['count']} alerts raised this session")


class SignalHandler:
    """Handles graceful shutdown on SIGTERM/SIGINT."""

    def __init__(self):
        self.shutdown_event = asyncio.Event()

    def setup_signal_handlers(self) -> None:
        """Set up signal handlers for graceful shutdown."""
        if sys.platform != 'win32':
            loop = asyncio.get_running_loop()
            for sig in (signal.SIGTERM, signal.SIGINT):
                loop.add_signal_handler(sig, self._signal_handler, sig)
        else:
            signal.signal(signal.SIGINT, self._signal_handler)
            signal.signal(signal.SIGTERM, self._signal_handler)

    def _signal_handler(self, signum=None, frame=None) -> None:
        """Handle shutdown signals."""
        logger.info(f"Received shutdown signal {signum}")
        self.shutdown_event.set()

    async def wait_for_shutdown(self) -> None:
        """Wait for shutdown signal."""
        await self.shutdown_event.wait()


async def main() -> None:
    """Main entry point for the containerized application."""
    logger.info("Starting brand sentiment monitor")

    try:
        config = MonitorServiceConfig.from_environment()
        logger.info(f"Loaded configuration: {config}")

        brands = parse_brands(os.getenv('MONITORED_BRANDS'))
        if not brands:
            logger.error("MONITORED_BRANDS is empty; nothing to monitor")
            sys.exit(1)

        app = BrandMonitorApp(config, brands, os.getenv('MONITOR_USER_ID', 'default'))

        signal_handler = SignalHandler()
        signal_handler.setup_signal_handlers()

        await app.start()
        try:
            await signal_handler.wait_for_shutdown()
        finally:
            await app.stop()

        logger.info("Brand sentiment monitor exited cleanly")

    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
