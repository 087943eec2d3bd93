"""
Tests for the containerized application entry point.
"""

import pytest
import sys
import os
from unittest.mock import Mock, patch

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from brand_sentiment.config import MonitorServiceConfig
from brand_sentiment.notifiers import LoggingNotifier, SnsNotifier
from main import BrandMonitorApp, SignalHandler, parse_brands


class TestParseBrands:
    """Test brand list parsing."""

    def test_comma_separated(self):
        assert parse_brands("Acme, Globex ,,Initech") == ["Acme", "Globex", "Initech"]

    def test_empty(self):
        assert parse_brands(None) == []
        assert parse_brands("  ") == []


class TestBrandMonitorApp:
    """Test BrandMonitorApp wiring and lifecycle."""

    @pytest.mark.asyncio
    async def test_start_and_stop(self):
        app = BrandMonitorApp(MonitorServiceConfig(), ["Acme", "Globex"], "ops")

        assert isinstance(app.notifier, LoggingNotifier)
        assert app.metrics is None

        await app.start()

        assert len(app.monitoring_ids) == 2
        assert {m['brand_name'] for m in app.service.list_monitors("ops")} == {"Acme", "Globex"}

        await app.stop()

        assert app.service.list_monitors() == []
        assert app.service.scheduler.active_task_count() == 0

    @pytest.mark.asyncio
    async def test_failed_brand_is_skipped(self):
        """A brand the service rejects is logged and the others still start."""
        app = BrandMonitorApp(MonitorServiceConfig(), ["Acme", ""], "ops")

        await app.start()

        assert len(app.monitoring_ids) == 1
        assert [m['brand_name'] for m in app.service.list_monitors("ops")] == ["Acme"]

        await app.stop()

    @patch('boto3.client')
    def test_sns_notifier_selected(self, mock_boto3_client):
        mock_boto3_client.return_value = Mock()
        config = MonitorServiceConfig(sns_topic_arn="arn:aws:sns:us-east-1:123456789012:alerts")

        app = BrandMonitorApp(config, ["Acme"], "ops")

        assert isinstance(app.notifier, SnsNotifier)

    @patch('boto3.client')
    def test_metrics_enabled(self, mock_boto3_client):
        mock_boto3_client.return_value = Mock()
        config = MonitorServiceConfig(enable_cloudwatch_metrics=True)

        app = BrandMonitorApp(config, ["Acme"], "ops")

        assert app.metrics is not None
        assert app.service.scheduler.metrics is app.metrics


class TestSignalHandler:
    """Test SignalHandler class."""

    @pytest.mark.asyncio
    async def test_signal_sets_shutdown_event(self):
        handler = SignalHandler()

        handler._signal_handler(15)
        await handler.wait_for_shutdown()

        assert handler.shutdown_event.is_set()
