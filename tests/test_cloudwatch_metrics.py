"""
Unit tests for the CloudWatch monitoring metrics publisher.
"""

import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock, patch
from botocore.exceptions import ClientError

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from brand_sentiment.config import MonitorServiceConfig
from brand_sentiment.metrics import MetricDatum, MonitoringMetricsPublisher
from brand_sentiment.models import AlertSeverity


@pytest.fixture
def service_config():
    """Create a test service configuration."""
    return MonitorServiceConfig(aws_region="us-east-1", enable_cloudwatch_metrics=True)


class TestMetricDatum:
    """Test MetricDatum class."""

    def test_default_timestamp_is_utc(self):
        metric = MetricDatum(metric_name="TickErrors", value=1.0)

        assert isinstance(metric.timestamp, datetime)
        assert metric.timestamp.tzinfo == timezone.utc

    def test_metric_data_shape(self):
        timestamp = datetime(2024, 5, 1, tzinfo=timezone.utc)
        metric = MetricDatum('MentionVolume', 25.0, 'Count', {'BrandName': 'Acme'}, timestamp)

        assert metric.to_metric_data() == {
            'MetricName': 'MentionVolume',
            'Value': 25.0,
            'Unit': 'Count',
            'Timestamp': timestamp,
            'Dimensions': [{'Name': 'BrandName', 'Value': 'Acme'}],
        }

    def test_no_dimensions_key_without_dimensions(self):
        assert 'Dimensions' not in MetricDatum('TickErrors', 0.0).to_metric_data()


class TestMonitoringMetricsPublisher:
    """Test MonitoringMetricsPublisher class."""

    @patch('boto3.client')
    def test_publisher_initialization(self, mock_boto3_client, service_config):
        mock_client = Mock()
        mock_boto3_client.return_value = mock_client

        publisher = MonitoringMetricsPublisher(service_config)

        assert publisher.namespace == "BrandSentimentMonitor"
        assert publisher.publish_interval_seconds == 60
        assert publisher.cloudwatch == mock_client
        assert not publisher.is_running
        mock_boto3_client.assert_called_once_with('cloudwatch', region_name='us-east-1')

    @patch('boto3.client')
    def test_invalid_batch_size(self, mock_boto3_client, service_config):
        with pytest.raises(ValueError):
            MonitoringMetricsPublisher(service_config, max_batch_size=0)

    @patch('boto3.client')
    @pytest.mark.asyncio
    async def test_start_stop_publishing(self, mock_boto3_client, service_config):
        """Stopping cancels the flusher and sends what is still queued."""
        mock_client = Mock()
        mock_boto3_client.return_value = mock_client
        publisher = MonitoringMetricsPublisher(service_config)

        await publisher.start_publishing()
        assert publisher.is_running

        await publisher.record_alert("Acme", AlertSeverity.WARNING)
        await publisher.stop_publishing()

        assert not publisher.is_running
        assert publisher.pending == []
        mock_client.put_metric_data.assert_called_once()

    @patch('boto3.client')
    @pytest.mark.asyncio
    async def test_record_tick(self, mock_boto3_client, service_config):
        """Tick metrics are queued with the brand dimension."""
        mock_boto3_client.return_value = Mock()
        publisher = MonitoringMetricsPublisher(service_config)

        await publisher.record_tick("Acme", volume=25, score=-0.4, duration_ms=12.5, errors=0)

        by_name = {m.metric_name: m for m in publisher.pending}
        assert set(by_name) == {
            'MentionVolume', 'AggregatedSentimentScore', 'TickDurationMs', 'TickErrors'
        }
        assert by_name['MentionVolume'].value == 25.0
        assert by_name['AggregatedSentimentScore'].value == -0.4
        assert by_name['TickDurationMs'].unit == 'Milliseconds'
        assert all(m.dimensions == {'BrandName': 'Acme'} for m in publisher.pending)

    @patch('boto3.client')
    @pytest.mark.asyncio
    async def test_record_alert(self, mock_boto3_client, service_config):
        mock_boto3_client.return_value = Mock()
        publisher = MonitoringMetricsPublisher(service_config)

        await publisher.record_alert("Acme", AlertSeverity.CRITICAL)

        metric = publisher.pending[0]
        assert metric.metric_name == 'SentimentAlerts'
        assert metric.dimensions == {'BrandName': 'Acme', 'Severity': 'critical'}

    @patch('boto3.client')
    @pytest.mark.asyncio
    async def test_flush_metrics(self, mock_boto3_client, service_config):
        """Flushing publishes queued metrics and empties the queue."""
        mock_client = Mock()
        mock_boto3_client.return_value = mock_client
        publisher = MonitoringMetricsPublisher(service_config)

        await publisher.record_tick("Acme", volume=3, score=0.1, duration_ms=5.0)
        sent = await publisher.flush_metrics()

        assert sent == 4
        mock_client.put_metric_data.assert_called_once()
        kwargs = mock_client.put_metric_data.call_args.kwargs
        assert kwargs['Namespace'] == "BrandSentimentMonitor"
        assert len(kwargs['MetricData']) == 4
        assert kwargs['MetricData'][0]['Dimensions'] == [{'Name': 'BrandName', 'Value': 'Acme'}]
        assert publisher.pending == []

    @patch('boto3.client')
    @pytest.mark.asyncio
    async def test_flush_empty_queue(self, mock_boto3_client, service_config):
        mock_client = Mock()
        mock_boto3_client.return_value = mock_client
        publisher = MonitoringMetricsPublisher(service_config)

        assert await publisher.flush_metrics() == 0
        mock_client.put_metric_data.assert_not_called()

    @patch('boto3.client')
    @pytest.mark.asyncio
    async def test_batching(self, mock_boto3_client, service_config):
        """Queued data points are split into batches of max_batch_size."""
        mock_client = Mock()
        mock_boto3_client.return_value = mock_client
        publisher = MonitoringMetricsPublisher(service_config)

        for _ in range(12):
            await publisher.record_tick("Acme", volume=1, score=0.0, duration_ms=1.0)
        await publisher.flush_metrics()

        sizes = [len(c.kwargs['MetricData']) for c in mock_client.put_metric_data.call_args_list]
        assert sizes == [20, 20, 8]

    @patch('boto3.client')
    @pytest.mark.asyncio
    async def test_throttling_retry(self, mock_boto3_client, service_config):
        """Throttled calls are retried with backoff."""
        mock_client = Mock()
        throttle = ClientError({'Error': {'Code': 'Throttling', 'Message': 'Rate exceeded'}}, 'PutMetricData')
        mock_client.put_metric_data.side_effect = [throttle, None]
        mock_boto3_client.return_value = mock_client
        publisher = MonitoringMetricsPublisher(service_config)

        await publisher.record_alert("Acme", AlertSeverity.WARNING)
        with patch('brand_sentiment.aws.asyncio.sleep', new=AsyncMock()) as mock_sleep:
            await publisher.flush_metrics()

        assert mock_client.put_metric_data.call_count == 2
        mock_sleep.assert_awaited_once_with(1.0)

    @patch('boto3.client')
    @pytest.mark.asyncio
    async def test_access_denied_drops_batch(self, mock_boto3_client, service_config):
        """A rejected batch is logged and dropped, never raised."""
        mock_client = Mock()
        denied = ClientError({'Error': {'Code': 'AccessDenied', 'Message': 'Denied'}}, 'PutMetricData')
        mock_client.put_metric_data.side_effect = denied
        mock_boto3_client.return_value = mock_client
        publisher = MonitoringMetricsPublisher(service_config)

        await publisher.record_alert("Acme", AlertSeverity.WARNING)
        await publisher.flush_metrics()

        assert mock_client.put_metric_data.call_count == 1
        assert publisher.pending == []
