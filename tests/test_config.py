"""
Unit tests for configuration management.
"""

import pytest
import sys
import os
from unittest.mock import patch

# Add the parent directory to the path so we can import the package
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from brand_sentiment.config import MonitorServiceConfig


class TestMonitorServiceConfig:
    """Test MonitorServiceConfig class."""

    def test_default_values(self):
        """Test configuration with default values."""
        config = MonitorServiceConfig()

        assert config.aws_region == "us-east-1"
        assert config.critical_threshold == -0.7
        assert config.warning_threshold == -0.3
        assert config.good_threshold == 0.3
        assert config.excellent_threshold == 0.7
        assert config.default_check_interval_seconds == 300.0
        assert config.provider_timeout_seconds == 5.0
        assert config.history_limit == 100
        assert config.max_alerts == 0
        assert config.enable_cloudwatch_metrics is False
        assert config.cloudwatch_namespace == "BrandSentimentMonitor"
        assert config.sns_topic_arn is None

    def test_custom_values(self):
        """Test configuration with custom values."""
        config = MonitorServiceConfig(
            critical_threshold=-0.8,
            warning_threshold=-0.4,
            default_check_interval_seconds=60,
            max_alerts=500
        )

        assert config.critical_threshold == -0.8
        assert config.warning_threshold == -0.4
        assert config.default_check_interval_seconds == 60
        assert config.max_alerts == 500

    def test_invalid_thresholds(self):
        """Test validation of threshold ordering."""
        with pytest.raises(ValueError, match="critical < warning"):
            MonitorServiceConfig(critical_threshold=-0.2, warning_threshold=-0.3)

        with pytest.raises(ValueError, match="good < excellent"):
            MonitorServiceConfig(good_threshold=0.8, excellent_threshold=0.7)

    def test_invalid_loop_settings(self):
        """Test validation of monitoring loop settings."""
        with pytest.raises(ValueError, match="Check interval must be positive"):
            MonitorServiceConfig(default_check_interval_seconds=0)

        with pytest.raises(ValueError, match="Provider timeout must be positive"):
            MonitorServiceConfig(provider_timeout_seconds=-1)

        with pytest.raises(ValueError, match="Scoring workers must be at least 1"):
            MonitorServiceConfig(scoring_workers=0)

        with pytest.raises(ValueError, match="Max alerts cannot be negative"):
            MonitorServiceConfig(max_alerts=-5)

        with pytest.raises(ValueError, match="History limit must be at least 1"):
            MonitorServiceConfig(history_limit=0)

    def test_from_environment(self):
        """Test loading configuration from environment variables."""
        env = {
            'AWS_REGION': 'eu-west-1',
            'CHECK_INTERVAL_SECONDS': '120',
            'PROVIDER_TIMEOUT_SECONDS': '2.5',
            'SCORING_WORKERS': '8',
            'HISTORY_LIMIT': '50',
            'MAX_ALERTS': '1000',
            'ENABLE_CLOUDWATCH_METRICS': 'TRUE',
            'CLOUDWATCH_NAMESPACE': 'CustomNamespace',
            'METRICS_PUBLISH_INTERVAL': '30',
            'SNS_TOPIC_ARN': 'arn:aws:sns:eu-west-1:123456789012:alerts',
        }

        with patch.dict(os.environ, env):
            config = MonitorServiceConfig.from_environment()

        assert config.aws_region == 'eu-west-1'
        assert config.default_check_interval_seconds == 120.0
        assert config.provider_timeout_seconds == 2.5
        assert config.scoring_workers == 8
        assert config.history_limit == 50
        assert config.max_alerts == 1000
        assert config.enable_cloudwatch_metrics is True
        assert config.cloudwatch_namespace == 'CustomNamespace'
        assert config.metrics_publish_interval == 30
        assert config.sns_topic_arn == 'arn:aws:sns:eu-west-1:123456789012:alerts'

    def test_from_environment_defaults(self):
        """Unset variables fall back to defaults."""
        keys = [
            'AWS_REGION', 'CHECK_INTERVAL_SECONDS', 'ENABLE_CLOUDWATCH_METRICS',
            'SNS_TOPIC_ARN', 'MAX_ALERTS',
        ]
        cleaned = {k: v for k, v in os.environ.items() if k not in keys}

        with patch.dict(os.environ, cleaned, clear=True):
            config = MonitorServiceConfig.from_environment()

        assert config.aws_region == 'us-east-1'
        assert config.default_check_interval_seconds == 300.0
        assert config.enable_cloudwatch_metrics is False
        assert config.sns_topic_arn is None
        assert config.max_alerts == 0
