"""
Configuration management for the brand sentiment monitor.
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class MonitorServiceConfig:
    """Configuration parameters for scoring, monitoring and alerting."""

    # AWS configuration
    aws_region: str = "us-east-1"

    # Brand reputation thresholds
    critical_threshold: float = -0.7
    warning_threshold: float = -0.3
    good_threshold: float = 0.3
    excellent_threshold: float = 0.7

    # Monitoring loop
    default_check_interval_seconds: float = 300.0  # 5 minutes
    provider_timeout_seconds: float = 5.0
    scoring_workers: int = 4

    # Sampling and retention
    brand_sample_size: int = 20
    alert_sample_size: int = 5
    history_limit: int = 100
    max_alerts: int = 0  # 0 keeps every alert

    # Observability and notification
    enable_cloudwatch_metrics: bool = False
    cloudwatch_namespace: str = "BrandSentimentMonitor"
    metrics_publish_interval: int = 60
    sns_topic_arn: Optional[str] = None

    def __post_init__(self):
        """Validate configuration."""
        if not -1.0 <= self.critical_threshold < self.warning_threshold <= 0.0:
            raise ValueError("Thresholds must satisfy -1 <= critical < warning <= 0")

        if not 0.0 <= self.good_threshold < self.excellent_threshold <= 1.0:
            raise ValueError("Thresholds must satisfy 0 <= good < excellent <= 1")

        if self.default_check_interval_seconds <= 0:
            raise ValueError("Check interval must be positive")

        if self.provider_timeout_seconds <= 0:
            raise ValueError("Provider timeout must be positive")

        if self.scoring_workers < 1:
            raise ValueError("Scoring workers must be at least 1")

        if self.max_alerts < 0:
            raise ValueError("Max alerts cannot be negative")

        if self.history_limit < 1:
            raise ValueError("History limit must be at least 1")

    @classmethod
    def from_environment(cls) -> 'MonitorServiceConfig':
        """Create configuration from environment variables."""
        return cls(
            aws_region=os.getenv('AWS_REGION', 'us-east-1'),
            default_check_interval_seconds=float(os.getenv('CHECK_INTERVAL_SECONDS', '300')),
            provider_timeout_seconds=float(os.getenv('PROVIDER_TIMEOUT_SECONDS', '5.0')),
            scoring_workers=int(os.getenv('SCORING_WORKERS', '4')),
            history_limit=int(os.getenv('HISTORY_LIMIT', '100')),
            max_alerts=int(os.getenv('MAX_ALERTS', '0')),
            enable_cloudwatch_metrics=os.getenv('ENABLE_CLOUDWATCH_METRICS', 'false').lower() == 'true',
            cloudwatch_namespace=os.getenv('CLOUDWATCH_NAMESPACE', 'BrandSentimentMonitor'),
            metrics_publish_interval=int(os.getenv('METRICS_PUBLISH_INTERVAL', '60')),
            sns_topic_arn=os.getenv('SNS_TOPIC_ARN') or None
        )
