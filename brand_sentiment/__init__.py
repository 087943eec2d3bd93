"""
Brand sentiment scoring and real-time reputation monitoring.
"""

from .models import (
    Alert, AlertSeverity, AggregatedSentiment, Mention, MentionSource,
    MonitoringConfig, MonitoringOptions, RiskAssessment, RiskLevel,
    SentimentLabel, SentimentResult
)
from .config import MonitorServiceConfig
from .scorer import LexiconScorer
from .aggregator import SentimentAggregator
from .risk import RiskAssessor
from .service import BrandSentimentService

__all__ = [
    'Alert',
    'AlertSeverity',
    'AggregatedSentiment',
    'Mention',
    'MentionSource',
    'MonitoringConfig',
    'MonitoringOptions',
    'RiskAssessment',
    'RiskLevel',
    'SentimentLabel',
    'SentimentResult',
    'MonitorServiceConfig',
    'LexiconScorer',
    'SentimentAggregator',
    'RiskAssessor',
    'BrandSentimentService'
]
