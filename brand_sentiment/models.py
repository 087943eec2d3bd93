"""
Core data models for the brand sentiment monitor.

This module defines the data structures used throughout the scoring,
aggregation and monitoring pipeline: mentions, sentiment results, brand-level
aggregates, risk assessments, monitoring configurations and alerts.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
import uuid


class MentionSource(Enum):
    """Categories of places a brand mention can come from."""
    SOCIAL = "social"
    NEWS = "news"
    REVIEW = "review"
    CUSTOM = "custom"


class SentimentLabel(Enum):
    """Five discrete sentiment buckets derived from a continuous score."""
    VERY_NEGATIVE = "very_negative"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    POSITIVE = "positive"
    VERY_POSITIVE = "very_positive"

    @classmethod
    def from_score(cls, score: float) -> 'SentimentLabel':
        """
        Map a score in [-1, 1] to its label bucket.

        Buckets:
            score > 0.6          -> very_positive
            0.2 < score <= 0.6   -> positive
            -0.2 <= score <= 0.2 -> neutral
            -0.6 <= score < -0.2 -> negative
            score < -0.6         -> very_negative
        """
        if score > 0.6:
            return cls.VERY_POSITIVE
        if score > 0.2:
            return cls.POSITIVE
        if score >= -0.2:
            return cls.NEUTRAL
        if score >= -0.6:
            return cls.NEGATIVE
        return cls.VERY_NEGATIVE


def label_for_score(score: float) -> SentimentLabel:
    """Label for a score, using the fixed threshold table."""
    return SentimentLabel.from_score(score)


class RiskLevel(Enum):
    """Reputation risk levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AlertSeverity(Enum):
    """Severity of a raised sentiment alert."""
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass
class Mention:
    """A single piece of text about a brand, attributed to a source."""
    text: str
    source: MentionSource = MentionSource.SOCIAL
    platform: str = ""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    published_at: datetime = field(default_factory=datetime.utcnow)
    author: str = ""
    engagement: Dict[str, int] = field(default_factory=dict)

    def __post_init__(self):
        """Normalize the source field."""
        if isinstance(self.source, str):
            self.source = MentionSource(self.source)
        if not self.platform:
            self.platform = self.source.value


@dataclass
class EntityTags:
    """Heuristic entity candidates found in a text."""
    organizations: List[str] = field(default_factory=list)
    numbers: List[str] = field(default_factory=list)


@dataclass
class SentimentResult:
    """
    Lexicon score for a single text.

    Attributes:
        score: Sentiment score from -1.0 (very negative) to 1.0 (very positive)
        label: Bucket derived from score
        confidence: Confidence level from 0.0 to 1.0
        themes: Subject-matter tags, never empty
        positives: Positive lexicon words matched in the text
        negatives: Negative lexicon words matched in the text
        entities: Organization and number candidates
        emotions: Emotional tone tags
        method: Which scoring path produced the result
        context: Content type the caller supplied (general, social, email, ...)
        source: Mention source value when the text came from a mention
        mention_id: Mention id when the text came from a mention
        token_count: Number of whitespace tokens in the text
        analyzed_at: When the analysis was performed
    """
    score: float
    label: SentimentLabel
    confidence: float
    themes: List[str] = field(default_factory=lambda: ["general"])
    positives: List[str] = field(default_factory=list)
    negatives: List[str] = field(default_factory=list)
    entities: EntityTags = field(default_factory=EntityTags)
    emotions: List[str] = field(default_factory=list)
    method: str = "lexicon"
    context: str = "general"
    source: Optional[str] = None
    mention_id: Optional[str] = None
    token_count: int = 0
    analyzed_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self):
        """Validate sentiment result data."""
        if not -1.0 <= self.score <= 1.0:
            raise ValueError(
                f"Invalid score {self.score}. Must be between -1.0 and 1.0"
            )
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(
                f"Invalid confidence {self.confidence}. Must be between 0.0 and 1.0"
            )
        if self.label != label_for_score(self.score):
            raise ValueError(
                f"Label {self.label.value} does not match score {self.score}"
            )

    @classmethod
    def neutral(cls, method: str = "fallback", context: str = "general",
                confidence: float = 0.4) -> 'SentimentResult':
        """Neutral result used for empty input and scoring failures."""
        return cls(
            score=0.0,
            label=SentimentLabel.NEUTRAL,
            confidence=confidence,
            method=method,
            context=context
        )


@dataclass
class OverallSentiment:
    """Headline score, label and confidence of an aggregate."""
    score: float = 0.0
    label: SentimentLabel = SentimentLabel.NEUTRAL
    confidence: float = 0.0

    def __post_init__(self):
        """Validate overall sentiment data."""
        if not -1.0 <= self.score <= 1.0:
            raise ValueError(
                f"Invalid score {self.score}. Must be between -1.0 and 1.0"
            )
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(
                f"Invalid confidence {self.confidence}. Must be between 0.0 and 1.0"
            )


@dataclass
class SourceStats:
    """Per-source mention count and mean score."""
    count: int = 0
    average_score: float = 0.0


@dataclass
class AggregatedSentiment:
    """
    Brand-level summary over many sentiment results.

    Attributes:
        overall: Mean score, derived label and mean confidence
        breakdown: Number of results per label bucket
        volume: Number of results aggregated
        sources: Count and mean score per mention source
    """
    overall: OverallSentiment = field(default_factory=OverallSentiment)
    breakdown: Dict[str, int] = field(default_factory=dict)
    volume: int = 0
    sources: Dict[str, SourceStats] = field(default_factory=dict)

    def __post_init__(self):
        """Validate aggregate data."""
        if self.volume < 0:
            raise ValueError("Volume cannot be negative")
        if self.breakdown and sum(self.breakdown.values()) != self.volume:
            raise ValueError("Sum of breakdown counts must equal volume")

    def negative_ratio(self) -> float:
        """Share of negative and very negative results."""
        if self.volume == 0:
            return 0.0
        negatives = (
            self.breakdown.get(SentimentLabel.NEGATIVE.value, 0)
            + self.breakdown.get(SentimentLabel.VERY_NEGATIVE.value, 0)
        )
        return negatives / self.volume


@dataclass
class RiskAssessment:
    """Reputation risk derived from an aggregate."""
    level: RiskLevel
    score: float
    factors: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)


@dataclass
class MonitoringOptions:
    """
    Recognized options for a monitoring job.

    Attributes:
        sources: Mention sources to poll
        keywords: Search terms; empty means the brand name alone
        alert_threshold: Aggregated score below which an alert is raised
        check_interval: Seconds between the starts of consecutive ticks
        timeframe: Look-back window passed to the mention provider
    """
    sources: List[MentionSource] = field(
        default_factory=lambda: [MentionSource.SOCIAL, MentionSource.REVIEW]
    )
    keywords: List[str] = field(default_factory=list)
    alert_threshold: float = -0.3
    check_interval: float = 300.0
    timeframe: str = "1h"

    FIELDS = ("sources", "keywords", "alert_threshold", "check_interval", "timeframe")

    def __post_init__(self):
        """Normalize sources and validate values."""
        self.sources = [MentionSource(s) if isinstance(s, str) else s for s in self.sources]
        if not self.sources:
            raise ValueError("At least one source is required")
        if not -1.0 <= self.alert_threshold <= 1.0:
            raise ValueError("Alert threshold must be between -1.0 and 1.0")
        if self.check_interval <= 0:
            raise ValueError("Check interval must be positive")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]],
                  base: Optional['MonitoringOptions'] = None) -> 'MonitoringOptions':
        """
        Build options from a plain dictionary.

        Missing keys fall back to ``base`` (or the class defaults). Unknown
        keys are rejected so typos do not silently become defaults.
        """
        data = data or {}
        unknown = set(data) - set(cls.FIELDS)
        if unknown:
            raise ValueError(f"Unknown monitoring options: {sorted(unknown)}")

        base = base or cls()
        values = {name: getattr(base, name) for name in cls.FIELDS}
        values.update({k: v for k, v in data.items() if v is not None})
        values["sources"] = list(values["sources"])
        values["keywords"] = list(values["keywords"])
        return cls(**values)


@dataclass
class MonitoringConfig:
    """State of one (user, brand) monitoring job while it is registered."""
    user_id: str
    brand_name: str
    sources: List[MentionSource]
    keywords: List[str]
    alert_threshold: float
    check_interval: float
    timeframe: str = "1h"
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    is_active: bool = True
    started_at: datetime = field(default_factory=datetime.utcnow)
    last_check: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def from_options(cls, user_id: str, brand_name: str,
                     options: MonitoringOptions) -> 'MonitoringConfig':
        """Create a job configuration from validated options."""
        if not brand_name:
            raise ValueError("Brand name cannot be empty")
        return cls(
            user_id=user_id,
            brand_name=brand_name,
            sources=list(options.sources),
            keywords=list(options.keywords) or [brand_name],
            alert_threshold=options.alert_threshold,
            check_interval=options.check_interval,
            timeframe=options.timeframe
        )

    def summary(self) -> Dict[str, Any]:
        """Public view of the job configuration."""
        return {
            'brand_name': self.brand_name,
            'sources': [s.value for s in self.sources],
            'keywords': list(self.keywords),
            'alert_threshold': self.alert_threshold,
            'check_interval': self.check_interval,
            'timeframe': self.timeframe
        }

    def status(self) -> Dict[str, Any]:
        """Runtime status of the job."""
        return {
            'id': self.id,
            'user_id': self.user_id,
            'brand_name': self.brand_name,
            'is_active': self.is_active,
            'last_check': self.last_check,
            'started_at': self.started_at
        }


@dataclass
class Alert:
    """Recorded event: a tick's aggregated score fell below the job threshold."""
    monitoring_id: str
    user_id: str
    brand_name: str
    severity: AlertSeverity
    sentiment: OverallSentiment
    risk_level: RiskLevel = RiskLevel.LOW
    mentions: List[Mention] = field(default_factory=list)
    alert_type: str = "sentiment_threshold"
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=datetime.utcnow)
