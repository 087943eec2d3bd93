"""
Mention providers.

A mention provider gathers recent mentions of a brand from one or more
sources. Providers are best-effort: a failing or slow source is logged and
skipped, and whatever could be gathered is returned.
"""

import asyncio
import itertools
import logging
import random
import re
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Dict, List, Optional, Sequence

from .models import Mention, MentionSource

logger = logging.getLogger(__name__)

# Platforms behind each mention source
SOURCE_PLATFORMS: Dict[MentionSource, List[str]] = {
    MentionSource.SOCIAL: ['twitter', 'facebook', 'instagram', 'linkedin', 'tiktok'],
    MentionSource.REVIEW: ['google', 'yelp', 'trustpilot', 'amazon'],
    MentionSource.NEWS: ['google_news', 'reddit', 'forums'],
    MentionSource.CUSTOM: ['surveys', 'feedback', 'support_tickets'],
}

_TIMEFRAME_PATTERN = re.compile(r'^(\d+)([mhdw])$')
_TIMEFRAME_UNITS = {'m': 'minutes', 'h': 'hours', 'd': 'days', 'w': 'weeks'}

SourceFetcher = Callable[[Sequence[str], str, Optional[datetime]], Awaitable[List[Mention]]]


class ProviderError(Exception):
    """Raised by a source fetcher when its source cannot be read."""


def parse_timeframe(timeframe: str) -> timedelta:
    """
    Parse a look-back window such as "30m", "1h", "7d" or "2w".

    Raises:
        ValueError: If the timeframe is not in <number><unit> form
    """
    match = _TIMEFRAME_PATTERN.match(timeframe.strip().lower()) if timeframe else None
    if not match:
        raise ValueError(f"Invalid timeframe '{timeframe}'. Expected e.g. 30m, 1h, 7d")
    amount, unit = match.groups()
    return timedelta(**{_TIMEFRAME_UNITS[unit]: int(amount)})


class MentionProvider(ABC):
    """Interface of a mention source collaborator."""

    @abstractmethod
    async def fetch_mentions(
        self,
        keywords: Sequence[str],
        sources: Sequence[MentionSource],
        timeframe: str = "1h",
        since: Optional[datetime] = None
    ) -> List[Mention]:
        """
        Gather mentions matching ``keywords`` from ``sources``.

        Args:
            keywords: Brand name and/or search keywords
            sources: Mention sources to query
            timeframe: Look-back window, e.g. "1h" or "7d"
            since: Only return mentions published after this instant

        Returns:
            Mentions gathered, possibly empty; never raises for a single
            failing source
        """


class MockMentionProvider(MentionProvider):
    """
    Generates realistic sample mentions for demos and tests.

    Mentions are built from a fixed set of templates, spread round-robin over
    the platforms of the requested sources, with publication times inside the
    requested window. A seeded generator keeps the output reproducible.
    """

    MENTION_TEMPLATES = [
        "Just tried {brand} and I'm impressed! Great quality and service.",
        "{brand} customer support was really helpful today.",
        "Not sure about {brand} - the price seems a bit high.",
        "Love the new features from {brand}! Game changer.",
        "{brand} needs to work on their delivery times.",
        "Highly recommend {brand} to anyone looking for quality.",
        "{brand} has been my go-to for years now.",
        "Disappointed with my recent {brand} experience.",
        "{brand} just launched something amazing!",
        "The {brand} team really knows what they're doing.",
    ]

    def __init__(self, mentions_per_call: int = 25, seed: int = 42,
                 clock: Callable[[], datetime] = datetime.utcnow):
        """
        Initialize the mock provider.

        Args:
            mentions_per_call: Number of mentions returned per fetch
            seed: Seed for reproducible timestamps and engagement
            clock: Source of the current time
        """
        if mentions_per_call < 0:
            raise ValueError("mentions_per_call cannot be negative")

        self.mentions_per_call = mentions_per_call
        self.clock = clock
        self.random = random.Random()
        self.random.seed(seed)  # For reproducible demo content
        # Ids stay unique across calls and across per-source fetchers
        self._mention_ids = itertools.count()

    async def fetch_mentions(
        self,
        keywords: Sequence[str],
        sources: Sequence[MentionSource],
        timeframe: str = "1h",
        since: Optional[datetime] = None
    ) -> List[Mention]:
        """Generate sample mentions for the first keyword."""
        return self.generate_mentions(keywords, sources, timeframe, since)

    def generate_mentions(
        self,
        keywords: Sequence[str],
        sources: Sequence[MentionSource],
        timeframe: str = "1h",
        since: Optional[datetime] = None
    ) -> List[Mention]:
        """Build the sample mentions synchronously."""
        if not sources:
            return []

        brand = keywords[0] if keywords else "brand"
        platforms = [
            (source, platform)
            for source in sources
            for platform in SOURCE_PLATFORMS.get(source, [source.value])
        ]

        now = self.clock()
        window_start = now - parse_timeframe(timeframe)
        if since is not None and since > window_start:
            window_start = since
        window_seconds = max((now - window_start).total_seconds(), 0.0)

        mentions = []
        for i in range(self.mentions_per_call):
            number = next(self._mention_ids)
            source, platform = platforms[i % len(platforms)]
            template = self.MENTION_TEMPLATES[i % len(self.MENTION_TEMPLATES)]
            offset = self.random.uniform(0, window_seconds)
            mentions.append(Mention(
                id=f"mention_{number}",
                text=template.format(brand=brand),
                source=source,
                platform=platform,
                author=f"user_{i}",
                published_at=now - timedelta(seconds=offset),
                engagement={
                    'likes': self.random.randint(0, 50),
                    'shares': self.random.randint(0, 10),
                    'comments': self.random.randint(0, 5),
                }
            ))

        return mentions

    def as_source_fetchers(self) -> Dict[MentionSource, SourceFetcher]:
        """Expose one fetcher per source, for use with MultiSourceMentionProvider."""
        def make_fetcher(source: MentionSource) -> SourceFetcher:
            async def fetch(keywords, timeframe, since):
                return self.generate_mentions(keywords, [source], timeframe, since)
            return fetch

        return {source: make_fetcher(source) for source in MentionSource}


class MultiSourceMentionProvider(MentionProvider):
    """
    Fans a fetch out to one fetcher per source and merges the results.

    Every source fetch is bounded by ``timeout_seconds``. A source that times
    out, raises, or has no registered fetcher is logged and skipped; the other
    sources still contribute their mentions.

    Attributes:
        fetchers: Source -> async fetcher callable
        timeout_seconds: Upper bound for each source fetch
    """

    def __init__(self, fetchers: Dict[MentionSource, SourceFetcher], timeout_seconds: float = 5.0):
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")

        self.fetchers = dict(fetchers)
        self.timeout_seconds = timeout_seconds

    async def fetch_mentions(
        self,
        keywords: Sequence[str],
        sources: Sequence[MentionSource],
        timeframe: str = "1h",
        since: Optional[datetime] = None
    ) -> List[Mention]:
        """Fetch from all requested sources concurrently."""
        batches = await asyncio.gather(*(
            self._fetch_source(source, keywords, timeframe, since)
            for source in sources
        ))

        mentions = [mention for batch in batches for mention in batch]
        logger.debug(f"Gathered {len(mentions)} mentions from {len(sources)} sources")
        return mentions

    async def _fetch_source(
        self,
        source: MentionSource,
        keywords: Sequence[str],
        timeframe: str,
        since: Optional[datetime]
    ) -> List[Mention]:
        fetcher = self.fetchers.get(source)
        if fetcher is None:
            logger.warning(f"No fetcher registered for source '{source.value}', skipping")
            return []

        try:
            return list(await asyncio.wait_for(
                fetcher(keywords, timeframe, since),
                timeout=self.timeout_seconds
            ))
        except asyncio.TimeoutError:
            logger.warning(
                f"Source '{source.value}' timed out after {self.timeout_seconds}s, skipping"
            )
        except ProviderError as e:
            logger.warning(f"Source '{source.value}' failed, skipping: {e}")
        except Exception as e:
            logger.error(f"Unexpected error from source '{source.value}', skipping: {e}", exc_info=True)

        return []
