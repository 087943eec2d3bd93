"""
Emotion Extractor.

Tags a text with emotional tone (optimism, concern, confidence, uncertainty)
from a static stem dictionary.
"""

from typing import Dict, List, Optional

from ..lexicon import EMOTION_KEYWORDS


class EmotionExtractor:
    """Extracts emotion tags from cleaned tokens."""

    def __init__(self, keywords: Optional[Dict[str, str]] = None):
        self.keywords = keywords if keywords is not None else EMOTION_KEYWORDS

    def extract(self, tokens: List[str]) -> List[str]:
        """Return sorted emotion tags; empty when no keyword matches."""
        emotions = set()
        for token in tokens:
            for stem, emotion in self.keywords.items():
                if token.startswith(stem):
                    emotions.add(emotion)
        return sorted(emotions)
