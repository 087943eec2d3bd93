"""
Tag extractors used by the lexicon scorer.

This package contains keyword-dictionary extractors that label a text with
subject-matter themes, heuristic named entities and emotional tone.
"""

from .themes import ThemeExtractor
from .entities import EntityExtractor
from .emotions import EmotionExtractor

__all__ = [
    'ThemeExtractor',
    'EntityExtractor',
    'EmotionExtractor',
]
