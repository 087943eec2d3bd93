"""
Lexicon-based sentiment scorer.

This module scores a single text locally, without any model or network call,
using static positive/negative word sets with negation and intensifier
handling, and tags the text with themes, entities and emotions.
"""

import logging
from dataclasses import replace
from typing import List, Optional, Tuple

from .extractors import EmotionExtractor, EntityExtractor, ThemeExtractor
from .lexicon import (
    INTENSIFIERS, NEGATIVE_WORDS, NEGATORS, POSITIVE_WORDS,
    clean_token, split_tokens
)
from .models import Mention, SentimentLabel, SentimentResult

# Configure logging
logger = logging.getLogger(__name__)


class LexiconScorer:
    """
    Scores text sentiment with a word lexicon.

    Every token containing a positive lexicon word contributes +0.3 and every
    token containing a negative word contributes -0.3. A negator in either of
    the two preceding tokens flips the sign of the contribution, and an
    intensifier right before or after the token multiplies its magnitude by
    1.5. Both rules apply independently, so "not very good" scores -0.45.
    The sum is clipped to [-1, 1].

    Scoring is a pure function of the input and never raises: empty input and
    internal failures both resolve to a neutral result.

    Attributes:
        positive_words: Words that push the score up
        negative_words: Words that push the score down
        negators: Tokens that flip the following one or two tokens
        intensifiers: Tokens that amplify their neighbours
    """

    METHOD = "lexicon"
    FALLBACK_METHOD = "fallback"

    WORD_WEIGHT = 0.3
    INTENSIFIER_MULTIPLIER = 1.5
    NEGATION_WINDOW = 2

    BASE_CONFIDENCE = 0.4
    COVERAGE_CONFIDENCE_WEIGHT = 0.5
    MAX_CONFIDENCE = 0.95

    def __init__(
        self,
        positive_words=POSITIVE_WORDS,
        negative_words=NEGATIVE_WORDS,
        negators=NEGATORS,
        intensifiers=INTENSIFIERS,
        theme_extractor: Optional[ThemeExtractor] = None,
        entity_extractor: Optional[EntityExtractor] = None,
        emotion_extractor: Optional[EmotionExtractor] = None
    ):
        """
        Initialize the scorer.

        Args:
            positive_words: Positive lexicon (lowercase)
            negative_words: Negative lexicon (lowercase)
            negators: Negator tokens (lowercase)
            intensifiers: Intensifier tokens (lowercase)
            theme_extractor: Theme tagger (default dictionary when omitted)
            entity_extractor: Entity tagger
            emotion_extractor: Emotion tagger
        """
        self.positive_words = frozenset(positive_words)
        self.negative_words = frozenset(negative_words)
        self.negators = frozenset(negators)
        self.intensifiers = frozenset(intensifiers)
        self.theme_extractor = theme_extractor or ThemeExtractor()
        self.entity_extractor = entity_extractor or EntityExtractor()
        self.emotion_extractor = emotion_extractor or EmotionExtractor()

    def score(self, text: str, context: str = "general") -> SentimentResult:
        """
        Score a single text.

        Args:
            text: Text to analyze
            context: Content type label carried through to the result

        Returns:
            SentimentResult; neutral with confidence 0.4 for empty input
        """
        try:
            return self._score(text, context)
        except Exception as e:
            logger.error(f"Lexicon scoring failed, using neutral fallback: {e}", exc_info=True)
            return SentimentResult.neutral(method=self.FALLBACK_METHOD, context=context)

    def score_mention(self, mention: Mention) -> SentimentResult:
        """Score a mention's text and stamp its source and id on the result."""
        result = self.score(mention.text, context=mention.source.value)
        return replace(result, source=mention.source.value, mention_id=mention.id)

    def _score(self, text: str, context: str) -> SentimentResult:
        if not isinstance(text, str) or not text.strip():
            return SentimentResult.neutral(
                method=self.METHOD,
                context=context,
                confidence=self.BASE_CONFIDENCE
            )

        tokens = [clean_token(token) for token in split_tokens(text)]

        total = 0.0
        matched = 0
        positives: List[str] = []
        negatives: List[str] = []

        for index, token in enumerate(tokens):
            polarity, word = self._match_polarity(token)
            if polarity == 0:
                continue

            matched += 1
            contribution = polarity * self.WORD_WEIGHT

            if self._is_negated(tokens, index):
                contribution = -contribution

            if self._is_intensified(tokens, index):
                contribution *= self.INTENSIFIER_MULTIPLIER

            total += contribution
            if polarity > 0:
                positives.append(word)
            else:
                negatives.append(word)

        score = round(max(-1.0, min(1.0, total)), 4)
        confidence = min(
            self.MAX_CONFIDENCE,
            self.BASE_CONFIDENCE + (matched / len(tokens)) * self.COVERAGE_CONFIDENCE_WEIGHT
        )

        return SentimentResult(
            score=score,
            label=SentimentLabel.from_score(score),
            confidence=confidence,
            themes=self.theme_extractor.extract(tokens),
            positives=positives,
            negatives=negatives,
            entities=self.entity_extractor.extract(text),
            emotions=self.emotion_extractor.extract(tokens),
            method=self.METHOD,
            context=context,
            token_count=len(tokens)
        )

    def _match_polarity(self, token: str) -> Tuple[int, Optional[str]]:
        """
        Find the lexicon word contained in ``token``.

        The longest contained word decides the polarity, so "unreliable"
        beats "reliable". Equal-length ties go to the negative word.

        Returns:
            (polarity, word): polarity is +1, -1 or 0 (no match)
        """
        if not token:
            return 0, None

        best_positive = max(
            (word for word in self.positive_words if word in token),
            key=lambda word: (len(word), word), default=None
        )
        best_negative = max(
            (word for word in self.negative_words if word in token),
            key=lambda word: (len(word), word), default=None
        )

        if best_negative and (not best_positive or len(best_negative) >= len(best_positive)):
            return -1, best_negative
        if best_positive:
            return 1, best_positive
        return 0, None

    def _is_negated(self, tokens: List[str], index: int) -> bool:
        start = max(0, index - self.NEGATION_WINDOW)
        return any(token in self.negators for token in tokens[start:index])

    def _is_intensified(self, tokens: List[str], index: int) -> bool:
        neighbours = []
        if index > 0:
            neighbours.append(tokens[index - 1])
        if index + 1 < len(tokens):
            neighbours.append(tokens[index + 1])
        return any(token in self.intensifiers for token in neighbours)
