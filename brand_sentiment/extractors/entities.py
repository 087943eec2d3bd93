"""
Entity Extractor.

Heuristic named-entity tagging: capitalized words become organization
candidates and numeric tokens become number candidates. This is deliberately
not NER-grade; it only surfaces likely brand and figure mentions.
"""

import re

from ..lexicon import split_tokens
from ..models import EntityTags


class EntityExtractor:
    """
    Extracts organization and number candidates from raw text.

    Organization candidates are alphabetic words with a leading capital,
    longer than two characters, that are not common sentence-initial words.
    Number candidates are integers or decimals, optionally with a currency
    sign, thousands separators or a percent suffix.
    """

    ORGANIZATION_PATTERN = re.compile(r'^[A-Z][a-z]+$')
    NUMBER_PATTERN = re.compile(r'^\$?\d+(?:,\d{3})*(?:\.\d+)?%?$')

    # Common words to exclude (not organization names)
    EXCLUDE_WORDS = {
        'The', 'This', 'That', 'These', 'Those', 'Just', 'Not', 'Our', 'Your',
        'Their', 'His', 'Her', 'Its', 'And', 'But', 'For', 'With', 'From',
        'Love', 'Highly', 'Disappointed', 'Great', 'Good', 'Bad', 'Best',
        'Worst', 'Very', 'Really', 'Today', 'Tomorrow', 'Yesterday',
        'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday',
        'Sunday', 'What', 'When', 'Where', 'Why', 'How', 'Who', 'Has', 'Have',
        'Was', 'Were', 'Will', 'Would', 'Should', 'Could', 'Can', 'Now',
    }

    def extract(self, text: str) -> EntityTags:
        """
        Extract entity candidates from ``text``.

        Args:
            text: Original (case-preserving) text

        Returns:
            EntityTags with de-duplicated candidates in order of appearance
        """
        tags = EntityTags()

        for raw in split_tokens(text):
            word = raw.strip('.,!?;:"()[]{}\'')
            if not word:
                continue

            # Possessives ("Apple's") still name the organization
            if word.endswith("'s"):
                word = word[:-2]

            if (self.ORGANIZATION_PATTERN.match(word)
                    and len(word) > 2
                    and word not in self.EXCLUDE_WORDS
                    and word not in tags.organizations):
                tags.organizations.append(word)
            elif self.NUMBER_PATTERN.match(word) and word not in tags.numbers:
                tags.numbers.append(word)

        return tags
