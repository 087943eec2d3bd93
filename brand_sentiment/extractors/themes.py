"""
Theme Extractor.

Maps tokens to subject-matter themes (pricing, delivery, customer experience,
...) with a static stem dictionary. Every text gets at least one theme.
"""

from typing import Dict, List, Optional

from ..lexicon import DEFAULT_THEME, THEME_KEYWORDS


class ThemeExtractor:
    """
    Extracts subject-matter themes from cleaned tokens.

    A token carries a theme when it starts with one of the dictionary stems,
    so "prices" and "pricing" both map to "pricing".

    Attributes:
        keywords: Stem -> theme dictionary
        default_theme: Theme returned when nothing matches
    """

    def __init__(self, keywords: Optional[Dict[str, str]] = None,
                 default_theme: str = DEFAULT_THEME):
        self.keywords = keywords if keywords is not None else THEME_KEYWORDS
        self.default_theme = default_theme

    def extract(self, tokens: List[str]) -> List[str]:
        """
        Return the sorted, de-duplicated themes found in ``tokens``.

        Args:
            tokens: Lowercased tokens with surrounding punctuation removed

        Returns:
            Non-empty list of theme names
        """
        themes = set()
        for token in tokens:
            if not token:
                continue
            for stem, theme in self.keywords.items():
                if token.startswith(stem):
                    themes.add(theme)

        if not themes:
            return [self.default_theme]
        return sorted(themes)
