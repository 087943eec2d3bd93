"""
Static word lists used by the lexicon scorer and the tag extractors.

Polarity words are matched as substrings of a token, so prefixed opposites
("unhappy", "unreliable") are listed explicitly and win over their shorter
counterparts. Negators and intensifiers are matched as whole tokens. Theme and
emotion keywords are stems matched against the start of a token.
"""

import re
from typing import Dict, FrozenSet, List

POSITIVE_WORDS: FrozenSet[str] = frozenset({
    # General praise
    'good', 'great', 'excellent', 'amazing', 'awesome', 'fantastic', 'wonderful',
    'outstanding', 'superb', 'brilliant', 'perfect', 'love', 'loved', 'best',
    'impressive', 'impressed', 'innovative', 'recommend', 'helpful', 'reliable',
    'happy', 'satisfied', 'pleased', 'delighted', 'enjoy', 'favorite', 'beautiful',
    'friendly', 'fast', 'easy', 'quality', 'premium', 'trusted', 'stable',
    'leading', 'thanks', 'thank',
    # Market context
    'bullish', 'growth', 'profit', 'profitable', 'revenue', 'earnings', 'success',
    'successful', 'positive', 'strong', 'robust', 'solid', 'established',
})

NEGATIVE_WORDS: FrozenSet[str] = frozenset({
    # General complaints
    'bad', 'terrible', 'awful', 'horrible', 'worst', 'poor', 'hate', 'hated',
    'disappointing', 'disappointed', 'broken', 'defect', 'defective', 'slow',
    'expensive', 'overpriced', 'refund', 'scam', 'fraud', 'fake', 'waste',
    'useless', 'buggy', 'rude', 'angry', 'upset', 'complaint', 'problem',
    'delay', 'delayed', 'uneasy', 'unhappy', 'unreliable', 'unhelpful', 'unimpressive',
    'dissatisfied', 'unsatisfied', 'unstable', 'untrusted', 'misleading',
    # Market context
    'bearish', 'decline', 'loss', 'weak', 'negative', 'concerning', 'risky',
    'volatile', 'uncertain', 'troubled', 'struggling', 'failing', 'overvalued',
    'bubble', 'crash', 'recession', 'downturn',
})

NEGATORS: FrozenSet[str] = frozenset({
    'not', 'no', 'never', 'none', 'nothing', 'neither', 'nor', 'nobody',
    'without', 'hardly', 'barely', 'cannot', "can't", 'cant', "isn't", 'isnt',
    "aren't", 'arent', "wasn't", 'wasnt', "weren't", "don't", 'dont', "doesn't",
    'doesnt', "didn't", 'didnt', "won't", 'wont', "shouldn't", "wouldn't",
    "couldn't",
})

INTENSIFIERS: FrozenSet[str] = frozenset({
    'very', 'extremely', 'highly', 'really', 'incredibly', 'super', 'so',
    'totally', 'absolutely', 'significantly', 'truly', 'remarkably',
    'exceptionally', 'especially', 'particularly', 'deeply', 'most',
})

# Stem -> theme
THEME_KEYWORDS: Dict[str, str] = {
    'price': 'pricing', 'pricing': 'pricing', 'cost': 'pricing',
    'expensive': 'pricing', 'cheap': 'pricing', 'overpriced': 'pricing',
    'afford': 'pricing', 'discount': 'pricing',
    'support': 'customer_experience', 'service': 'customer_experience',
    'customer': 'customer_experience', 'staff': 'customer_experience',
    'satisfaction': 'customer_experience', 'help': 'customer_experience',
    'quality': 'product_quality', 'defect': 'product_quality',
    'broken': 'product_quality', 'durable': 'product_quality',
    'reliab': 'product_quality',
    'deliver': 'delivery', 'shipping': 'delivery', 'shipment': 'delivery',
    'delay': 'delivery', 'arriv': 'delivery',
    'innovat': 'innovation', 'technolog': 'innovation', 'digital': 'innovation',
    'feature': 'innovation', 'launch': 'innovation',
    'stock': 'stock_market', 'shares': 'stock_market', 'trading': 'stock_market',
    'investor': 'stock_market',
    'earnings': 'financial_performance', 'revenue': 'financial_performance',
    'profit': 'financial_performance',
    'growth': 'business_growth', 'expansion': 'business_growth',
    'competit': 'competitive_landscape', 'rival': 'competitive_landscape',
    'econom': 'economic_factors', 'recession': 'economic_factors',
    'inflation': 'economic_factors',
}

DEFAULT_THEME = 'general'

# Stem -> emotion
EMOTION_KEYWORDS: Dict[str, str] = {
    'excited': 'optimism', 'thrilled': 'optimism', 'optimistic': 'optimism',
    'hopeful': 'optimism', 'eager': 'optimism',
    'worried': 'concern', 'concerned': 'concern', 'pessimistic': 'concern',
    'anxious': 'concern', 'afraid': 'concern',
    'confident': 'confidence', 'assured': 'confidence', 'certain': 'confidence',
    'uncertain': 'uncertainty', 'doubtful': 'uncertainty', 'unsure': 'uncertainty',
    'skeptical': 'uncertainty', 'confused': 'uncertainty',
}

_EDGE_PUNCTUATION = re.compile(r"^[^\w$]+|[^\w%]+$")


def split_tokens(text: str) -> List[str]:
    """Split text on whitespace, normalizing typographic apostrophes."""
    return text.replace('’', "'").split()


def clean_token(token: str) -> str:
    """Lowercase a token and strip surrounding punctuation."""
    return _EDGE_PUNCTUATION.sub('', token.lower())
