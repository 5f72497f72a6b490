"""Derived signals over stored articles: lexicon sentiment and trending keywords."""

from __future__ import annotations

import re
from collections import Counter
from typing import Any, Iterable

TOKEN_SPLIT_RE = re.compile(r"\W+")

STOP_WORDS = frozenset({"the", "is", "in", "and", "of", "to", "a"})
MIN_KEYWORD_LEN = 4

# AFINN-style polarity weights (-5..5), with a few market terms added
SENTIMENT_LEXICON: dict[str, int] = {
    # positive
    "good": 3, "great": 3, "excellent": 3, "amazing": 4, "awesome": 4, "best": 3, "better": 2,
    "positive": 2, "optimistic": 2, "confident": 2, "success": 2, "successful": 3, "win": 4,
    "wins": 4, "winning": 4, "gain": 2, "gains": 2, "profit": 2, "profits": 2, "profitable": 2,
    "growth": 2, "grow": 2, "growing": 2, "boost": 1, "boosts": 1, "strong": 2, "stronger": 2,
    "rise": 1, "rises": 1, "rising": 1, "surge": 2, "surges": 2, "soar": 2, "soars": 2,
    "rally": 2, "rallies": 2, "record": 1, "recover": 2, "recovery": 2, "rebound": 2,
    "bullish": 2, "adopt": 1, "adoption": 1, "approve": 2, "approved": 2, "approval": 2,
    "support": 2, "supports": 2, "innovation": 1, "innovative": 2, "opportunity": 2,
    "opportunities": 2, "safe": 1, "secure": 2, "benefit": 2, "benefits": 2, "trust": 1,
    "like": 2, "love": 3, "happy": 3, "hope": 2, "hopeful": 2, "welcome": 2, "clarity": 2,
    "upgrade": 1, "breakthrough": 3, "partnership": 1, "legal": 1, "stable": 2, "moon": 2,
    # negative
    "bad": -3, "worse": -3, "worst": -3, "negative": -2, "poor": -2, "fail": -2, "fails": -2,
    "failed": -2, "failure": -2, "loss": -3, "losses": -3, "lose": -3, "losing": -3, "lost": -3,
    "crash": -2, "crashes": -2, "crashed": -2, "collapse": -2, "collapsed": -2, "plunge": -2,
    "plunges": -2, "drop": -1, "drops": -1, "fall": -1, "falls": -1, "falling": -1,
    "decline": -1, "declines": -1, "slump": -2, "bearish": -2, "dump": -1,
    "fear": -2, "fears": -2, "panic": -3, "risk": -2, "risks": -2, "risky": -2, "volatile": -1,
    "volatility": -1, "uncertain": -1, "uncertainty": -1, "warning": -3, "warn": -2,
    "warns": -2, "crisis": -3, "scam": -2, "scams": -2, "fraud": -4, "fraudulent": -4,
    "hack": -1, "hacked": -1, "hacker": -2, "hackers": -2, "stolen": -2, "steal": -2,
    "theft": -2, "attack": -1, "exploit": -2, "breach": -2, "ban": -2, "banned": -2,
    "bans": -2, "crackdown": -1, "lawsuit": -2, "sued": -2, "charged": -3, "arrest": -2,
    "arrested": -3, "illegal": -3, "bankrupt": -3, "bankruptcy": -3, "insolvent": -3,
    "bubble": -2, "ponzi": -3, "manipulation": -1, "concern": -1, "concerns": -1,
    "problem": -2, "problems": -2, "trouble": -2, "angry": -3, "hate": -3, "worried": -3,
    "worry": -3, "doubt": -1, "doubts": -1, "criticism": -2, "criticised": -2, "criticized": -2,
}

def tokenize(text: str) -> list[str]:
    return [t for t in TOKEN_SPLIT_RE.split(text.lower()) if t]

def score_sentiment(text: str | None) -> int:
    """Sum of lexicon weights over the tokens of ``text``; unknown words count 0."""
    if not text:
        return 0
    return sum(SENTIMENT_LEXICON.get(token, 0) for token in tokenize(text))

def article_text(title: str | None, description: str | None) -> str:
    return f"{title or ''} {description or ''}"

def extract_keywords(text: str | None) -> list[str]:
    """Lowercased tokens longer than three characters, minus stop words. Repeats are kept."""
    if not text:
        return []
    return [t for t in tokenize(text) if len(t) >= MIN_KEYWORD_LEN and t not in STOP_WORDS]

def compute_trending(articles: Iterable[Any], limit: int = 20) -> list[dict[str, Any]]:
    counts: Counter[str] = Counter()
    for a in articles:
        counts.update(extract_keywords(article_text(getattr(a, "title", ""), getattr(a, "description", ""))))
    # most_common keeps first-seen order among equal counts
    return [{"keyword": k, "count": c} for k, c in counts.most_common(limit)]
