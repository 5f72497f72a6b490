import math
from types import SimpleNamespace

from cryptoboard.services.enrich import compute_trending, extract_keywords, score_sentiment


def test_sentiment_is_deterministic() -> None:
    text = "Bitcoin surges to record as fear fades"
    assert score_sentiment(text) == score_sentiment(text)


def test_sentiment_sums_lexicon_weights() -> None:
    assert score_sentiment("good news") == 3
    assert score_sentiment("crash and fraud") == -6
    assert score_sentiment("Good GOOD good") == 9


def test_sentiment_of_empty_or_unknown_text_is_zero() -> None:
    assert score_sentiment("") == 0
    assert score_sentiment(None) == 0
    assert score_sentiment("blockchain ledger") == 0
    assert math.isfinite(score_sentiment("anything at all"))


def test_extract_keywords_filters_short_and_stop_words() -> None:
    words = extract_keywords("The Bitcoin price is in a rally, and the rally continues!")
    assert words == ["bitcoin", "price", "rally", "rally", "continues"]


def _art(title: str, description: str = "") -> SimpleNamespace:
    return SimpleNamespace(title=title, description=description)


def test_trending_ranks_by_count() -> None:
    articles = [_art("crypto news")] * 5 + [_art("blockchain")] * 3

    trending = compute_trending(articles)

    keywords = [t["keyword"] for t in trending]
    assert keywords.index("crypto") < keywords.index("blockchain")
    assert trending[0] == {"keyword": "crypto", "count": 5}


def test_trending_ties_keep_first_seen_order() -> None:
    trending = compute_trending([_art("zeta alpha"), _art("alpha zeta")])
    assert [t["keyword"] for t in trending] == ["zeta", "alpha"]


def test_trending_counts_description_and_caps_limit() -> None:
    articles = [_art(f"word{i:02d}", "ethereum") for i in range(30)]

    trending = compute_trending(articles, limit=20)

    assert len(trending) == 20
    assert trending[0] == {"keyword": "ethereum", "count": 30}


def test_trending_tolerates_missing_description() -> None:
    trending = compute_trending([_art("solana rally", None)])
    assert {t["keyword"] for t in trending} == {"solana", "rally"}
