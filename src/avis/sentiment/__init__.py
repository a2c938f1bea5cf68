"""Feedback sentiment scoring: VADER baseline blended with a French lexicon."""

from avis.sentiment.analyzer import (
    BaselineScorer,
    SentimentScorer,
    VaderBaseline,
    get_sentiment_scorer,
    score_sentiment,
    tokenize,
)

__all__ = [
    "BaselineScorer",
    "SentimentScorer",
    "VaderBaseline",
    "get_sentiment_scorer",
    "score_sentiment",
    "tokenize",
]
