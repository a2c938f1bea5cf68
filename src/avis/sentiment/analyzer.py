"""Rule-based sentiment scorer for French feedback text.

A feedback's score blends two signals:

- a generic baseline from VADER over the token sequence, and
- a hand-built French lexicon pass with negation and intensifier handling.

``final = baseline * 0.3 + lexicon * 0.7``, clamped to [-1, 1]. The scorer is
a total function: empty or token-less input scores exactly 0.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Protocol

from vaderSentiment.vaderSentiment import SentimentIntensityAnalyzer

from avis.sentiment.lexicon import (
    BASELINE_WEIGHT,
    INTENSIFIER_BOOST,
    INTENSIFIER_WORDS,
    LEXICON_WEIGHT,
    NEGATED_NEGATIVE_WEIGHT,
    NEGATED_POSITIVE_WEIGHT,
    NEGATION_RESET_PERIOD,
    NEGATION_WORDS,
    NEGATIVE_WEIGHT,
    NEGATIVE_WORDS,
    POSITIVE_WEIGHT,
    POSITIVE_WORDS,
)

_WORD_PATTERN = re.compile(r"\w+")


def tokenize(text: str | None) -> list[str]:
    """Lowercase, trim and split text into word tokens."""
    if not text:
        return []
    return _WORD_PATTERN.findall(text.lower().strip())


class BaselineScorer(Protocol):
    """Generic statistical analyzer; sign of the result is the polarity."""

    def score(self, tokens: list[str]) -> float: ...


class VaderBaseline:
    """Baseline backed by VADER's compound score."""

    def __init__(self, analyzer: SentimentIntensityAnalyzer | None = None) -> None:
        self._analyzer = analyzer if analyzer is not None else SentimentIntensityAnalyzer()

    def score(self, tokens: list[str]) -> float:
        if not tokens:
            return 0.0
        return float(self._analyzer.polarity_scores(" ".join(tokens))["compound"])


class SentimentScorer:
    """Blend of a baseline analyzer and the French lexicon pass."""

    def __init__(
        self,
        baseline: BaselineScorer | None = None,
        positive: frozenset[str] = POSITIVE_WORDS,
        negative: frozenset[str] = NEGATIVE_WORDS,
        negations: frozenset[str] = NEGATION_WORDS,
        intensifiers: frozenset[str] = INTENSIFIER_WORDS,
    ) -> None:
        """Initialize scorer.

        Args:
            baseline: Baseline analyzer, VADER when omitted.
            positive: Positive vocabulary.
            negative: Negative vocabulary.
            negations: Words that flip the polarity of what follows.
            intensifiers: Words that amplify the next sentiment word.
        """
        self._baseline = baseline if baseline is not None else VaderBaseline()
        self._positive = positive
        self._negative = negative
        self._negations = negations
        self._intensifiers = intensifiers

    def lexicon_score(self, tokens: list[str]) -> float:
        """Score tokens against the lexicon, left to right.

        The negation flag is cleared on loop indices that are positive
        multiples of NEGATION_RESET_PERIOD, counted from the start of the
        token list rather than from the negation word.
        """
        score = 0.0
        negated = False
        last = len(tokens) - 1

        for i, token in enumerate(tokens):
            if token in self._negations:
                negated = True
                continue

            if token in self._positive:
                score += NEGATED_POSITIVE_WEIGHT if negated else POSITIVE_WEIGHT
            elif token in self._negative:
                score += NEGATED_NEGATIVE_WEIGHT if negated else NEGATIVE_WEIGHT

            # Applies on top of the next token's own hit, negated or not
            if token in self._intensifiers and i < last:
                following = tokens[i + 1]
                if following in self._positive:
                    score += INTENSIFIER_BOOST
                elif following in self._negative:
                    score -= INTENSIFIER_BOOST

            if negated and i > 0 and i % NEGATION_RESET_PERIOD == 0:
                negated = False

        return score

    def score(self, text: str | None) -> float:
        """Score text in [-1, 1]."""
        tokens = tokenize(text)
        if not tokens:
            return 0.0

        baseline = self._baseline.score(tokens)
        lexicon = self.lexicon_score(tokens)
        final = baseline * BASELINE_WEIGHT + lexicon * LEXICON_WEIGHT
        return max(-1.0, min(1.0, final))


@lru_cache
def get_sentiment_scorer() -> SentimentScorer:
    """Get cached default scorer (VADER baseline, built-in lexicon)."""
    return SentimentScorer()


def score_sentiment(text: str | None) -> float:
    """Score text with the default scorer."""
    return get_sentiment_scorer().score(text)
