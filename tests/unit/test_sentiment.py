"""Unit tests for the feedback sentiment scorer."""

import pytest

from avis.sentiment import SentimentScorer, get_sentiment_scorer, score_sentiment, tokenize


class FixedBaseline:
    """Baseline stub returning a constant, so lexicon arithmetic is exact."""

    def __init__(self, value: float = 0.0) -> None:
        self.value = value
        self.calls: list[list[str]] = []

    def score(self, tokens: list[str]) -> float:
        self.calls.append(tokens)
        return self.value


@pytest.fixture
def scorer() -> SentimentScorer:
    """Scorer with a neutral baseline."""
    return SentimentScorer(baseline=FixedBaseline(0.0))


class TestTokenize:
    """Tests for tokenize."""

    def test_lowercases_and_splits_on_punctuation(self) -> None:
        assert tokenize("Très BON, n'est-ce pas?") == ["très", "bon", "n", "est", "ce", "pas"]

    def test_trims_whitespace(self) -> None:
        assert tokenize("   bon   ") == ["bon"]

    def test_empty_and_none(self) -> None:
        assert tokenize("") == []
        assert tokenize(None) == []

    def test_symbols_only(self) -> None:
        assert tokenize("!!! ??? ...") == []

    def test_keeps_accents(self) -> None:
        assert tokenize("Déçu, décevant") == ["déçu", "décevant"]


class TestLexiconScore:
    """Tests for SentimentScorer.lexicon_score."""

    def test_positive(self, scorer: SentimentScorer) -> None:
        assert scorer.lexicon_score(["bon"]) == pytest.approx(0.5)

    def test_negative(self, scorer: SentimentScorer) -> None:
        assert scorer.lexicon_score(["mauvais"]) == pytest.approx(-0.5)

    def test_negated_positive(self, scorer: SentimentScorer) -> None:
        assert scorer.lexicon_score(["pas", "bon"]) == pytest.approx(-0.5)

    def test_negated_negative_is_mildly_positive(self, scorer: SentimentScorer) -> None:
        assert scorer.lexicon_score(["pas", "mauvais"]) == pytest.approx(0.3)

    def test_intensifier_before_negative(self, scorer: SentimentScorer) -> None:
        # -0.3 from the intensifier lookahead plus -0.5 for the word itself
        assert scorer.lexicon_score(["très", "mauvais"]) == pytest.approx(-0.8)

    def test_intensifier_before_positive(self, scorer: SentimentScorer) -> None:
        assert scorer.lexicon_score(["très", "bon"]) == pytest.approx(0.8)

    def test_intensifier_ignores_negation(self, scorer: SentimentScorer) -> None:
        # +0.3 lookahead is unaffected by negation, the negated "bon" adds -0.5
        assert scorer.lexicon_score(["pas", "très", "bon"]) == pytest.approx(-0.2)

    def test_intensifier_as_last_token(self, scorer: SentimentScorer) -> None:
        assert scorer.lexicon_score(["bon", "très"]) == pytest.approx(0.5)

    def test_intensifier_before_unknown(self, scorer: SentimentScorer) -> None:
        assert scorer.lexicon_score(["très", "table"]) == 0.0

    def test_unknown_tokens(self, scorer: SentimentScorer) -> None:
        assert scorer.lexicon_score(["xyz", "qqq"]) == 0.0

    def test_negation_word_contributes_nothing(self, scorer: SentimentScorer) -> None:
        assert scorer.lexicon_score(["pas"]) == 0.0
        assert scorer.lexicon_score(["jamais", "rien"]) == 0.0


class TestNegationReset:
    """The negation flag clears on loop indices that are multiples of 3."""

    def test_still_negated_at_reset_index(self, scorer: SentimentScorer) -> None:
        # "bon" sits at index 3: scored as negated, then the flag clears
        assert scorer.lexicon_score(["pas", "a", "b", "bon"]) == pytest.approx(-0.5)

    def test_cleared_after_reset_index(self, scorer: SentimentScorer) -> None:
        assert scorer.lexicon_score(["pas", "a", "b", "c", "bon"]) == pytest.approx(0.5)

    def test_reset_counts_from_loop_start_not_negation(self, scorer: SentimentScorer) -> None:
        # Negation at index 2 is cleared at index 3, only one token later
        assert scorer.lexicon_score(["a", "b", "pas", "c", "bon"]) == pytest.approx(0.5)

    def test_negation_word_on_reset_index_keeps_flag(self, scorer: SentimentScorer) -> None:
        # Negation words skip the rest of the iteration, including the reset
        assert scorer.lexicon_score(["a", "b", "c", "pas", "bon"]) == pytest.approx(-0.5)

    def test_index_zero_never_resets(self, scorer: SentimentScorer) -> None:
        assert scorer.lexicon_score(["pas", "bon", "bon"]) == pytest.approx(-1.0)

    def test_reset_at_six(self, scorer: SentimentScorer) -> None:
        tokens = ["a", "b", "c", "d", "pas", "e", "f", "bon"]
        # Set at 4, cleared at 6, "bon" at 7 unnegated
        assert scorer.lexicon_score(tokens) == pytest.approx(0.5)


class TestScore:
    """Tests for SentimentScorer.score blending and clamping."""

    def test_empty_is_exactly_zero(self, scorer: SentimentScorer) -> None:
        assert scorer.score("") == 0.0
        assert scorer.score("   \n\t ") == 0.0

    def test_empty_skips_baseline(self) -> None:
        baseline = FixedBaseline(0.9)
        scorer = SentimentScorer(baseline=baseline)

        assert scorer.score("?!") == 0.0
        assert baseline.calls == []

    def test_blend_weights(self) -> None:
        scorer = SentimentScorer(baseline=FixedBaseline(0.4))
        # 0.4 * 0.3 + 0.5 * 0.7
        assert scorer.score("bon") == pytest.approx(0.47)

    def test_unknown_tokens_score_is_baseline_share(self) -> None:
        scorer = SentimentScorer(baseline=FixedBaseline(0.4))
        assert scorer.score("xyz qqq") == pytest.approx(0.12)

    def test_baseline_receives_tokens(self) -> None:
        baseline = FixedBaseline(0.0)
        SentimentScorer(baseline=baseline).score("  Très Bon  ")
        assert baseline.calls == [["très", "bon"]]

    def test_clamped_high(self) -> None:
        scorer = SentimentScorer(baseline=FixedBaseline(1.0))
        assert scorer.score("excellent " * 10) == 1.0

    def test_clamped_low(self) -> None:
        scorer = SentimentScorer(baseline=FixedBaseline(-1.0))
        assert scorer.score("très mauvais " * 10) == -1.0

    def test_custom_lexicon(self) -> None:
        scorer = SentimentScorer(
            baseline=FixedBaseline(0.0),
            positive=frozenset({"good"}),
            negative=frozenset({"bad"}),
            negations=frozenset({"not"}),
            intensifiers=frozenset({"very"}),
        )
        assert scorer.score("not very good") == pytest.approx((0.3 - 0.5) * 0.7)


class TestDefaultScorer:
    """Tests against the real VADER baseline."""

    def test_empty(self) -> None:
        assert score_sentiment("") == 0.0
        assert score_sentiment("    ") == 0.0
        assert score_sentiment(None) == 0.0

    def test_excellent_is_positive(self) -> None:
        assert score_sentiment("excellent") > 0

    def test_negation_flips(self) -> None:
        bon = score_sentiment("bon")
        pas_bon = score_sentiment("pas bon")
        assert pas_bon < bon
        assert pas_bon <= 0.05

    def test_intensifier_deepens_negative(self) -> None:
        assert score_sentiment("très mauvais") < score_sentiment("mauvais") < 0

    def test_unknown_tokens_have_no_lexicon_share(self) -> None:
        scorer = get_sentiment_scorer()
        tokens = tokenize("xyz qqq")
        assert scorer.lexicon_score(tokens) == 0.0
        assert score_sentiment("xyz qqq") == pytest.approx(0.3 * scorer._baseline.score(tokens))

    def test_deterministic(self) -> None:
        text = "Livraison rapide mais service client vraiment décevant"
        assert score_sentiment(text) == score_sentiment(text)

    def test_cached_scorer(self) -> None:
        assert get_sentiment_scorer() is get_sentiment_scorer()

    @pytest.mark.parametrize(
        "text",
        [
            "🙂🙂🙂",
            "1234 5678",
            "SUPER SUPER SUPER génial parfait excellent merci bravo top",
            "nul nul nul horrible catastrophe arnaque pire lamentable",
            "ce n'est jamais vraiment ni bon ni mauvais",
            "The service was great, thanks!",
            "a" * 10_000,
        ],
    )
    def test_always_in_range(self, text: str) -> None:
        assert -1.0 <= score_sentiment(text) <= 1.0
