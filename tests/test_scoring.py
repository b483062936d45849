"""Tests for rubric scoring."""

from fractions import Fraction

import pytest

from vibe_progression.assessment import feedback
from vibe_progression.assessment.rubric_scorer import RubricScorer, round_half_up
from vibe_progression.catalog.rubrics import FALLBACK_OUTPUT, SAMPLE_OUTPUTS
from vibe_progression.errors import ValidationError
from vibe_progression.models.assessment import RubricEntry

TEN_TERM_RUBRIC = RubricEntry(
    keywords=tuple(f"k{i}" for i in range(10)),
    intent_verbs=("do",),
    context_terms=tuple(f"c{i}" for i in range(10)),
)


@pytest.fixture
def scorer():
    return RubricScorer()


@pytest.fixture
def boundary_scorer():
    return RubricScorer(rubrics={"boundary": TEN_TERM_RUBRIC})


class TestRubricScoring:
    def test_clear_prompt_passes(self, scorer):
        result = scorer.evaluate(
            "prompt-basics-1",
            "please write a javascript function that prints hello world using console.log",
        )
        assert result.score == 80
        assert result.passed is True
        assert result.feedback.startswith("Vibe check passed.")
        assert "You covered 4 core concepts" in result.feedback
        assert "(write)" in result.feedback
        assert result.output == SAMPLE_OUTPUTS["prompt-basics-1"]

    def test_trivial_prompt_fails_and_names_missing_keywords(self, scorer):
        result = scorer.evaluate("prompt-basics-1", "hi")
        assert result.score == 0
        assert result.passed is False
        assert '"hello world" and "javascript"' in result.feedback
        assert "active verbs" in result.feedback
        assert "function" not in result.feedback
        assert "Missing Context: hello world, javascript, function..." in result.output

    def test_matching_is_case_insensitive(self, scorer):
        result = scorer.evaluate(
            "prompt-basics-1",
            "WRITE a JavaScript FUNCTION printing Hello World with Console.Log",
        )
        assert result.score == 80

    def test_spectacular_band(self, scorer):
        result = scorer.evaluate(
            "prompt-basics-1",
            "write a simple basic tutorial javascript function: hello world via console.log",
        )
        assert result.score == 100
        assert result.feedback.startswith("Spectacular aura!")

    def test_strong_band(self, scorer):
        result = scorer.evaluate(
            "prompt-basics-1",
            "write a simple javascript function for hello world with console.log",
        )
        # 50 + 30 + 20/3 = 86.67
        assert result.score == 87
        assert result.feedback.startswith("Strong technical vibe.")

    def test_intent_without_keywords_names_keywords_only(self, scorer):
        result = scorer.evaluate("debug-ai-1", "please fix this")
        assert result.passed is False
        assert '"await" and "fetch"' in result.feedback
        assert "active verbs" not in result.feedback

    def test_scoring_is_deterministic(self, scorer):
        text = "explain why my array sum is nan, fix the loop"
        assert scorer.evaluate("prompt-basics-2", text) == scorer.evaluate(
            "prompt-basics-2", text
        )

    def test_empty_rubric_sets_do_not_divide_by_zero(self):
        scorer = RubricScorer(
            rubrics={"bare": RubricEntry(intent_verbs=("fix",), context_terms=("api",))}
        )
        result = scorer.evaluate("bare", "fix the api")
        assert result.score == 50
        assert result.passed is False
        assert feedback.GENERIC_TIP in result.feedback

    def test_rejects_missing_challenge_id(self, scorer):
        with pytest.raises(ValidationError):
            scorer.evaluate("", "anything")

    def test_rejects_non_string_text(self, scorer):
        with pytest.raises(ValidationError):
            scorer.evaluate("prompt-basics-1", None)


class TestPassBoundary:
    def test_69_fails(self, boundary_scorer):
        # 35 + 30 + 4
        result = boundary_scorer.evaluate("boundary", "do k0 k1 k2 k3 k4 k5 k6 c0 c1")
        assert result.score == 69
        assert result.passed is False

    def test_70_passes(self, boundary_scorer):
        # 40 + 30 + 0
        result = boundary_scorer.evaluate("boundary", "do k0 k1 k2 k3 k4 k5 k6 k7")
        assert result.score == 70
        assert result.passed is True

    def test_71_passes(self, boundary_scorer):
        # 35 + 30 + 6
        result = boundary_scorer.evaluate("boundary", "do k0 k1 k2 k3 k4 k5 k6 c0 c1 c2")
        assert result.score == 71
        assert result.passed is True


class TestLengthFallback:
    def test_unknown_challenge_scores_by_length(self, scorer):
        result = scorer.evaluate("no-such-challenge", "x" * 35)
        assert result.score == 70
        assert result.passed is True
        assert result.feedback == feedback.FALLBACK_PASS_FEEDBACK
        assert result.output == FALLBACK_OUTPUT

    def test_short_text_fails(self, scorer):
        result = scorer.evaluate("no-such-challenge", "x" * 34)
        assert result.score == 68
        assert result.passed is False
        assert result.feedback == feedback.FALLBACK_FAIL_FEEDBACK

    def test_long_text_is_capped(self, scorer):
        result = scorer.evaluate("no-such-challenge", "x" * 500)
        assert result.score == 100

    def test_empty_text(self, scorer):
        assert scorer.evaluate("no-such-challenge", "").score == 0


class TestRounding:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (Fraction(2, 5), 0),
            (Fraction(1, 2), 1),
            (Fraction(5, 2), 3),
            (Fraction(139, 2), 70),
            (Fraction(7049, 100), 70),
        ],
    )
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_result_stays_exact(self):
        # as a float this collapses to 0.5 and rounds up
        assert round_half_up(Fraction(1, 2) - Fraction(1, 10**18)) == 0
