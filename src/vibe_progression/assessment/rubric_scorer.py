"""Lexical rubric scoring for free-text submissions."""

import math
from collections.abc import Mapping
from fractions import Fraction

import structlog

from vibe_progression.assessment import feedback
from vibe_progression.catalog.rubrics import FALLBACK_OUTPUT, RUBRICS
from vibe_progression.errors import ValidationError
from vibe_progression.models.assessment import PASS_THRESHOLD, RubricEntry, ScoreResult

logger = structlog.get_logger()

# Exact weights so half-point totals round the same on every platform.
KEYWORD_WEIGHT = Fraction(1, 2)
INTENT_WEIGHT = Fraction(3, 10)
CONTEXT_WEIGHT = Fraction(1, 5)

# Characters of submission text worth a full score when no rubric exists.
FALLBACK_FULL_LENGTH = 50


def round_half_up(value: Fraction) -> int:
    """Round to the nearest integer with halves going up."""
    return math.floor(value + Fraction(1, 2))


def coverage(terms: tuple[str, ...], found: list[str]) -> Fraction:
    """Percentage of ``terms`` present; 0 for an empty term set."""
    if not terms:
        return Fraction(0)
    return Fraction(100 * len(found), len(terms))


class RubricScorer:
    """Scores submissions against per-challenge rubrics.

    Stateless after construction: safe to share between requests and threads.

    Args:
        rubrics: Rubric per challenge id. Challenges without an entry are
            scored by submission length.
    """

    def __init__(self, rubrics: Mapping[str, RubricEntry] | None = None):
        self.rubrics = RUBRICS if rubrics is None else rubrics

    def evaluate(self, challenge_id: str, text: str) -> ScoreResult:
        """Score one submission.

        Args:
            challenge_id: Challenge being attempted.
            text: The learner's submission, unbounded.

        Returns:
            ScoreResult with score, verdict, feedback and illustrative output.
        """
        if not isinstance(challenge_id, str) or not challenge_id.strip():
            raise ValidationError("challenge_id must be a non-empty string")
        if not isinstance(text, str):
            raise ValidationError("submission text must be a string")

        rubric = self.rubrics.get(challenge_id)
        if rubric is None:
            result = self._evaluate_by_length(text)
        else:
            result = self._evaluate_with_rubric(challenge_id, rubric, text.lower())

        logger.debug(
            "submission_evaluated",
            challenge_id=challenge_id,
            rubric=rubric is not None,
            score=result.score,
            passed=result.passed,
        )
        return result

    @staticmethod
    def _evaluate_by_length(text: str) -> ScoreResult:
        score = min(100, round_half_up(Fraction(len(text) * 100, FALLBACK_FULL_LENGTH)))
        message = (
            feedback.FALLBACK_PASS_FEEDBACK if score >= PASS_THRESHOLD
            else feedback.FALLBACK_FAIL_FEEDBACK
        )
        return ScoreResult.from_score(score, message, FALLBACK_OUTPUT)

    @staticmethod
    def _evaluate_with_rubric(challenge_id: str, rubric: RubricEntry, text: str) -> ScoreResult:
        found_keywords = [k for k in rubric.keywords if k in text]
        found_intents = [v for v in rubric.intent_verbs if v in text]
        found_context = [c for c in rubric.context_terms if c in text]

        keyword_score = coverage(rubric.keywords, found_keywords)
        intent_score = Fraction(100 if found_intents else 0)
        context_score = coverage(rubric.context_terms, found_context)

        score = round_half_up(
            keyword_score * KEYWORD_WEIGHT
            + intent_score * INTENT_WEIGHT
            + context_score * CONTEXT_WEIGHT
        )
        score = max(0, min(100, score))

        missing = [k for k in rubric.keywords if k not in found_keywords]
        if score >= PASS_THRESHOLD:
            return ScoreResult.from_score(
                score,
                feedback.pass_feedback(score, found_keywords, found_intents),
                feedback.sample_output(challenge_id),
            )
        return ScoreResult.from_score(
            score,
            feedback.fail_feedback(missing, found_intents),
            feedback.mismatch_output(missing),
        )
