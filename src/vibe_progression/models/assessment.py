"""Rubric and score models."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

# A submission passes at this score or above.
PASS_THRESHOLD = 70


class RubricEntry(BaseModel):
    """Scoring definition for one challenge.

    Term order is kept: it decides which missing keywords feedback names first.
    """

    model_config = ConfigDict(frozen=True)

    keywords: tuple[str, ...] = ()
    intent_verbs: tuple[str, ...] = ()
    context_terms: tuple[str, ...] = ()


class ScoreResult(BaseModel):
    """Outcome of evaluating one submission."""

    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0, le=100)
    passed: bool
    feedback: str
    output: str

    @model_validator(mode="after")
    def _passed_matches_score(self) -> "ScoreResult":
        if self.passed != (self.score >= PASS_THRESHOLD):
            raise ValueError(
                f"passed={self.passed} disagrees with score={self.score}"
            )
        return self

    @classmethod
    def from_score(cls, score: int, feedback: str, output: str) -> "ScoreResult":
        """Build a result whose verdict is derived from the score."""
        return cls(
            score=score,
            passed=score >= PASS_THRESHOLD,
            feedback=feedback,
            output=output,
        )
