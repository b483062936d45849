"""REST API routes over the progression engine.

Identity arrives from the upstream session service as ``X-User-Id`` and
``X-User-Role`` headers. These routes only translate HTTP to engine calls.
"""

import functools

import structlog
from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from vibe_progression.assessment.rubric_scorer import RubricScorer
from vibe_progression.config import get_settings
from vibe_progression.errors import (
    AuthorizationError,
    ConsistencyError,
    NotFoundError,
    ProgressionError,
    StorageError,
    TransientStorageError,
    ValidationError,
)
from vibe_progression.models.assessment import ScoreResult
from vibe_progression.models.progress import Actor, CompletionOutcome, Role
from vibe_progression.progression.levels import level_for_xp, level_info, progress_toward
from vibe_progression.progression.ordering import recommend_challenges
from vibe_progression.storage.coordinator import ProgressCoordinator
from vibe_progression.storage.progress_store import ProgressStore

logger = structlog.get_logger()
router = APIRouter(prefix="/api")


class EvaluateRequest(BaseModel):
    text: str


class SubmissionRequest(BaseModel):
    challenge_id: str = Field(min_length=1)
    text: str
    elapsed_seconds: float | None = Field(default=None, ge=0)


class SubmissionResponse(BaseModel):
    """Scoring and persistence are reported as separate facts."""

    result: ScoreResult
    passed: bool
    persisted: bool
    outcome: CompletionOutcome | None = None


@functools.lru_cache
def get_scorer() -> RubricScorer:
    return RubricScorer()


@functools.lru_cache
def get_coordinator() -> ProgressCoordinator:
    settings = get_settings()
    store = ProgressStore(settings.database_path, settings.storage_timeout_seconds)
    return ProgressCoordinator(store)


def get_actor(
    x_user_id: str | None = Header(default=None),
    x_user_role: Role = Header(default=Role.USER),
) -> Actor:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing authenticated user")
    return Actor(user_id=x_user_id, role=x_user_role)


def _progress_view(progress) -> dict:
    return {
        **progress.model_dump(mode="json"),
        "level_info": level_info(progress.level).model_dump(),
        "progress": progress_toward(progress.xp).model_dump(),
    }


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


@router.post("/challenges/{challenge_id}/evaluate")
async def evaluate(
    challenge_id: str,
    body: EvaluateRequest,
    scorer: RubricScorer = Depends(get_scorer),
) -> ScoreResult:
    """Score a submission without recording anything."""
    return scorer.evaluate(challenge_id, body.text)


@router.get("/levels")
async def levels(xp: int = Query(ge=0)) -> dict:
    level = level_for_xp(xp)
    return {
        "xp": xp,
        "level": level,
        "level_info": level_info(level).model_dump(),
        "progress": progress_toward(xp, level).model_dump(),
    }


@router.post("/users/{user_id}")
def register(
    user_id: str,
    actor: Actor = Depends(get_actor),
    coordinator: ProgressCoordinator = Depends(get_coordinator),
) -> dict:
    if not actor.may_act_for(user_id):
        raise AuthorizationError(f"{actor.user_id} may not register {user_id}")
    return _progress_view(coordinator.register_user(user_id))


@router.get("/users/{user_id}/progress")
def get_progress(
    user_id: str,
    actor: Actor = Depends(get_actor),
    coordinator: ProgressCoordinator = Depends(get_coordinator),
) -> dict:
    return _progress_view(coordinator.get_progress(user_id, actor=actor))


@router.post("/users/{user_id}/submissions")
def submit(
    user_id: str,
    body: SubmissionRequest,
    actor: Actor = Depends(get_actor),
    scorer: RubricScorer = Depends(get_scorer),
    coordinator: ProgressCoordinator = Depends(get_coordinator),
) -> SubmissionResponse:
    """Score a submission and, only if it passed, persist the completion."""
    if not actor.may_act_for(user_id):
        raise AuthorizationError(f"{actor.user_id} may not submit for {user_id}")
    challenge = coordinator.challenges.get(body.challenge_id)
    if challenge is None:
        raise NotFoundError(f"unknown challenge {body.challenge_id}")

    result = scorer.evaluate(challenge.id, body.text)
    if not result.passed:
        return SubmissionResponse(result=result, passed=False, persisted=False)

    outcome = coordinator.record_completion(
        user_id,
        challenge.id,
        challenge.xp_reward,
        actor=actor,
        score=result.score,
        elapsed_seconds=body.elapsed_seconds,
    )
    return SubmissionResponse(result=result, passed=True, persisted=True, outcome=outcome)


@router.get("/users/{user_id}/recommendations")
def recommendations(
    user_id: str,
    actor: Actor = Depends(get_actor),
    coordinator: ProgressCoordinator = Depends(get_coordinator),
) -> list[dict]:
    progress = coordinator.get_progress(user_id, actor=actor)
    count = get_settings().recommendation_count
    return [c.model_dump() for c in recommend_challenges(progress.level, user_id, count)]


_STATUS_BY_ERROR: dict[type[ProgressionError], int] = {
    ValidationError: 400,
    AuthorizationError: 403,
    NotFoundError: 404,
    TransientStorageError: 503,
    StorageError: 500,
    ConsistencyError: 500,
}


async def progression_error_handler(request: Request, exc: ProgressionError) -> JSONResponse:
    status = next(
        (code for cls, code in _STATUS_BY_ERROR.items() if isinstance(exc, cls)), 500
    )
    headers = {"Retry-After": "1"} if exc.retryable else None
    logger.info("request_failed", path=request.url.path, status=status, error=str(exc))
    return JSONResponse({"error": str(exc)}, status_code=status, headers=headers)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ProgressionError, progression_error_handler)
