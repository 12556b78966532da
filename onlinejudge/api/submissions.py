"""
Submissions API routes.
Creating a submission stores it and pushes it to the judge queue of its
language; restart endpoints send unjudged work to the queue again.
"""

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from onlinejudge.config import get_settings
from onlinejudge.database import get_db
from onlinejudge.models.user import User
from onlinejudge.schemas.submission import (
    SubmissionCreate,
    SubmissionResponse,
    SubmissionCreatedResponse,
    RestartResponse,
    SweepResponse,
)
from onlinejudge.auth.jwt_handler import get_current_user, require_privileged
from onlinejudge.api.deps import get_dispatcher, get_requeue_coordinator
from onlinejudge.services.dispatcher import Dispatcher
from onlinejudge.services.requeue import RequeueCoordinator
from onlinejudge.services.submission_service import create_submission, get_own_submission
from onlinejudge.middleware.rate_limiter import limiter, submissions_limit, restart_limit

settings = get_settings()
router = APIRouter()


@router.post("", response_model=SubmissionCreatedResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(submissions_limit)
def submit(
    request: Request,
    submission_data: SubmissionCreate,
    db: Session = Depends(get_db),
    dispatcher: Dispatcher = Depends(get_dispatcher),
    current_user: User = Depends(get_current_user),
):
    """
    Create a submission and dispatch it.

    The submission is stored even if the queue is down; ``queued`` tells the
    caller whether it actually reached a worker queue.
    """
    outcome = create_submission(
        db,
        dispatcher,
        user_id=current_user.id,
        problem_id=submission_data.problem_id,
        language=submission_data.language,
        code=submission_data.code,
        supported_languages=settings.supported_languages,
    )
    return SubmissionCreatedResponse(submission_id=outcome.submission.id, queued=outcome.queued)


@router.post("/restart", response_model=SweepResponse)
def restart_all(
    response: Response,
    db: Session = Depends(get_db),
    coordinator: RequeueCoordinator = Depends(get_requeue_coordinator),
    admin_user: User = Depends(require_privileged),
):
    """
    Re-dispatch every submission that has no result yet (privileged).

    Responds 503 if the queue failed part way; submissions counted as
    dispatched stay queued.
    """
    result = coordinator.sweep_all(db)
    if not result.ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return SweepResponse(
        ok=result.ok,
        total=result.total,
        dispatched=result.dispatched,
        skipped=result.skipped,
    )


@router.get("/{submission_id}", response_model=SubmissionResponse)
def get_submission(
    submission_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get one of the caller's submissions."""
    return get_own_submission(db, submission_id, current_user.id)


@router.post("/{submission_id}/restart", response_model=RestartResponse)
@limiter.limit(restart_limit)
def restart_submission(
    request: Request,
    submission_id: int,
    db: Session = Depends(get_db),
    coordinator: RequeueCoordinator = Depends(get_requeue_coordinator),
    current_user: User = Depends(get_current_user),
):
    """Re-dispatch one of the caller's submissions against current test cases."""
    result = coordinator.restart_submission(db, submission_id, current_user.id)
    return RestartResponse(submission_id=submission_id, queued=result.queued)
