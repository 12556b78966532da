"""
Submission creation.

A new submission is committed with the "-" sentinel result before it is
dispatched. If the queue is down the submission simply stays unjudged and
the next sweep picks it up.
"""

import logging
from dataclasses import dataclass
from typing import Iterable

from sqlalchemy.orm import Session

from onlinejudge.database import transaction
from onlinejudge.exceptions import (
    ProblemNotFoundError,
    QueuePushError,
    QueueUnavailableError,
    SubmissionNotFoundError,
    SubmissionOwnershipError,
    UnsupportedLanguageError,
)
from onlinejudge.models.problem import Problem
from onlinejudge.models.submission import (
    Submission,
    SUBMISSION_NO_RESULT,
    SUBMISSION_NOT_EXECUTED,
)
from onlinejudge.services.dispatcher import Dispatcher
from onlinejudge.services.payload_builder import build_judge_payload
from onlinejudge.services.requeue import current_test_cases

logger = logging.getLogger(__name__)


@dataclass
class SubmissionOutcome:
    submission: Submission
    queued: bool


def create_submission(
    db: Session,
    dispatcher: Dispatcher,
    user_id: int,
    problem_id: int,
    language: str,
    code: str,
    supported_languages: Iterable[str],
) -> SubmissionOutcome:
    """
    Persist a submission and hand it to the judge queue.

    Raises:
        UnsupportedLanguageError: No worker pool serves ``language``
        ProblemNotFoundError: No such problem
    """
    if language not in set(supported_languages):
        raise UnsupportedLanguageError(language)

    with transaction(db):
        if db.query(Problem.id).filter(Problem.id == problem_id).first() is None:
            raise ProblemNotFoundError(problem_id)
        submission = Submission(
            language=language,
            code=code,
            executed_time=SUBMISSION_NOT_EXECUTED,
            result=SUBMISSION_NO_RESULT,
            problem_id=problem_id,
            user_id=user_id,
        )
        db.add(submission)

    db.refresh(submission)

    payload = build_judge_payload(submission, current_test_cases(db, problem_id))
    try:
        result = dispatcher.dispatch(payload)
    except (QueueUnavailableError, QueuePushError) as e:
        logger.error(f"Submission {submission.id} saved but not queued: {e}")
        return SubmissionOutcome(submission=submission, queued=False)

    return SubmissionOutcome(submission=submission, queued=result.queued)


def get_own_submission(db: Session, submission_id: int, user_id: int) -> Submission:
    """Load a submission, checking that `user_id` owns it."""
    submission = db.query(Submission).filter(Submission.id == submission_id).first()
    if submission is None:
        raise SubmissionNotFoundError(submission_id)
    if submission.user_id != user_id:
        raise SubmissionOwnershipError(submission_id, user_id)
    return submission
