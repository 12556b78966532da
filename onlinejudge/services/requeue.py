"""
Requeue Coordinator

Sends submissions that never received a verdict back to the judge queues.
Payloads are always built from the problem's current test cases, so a
restart after a problem edit is judged against the edited set.

Authority checks happen in the API layer before these functions run.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, List

from sqlalchemy.orm import Session

from onlinejudge.exceptions import (
    QueuePushError,
    QueueUnavailableError,
    SubmissionNotFoundError,
    SubmissionOwnershipError,
)
from onlinejudge.models.submission import Submission, SUBMISSION_NO_RESULT
from onlinejudge.models.test_case import TestCase
from onlinejudge.services.dispatcher import Dispatcher, DispatchResult
from onlinejudge.services.payload_builder import build_judge_payload

logger = logging.getLogger(__name__)


@dataclass
class SweepResult:
    """
    Outcome of a sweep.

    ``ok`` is False when the queue failed part way; submissions counted in
    ``dispatched`` stay queued.
    """
    ok: bool
    total: int
    dispatched: int
    skipped: int


def current_test_cases(db: Session, problem_id: int) -> List[TestCase]:
    """Test cases of a problem in natural row order."""
    return (
        db.query(TestCase)
        .filter(TestCase.problem_id == problem_id)
        .order_by(TestCase.id)
        .all()
    )


def _test_cases_by_problem(db: Session, problem_ids: List[int]) -> Dict[int, List[TestCase]]:
    """Fetch the test cases of several problems in one query."""
    grouped: Dict[int, List[TestCase]] = {problem_id: [] for problem_id in problem_ids}
    if not problem_ids:
        return grouped
    rows = (
        db.query(TestCase)
        .filter(TestCase.problem_id.in_(problem_ids))
        .order_by(TestCase.problem_id, TestCase.id)
        .all()
    )
    for row in rows:
        grouped[row.problem_id].append(row)
    return grouped


class RequeueCoordinator:
    """Re-dispatches unjudged submissions individually or in bulk."""

    def __init__(self, dispatcher: Dispatcher):
        self.dispatcher = dispatcher

    def sweep_all(self, db: Session) -> SweepResult:
        """
        Dispatch every submission whose result is still the "-" sentinel.

        Submissions are grouped by problem and each problem's test cases are
        loaded once. The first queue failure aborts the rest of the sweep.
        """
        pending = (
            db.query(Submission)
            .filter(Submission.result == SUBMISSION_NO_RESULT)
            .order_by(Submission.id)
            .all()
        )

        by_problem: "OrderedDict[int, List[Submission]]" = OrderedDict()
        for submission in pending:
            by_problem.setdefault(submission.problem_id, []).append(submission)

        test_cases = _test_cases_by_problem(db, list(by_problem))

        dispatched = 0
        skipped = 0
        for problem_id, submissions in by_problem.items():
            for submission in submissions:
                payload = build_judge_payload(submission, test_cases[problem_id])
                try:
                    result = self.dispatcher.dispatch(payload)
                except (QueueUnavailableError, QueuePushError) as e:
                    logger.error(
                        f"Sweep aborted at submission {submission.id} "
                        f"after {dispatched}/{len(pending)} dispatched: {e}"
                    )
                    return SweepResult(
                        ok=False, total=len(pending), dispatched=dispatched, skipped=skipped
                    )
                if result.queued:
                    dispatched += 1
                else:
                    skipped += 1

        logger.info(
            f"Sweep finished: {dispatched} dispatched, {skipped} skipped "
            f"across {len(by_problem)} problems"
        )
        return SweepResult(ok=True, total=len(pending), dispatched=dispatched, skipped=skipped)

    def restart_submission(self, db: Session, submission_id: int, user_id: int) -> DispatchResult:
        """
        Re-dispatch one submission on behalf of its owner.

        Raises:
            SubmissionNotFoundError: No such submission
            SubmissionOwnershipError: Submission belongs to another user
            QueueUnavailableError: Judge queue unreachable
        """
        submission = db.query(Submission).filter(Submission.id == submission_id).first()
        if submission is None:
            raise SubmissionNotFoundError(submission_id)
        if submission.user_id != user_id:
            raise SubmissionOwnershipError(submission_id, user_id)

        payload = build_judge_payload(submission, current_test_cases(db, submission.problem_id))
        return self.dispatcher.dispatch(payload)
