"""
Test Case Reconciler

Brings a problem's persisted test cases in line with an edited set:
- specs without an id become new rows owned by the problem
- specs with an id update that row in place (ownership and id never change)
- persisted rows whose id is absent from the edit are deleted

Planning is a pure function over the current rows; applying the plan runs
inside the same transaction as the problem's own title/description update.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Set, Union

from sqlalchemy.orm import Session

from onlinejudge.database import transaction
from onlinejudge.exceptions import ProblemNotFoundError, TestCaseNotFoundError
from onlinejudge.models.problem import Problem
from onlinejudge.models.test_case import TestCase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TestCaseFields:
    """Editable content of a test case."""
    __test__ = False

    input: str
    expected_output: str
    comment: str = ""
    score: int = 0
    timeout_seconds: float = 1.0

    def as_dict(self) -> dict:
        return {
            "input": self.input,
            "expected_output": self.expected_output,
            "comment": self.comment,
            "score": self.score,
            "timeout_seconds": self.timeout_seconds,
        }


@dataclass(frozen=True)
class NewTestCase:
    """Incoming spec with no id: create it."""
    fields: TestCaseFields


@dataclass(frozen=True)
class ExistingTestCase:
    """Incoming spec naming a persisted row: update it."""
    id: int
    fields: TestCaseFields


TestCaseSpec = Union[NewTestCase, ExistingTestCase]


@dataclass
class ReconciliationPlan:
    """Disjoint create/update/delete sets for one problem."""
    problem_id: int
    creates: List[TestCaseFields] = field(default_factory=list)
    updates: Dict[int, TestCaseFields] = field(default_factory=dict)
    deletes: List[int] = field(default_factory=list)
    unknown_ids: Set[int] = field(default_factory=set)

    @property
    def is_valid(self) -> bool:
        return not self.unknown_ids

    def summary(self) -> Dict[str, int]:
        return {
            "created": len(self.creates),
            "updated": len(self.updates),
            "deleted": len(self.deletes),
        }


def plan_reconciliation(
    problem_id: int,
    persisted: Sequence[TestCase],
    incoming: Sequence[TestCaseSpec],
) -> ReconciliationPlan:
    """
    Compute the actions that turn ``persisted`` into ``incoming``.

    Args:
        problem_id: Owner of every persisted row and every created row
        persisted: Current test cases of the problem
        incoming: Desired test case set

    Returns:
        ReconciliationPlan; ids in the edit that match no persisted row of
        this problem are reported in ``unknown_ids``
    """
    incoming_by_id = {
        spec.id: spec for spec in incoming if isinstance(spec, ExistingTestCase)
    }
    persisted_ids = {row.id for row in persisted}

    plan = ReconciliationPlan(problem_id=problem_id)
    plan.deletes = [row.id for row in persisted if row.id not in incoming_by_id]

    for spec in incoming:
        if isinstance(spec, NewTestCase):
            plan.creates.append(spec.fields)
        elif spec.id in persisted_ids:
            plan.updates[spec.id] = spec.fields
        else:
            plan.unknown_ids.add(spec.id)

    return plan


def apply_plan(db: Session, plan: ReconciliationPlan) -> None:
    """
    Execute a plan on an open session: deletions first, then creations and
    updates. The caller owns the transaction.
    """
    if not plan.is_valid:
        raise TestCaseNotFoundError(plan.problem_id, plan.unknown_ids)

    if plan.deletes:
        db.query(TestCase).filter(
            TestCase.problem_id == plan.problem_id,
            TestCase.id.in_(plan.deletes),
        ).delete(synchronize_session="fetch")  # evict rows whose ids may be reused below

    for fields in plan.creates:
        db.add(TestCase(problem_id=plan.problem_id, **fields.as_dict()))

    for test_case_id, fields in plan.updates.items():
        db.query(TestCase).filter(
            TestCase.id == test_case_id,
            TestCase.problem_id == plan.problem_id,
        ).update(fields.as_dict(), synchronize_session=False)

    db.flush()


def reconcile_problem(
    db: Session,
    problem_id: int,
    title: str,
    description: str,
    incoming: Sequence[TestCaseSpec],
) -> ReconciliationPlan:
    """
    Update a problem's details and reconcile its test cases atomically.

    Raises:
        ProblemNotFoundError: No problem has this id; nothing is written
        TestCaseNotFoundError: The edit names a test case id that does not
            belong to this problem; nothing is written
    """
    with transaction(db):
        affected = db.query(Problem).filter(Problem.id == problem_id).update(
            {"title": title, "description": description},
            synchronize_session=False,
        )
        if affected == 0:
            raise ProblemNotFoundError(problem_id)

        persisted = (
            db.query(TestCase)
            .filter(TestCase.problem_id == problem_id)
            .order_by(TestCase.id)
            .all()
        )
        plan = plan_reconciliation(problem_id, persisted, incoming)
        if not plan.is_valid:
            logger.warning(
                f"Rejecting edit of problem {problem_id}: unknown test case ids "
                f"{sorted(plan.unknown_ids)}"
            )
        apply_plan(db, plan)

    # Bulk statements bypass the identity map
    db.expire_all()
    logger.info(f"Reconciled problem {problem_id}: {plan.summary()}")
    return plan
