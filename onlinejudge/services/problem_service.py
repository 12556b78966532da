"""
Problem lifecycle: creation with initial test cases, lookup and deletion.
Edits go through the reconciler.
"""

import logging
from typing import List, Sequence

from sqlalchemy.orm import Session

from onlinejudge.database import transaction
from onlinejudge.exceptions import ProblemNotFoundError
from onlinejudge.models.problem import Problem
from onlinejudge.models.test_case import TestCase
from onlinejudge.services.reconciler import TestCaseFields

logger = logging.getLogger(__name__)


def create_problem(
    db: Session,
    title: str,
    description: str,
    test_cases: Sequence[TestCaseFields],
) -> Problem:
    """Create a problem and its test cases in one transaction."""
    with transaction(db):
        problem = Problem(title=title, description=description)
        db.add(problem)
        db.flush()
        for fields in test_cases:
            db.add(TestCase(problem_id=problem.id, **fields.as_dict()))

    db.refresh(problem)
    logger.info(f"Created problem {problem.id} with {len(test_cases)} test cases")
    return problem


def get_problem(db: Session, problem_id: int) -> Problem:
    problem = db.query(Problem).filter(Problem.id == problem_id).first()
    if problem is None:
        raise ProblemNotFoundError(problem_id)
    return problem


def list_problems(db: Session, skip: int = 0, limit: int = 100) -> List[Problem]:
    return db.query(Problem).order_by(Problem.id).offset(skip).limit(limit).all()


def delete_problem(db: Session, problem_id: int) -> None:
    """Delete a problem together with all its test cases."""
    with transaction(db):
        db.query(TestCase).filter(TestCase.problem_id == problem_id).delete(
            synchronize_session=False
        )
        deleted = db.query(Problem).filter(Problem.id == problem_id).delete(
            synchronize_session=False
        )
        if deleted == 0:
            raise ProblemNotFoundError(problem_id)

    db.expire_all()
    logger.info(f"Deleted problem {problem_id}")
