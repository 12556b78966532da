"""
Problems API routes.
Anyone may read problems; creating, editing and deleting them requires a
privileged user.
"""

from typing import List
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from onlinejudge.database import get_db
from onlinejudge.models.user import User
from onlinejudge.schemas.problem import (
    ProblemCreate,
    ProblemUpdate,
    ProblemResponse,
    ProblemListResponse,
    ProblemCreatedResponse,
    ReconciliationResponse,
)
from onlinejudge.auth.jwt_handler import require_privileged
from onlinejudge.services import problem_service
from onlinejudge.services.reconciler import reconcile_problem

router = APIRouter()


@router.get("", response_model=List[ProblemListResponse])
def list_problems(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    """List problem ids and titles."""
    return problem_service.list_problems(db, skip=skip, limit=limit)


@router.get("/{problem_id}", response_model=ProblemResponse)
def get_problem(problem_id: int, db: Session = Depends(get_db)):
    """Get a problem with its test cases."""
    return problem_service.get_problem(db, problem_id)


@router.post("", response_model=ProblemCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_problem(
    problem_data: ProblemCreate,
    db: Session = Depends(get_db),
    admin_user: User = Depends(require_privileged),
):
    """Create a problem together with its initial test cases."""
    problem = problem_service.create_problem(
        db,
        title=problem_data.title,
        description=problem_data.description,
        test_cases=[t.to_fields() for t in problem_data.test_cases],
    )
    return {"problem_id": problem.id}


@router.put("/{problem_id}", response_model=ReconciliationResponse)
def update_problem(
    problem_id: int,
    problem_data: ProblemUpdate,
    db: Session = Depends(get_db),
    admin_user: User = Depends(require_privileged),
):
    """
    Replace a problem's details and test case set.

    Test cases with an id are updated, those without are created, and
    existing ones missing from the request are deleted. An id that does not
    belong to this problem rejects the whole edit with 404.
    """
    plan = reconcile_problem(
        db,
        problem_id,
        title=problem_data.title,
        description=problem_data.description,
        incoming=[t.to_spec() for t in problem_data.test_cases],
    )
    return ReconciliationResponse(**plan.summary())


@router.delete("/{problem_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_problem(
    problem_id: int,
    db: Session = Depends(get_db),
    admin_user: User = Depends(require_privileged),
):
    """Delete a problem and all its test cases."""
    problem_service.delete_problem(db, problem_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
