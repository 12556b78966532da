"""
Pydantic schemas for request/response validation and the judge wire format.
"""

from onlinejudge.schemas.user import UserCreate, UserLogin, UserResponse, TokenResponse
from onlinejudge.schemas.problem import (
    TestCaseCreate,
    TestCaseUpdate,
    TestCaseResponse,
    ProblemCreate,
    ProblemUpdate,
    ProblemResponse,
    ProblemListResponse,
    ProblemCreatedResponse,
    ReconciliationResponse,
)
from onlinejudge.schemas.submission import (
    SubmissionCreate,
    SubmissionResponse,
    SubmissionCreatedResponse,
    RestartResponse,
    SweepResponse,
)
from onlinejudge.schemas.judge import JudgePayload, JudgeTestCase

__all__ = [
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "TokenResponse",
    "TestCaseCreate",
    "TestCaseUpdate",
    "TestCaseResponse",
    "ProblemCreate",
    "ProblemUpdate",
    "ProblemResponse",
    "ProblemListResponse",
    "ProblemCreatedResponse",
    "ReconciliationResponse",
    "SubmissionCreate",
    "SubmissionResponse",
    "SubmissionCreatedResponse",
    "RestartResponse",
    "SweepResponse",
    "JudgePayload",
    "JudgeTestCase",
]
