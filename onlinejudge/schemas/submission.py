"""
Submission-related Pydantic schemas.
"""

from pydantic import BaseModel, Field


class SubmissionCreate(BaseModel):
    """Schema for creating a new submission."""
    problem_id: int
    language: str = Field(min_length=1, max_length=255)
    code: str


class SubmissionResponse(BaseModel):
    """Schema for submission details."""
    id: int
    language: str
    code: str
    executed_time: float
    result: str
    problem_id: int
    user_id: int

    class Config:
        from_attributes = True


class SubmissionCreatedResponse(BaseModel):
    """
    Response for a new submission.

    ``queued`` is False when the problem has no test cases or the judge
    queue could not be reached; the submission keeps its "-" result and
    is picked up by the next sweep.
    """
    submission_id: int
    queued: bool


class RestartResponse(BaseModel):
    submission_id: int
    queued: bool


class SweepResponse(BaseModel):
    """Outcome of re-queueing every unjudged submission."""
    ok: bool
    total: int
    dispatched: int
    skipped: int
