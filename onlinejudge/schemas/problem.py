"""
Problem and test case schemas.

Updates are full replacements: the ``test_cases`` list of a ProblemUpdate is
the complete desired set. Entries with an ``id`` update that row, entries
without one are created, and rows missing from the list are deleted.
"""

from typing import List, Optional, Union
from pydantic import BaseModel, Field

from onlinejudge.services.reconciler import ExistingTestCase, NewTestCase, TestCaseFields


class TestCaseCreate(BaseModel):
    """Schema for a new test case."""
    __test__ = False

    input: str = ""
    expected_output: str = ""
    comment: str = ""
    score: int = Field(default=0, ge=0)
    timeout_seconds: float = Field(default=1.0, gt=0)

    def to_fields(self) -> TestCaseFields:
        return TestCaseFields(
            input=self.input,
            expected_output=self.expected_output,
            comment=self.comment,
            score=self.score,
            timeout_seconds=self.timeout_seconds,
        )


class TestCaseUpdate(TestCaseCreate):
    """Schema for a test case inside a problem edit."""
    id: Optional[int] = Field(default=None, ge=1)

    def to_spec(self) -> Union[NewTestCase, ExistingTestCase]:
        """Convert into the reconciler's tagged variant."""
        if self.id is None:
            return NewTestCase(fields=self.to_fields())
        return ExistingTestCase(id=self.id, fields=self.to_fields())


class TestCaseResponse(BaseModel):
    """Schema for a persisted test case."""
    __test__ = False

    id: int
    input: str
    expected_output: str
    comment: str
    score: int
    timeout_seconds: float

    class Config:
        from_attributes = True


class ProblemCreate(BaseModel):
    """Schema for creating a new problem with its initial test cases."""
    title: str = Field(min_length=1, max_length=255)
    description: str = ""
    test_cases: List[TestCaseCreate] = Field(default_factory=list)


class ProblemUpdate(BaseModel):
    """Schema for replacing a problem's details and test case set."""
    title: str = Field(min_length=1, max_length=255)
    description: str = ""
    test_cases: List[TestCaseUpdate] = Field(default_factory=list)


class ProblemResponse(BaseModel):
    """Schema for problem response with full details."""
    id: int
    title: str
    description: str
    test_cases: List[TestCaseResponse]

    class Config:
        from_attributes = True


class ProblemListResponse(BaseModel):
    """Schema for problem list entries."""
    id: int
    title: str

    class Config:
        from_attributes = True


class ProblemCreatedResponse(BaseModel):
    problem_id: int


class ReconciliationResponse(BaseModel):
    """Outcome of a problem edit."""
    ok: bool = True
    created: int
    updated: int
    deleted: int
