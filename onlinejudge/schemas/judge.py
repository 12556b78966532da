"""
Judge payload: the record a language worker pops from its queue.

Serialized with camelCase keys:
{"submissionId", "language", "code", "testCases": [{"input",
"expectedOutput", "score", "timeoutSeconds"}]}
"""

from typing import List
from pydantic import BaseModel, Field


class JudgeTestCase(BaseModel):
    """One test case as seen by a worker (no id, no comment)."""
    input: str
    expected_output: str = Field(alias="expectedOutput")
    score: int
    timeout_seconds: float = Field(alias="timeoutSeconds")

    class Config:
        populate_by_name = True


class JudgePayload(BaseModel):
    """Submission plus the current test cases of its problem."""
    submission_id: int = Field(alias="submissionId")
    language: str
    code: str
    test_cases: List[JudgeTestCase] = Field(default_factory=list, alias="testCases")

    class Config:
        populate_by_name = True

    def to_wire(self) -> bytes:
        """Encode as the UTF-8 JSON document pushed onto the queue."""
        return self.model_dump_json(by_alias=True).encode("utf-8")
