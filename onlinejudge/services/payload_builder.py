"""
Judge payload assembly.
"""

from typing import Iterable

from onlinejudge.models.submission import Submission
from onlinejudge.models.test_case import TestCase
from onlinejudge.schemas.judge import JudgePayload, JudgeTestCase


def build_judge_payload(submission: Submission, test_cases: Iterable[TestCase]) -> JudgePayload:
    """
    Combine a submission with its problem's current test cases.

    Test case order is preserved; ids and comments are dropped since workers
    never see them. Missing fields raise pydantic's ValidationError.
    """
    return JudgePayload(
        submission_id=submission.id,
        language=submission.language,
        code=submission.code,
        test_cases=[
            JudgeTestCase(
                input=test_case.input,
                expected_output=test_case.expected_output,
                score=test_case.score,
                timeout_seconds=test_case.timeout_seconds,
            )
            for test_case in test_cases
        ],
    )
