"""
Error taxonomy for the judge backend.

Every error raised by the dispatch, requeue and reconciliation paths derives
from JudgeError. The API layer turns them into JSON responses using the
class-level ``status_code`` and ``error_code``.
"""

from typing import Iterable, Optional


class JudgeError(Exception):
    """Base class for all domain errors."""
    status_code = 500
    error_code = "internal_error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__


class NotFoundError(JudgeError):
    """Requested record does not exist."""
    status_code = 404
    error_code = "not_found"


class ProblemNotFoundError(NotFoundError):
    """Problem not found."""

    def __init__(self, problem_id: int):
        super().__init__(f"Problem {problem_id} not found")
        self.problem_id = problem_id


class SubmissionNotFoundError(NotFoundError):
    """Submission not found."""

    def __init__(self, submission_id: int):
        super().__init__(f"Submission {submission_id} not found")
        self.submission_id = submission_id


class TestCaseNotFoundError(NotFoundError):
    """Test case not found."""
    __test__ = False  # not a pytest class

    def __init__(self, problem_id: int, test_case_ids: Iterable[int]):
        self.test_case_ids = sorted(test_case_ids)
        self.problem_id = problem_id
        super().__init__(
            f"Test cases {self.test_case_ids} do not belong to problem {problem_id}"
        )


class UnauthorizedError(JudgeError):
    """Caller is not allowed to act on this record."""
    status_code = 403
    error_code = "unauthorized"


class SubmissionOwnershipError(UnauthorizedError):
    """Submission belongs to another user."""

    def __init__(self, submission_id: int, user_id: int):
        super().__init__(f"Submission {submission_id} is not owned by user {user_id}")
        self.submission_id = submission_id
        self.user_id = user_id


class UnsupportedLanguageError(JudgeError):
    """Language has no judge queue."""
    status_code = 400
    error_code = "unsupported_language"

    def __init__(self, language: str):
        super().__init__(f"Language '{language}' is not supported")
        self.language = language


class QueueUnavailableError(JudgeError):
    """Judge queue did not answer the liveness probe."""
    status_code = 503
    error_code = "queue_unavailable"


class QueuePushError(JudgeError):
    """Judge queue rejected the push."""
    status_code = 503
    error_code = "queue_push_failed"


class PayloadSerializationError(JudgeError):
    """Judge payload could not be encoded."""
    status_code = 500
    error_code = "serialization_failed"


class StoreError(JudgeError):
    """Database transaction failed and was rolled back."""
    status_code = 500
    error_code = "store_failure"
