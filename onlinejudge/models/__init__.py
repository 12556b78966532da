"""
SQLAlchemy ORM models for the online judge.
"""

from onlinejudge.models.user import User
from onlinejudge.models.problem import Problem
from onlinejudge.models.test_case import TestCase
from onlinejudge.models.submission import Submission, SUBMISSION_NO_RESULT, SUBMISSION_NOT_EXECUTED

__all__ = [
    "User",
    "Problem",
    "TestCase",
    "Submission",
    "SUBMISSION_NO_RESULT",
    "SUBMISSION_NOT_EXECUTED",
]
