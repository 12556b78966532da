"""
Submission model for user code awaiting or holding a judge verdict.
"""

from sqlalchemy import Column, Integer, String, Text, Float, ForeignKey
from sqlalchemy.orm import relationship

from onlinejudge.database import Base

# Placeholder result until a judge worker reports back
SUBMISSION_NO_RESULT = "-"
SUBMISSION_NOT_EXECUTED = -1.0


class Submission(Base):
    """
    User's code submission.

    Attributes:
        id: Primary key
        language: Language name; doubles as the judge queue key
        code: Source code
        executed_time: Run time reported by the judge, -1.0 until judged
        result: Verdict reported by the judge, "-" until judged
        problem_id: Problem being solved. Not a foreign key so that
            submission history survives problem deletion.
        user_id: Submitting user
    """
    __tablename__ = "submissions"

    id = Column(Integer, primary_key=True, index=True)
    language = Column(String(255), nullable=False)
    code = Column(Text, nullable=False, default="")
    executed_time = Column(Float, nullable=False, default=SUBMISSION_NOT_EXECUTED)
    result = Column(String(255), nullable=False, default=SUBMISSION_NO_RESULT, index=True)

    problem_id = Column(Integer, nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    user = relationship("User", back_populates="submissions")

    @property
    def is_judged(self) -> bool:
        return self.result != SUBMISSION_NO_RESULT

    def __repr__(self) -> str:
        return f"<Submission(id={self.id}, language='{self.language}', result='{self.result}')>"
