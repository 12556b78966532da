"""
Problem model: a programming task together with the test cases it is
judged against.
"""

from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship

from onlinejudge.database import Base


class Problem(Base):
    """
    Problem definition.

    Attributes:
        id: Primary key
        title: Problem title
        description: Full problem statement
        test_cases: Owned test cases in natural row order (ascending id).
            Deleting the problem deletes them.
    """
    __tablename__ = "problems"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")

    test_cases = relationship(
        "TestCase",
        back_populates="problem",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TestCase.id",
    )

    def __repr__(self) -> str:
        return f"<Problem(id={self.id}, title='{self.title}')>"
