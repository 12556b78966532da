"""
User model for authentication and submission ownership.
"""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from onlinejudge.database import Base


class User(Base):
    """
    Registered user.

    Attributes:
        id: Primary key
        username: Login name (unique)
        password_hash: Salted password hash
        name: Display name
        email: Contact address
        authority: 0 = none, 1 = normal user, 2+ = privileged
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    authority = Column(Integer, nullable=False, default=1)

    submissions = relationship("Submission", back_populates="user")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
