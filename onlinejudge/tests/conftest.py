"""
Pytest configuration and fixtures for backend tests.

Tests run against an in-memory SQLite database and an in-memory stand-in
for the Redis judge queue.
"""

import os
import sys
from collections import defaultdict

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

# Must be set before onlinejudge.config is first imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from onlinejudge.database import Base, init_db  # noqa: E402
from onlinejudge.exceptions import QueuePushError, QueueUnavailableError  # noqa: E402
from onlinejudge.models import Problem, Submission, TestCase, User  # noqa: E402
from onlinejudge.auth.passwords import hash_password  # noqa: E402
from onlinejudge.services.dispatcher import Dispatcher  # noqa: E402


class FakeBroker:
    """Shared state behind every FakeQueueClient: the lists and the outage switches."""

    def __init__(self):
        self.queues = defaultdict(list)
        self.down = False
        self.failing_pings = 0  # Number of upcoming pings that fail
        self.push_budget = None  # Pushes allowed before push starts failing
        self.clients_created = 0
        self.pings = 0

    def client_factory(self):
        self.clients_created += 1
        return FakeQueueClient(self)


class FakeQueueClient:
    """In-memory QueueClient."""

    def __init__(self, broker: FakeBroker):
        self.broker = broker
        self.closed = False

    def ping(self) -> None:
        self.broker.pings += 1
        if self.broker.down:
            raise QueueUnavailableError("broker down")
        if self.broker.failing_pings > 0:
            self.broker.failing_pings -= 1
            raise QueueUnavailableError("transient ping failure")

    def push(self, key: str, payload: bytes) -> int:
        if self.broker.push_budget is not None:
            if self.broker.push_budget <= 0:
                raise QueuePushError("push rejected")
            self.broker.push_budget -= 1
        self.broker.queues[key].append(payload)
        return len(self.broker.queues[key])

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def engine():
    """Fresh in-memory database per test, shared across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    """Database session bound to the test engine."""
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def statement_log(engine):
    """Every SQL statement executed on the test engine."""
    statements = []

    @event.listens_for(engine, "before_cursor_execute")
    def record(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    yield statements
    event.remove(engine, "before_cursor_execute", record)


@pytest.fixture
def broker():
    return FakeBroker()


@pytest.fixture
def sleeps():
    """Backoff delays requested by the dispatcher."""
    return []


@pytest.fixture
def dispatcher(broker, sleeps):
    return Dispatcher(broker.client_factory, max_attempts=3, backoff_seconds=0.1, sleep=sleeps.append)


@pytest.fixture
def make_user(db):
    """Factory for persisted users."""
    def factory(username="alice", authority=1, password="secret", **kwargs):
        user = User(
            username=username,
            password_hash=hash_password(password),
            name=kwargs.get("name", username.title()),
            email=kwargs.get("email", f"{username}@example.com"),
            authority=authority,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return factory


@pytest.fixture
def make_problem(db):
    """Factory for persisted problems with test cases given as dicts."""
    def factory(test_cases=(), problem_id=None, title="A + B", description="Add two numbers"):
        problem = Problem(id=problem_id, title=title, description=description)
        db.add(problem)
        db.flush()
        for spec in test_cases:
            db.add(TestCase(problem_id=problem.id, **spec))
        db.commit()
        db.refresh(problem)
        return problem
    return factory


@pytest.fixture
def make_submission(db):
    """Factory for persisted submissions (unjudged by default)."""
    def factory(problem, user, submission_id=None, language="kotlin", code="fun main() {}", result="-"):
        submission = Submission(
            id=submission_id,
            language=language,
            code=code,
            result=result,
            problem_id=problem.id,
            user_id=user.id,
        )
        db.add(submission)
        db.commit()
        db.refresh(submission)
        return submission
    return factory


@pytest.fixture
def sample_test_cases():
    return [
        {"input": "3 4", "expected_output": "7", "comment": "small", "score": 50, "timeout_seconds": 10.0},
        {"input": "10 20", "expected_output": "30", "comment": "medium", "score": 50, "timeout_seconds": 2.5},
    ]
