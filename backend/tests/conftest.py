"""
Pytest configuration and fixtures for diagramiq backend tests.

Provides:
- Test database setup/teardown
- FastAPI test client
- User, diagram and question fixtures
- Session factory for persisting test history
"""

import pytest
import os
import uuid
from typing import Callable, Generator, List, Optional
from datetime import datetime
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

# Set test environment before importing app
os.environ["DATABASE_URL"] = "sqlite:///./test_diagramiq.db"
os.environ["JWT_SECRET"] = "test-secret-not-real"

from diagramiq.main import app
from diagramiq.database import Base, get_db
from diagramiq.models.models import (
    User, Diagram, Question, TestSession, TestResult,
    ROLE_STUDENT, ROLE_SUPERVISOR, MODE_EXAM
)

# Test database setup
TEST_DATABASE_URL = "sqlite:///./test_diagramiq.db"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database tables once per test session"""
    Base.metadata.create_all(bind=test_engine)
    yield
    # Cleanup after all tests
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()
    if os.path.exists("./test_diagramiq.db"):
        os.remove("./test_diagramiq.db")


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Provide a database session for each test, with rollback after"""
    connection = test_engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Provide FastAPI test client with database override"""
    def override_get_db():
        try:
            yield db
        finally:
            pass  # Don't close - let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# =========================================================================
# User Fixtures
# =========================================================================

@pytest.fixture
def supervisor_user(db: Session) -> User:
    """Create a supervisor"""
    user = User(
        id="test-supervisor-1",
        name="Sara",
        last_name="Supervisor",
        email="supervisor@diagramiq.test",
        role=ROLE_SUPERVISOR,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def student_user(db: Session) -> User:
    """Create a student"""
    user = User(
        id="test-student-1",
        name="Ana",
        last_name="Student",
        email="student@diagramiq.test",
        role=ROLE_STUDENT,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def make_student(db: Session) -> Callable[..., User]:
    """Factory for additional students"""
    def _make(name: str = "Student", last_name: str = "Test") -> User:
        user = User(
            id=str(uuid.uuid4()),
            name=name,
            last_name=last_name,
            email=f"{uuid.uuid4().hex[:8]}@diagramiq.test",
            role=ROLE_STUDENT,
        )
        db.add(user)
        db.commit()
        return user
    return _make


# =========================================================================
# Diagram & Question Fixtures
# =========================================================================

@pytest.fixture
def test_diagram(db: Session) -> Diagram:
    diagram = Diagram(
        id="test-diagram-1",
        title="Human Heart",
        filename="heart.png",
        path="/uploads/heart.png",
    )
    db.add(diagram)
    db.commit()
    db.refresh(diagram)
    return diagram


@pytest.fixture
def test_questions(db: Session, test_diagram: Diagram) -> List[Question]:
    """Three approved questions on the test diagram"""
    prompts = ["Label A", "Label B", "Label C"]
    questions = []
    for i, prompt in enumerate(prompts):
        q = Question(
            id=f"test-question-{i}",
            diagram_id=test_diagram.id,
            prompt=prompt,
            hint="",
            correct_option_index=0,
            options=["Aorta", "Vena cava", "Left atrium"],
            status="approved",
        )
        questions.append(q)
        db.add(q)
    db.commit()
    return questions


@pytest.fixture
def add_session(db: Session) -> Callable[..., TestSession]:
    """
    Factory persisting a completed session with one result per answer.

    answers: list of (question, selected_index) pairs; correct when the
    selected index matches the question's correct option.
    """
    def _add(
        user: User,
        diagram: Diagram,
        answers: list,
        mode: str = MODE_EXAM,
        created_at: Optional[datetime] = None,
        score: Optional[float] = None,
        completed: bool = True,
        time_spent_seconds: int = 10,
    ) -> TestSession:
        created_at = created_at or datetime.utcnow()
        correct = sum(1 for q, sel in answers if sel == q.correct_option_index)
        session = TestSession(
            user_id=user.id,
            diagram_id=diagram.id,
            mode=mode,
            total_questions=len(answers),
            correct_count=correct,
            incorrect_count=len(answers) - correct,
            score=score if score is not None else (
                round(correct * 10 / len(answers), 2) if mode == MODE_EXAM and answers else None
            ),
            created_at=created_at,
            completed_at=created_at if completed else None,
        )
        for i, (q, sel) in enumerate(answers):
            session.results.append(TestResult(
                question_id=q.id,
                order_index=i,
                prompt_snapshot=q.prompt,
                options_snapshot=list(q.options),
                correct_index_at_test=q.correct_option_index,
                selected_index=sel,
                time_spent_seconds=time_spent_seconds,
                is_correct=None if sel is None else sel == q.correct_option_index,
            ))
        db.add(session)
        db.commit()
        return session
    return _add

