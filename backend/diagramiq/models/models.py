from sqlalchemy import Column, String, Integer, Float, Boolean, DateTime, JSON, ForeignKey, Text
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid
from diagramiq.database import Base

def generate_uuid():
    return str(uuid.uuid4())


# Roles
ROLE_STUDENT = "student"
ROLE_SUPERVISOR = "supervisor"

# Test session modes
MODE_LEARNING = "learning"
MODE_EXAM = "exam"
MODE_ERRORS = "errors"

# Claim statuses
CLAIM_PENDING = "pending"
CLAIM_APPROVED = "approved"
CLAIM_REJECTED = "rejected"


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=True)
    role = Column(String, default=ROLE_STUDENT, nullable=False, index=True)  # "student" or "supervisor"

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    test_sessions = relationship("TestSession", back_populates="user")
    ratings = relationship("Rating", back_populates="user")

    @property
    def is_supervisor(self) -> bool:
        return self.role == ROLE_SUPERVISOR


class Diagram(Base):
    __tablename__ = "diagrams"

    id = Column(String, primary_key=True, default=generate_uuid)
    title = Column(String(255), unique=True, nullable=False)
    filename = Column(String(255), nullable=False)
    path = Column(String(500), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    questions = relationship("Question", back_populates="diagram")


class Question(Base):
    __tablename__ = "questions"

    id = Column(String, primary_key=True, default=generate_uuid)
    diagram_id = Column(String, ForeignKey("diagrams.id", ondelete="CASCADE"), nullable=False, index=True)
    prompt = Column(Text, nullable=False)
    hint = Column(Text, nullable=False, default="")
    correct_option_index = Column(Integer, nullable=False)
    options = Column(JSON, nullable=False, default=list)  # Ordered list of option texts
    status = Column(String, default="pending", index=True)  # "pending", "approved", "rejected"
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    # Relationships
    diagram = relationship("Diagram", back_populates="questions")
    ratings = relationship("Rating", back_populates="question")


class TestSession(Base):
    """One test-taking attempt by a user on a diagram"""
    __tablename__ = "test_sessions"
    __test__ = False  # not a pytest class

    id = Column(String, primary_key=True, default=generate_uuid)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    diagram_id = Column(String, ForeignKey("diagrams.id", ondelete="CASCADE"), nullable=False, index=True)
    mode = Column(String, nullable=False, default=MODE_LEARNING, index=True)  # "learning", "exam", "errors"
    total_questions = Column(Integer, default=0)
    correct_count = Column(Integer, default=0)
    incorrect_count = Column(Integer, default=0)
    duration_seconds = Column(Integer, nullable=True)
    score = Column(Float, nullable=True)  # 0-10, exam only
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    completed_at = Column(DateTime, nullable=True)  # NULL while in progress

    # Relationships
    user = relationship("User", back_populates="test_sessions")
    diagram = relationship("Diagram")
    results = relationship(
        "TestResult",
        back_populates="session",
        order_by="TestResult.order_index",
        cascade="all, delete-orphan",
    )


class TestResult(Base):
    """Answer to one question instance within a test session"""
    __tablename__ = "test_results"
    __test__ = False  # not a pytest class

    id = Column(String, primary_key=True, default=generate_uuid)
    session_id = Column(String, ForeignKey("test_sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    question_id = Column(String, ForeignKey("questions.id", ondelete="SET NULL"), nullable=True, index=True)
    order_index = Column(Integer, nullable=False)

    # Snapshots taken at test time so later edits don't rewrite history
    prompt_snapshot = Column(Text, nullable=False)
    options_snapshot = Column(JSON, nullable=False)
    correct_index_at_test = Column(Integer, nullable=False)

    selected_index = Column(Integer, nullable=True)  # NULL = unanswered
    used_hint = Column(Boolean, default=False)
    revealed_answer = Column(Boolean, default=False)
    attempts_count = Column(Integer, default=0)
    time_spent_seconds = Column(Integer, default=0)
    is_correct = Column(Boolean, nullable=True)  # NULL until answered
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    session = relationship("TestSession", back_populates="results")
    question = relationship("Question")


class Claim(Base):
    """Student appeal against the grading of a question"""
    __tablename__ = "claims"

    id = Column(String, primary_key=True, default=generate_uuid)
    status = Column(String, default=CLAIM_PENDING, nullable=False, index=True)  # "pending", "approved", "rejected"
    question_id = Column(String, ForeignKey("questions.id", ondelete="SET NULL"), nullable=True, index=True)
    test_result_id = Column(String, ForeignKey("test_results.id", ondelete="SET NULL"), nullable=True)
    diagram_id = Column(String, ForeignKey("diagrams.id", ondelete="SET NULL"), nullable=True)
    student_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    prompt_snapshot = Column(Text, nullable=False)
    options_snapshot = Column(JSON, nullable=False)
    chosen_index = Column(Integer, nullable=False)
    correct_index_at_submission = Column(Integer, nullable=False)
    explanation = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    # Relationships
    question = relationship("Question")
    student = relationship("User")


class Rating(Base):
    """Scalar rating of a question by a user"""
    __tablename__ = "ratings"

    id = Column(String, primary_key=True, default=generate_uuid)
    rating = Column(Integer, nullable=False)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    question_id = Column(String, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    # Relationships
    user = relationship("User", back_populates="ratings")
    question = relationship("Question", back_populates="ratings")
