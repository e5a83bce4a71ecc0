"""
Typed in-memory records consumed by the analytics engine.

The loader converts ORM entities and raw aggregate rows into these dataclasses
so every downstream computation works on a validated, read-only snapshot
instead of query-layer objects.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional


class SessionMode(str, Enum):
    LEARNING = "learning"
    EXAM = "exam"
    ERRORS = "errors"


@dataclass(frozen=True)
class StudentRef:
    id: str
    name: Optional[str] = None
    last_name: Optional[str] = None


@dataclass(frozen=True)
class QuestionRef:
    id: str
    prompt: Optional[str] = None


@dataclass
class ResultRecord:
    """One answered (or unanswered) question instance within a session"""
    id: str
    order_index: int
    prompt_snapshot: str
    options_snapshot: List[str]
    correct_index_at_test: int
    selected_index: Optional[int] = None
    used_hint: bool = False
    time_spent_seconds: Optional[float] = 0
    is_correct: Optional[bool] = None
    question: Optional[QuestionRef] = None  # None when the source question was deleted

    @property
    def question_id(self) -> Optional[str]:
        return self.question.id if self.question is not None else None

    def selected_option_text(self) -> Optional[str]:
        """Text of the chosen option as shown at test time, if any."""
        if self.selected_index is None or not isinstance(self.options_snapshot, list):
            return None
        if not 0 <= self.selected_index < len(self.options_snapshot):
            return None
        return self.options_snapshot[self.selected_index] or None


@dataclass
class SessionRecord:
    """One test-taking attempt with its nested results"""
    id: str
    mode: SessionMode
    student: StudentRef
    diagram_id: str
    total_questions: int
    correct_count: int
    incorrect_count: int
    score: Optional[float]
    created_at: datetime
    completed_at: Optional[datetime] = None
    results: List[ResultRecord] = field(default_factory=list)

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    @property
    def is_exam(self) -> bool:
        return self.mode == SessionMode.EXAM

    @property
    def is_learning(self) -> bool:
        return self.mode == SessionMode.LEARNING


@dataclass(frozen=True)
class ClaimStats:
    total: int = 0
    approved: int = 0


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar-day bounds; either side may be open."""
    start: Optional[date] = None
    end: Optional[date] = None

    def normalized(self) -> "DateRange":
        if self.start and self.end and self.start > self.end:
            return DateRange(start=self.end, end=self.start)
        return self


@dataclass
class DiagramDataset:
    """Everything the engine needs for one diagram, sessions in ascending created_at order"""
    diagram_id: str
    sessions: List[SessionRecord] = field(default_factory=list)
    claims_by_question: Dict[str, ClaimStats] = field(default_factory=dict)
    rating_by_question: Dict[str, float] = field(default_factory=dict)
