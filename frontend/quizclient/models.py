"""
models.py — plain records built from backend JSON.

The backend is Mongo-backed, so identifiers arrive as ``_id`` and references
arrive either populated (a nested object) or as a bare id. Every ``from_dict``
accepts both.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

ROLE_TEACHER = "teacher"
ROLE_STUDENT = "student"
ROLES = (ROLE_TEACHER, ROLE_STUDENT)

SINGLE = "single"
MULTIPLE = "multiple"
QUESTION_TYPES = (SINGLE, MULTIPLE)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _id(data: dict) -> str:
    return str(data.get("_id") or data.get("id") or "")


def ref_id(value: Any) -> str:
    """Id of a reference that may be populated (dict) or a bare id."""
    if isinstance(value, dict):
        return _id(value)
    return str(value) if value else ""


def parse_datetime(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def percentage_of(score: float, total_points: float) -> float:
    if not total_points:
        return 0.0
    return 100.0 * score / total_points


# ── Records ───────────────────────────────────────────────────────────────────

@dataclass
class User:
    id: str
    name: str
    email: str
    role: str
    subjects: list[str] = field(default_factory=list)

    @property
    def is_teacher(self) -> bool:
        return self.role == ROLE_TEACHER

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            id=_id(data),
            name=data.get("name") or "",
            email=data.get("email") or "",
            role=data.get("role") or ROLE_STUDENT,
            subjects=list(data.get("subjects") or []),
        )

    def to_dict(self) -> dict:
        return {
            "id":       self.id,
            "name":     self.name,
            "email":    self.email,
            "role":     self.role,
            "subjects": list(self.subjects),
        }


@dataclass
class Question:
    id: str
    text: str
    type: str
    options: list[str]
    points: float = 1
    correct_answers: list[int] = field(default_factory=list)

    @property
    def is_multiple(self) -> bool:
        return self.type == MULTIPLE

    @classmethod
    def from_dict(cls, data: dict) -> "Question":
        return cls(
            id=_id(data),
            text=data.get("questionText") or data.get("text") or "",
            type=data.get("questionType") or data.get("type") or SINGLE,
            options=list(data.get("options") or []),
            points=1 if data.get("points") is None else data["points"],
            correct_answers=list(data.get("correctAnswers") or []),
        )


@dataclass
class Quiz:
    id: str
    title: str
    description: str
    duration: int
    module_id: str
    questions: list[Question] = field(default_factory=list)
    question_count: int = 0
    declared_total_points: float = 0

    @property
    def total_points(self) -> float:
        # listings may carry question ids only; fall back to the backend total
        if self.questions:
            return sum(q.points for q in self.questions)
        return self.declared_total_points

    @classmethod
    def from_dict(cls, data: dict) -> "Quiz":
        questions = [Question.from_dict(q) for q in data.get("questions") or [] if isinstance(q, dict)]
        return cls(
            id=_id(data),
            title=data.get("title") or "",
            description=data.get("description") or "",
            duration=int(data.get("duration") or 0),
            module_id=ref_id(data.get("module") or data.get("moduleId")),
            questions=questions,
            question_count=len(data.get("questions") or []),
            declared_total_points=data.get("totalPoints") or 0,
        )


@dataclass
class Module:
    id: str
    title: str
    description: str
    subject: str
    teacher_name: str = ""
    quiz_ids: list[str] = field(default_factory=list)

    @property
    def quiz_count(self) -> int:
        return len(self.quiz_ids)

    @classmethod
    def from_dict(cls, data: dict) -> "Module":
        teacher = data.get("teacher")
        return cls(
            id=_id(data),
            title=data.get("title") or "",
            description=data.get("description") or "",
            subject=data.get("subject") or "",
            teacher_name=teacher.get("name", "") if isinstance(teacher, dict) else "",
            quiz_ids=[ref_id(q) for q in data.get("quizzes") or []],
        )


@dataclass
class Enrollment:
    id: str
    student_id: str
    module: Module

    @classmethod
    def from_dict(cls, data: dict) -> "Enrollment":
        module = data.get("module")
        if not isinstance(module, dict):
            module = {"_id": module}
        return cls(
            id=_id(data),
            student_id=ref_id(data.get("student")),
            module=Module.from_dict(module),
        )


@dataclass
class Attempt:
    id: str
    quiz_id: str
    student_id: str
    student_name: str = ""
    answers: dict[str, list[int]] = field(default_factory=dict)
    score: float = 0
    percentage: float = 0
    total_points: float = 0
    created_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    time_taken: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Attempt":
        student = data.get("student")
        answers = {}
        for a in data.get("answers") or []:
            answers[ref_id(a.get("questionId") or a.get("question"))] = list(a.get("selectedAnswers") or [])
        return cls(
            id=_id(data),
            quiz_id=ref_id(data.get("quiz")),
            student_id=ref_id(student),
            student_name=student.get("name", "") if isinstance(student, dict) else "",
            answers=answers,
            score=data.get("score") or 0,
            percentage=float(data.get("percentage") or 0),
            total_points=data.get("totalPoints") or 0,
            created_at=parse_datetime(data.get("createdAt")),
            submitted_at=parse_datetime(data.get("submittedAt")),
            time_taken=data.get("timeTaken"),
        )


@dataclass
class AnswerResult:
    question_id: str
    is_correct: bool
    selected_answers: list[int] = field(default_factory=list)
    points_earned: float = 0

    @classmethod
    def from_dict(cls, data: dict) -> "AnswerResult":
        return cls(
            question_id=ref_id(data.get("questionId") or data.get("question")),
            is_correct=bool(data.get("isCorrect")),
            selected_answers=list(data.get("selectedAnswers") or []),
            points_earned=data.get("pointsEarned") or 0,
        )


@dataclass
class SubmissionResult:
    score: float
    total_points: float
    percentage: float
    answers: list[AnswerResult] = field(default_factory=list)

    @property
    def correct_count(self) -> int:
        return sum(1 for a in self.answers if a.is_correct)

    @property
    def incorrect_count(self) -> int:
        return sum(1 for a in self.answers if not a.is_correct)

    @classmethod
    def from_dict(cls, data: dict) -> "SubmissionResult":
        score = data.get("score") or 0
        total = data.get("totalPoints") or 0
        pct = data.get("percentage")
        return cls(
            score=score,
            total_points=total,
            percentage=float(pct) if pct is not None else percentage_of(score, total),
            answers=[AnswerResult.from_dict(a) for a in data.get("answers") or []],
        )
