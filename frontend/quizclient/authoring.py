"""
authoring.py — teacher-side drafts for modules and quizzes.

Drafts live in memory (the page keeps them in st.session_state) and only
reach the backend through ``publish``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from quizclient.api_client import APIClient
from quizclient.models import QUESTION_TYPES, SINGLE, User
from quizclient.session import ValidationError

log = logging.getLogger(__name__)

DEFAULT_OPTION_COUNT = 4
DEFAULT_DURATION = 30


def _blank_options() -> list[str]:
    return [""] * DEFAULT_OPTION_COUNT


@dataclass
class QuestionDraft:
    text: str = ""
    type: str = SINGLE
    options: list[str] = field(default_factory=_blank_options)
    correct_answers: list[int] = field(default_factory=list)
    points: int = 1

    def set_type(self, question_type: str) -> None:
        if question_type not in QUESTION_TYPES:
            raise ValueError(f"Unknown question type: {question_type}")
        self.type = question_type
        if question_type == SINGLE:
            self.correct_answers = self.correct_answers[:1]

    def toggle_correct(self, index: int) -> None:
        if not 0 <= index < len(self.options):
            raise ValueError(f"Option {index} out of range")
        if self.type == SINGLE:
            self.correct_answers = [index]
        elif index in self.correct_answers:
            self.correct_answers = [i for i in self.correct_answers if i != index]
        else:
            self.correct_answers = self.correct_answers + [index]

    def set_option(self, index: int, text: str) -> None:
        self.options[index] = text

    def add_option(self) -> None:
        self.options.append("")

    def validate(self) -> None:
        if not self.text.strip():
            raise ValidationError("Please fill in question text and select correct answer(s)")
        marked = [i for i in self.correct_answers if self.options[i].strip()]
        if not marked:
            raise ValidationError("Please fill in question text and select correct answer(s)")
        if self.type == SINGLE and len(self.correct_answers) > 1:
            raise ValidationError("A single-answer question has exactly one correct option")
        if self.points < 1:
            raise ValidationError("Points must be at least 1")

    def to_payload(self) -> dict:
        return {
            "questionText":   self.text.strip(),
            "questionType":   self.type,
            "options":        list(self.options),
            "correctAnswers": sorted(self.correct_answers),
            "points":         int(self.points),
        }


@dataclass
class QuizDraft:
    title: str = ""
    description: str = ""
    duration: int = DEFAULT_DURATION
    questions: list[QuestionDraft] = field(default_factory=list)

    @property
    def total_points(self) -> int:
        return sum(q.points for q in self.questions)

    def add_question(self, question: QuestionDraft) -> None:
        """Append a copy of *question*; incomplete questions are rejected."""
        question.validate()
        self.questions.append(
            QuestionDraft(
                text=question.text,
                type=question.type,
                options=list(question.options),
                correct_answers=list(question.correct_answers),
                points=question.points,
            )
        )

    def remove_question(self, index: int) -> None:
        del self.questions[index]

    def validate(self) -> None:
        if not self.title.strip():
            raise ValidationError("Quiz title is required")
        if self.duration < 1:
            raise ValidationError("Duration must be at least 1 minute")
        if not self.questions:
            raise ValidationError("Please add at least one question")

    def to_payload(self, module_id: str) -> dict:
        return {
            "title":       self.title.strip(),
            "description": self.description.strip(),
            "duration":    int(self.duration),
            "questions":   [q.to_payload() for q in self.questions],
            "moduleId":    module_id,
        }

    def publish(self, api: APIClient, module_id: str) -> dict:
        self.validate()
        data = api.quizzes.create(self.to_payload(module_id))
        log.info("Created quiz %r in module %s", self.title, module_id)
        return data


@dataclass
class ModuleDraft:
    title: str = ""
    description: str = ""
    subject: str = ""

    def validate(self, teacher: User) -> None:
        if not self.title.strip() or not self.description.strip():
            raise ValidationError("Title and description are required")
        if self.subject not in teacher.subjects:
            raise ValidationError("Select one of your subjects")

    def publish(self, api: APIClient, teacher: User) -> dict:
        self.validate(teacher)
        data = api.modules.create(
            {
                "title":       self.title.strip(),
                "description": self.description.strip(),
                "subject":     self.subject,
            }
        )
        log.info("Created module %r", self.title)
        return data
