"""
attempt.py — one student's run through one quiz.

States
------
    loading       – quiz + prior attempts being fetched
    start-screen  – quiz metadata and attempt history, waiting for "Start"
    in-progress   – attempt id issued, countdown running, answers collected
    submitted     – terminal; holds the SubmissionResult

Failures while loading or starting raise AttemptAborted (the page goes back).
Failures while submitting raise SubmissionFailed and leave the attempt
in-progress with every answer kept.
"""
from __future__ import annotations

import enum
import logging
from typing import Optional

from quizclient import navigation
from quizclient.api_client import APIClient, APIError
from quizclient.concurrency import fetch_all
from quizclient.models import Attempt, Quiz, SubmissionResult
from quizclient.timer import Countdown

log = logging.getLogger(__name__)


class AttemptState(enum.Enum):
    LOADING = "loading"
    START_SCREEN = "start-screen"
    IN_PROGRESS = "in-progress"
    SUBMITTED = "submitted"


class AttemptError(Exception):
    pass


class AttemptAborted(AttemptError):
    pass


class SubmissionFailed(AttemptError):
    pass


def score_band(percentage: float) -> str:
    if percentage >= 70:
        return "high"
    if percentage >= 50:
        return "medium"
    return "low"


def newest_first(attempts: list[Attempt]) -> list[Attempt]:
    return sorted(
        attempts,
        key=lambda a: a.created_at.timestamp() if a.created_at else 0,
        reverse=True,
    )


class QuizAttemptWorkflow:
    def __init__(self, api: APIClient, quiz_id: str):
        self.api = api
        self.quiz_id = quiz_id
        self.state = AttemptState.LOADING

        self.quiz: Optional[Quiz] = None
        self.history: list[Attempt] = []
        self.attempt_id: Optional[str] = None
        self.answers: dict[str, list[int]] = {}
        self.timer: Optional[Countdown] = None
        self.result: Optional[SubmissionResult] = None
        self.awaiting_confirmation = False
        self._submitting = False

    # ── loading ──────────────────────────────────────────────────────────────

    def load(self) -> None:
        try:
            quiz_res, attempts_res = fetch_all(
                lambda: self.api.quizzes.get_by_id(self.quiz_id),
                lambda: self.api.attempts.get_by_quiz(self.quiz_id),
            )
        except APIError as e:
            raise AttemptAborted(str(e) or "Failed to load quiz") from e
        self.quiz = Quiz.from_dict(quiz_res.get("quiz") or {})
        self.history = newest_first(
            [Attempt.from_dict(a) for a in attempts_res.get("attempts") or []]
        )
        self.state = AttemptState.START_SCREEN

    # ── start-screen ─────────────────────────────────────────────────────────

    @property
    def best_percentage(self) -> Optional[float]:
        if not self.history:
            return None
        return max(a.percentage for a in self.history)

    @property
    def module_id(self) -> str:
        return self.quiz.module_id if self.quiz else ""

    @property
    def back_route(self) -> str:
        if self.module_id:
            return navigation.student_module(self.module_id)
        return navigation.STUDENT_DASHBOARD

    def start(self) -> None:
        """
        Open a new attempt. Retakes are unlimited, so this is allowed whatever
        the history holds.
        """
        if self.state is not AttemptState.START_SCREEN:
            raise AttemptError(f"Cannot start from {self.state.value}")
        try:
            data = self.api.attempts.start(self.quiz_id)
        except APIError as e:
            raise AttemptAborted(str(e) or "Failed to start quiz") from e

        attempt_id = data.get("attemptId")
        if not attempt_id:
            log.warning("Start of quiz %s returned no attempt id", self.quiz_id)
            raise AttemptAborted("Failed to start quiz")
        self.attempt_id = str(attempt_id)
        self.answers = {q.id: [] for q in self.quiz.questions}
        self.timer = Countdown(self.quiz.duration * 60, on_expire=self._auto_submit)
        self.state = AttemptState.IN_PROGRESS
        log.info("Started attempt %s on quiz %s", self.attempt_id, self.quiz_id)
        self.timer.start()

    # ── in-progress ──────────────────────────────────────────────────────────

    @property
    def time_left(self) -> int:
        return self.timer.remaining if self.timer else 0

    def toggle(self, question_id: str, option_index: int) -> list[int]:
        if self.state is not AttemptState.IN_PROGRESS:
            raise AttemptError("No attempt in progress")
        question = next((q for q in self.quiz.questions if q.id == question_id), None)
        if question is None:
            raise KeyError(question_id)
        if not 0 <= option_index < len(question.options):
            raise ValueError(f"Option {option_index} out of range")

        current = self.answers.get(question_id, [])
        if not question.is_multiple:
            selected = [option_index]
        elif option_index in current:
            selected = [i for i in current if i != option_index]
        else:
            selected = current + [option_index]
        self.answers[question_id] = selected
        return selected

    def tick(self) -> int:
        """
        One elapsed second. Reaching zero submits automatically and may raise
        SubmissionFailed.
        """
        if self.state is not AttemptState.IN_PROGRESS or self.timer is None:
            return self.time_left
        return self.timer.tick()

    def request_submit(self) -> None:
        """The learner pressed Submit; ask before sending anything."""
        if self.state is not AttemptState.IN_PROGRESS:
            raise AttemptError("No attempt in progress")
        self.awaiting_confirmation = True

    def cancel_submit(self) -> None:
        self.awaiting_confirmation = False

    def submit(self, confirmed: bool = False) -> bool:
        """
        Manual submit. Returns False without touching anything unless the
        learner confirmed.
        """
        if self.state is not AttemptState.IN_PROGRESS:
            raise AttemptError("This attempt has already been submitted")
        if not confirmed:
            return False
        self._submit()
        return True

    def _auto_submit(self) -> None:
        if self.state is not AttemptState.IN_PROGRESS or self._submitting:
            return
        log.info("Time is up — auto-submitting attempt %s", self.attempt_id)
        self._submit()

    def _submit(self) -> None:
        self._submitting = True
        self.awaiting_confirmation = False
        self.timer.stop()
        try:
            data = self.api.attempts.submit(self.attempt_id, self.submission_payload())
        except APIError as e:
            log.warning("Submit of attempt %s failed: %s", self.attempt_id, e)
            self._submitting = False
            self.timer.resume()
            raise SubmissionFailed("Failed to submit quiz") from e
        self.result = SubmissionResult.from_dict(data)
        self.state = AttemptState.SUBMITTED
        self._submitting = False
        log.info("Submitted attempt %s: %s%%", self.attempt_id, round(self.result.percentage, 1))

    def submission_payload(self) -> list[dict]:
        return [
            {"questionId": qid, "selectedAnswers": list(selected)}
            for qid, selected in self.answers.items()
        ]

    # ── teardown ─────────────────────────────────────────────────────────────

    def teardown(self) -> None:
        if self.timer:
            self.timer.stop()
