"""
dashboards.py — data behind the teacher and student screens.

Each loader issues its requests in parallel and returns a view object; any
failed request fails the whole load with the APIError.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from quizclient.api_client import APIClient
from quizclient.attempt import newest_first
from quizclient.concurrency import fetch_all
from quizclient.models import Attempt, Enrollment, Module, Quiz

log = logging.getLogger(__name__)


# ── Teacher ───────────────────────────────────────────────────────────────────

@dataclass
class TeacherDashboard:
    modules: list[Module]

    @property
    def total_quizzes(self) -> int:
        return sum(m.quiz_count for m in self.modules)


def load_teacher_dashboard(api: APIClient) -> TeacherDashboard:
    data = api.modules.get_my_modules()
    return TeacherDashboard([Module.from_dict(m) for m in data.get("modules") or []])


@dataclass
class TeacherModuleDetail:
    module: Module
    quizzes: list[Quiz]


def load_teacher_module(api: APIClient, module_id: str) -> TeacherModuleDetail:
    module_res, quizzes_res = fetch_all(
        lambda: api.modules.get_by_id(module_id),
        lambda: api.quizzes.get_by_module(module_id),
    )
    return TeacherModuleDetail(
        module=Module.from_dict(module_res.get("module") or {}),
        quizzes=[Quiz.from_dict(q) for q in quizzes_res.get("quizzes") or []],
    )


def load_quiz_attempts(api: APIClient, quiz_id: str) -> list[Attempt]:
    """Every student's attempts on one quiz (teacher view), newest first."""
    data = api.attempts.teacher_quiz_attempts(quiz_id)
    return newest_first([Attempt.from_dict(a) for a in data.get("attempts") or []])


# ── Student ───────────────────────────────────────────────────────────────────

@dataclass
class StudentDashboard:
    modules: list[Module]
    courses: list[Enrollment]

    def is_enrolled(self, module_id: str) -> bool:
        return any(c.module.id == module_id for c in self.courses)


def load_student_dashboard(api: APIClient) -> StudentDashboard:
    modules_res, courses_res = fetch_all(
        api.modules.get_all,
        api.enrollments.get_my_courses,
    )
    return StudentDashboard(
        modules=[Module.from_dict(m) for m in modules_res.get("modules") or []],
        courses=[Enrollment.from_dict(e) for e in courses_res.get("enrollments") or []],
    )


def enroll(api: APIClient, module_id: str) -> str:
    data = api.enrollments.enroll(module_id)
    log.info("Enrolled in module %s", module_id)
    return data.get("message") or "Successfully enrolled!"


def unenroll(api: APIClient, module_id: str) -> str:
    data = api.enrollments.unenroll(module_id)
    log.info("Left module %s", module_id)
    return data.get("message") or "Unenrolled"


@dataclass
class StudentModuleDetail:
    module: Module
    quizzes: list[Quiz]
    attempts: dict[str, list[Attempt]] = field(default_factory=dict)

    def attempts_for(self, quiz_id: str) -> list[Attempt]:
        return self.attempts.get(quiz_id, [])

    def best_score(self, quiz_id: str) -> Optional[float]:
        attempts = self.attempts_for(quiz_id)
        if not attempts:
            return None
        return max(a.percentage for a in attempts)


def load_student_module(api: APIClient, module_id: str) -> StudentModuleDetail:
    module_res, quizzes_res, attempts_res = fetch_all(
        lambda: api.modules.get_by_id(module_id),
        lambda: api.quizzes.get_by_module(module_id),
        lambda: api.attempts.get_by_module(module_id),
    )
    grouped: dict[str, list[Attempt]] = {}
    for raw in attempts_res.get("attempts") or []:
        attempt = Attempt.from_dict(raw)
        grouped.setdefault(attempt.quiz_id, []).append(attempt)
    return StudentModuleDetail(
        module=Module.from_dict(module_res.get("module") or {}),
        quizzes=[Quiz.from_dict(q) for q in quizzes_res.get("quizzes") or []],
        attempts={qid: newest_first(a) for qid, a in grouped.items()},
    )
