"""
navigation.py — logical routes and forced redirects.

Routes are the web paths the platform has always used (``/login``,
``/student/quiz/<id>`` …). ``quizclient.ui`` maps them onto Streamlit pages;
everything else only deals in paths.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Optional

log = logging.getLogger(__name__)

HOME = "/"
LOGIN = "/login"
REGISTER = "/register"
TEACHER_DASHBOARD = "/teacher/dashboard"
STUDENT_DASHBOARD = "/student/dashboard"


def teacher_module(module_id: str) -> str:
    return f"/teacher/module/{module_id}"


def student_module(module_id: str) -> str:
    return f"/student/module/{module_id}"


def take_quiz(quiz_id: str) -> str:
    return f"/student/quiz/{quiz_id}"


@dataclass(frozen=True)
class Route:
    name: str
    params: dict = field(default_factory=dict)


_PATTERNS = [
    (re.compile(r"^/$"), "home"),
    (re.compile(r"^/login$"), "login"),
    (re.compile(r"^/register$"), "register"),
    (re.compile(r"^/teacher/dashboard$"), "teacher_dashboard"),
    (re.compile(r"^/teacher/module/(?P<module_id>[^/]+)$"), "teacher_module"),
    (re.compile(r"^/student/dashboard$"), "student_dashboard"),
    (re.compile(r"^/student/module/(?P<module_id>[^/]+)$"), "student_module"),
    (re.compile(r"^/student/quiz/(?P<quiz_id>[^/]+)$"), "take_quiz"),
]


def match(path: str) -> Route:
    """Resolve *path* to a Route; unknown paths fall back to home."""
    for pattern, name in _PATTERNS:
        m = pattern.match(path or "")
        if m:
            return Route(name, m.groupdict())
    return Route("home")


class Navigator:
    """
    Holds at most one pending forced redirect.

    ``force`` only records the target, so it is safe to call from inside a
    request (even one running on a worker thread). ``flush`` performs it with
    the injected *switch* callable, on the script thread.
    """

    def __init__(self, switch: Optional[Callable[[str], None]] = None):
        self._switch = switch
        self.pending: Optional[str] = None

    def force(self, path: str) -> None:
        log.info("Forced navigation to %s", path)
        self.pending = path

    def flush(self, current: Optional[str] = None) -> None:
        path, self.pending = self.pending, None
        if path and path != current and self._switch:
            self._switch(path)
