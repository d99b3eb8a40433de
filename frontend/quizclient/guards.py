"""
guards.py — route gating from session-store reads only.

Decisions are plain values; ``quizclient.ui`` turns them into a spinner, a
page switch or nothing.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

from quizclient import navigation
from quizclient.models import ROLE_STUDENT, ROLE_TEACHER, User
from quizclient.session import SessionStore, landing_route


class GuardState(enum.Enum):
    LOADING = "loading"
    ALLOWED = "authenticated-matching-role"
    WRONG_ROLE = "authenticated-wrong-role"
    UNAUTHENTICATED = "unauthenticated"
    SIGNED_IN = "authenticated"  # public-only routes


@dataclass(frozen=True)
class GuardDecision:
    state: GuardState
    redirect: Optional[str] = None
    return_to: Optional[str] = None

    @property
    def render(self) -> bool:
        return self.state is GuardState.ALLOWED


def protected_route(session: SessionStore, location: str, role: Optional[str] = None) -> GuardDecision:
    if session.is_loading():
        return GuardDecision(GuardState.LOADING)
    user = session.current_user()
    if user is None:
        return GuardDecision(GuardState.UNAUTHENTICATED, navigation.LOGIN, return_to=location)
    if role and user.role != role:
        return GuardDecision(GuardState.WRONG_ROLE, landing_route(user))
    return GuardDecision(GuardState.ALLOWED)


def public_route(session: SessionStore) -> GuardDecision:
    """Login/register: signed-in users are sent to their dashboard."""
    if session.is_loading():
        return GuardDecision(GuardState.LOADING)
    user = session.current_user()
    if user is not None:
        return GuardDecision(GuardState.SIGNED_IN, landing_route(user))
    return GuardDecision(GuardState.ALLOWED)


_ROLE_PREFIX = {
    ROLE_TEACHER: "/teacher/",
    ROLE_STUDENT: "/student/",
}


def post_login_route(user: User, return_to: Optional[str]) -> str:
    """Where to go after signing in: the saved location if this role may see it."""
    if return_to and return_to.startswith(_ROLE_PREFIX.get(user.role, "\0")):
        return return_to
    return landing_route(user)
