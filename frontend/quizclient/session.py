"""
session.py — the authenticated identity of one browser session.

The store is created once per browser session and handed to whatever needs
it; there is no module-level "current user". It is loading until ``init``
has read persisted storage.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from quizclient import navigation
from quizclient.api_client import APIClient, APIError
from quizclient.models import ROLE_TEACHER, ROLES, User
from quizclient.storage import ClientStorage

log = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class ValidationError(Exception):
    """Client-side validation failure; no request was sent."""


@dataclass
class AuthResult:
    success: bool
    message: str = ""
    user: Optional[User] = None


@dataclass
class RegistrationProfile:
    name: str
    email: str
    password: str
    confirm_password: str
    role: str = "student"
    subjects: list[str] = field(default_factory=list)

    def validate(self) -> None:
        if not self.name.strip() or not self.email.strip() or not self.password:
            raise ValidationError("Name, email and password are required")
        if len(self.password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if self.password != self.confirm_password:
            raise ValidationError("Passwords do not match")
        if self.role not in ROLES:
            raise ValidationError(f"Unknown role: {self.role}")
        if self.role == ROLE_TEACHER and not normalise_subjects(self.subjects):
            raise ValidationError("Teachers must add at least one subject")

    def to_payload(self) -> dict:
        return {
            "name":     self.name.strip(),
            "email":    self.email.strip().lower(),
            "password": self.password,
            "role":     self.role,
            "subjects": normalise_subjects(self.subjects) if self.role == ROLE_TEACHER else [],
        }


def normalise_subjects(subjects: list[str]) -> list[str]:
    out: list[str] = []
    for s in subjects:
        s = (s or "").strip()
        if s and s not in out:
            out.append(s)
    return out


def landing_route(user: User) -> str:
    if user.role == ROLE_TEACHER:
        return navigation.TEACHER_DASHBOARD
    return navigation.STUDENT_DASHBOARD


class SessionStore:
    """
    *on_end* runs whenever the signed-in user goes away: logout, a 401 that
    cleared the token, or a different user signing in.
    """

    def __init__(
        self,
        api: APIClient,
        storage: ClientStorage,
        on_end: Optional[Callable[[], None]] = None,
    ):
        self.api = api
        self.storage = storage
        self.on_end = on_end
        self._user: Optional[User] = None
        self._loading = True

    # ── Lifecycle ────────────────────────────────────────────────────────────

    def init(self) -> None:
        """Restore the session from persisted storage."""
        token = self.storage.get_token()
        user = self.storage.get_user()
        self._user = User.from_dict(user) if token and user else None
        self._loading = False

    def refresh_current_user(self) -> Optional[User]:
        """Re-read the identity from /auth/me. A 401 clears the session."""
        if not self.storage.get_token():
            return self.current_user()
        try:
            data = self.api.auth.me()
        except APIError as e:
            if e.status_code == 401:
                self._end()
            raise
        user = User.from_dict(data.get("user") or data)
        self.storage.set_user(user.to_dict())
        self._user = user
        return user

    # ── Reads ────────────────────────────────────────────────────────────────

    def current_user(self) -> Optional[User]:
        # the API client may have cleared storage on a 401 since the last read
        if self._user is not None and not self.storage.get_token():
            log.info("Session of %s ended by the server", self._user.email)
            self._end()
        return self._user

    def is_loading(self) -> bool:
        return self._loading

    # ── Actions ──────────────────────────────────────────────────────────────

    def login(self, email: str, password: str) -> AuthResult:
        if not email or not password:
            return AuthResult(False, "Please fill in both fields.")
        try:
            data = self.api.auth.login(email.strip().lower(), password)
        except APIError as e:
            return AuthResult(False, str(e) or "Login failed")
        return self._accept(data, "Login successful")

    def register(self, profile: RegistrationProfile) -> AuthResult:
        try:
            profile.validate()
        except ValidationError as e:
            return AuthResult(False, str(e))
        try:
            data = self.api.auth.register(profile.to_payload())
        except APIError as e:
            return AuthResult(False, str(e) or "Registration failed")
        return self._accept(data, "Registration successful!")

    def verify_email(self, token: str) -> AuthResult:
        try:
            data = self.api.auth.verify_email(token)
        except APIError as e:
            return AuthResult(False, str(e) or "Verification failed")
        return self._accept(data, "Email verified")

    def logout(self) -> None:
        if self._user:
            log.info("Logout %s", self._user.email)
        self.storage.clear()
        self._end()

    def _accept(self, data: dict, default_message: str) -> AuthResult:
        if data.get("success") is False:
            return AuthResult(False, data.get("message") or "Request failed")
        message = data.get("message") or default_message
        token = data.get("token")
        if not token or not data.get("user"):
            # e.g. registration pending email verification
            return AuthResult(True, message)
        user = User.from_dict(data["user"])
        if self._user is not None and self._user.id != user.id:
            self._end()
        self.storage.set_token(token)
        self.storage.set_user(user.to_dict())
        self._user = user
        log.info("Signed in %s (%s)", user.email, user.role)
        return AuthResult(True, message, user)

    def _end(self) -> None:
        self._user = None
        if self.on_end:
            self.on_end()
