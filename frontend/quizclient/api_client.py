"""
api_client.py — single HTTP client for all frontend → backend communication.

One requests.Session per browser session, pinned to one resolved base URL.
Every request gets the bearer token read from persisted storage; every 401
clears that storage and forces navigation to /login before the error reaches
the caller.
"""
from __future__ import annotations

import logging
from typing import Optional

import requests

from quizclient import navigation
from quizclient.config import Config
from quizclient.storage import ClientStorage

log = logging.getLogger(__name__)


class APIError(Exception):
    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code


def _error_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or f"Request failed ({resp.status_code})"
    if isinstance(body, dict):
        return body.get("message") or body.get("error") or resp.text
    return resp.text


def _raise(resp: requests.Response) -> None:
    if not resp.ok:
        raise APIError(_error_message(resp), resp.status_code)


class APIClient:
    def __init__(
        self,
        base_url: str,
        storage: ClientStorage,
        navigator: Optional[navigation.Navigator] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.storage = storage
        self.navigator = navigator
        self.http = session or requests.Session()
        self.http.headers.update({"Content-Type": "application/json"})

        self.auth = AuthAPI(self)
        self.modules = ModuleAPI(self)
        self.quizzes = QuizAPI(self)
        self.enrollments = EnrollmentAPI(self)
        self.attempts = AttemptAPI(self)

        log.info("API URL: %s", self.base_url)

    # ── Interceptors ─────────────────────────────────────────────────────────

    def _before_request(self, headers: dict) -> dict:
        token = self.storage.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _after_response(self, resp: requests.Response) -> requests.Response:
        if resp.status_code == 401:
            log.warning("401 from %s — clearing session", resp.url)
            self.storage.clear()
            if self.navigator:
                self.navigator.force(navigation.LOGIN)
        return resp

    # ── Transport ────────────────────────────────────────────────────────────

    def request(
        self,
        method: str,
        path: str,
        payload: Optional[dict] = None,
        timeout: Optional[float] = None,
    ) -> dict:
        log.debug("%s %s", method, path)
        try:
            resp = self.http.request(
                method,
                f"{self.base_url}{path}",
                json=payload,
                headers=self._before_request({}),
                timeout=timeout or Config.REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            log.warning("%s %s failed: %s", method, path, e)
            raise APIError("Could not reach the server. Please try again.") from e
        _raise(self._after_response(resp))
        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as e:
            raise APIError("Unexpected response from the server.", resp.status_code) from e

    def get(self, path: str, timeout: Optional[float] = None) -> dict:
        return self.request("GET", path, timeout=timeout)

    def post(self, path: str, payload: Optional[dict] = None, timeout: Optional[float] = None) -> dict:
        return self.request("POST", path, payload or {}, timeout=timeout)

    def put(self, path: str, payload: dict) -> dict:
        return self.request("PUT", path, payload)

    def delete(self, path: str) -> dict:
        return self.request("DELETE", path)


class _Resource:
    def __init__(self, client: APIClient):
        self._c = client


# ── Auth ─────────────────────────────────────────────────────────────────────

class AuthAPI(_Resource):
    def login(self, email: str, password: str) -> dict:
        return self._c.post(
            "/auth/login",
            {"email": email, "password": password},
            timeout=Config.AUTH_TIMEOUT,
        )

    def register(self, profile: dict) -> dict:
        return self._c.post("/auth/register", profile, timeout=Config.AUTH_TIMEOUT)

    def verify_email(self, token: str) -> dict:
        return self._c.get(f"/auth/verify-email/{token}", timeout=Config.AUTH_TIMEOUT)

    def me(self) -> dict:
        return self._c.get("/auth/me", timeout=Config.AUTH_TIMEOUT)


# ── Modules ──────────────────────────────────────────────────────────────────

class ModuleAPI(_Resource):
    def get_all(self) -> dict:
        return self._c.get("/modules")

    def get_my_modules(self) -> dict:
        return self._c.get("/modules/my-modules")

    def get_by_id(self, module_id: str) -> dict:
        return self._c.get(f"/modules/{module_id}")

    def create(self, data: dict) -> dict:
        return self._c.post("/modules", data)

    def update(self, module_id: str, data: dict) -> dict:
        return self._c.put(f"/modules/{module_id}", data)

    def delete(self, module_id: str) -> dict:
        return self._c.delete(f"/modules/{module_id}")


# ── Quizzes ──────────────────────────────────────────────────────────────────

class QuizAPI(_Resource):
    def get_by_module(self, module_id: str) -> dict:
        return self._c.get(f"/quizzes/module/{module_id}")

    def get_by_id(self, quiz_id: str) -> dict:
        return self._c.get(f"/quizzes/{quiz_id}")

    def create(self, data: dict) -> dict:
        return self._c.post("/quizzes", data)

    def update(self, quiz_id: str, data: dict) -> dict:
        return self._c.put(f"/quizzes/{quiz_id}", data)

    def delete(self, quiz_id: str) -> dict:
        return self._c.delete(f"/quizzes/{quiz_id}")


# ── Enrollments ──────────────────────────────────────────────────────────────

class EnrollmentAPI(_Resource):
    def get_my_courses(self) -> dict:
        return self._c.get("/enrollments/my-courses")

    def enroll(self, module_id: str) -> dict:
        return self._c.post("/enrollments", {"moduleId": module_id})

    def check(self, module_id: str) -> dict:
        return self._c.get(f"/enrollments/check/{module_id}")

    def unenroll(self, module_id: str) -> dict:
        return self._c.delete(f"/enrollments/{module_id}")


# ── Attempts ─────────────────────────────────────────────────────────────────

class AttemptAPI(_Resource):
    def get_by_quiz(self, quiz_id: str) -> dict:
        return self._c.get(f"/attempts/quiz/{quiz_id}")

    def get_by_module(self, module_id: str) -> dict:
        return self._c.get(f"/attempts/module/{module_id}")

    def start(self, quiz_id: str) -> dict:
        return self._c.post("/attempts/start", {"quizId": quiz_id})

    def submit(self, attempt_id: str, answers: list[dict]) -> dict:
        return self._c.post(f"/attempts/submit/{attempt_id}", {"answers": answers})

    def get(self, attempt_id: str) -> dict:
        return self._c.get(f"/attempts/{attempt_id}")

    def teacher_module_results(self, module_id: str) -> dict:
        return self._c.get(f"/attempts/teacher/module/{module_id}")

    def teacher_quiz_attempts(self, quiz_id: str) -> dict:
        return self._c.get(f"/attempts/teacher/quiz/{quiz_id}")

