"""
Pytest configuration and fixtures for the EduQuiz client tests.

HTTP is stubbed at the transport layer: a fake requests adapter is mounted
on the client's session, so interceptors, headers and error mapping all run
for real.
"""
import json
import os
import sys
from urllib.parse import urlparse

import pytest
import requests
from requests.adapters import BaseAdapter

# Add frontend/ to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "frontend"))

from quizclient.api_client import APIClient  # noqa: E402
from quizclient.navigation import Navigator  # noqa: E402
from quizclient.session import SessionStore  # noqa: E402
from quizclient.storage import ClientStorage  # noqa: E402

BASE_URL = "http://api.test/api"


class StubAdapter(BaseAdapter):
    """Answers requests from a (method, path) table and records what was sent."""

    def __init__(self):
        super().__init__()
        self.routes = {}
        self.sent = []

    def add(self, method, path, status=200, body=None, exc=None):
        self.routes[(method, "/api" + path)] = (status, body if body is not None else {}, exc)

    def calls(self, method, path):
        return [r for r in self.sent if r.method == method and urlparse(r.url).path == "/api" + path]

    def send(self, request, **kwargs):
        self.sent.append(request)
        status, body, exc = self.routes.get(
            (request.method, urlparse(request.url).path),
            (404, {"message": "Not found"}, None),
        )
        if exc is not None:
            raise exc
        resp = requests.Response()
        resp.status_code = status
        resp._content = json.dumps(body).encode()
        resp.headers["Content-Type"] = "application/json"
        resp.encoding = "utf-8"
        resp.url = request.url
        resp.request = request
        return resp

    def close(self):
        pass


@pytest.fixture
def stub():
    return StubAdapter()


@pytest.fixture
def storage():
    return ClientStorage({})


@pytest.fixture
def navigator():
    switched = []
    nav = Navigator(switch=switched.append)
    nav.switched = switched
    return nav


@pytest.fixture
def api(stub, storage, navigator):
    session = requests.Session()
    session.mount("http://api.test", stub)
    return APIClient(BASE_URL, storage, navigator, session=session)


@pytest.fixture
def session_store(api, storage):
    store = SessionStore(api, storage)
    store.init()
    return store


@pytest.fixture
def student():
    return {
        "_id": "s1",
        "name": "Ada Student",
        "email": "ada@example.com",
        "role": "student",
        "subjects": [],
    }


@pytest.fixture
def teacher():
    return {
        "_id": "t1",
        "name": "Grace Teacher",
        "email": "grace@example.com",
        "role": "teacher",
        "subjects": ["Mathematics", "Physics"],
    }


@pytest.fixture
def signed_in(storage, student):
    storage.set_token("tok-123")
    storage.set_user(student)
    return storage


@pytest.fixture
def sample_quiz():
    """One single-answer question worth 1 point, one multiple-answer worth 2."""
    return {
        "_id": "qz1",
        "title": "Fractions",
        "description": "Basic fractions",
        "duration": 10,
        "module": {"_id": "m1", "title": "Algebra"},
        "questions": [
            {
                "_id": "q1",
                "questionText": "1/2 + 1/2 = ?",
                "questionType": "single",
                "options": ["0", "1", "2", "1/4"],
                "points": 1,
            },
            {
                "_id": "q2",
                "questionText": "Which equal one half?",
                "questionType": "multiple",
                "options": ["2/4", "3/6", "1/3", "2/3"],
                "points": 2,
            },
        ],
        "totalPoints": 3,
    }
