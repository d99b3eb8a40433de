"""
End-to-end smoke run of the quiz client against a live backend.

Requires a running backend (default http://localhost:5000/api, or QUIZ_API_URL).
Run from project root:
    python smoke_quiz_flow.py

Registers (or logs in) a teacher and a student, builds a module with a
two-question quiz, enrolls the student, takes the quiz through the same
workflow the Take Quiz page uses, and checks the 401 interceptor.
"""

import sys
import uuid

sys.path.insert(0, "frontend")

from quizclient.api_client import APIClient, APIError  # noqa: E402
from quizclient.attempt import AttemptState, QuizAttemptWorkflow  # noqa: E402
from quizclient.authoring import ModuleDraft, QuestionDraft, QuizDraft  # noqa: E402
from quizclient.config import resolve_api_base_url  # noqa: E402
from quizclient.dashboards import enroll, load_student_module, load_teacher_dashboard  # noqa: E402
from quizclient.navigation import Navigator  # noqa: E402
from quizclient.session import RegistrationProfile, SessionStore  # noqa: E402
from quizclient.storage import ClientStorage  # noqa: E402

BASE = resolve_api_base_url()

# ── Test credentials ──────────────────────────────────────────────────────────
RUN = uuid.uuid4().hex[:6]
PASSWORD = "smoketest123"
TEACHER_EMAIL = f"smoke_teacher_{RUN}@quiz.local"
STUDENT_EMAIL = f"smoke_student_{RUN}@quiz.local"


def hdr(label: str):
    print("\n" + "=" * 60)
    print(label)
    print("=" * 60)


def fail(msg: str):
    print(f"FAIL  {msg}")
    sys.exit(1)


def new_session():
    storage = ClientStorage()
    navigator = Navigator()
    api = APIClient(BASE, storage, navigator)
    store = SessionStore(api, storage)
    store.init()
    return api, store, navigator


def sign_up(store: SessionStore, email: str, role: str, subjects=()):
    result = store.register(
        RegistrationProfile(
            name=f"Smoke {role}",
            email=email,
            password=PASSWORD,
            confirm_password=PASSWORD,
            role=role,
            subjects=list(subjects),
        )
    )
    if not result.success:
        fail(f"register {role}: {result.message}")
    if result.user is None:
        # backend wants email verification first – try logging in anyway
        result = store.login(email, PASSWORD)
        if not result.success:
            fail(f"login {role} after register: {result.message}")
    return result.user


# ── Teacher: module + quiz ────────────────────────────────────────────────────
hdr("Teacher – register and create a module")
t_api, t_store, _ = new_session()
teacher = sign_up(t_store, TEACHER_EMAIL, "teacher", ["Mathematics"])
assert teacher.role == "teacher", f"expected teacher, got {teacher.role}"

ModuleDraft(title=f"Smoke Algebra {RUN}", description="Smoke module", subject="Mathematics").publish(t_api, teacher)
modules = load_teacher_dashboard(t_api).modules
module = next((m for m in modules if m.title == f"Smoke Algebra {RUN}"), None)
if module is None:
    fail("created module not in my-modules")
print(f"OK  module_id={module.id}")

hdr("Teacher – build and publish a quiz")
draft = QuizDraft(title="Smoke Quiz", description="two questions", duration=5)
q1 = QuestionDraft(text="1/2 + 1/2 = ?", options=["0", "1", "2", "1/4"], points=1)
q1.toggle_correct(1)
draft.add_question(q1)
q2 = QuestionDraft(text="Which equal one half?", options=["2/4", "3/6", "1/3", "2/3"], points=2)
q2.set_type("multiple")
q2.toggle_correct(0)
q2.toggle_correct(1)
draft.add_question(q2)
assert draft.total_points == 3
draft.publish(t_api, module.id)
print("OK  quiz published")

# ── Student: enroll + take quiz ───────────────────────────────────────────────
hdr("Student – register and enroll")
s_api, s_store, s_nav = new_session()
student = sign_up(s_store, STUDENT_EMAIL, "student")
print(enroll(s_api, module.id))

try:
    enroll(s_api, module.id)
    print("WARN  second enrollment accepted")
except APIError as e:
    print(f"OK  duplicate enrollment rejected status={e.status_code}")

detail = load_student_module(s_api, module.id)
if not detail.quizzes:
    fail("no quizzes visible to the enrolled student")
quiz_id = detail.quizzes[0].id
print(f"OK  quiz_id={quiz_id}")

hdr("Student – take the quiz")
wf = QuizAttemptWorkflow(s_api, quiz_id)
wf.load()
assert wf.state is AttemptState.START_SCREEN
assert wf.best_percentage is None, "fresh student should have no best score"
wf.start()
assert wf.time_left == 300, f"expected 300s, got {wf.time_left}"
first, second = wf.quiz.questions
wf.toggle(first.id, 1)
wf.toggle(second.id, 0)
assert wf.submit() is False, "unconfirmed submit must not send"
wf.submit(confirmed=True)
result = wf.result
print(f"OK  score={result.score}/{result.total_points}  percentage={result.percentage:.1f}")
print(f"    correct={result.correct_count}  incorrect={result.incorrect_count}")

hdr("Student – history shows the attempt")
wf2 = QuizAttemptWorkflow(s_api, quiz_id)
wf2.load()
assert len(wf2.history) >= 1, "attempt missing from history"
print(f"OK  attempts={len(wf2.history)}  best={wf2.best_percentage}")

# ── 401 interceptor ───────────────────────────────────────────────────────────
hdr("401 – a bad token clears the session and forces /login")
s_api.storage.set_token("not-a-real-token")
try:
    s_api.enrollments.get_my_courses()
    fail("expected 401 with a bad token")
except APIError as e:
    if e.status_code != 401:
        fail(f"expected 401, got {e.status_code}")
assert s_api.storage.get_token() is None, "token not cleared"
assert s_nav.pending == "/login", f"expected pending /login, got {s_nav.pending}"
assert s_store.current_user() is None
print("OK  session cleared, redirect pending")

print("\nAll smoke checks passed.")
