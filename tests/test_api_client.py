import pytest
import requests

from quizclient.api_client import APIError


def test_bearer_token_attached_when_stored(api, stub, signed_in):
    stub.add("GET", "/modules", body={"modules": []})
    api.modules.get_all()
    sent = stub.calls("GET", "/modules")[0]
    assert sent.headers["Authorization"] == "Bearer tok-123"
    assert sent.headers["Content-Type"] == "application/json"


def test_no_authorization_header_without_token(api, stub):
    stub.add("GET", "/modules", body={"modules": []})
    api.modules.get_all()
    assert "Authorization" not in stub.calls("GET", "/modules")[0].headers


def test_token_read_at_send_time(api, stub, storage):
    stub.add("GET", "/modules", body={})
    api.modules.get_all()
    storage.set_token("fresh")
    api.modules.get_all()
    first, second = stub.calls("GET", "/modules")
    assert "Authorization" not in first.headers
    assert second.headers["Authorization"] == "Bearer fresh"


@pytest.mark.parametrize(
    "call",
    [
        lambda api: api.modules.get_my_modules(),
        lambda api: api.attempts.get_by_quiz("qz1"),
        lambda api: api.attempts.submit("a1", []),
        lambda api: api.enrollments.enroll("m1"),
    ],
)
def test_any_401_clears_session_and_forces_login(api, stub, signed_in, navigator, call):
    for method, path in [
        ("GET", "/modules/my-modules"),
        ("GET", "/attempts/quiz/qz1"),
        ("POST", "/attempts/submit/a1"),
        ("POST", "/enrollments"),
    ]:
        stub.add(method, path, status=401, body={"message": "Token expired"})

    with pytest.raises(APIError) as exc:
        call(api)

    # caller's own handling still sees the failure
    assert exc.value.status_code == 401
    assert str(exc.value) == "Token expired"
    assert signed_in.get_token() is None
    assert signed_in.get_user() is None
    assert navigator.pending == "/login"
    navigator.flush()
    assert navigator.switched == ["/login"]


def test_other_errors_leave_session_alone(api, stub, signed_in, navigator):
    stub.add("POST", "/enrollments", status=400, body={"message": "Already enrolled"})
    with pytest.raises(APIError) as exc:
        api.enrollments.enroll("m1")
    assert exc.value.status_code == 400
    assert str(exc.value) == "Already enrolled"
    assert signed_in.get_token() == "tok-123"
    assert navigator.pending is None


def test_error_field_used_when_no_message(api, stub):
    stub.add("GET", "/quizzes/x", status=404, body={"error": "quiz not found"})
    with pytest.raises(APIError, match="quiz not found"):
        api.quizzes.get_by_id("x")


def test_transport_failure_maps_to_generic_error(api, stub):
    stub.add("GET", "/modules", exc=requests.ConnectionError("refused"))
    with pytest.raises(APIError) as exc:
        api.modules.get_all()
    assert exc.value.status_code == 0
    assert "reach the server" in str(exc.value)


def test_start_and_submit_payloads(api, stub):
    import json

    stub.add("POST", "/attempts/start", body={"attemptId": "a1"})
    stub.add("POST", "/attempts/submit/a1", body={"score": 0})
    assert api.attempts.start("qz1") == {"attemptId": "a1"}
    api.attempts.submit("a1", [{"questionId": "q1", "selectedAnswers": [2]}])

    assert json.loads(stub.calls("POST", "/attempts/start")[0].body) == {"quizId": "qz1"}
    assert json.loads(stub.calls("POST", "/attempts/submit/a1")[0].body) == {
        "answers": [{"questionId": "q1", "selectedAnswers": [2]}]
    }


@pytest.mark.parametrize(
    "call, method, path, body",
    [
        (lambda api: api.auth.me(), "GET", "/auth/me", None),
        (lambda api: api.auth.verify_email("v1"), "GET", "/auth/verify-email/v1", None),
        (lambda api: api.modules.get_all(), "GET", "/modules", None),
        (lambda api: api.modules.get_by_id("m1"), "GET", "/modules/m1", None),
        (lambda api: api.modules.create({"title": "A"}), "POST", "/modules", {"title": "A"}),
        (lambda api: api.modules.update("m1", {"title": "B"}), "PUT", "/modules/m1", {"title": "B"}),
        (lambda api: api.modules.delete("m1"), "DELETE", "/modules/m1", None),
        (lambda api: api.quizzes.get_by_module("m1"), "GET", "/quizzes/module/m1", None),
        (lambda api: api.quizzes.create({"title": "Q"}), "POST", "/quizzes", {"title": "Q"}),
        (lambda api: api.quizzes.update("qz1", {"duration": 5}), "PUT", "/quizzes/qz1", {"duration": 5}),
        (lambda api: api.quizzes.delete("qz1"), "DELETE", "/quizzes/qz1", None),
        (lambda api: api.enrollments.get_my_courses(), "GET", "/enrollments/my-courses", None),
        (lambda api: api.enrollments.enroll("m1"), "POST", "/enrollments", {"moduleId": "m1"}),
        (lambda api: api.enrollments.check("m1"), "GET", "/enrollments/check/m1", None),
        (lambda api: api.enrollments.unenroll("m1"), "DELETE", "/enrollments/m1", None),
        (lambda api: api.attempts.get_by_module("m1"), "GET", "/attempts/module/m1", None),
        (lambda api: api.attempts.get("a1"), "GET", "/attempts/a1", None),
        (lambda api: api.attempts.teacher_module_results("m1"), "GET", "/attempts/teacher/module/m1", None),
        (lambda api: api.attempts.teacher_quiz_attempts("qz1"), "GET", "/attempts/teacher/quiz/qz1", None),
    ],
)
def test_endpoint_table(api, stub, signed_in, call, method, path, body):
    import json

    stub.add(method, path, body={"success": True, "path": path})
    assert call(api) == {"success": True, "path": path}

    (sent,) = stub.calls(method, path)
    assert sent.headers["Authorization"] == "Bearer tok-123"
    if body is not None:
        assert json.loads(sent.body) == body
