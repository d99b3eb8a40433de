import pytest

from quizclient.api_client import APIError
from quizclient.session import RegistrationProfile, SessionStore, landing_route
from quizclient.models import User


def _profile(**overrides):
    data = dict(
        name="Ada Student",
        email="Ada@Example.com ",
        password="secret1",
        confirm_password="secret1",
        role="student",
        subjects=[],
    )
    data.update(overrides)
    return RegistrationProfile(**data)


def test_store_is_loading_until_init(api, storage):
    store = SessionStore(api, storage)
    assert store.is_loading()
    store.init()
    assert not store.is_loading()
    assert store.current_user() is None


def test_init_restores_persisted_identity(api, signed_in):
    store = SessionStore(api, signed_in)
    store.init()
    assert store.current_user().email == "ada@example.com"


def test_login_success_stores_identity_and_token(session_store, stub, storage, teacher):
    stub.add("POST", "/auth/login", body={"success": True, "token": "tok", "user": teacher})
    result = session_store.login("grace@example.com", "pw")
    assert result.success
    assert result.user.role == "teacher"
    assert storage.get_token() == "tok"
    assert session_store.current_user().id == "t1"


def test_login_failure_leaves_session_unchanged(session_store, stub, storage):
    stub.add("POST", "/auth/login", status=400, body={"success": False, "message": "Invalid credentials"})
    result = session_store.login("x@example.com", "bad")
    assert not result.success
    assert result.message == "Invalid credentials"
    assert storage.get_token() is None
    assert session_store.current_user() is None


def test_login_requires_both_fields(session_store, stub):
    assert not session_store.login("", "pw").success
    assert stub.sent == []


def test_register_password_mismatch_sends_nothing(session_store, stub):
    result = session_store.register(_profile(confirm_password="other"))
    assert not result.success
    assert result.message == "Passwords do not match"
    assert stub.sent == []


def test_teacher_registration_needs_a_subject(session_store, stub):
    result = session_store.register(_profile(role="teacher", subjects=[" ", ""]))
    assert not result.success
    assert result.message == "Teachers must add at least one subject"
    assert stub.sent == []


def test_register_sends_normalised_profile(session_store, stub, teacher):
    import json

    stub.add("POST", "/auth/register", body={"success": True, "token": "tok", "user": teacher})
    result = session_store.register(
        _profile(role="teacher", subjects=["Mathematics", " Physics ", "Mathematics", ""])
    )
    assert result.success
    assert result.user.is_teacher
    sent = json.loads(stub.calls("POST", "/auth/register")[0].body)
    assert sent["email"] == "ada@example.com"
    assert sent["subjects"] == ["Mathematics", "Physics"]
    assert "confirm_password" not in sent


def test_register_pending_verification_creates_no_session(session_store, stub, storage):
    stub.add("POST", "/auth/register", body={"success": True, "message": "Check your email"})
    result = session_store.register(_profile())
    assert result.success
    assert result.user is None
    assert result.message == "Check your email"
    assert storage.get_token() is None


def test_logout_clears_everything(api, signed_in, stub):
    store = SessionStore(api, signed_in)
    store.init()
    store.logout()
    assert store.current_user() is None
    assert signed_in.get_token() is None
    assert stub.sent == []


def test_401_elsewhere_drops_current_user(api, signed_in, stub):
    store = SessionStore(api, signed_in)
    store.init()
    stub.add("GET", "/modules", status=401, body={"message": "expired"})
    with pytest.raises(APIError):
        api.modules.get_all()
    assert store.current_user() is None


def test_refresh_current_user_updates_storage(api, signed_in, stub, student):
    store = SessionStore(api, signed_in)
    store.init()
    stub.add("GET", "/auth/me", body={"user": dict(student, name="Ada L.")})
    assert store.refresh_current_user().name == "Ada L."
    assert signed_in.get_user()["name"] == "Ada L."


def test_landing_routes(teacher, student):
    assert landing_route(User.from_dict(teacher)) == "/teacher/dashboard"
    assert landing_route(User.from_dict(student)) == "/student/dashboard"


def test_short_password_sends_nothing(session_store, stub):
    result = session_store.register(_profile(password="abc12", confirm_password="abc12"))
    assert not result.success
    assert "at least 6" in result.message
    assert stub.sent == []


def _ending_store(api, storage):
    ended = []
    store = SessionStore(api, storage, on_end=lambda: ended.append(True))
    store.init()
    return store, ended


def test_logout_ends_the_session(api, signed_in):
    store, ended = _ending_store(api, signed_in)
    store.logout()
    assert ended == [True]


def test_401_ends_the_session_on_next_read(api, signed_in, stub):
    store, ended = _ending_store(api, signed_in)
    stub.add("GET", "/modules", status=401, body={"message": "expired"})
    with pytest.raises(APIError):
        api.modules.get_all()
    assert ended == []
    store.current_user()
    store.current_user()
    assert ended == [True]


def test_other_user_signing_in_ends_the_previous_session(api, signed_in, stub, teacher):
    store, ended = _ending_store(api, signed_in)
    stub.add("POST", "/auth/login", body={"token": "tok-t", "user": teacher})
    store.login("grace@example.com", "secret1")
    assert ended == [True]
    assert store.current_user().email == "grace@example.com"


def test_same_user_signing_in_again_keeps_the_session(api, signed_in, stub, student):
    store, ended = _ending_store(api, signed_in)
    stub.add("POST", "/auth/login", body={"token": "tok-new", "user": student})
    store.login("ada@example.com", "secret1")
    assert ended == []
