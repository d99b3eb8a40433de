"""
0_Login.py — Login & Register page.
This is page 0 in the Streamlit sidebar so it always appears first.
"""
import streamlit as st

from quizclient import navigation, ui
from quizclient.guards import post_login_route
from quizclient.models import ROLE_STUDENT, ROLE_TEACHER
from quizclient.session import RegistrationProfile

ctx = ui.setup_page("Login", "🎓", layout="centered")
session = ctx.session

# ── Redirect if already logged in ────────────────────────────────────────────
ui.require_anonymous(navigation.LOGIN)

# ── Email verification link (?verify=<token>) ────────────────────────────────
verify_token = st.query_params.get("verify")
if verify_token:
    result = session.verify_email(verify_token)
    st.query_params.clear()
    if result.success and result.user:
        ui.go(post_login_route(result.user, None))
    elif result.success:
        st.success(result.message)
    else:
        st.error(result.message)

st.markdown("## 🎓 EduQuiz")
st.caption("Sign in to your modules and quizzes")

tab_login, tab_register = st.tabs(["Sign In", "Create Account"])

# ── LOGIN ─────────────────────────────────────────────────────────────────────
with tab_login:
    with st.form("login_form"):
        email = st.text_input("Email", placeholder="you@example.com")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign In")

    if submitted:
        result = session.login(email, password)
        if result.success:
            ui.go(post_login_route(result.user, st.session_state.pop("return_to", None)))
        else:
            st.error(result.message)

# ── REGISTER ──────────────────────────────────────────────────────────────────
with tab_register:
    r_role = st.radio(
        "I am a",
        [ROLE_STUDENT, ROLE_TEACHER],
        format_func=str.capitalize,
        horizontal=True,
        key="r_role",
    )
    with st.form("register_form"):
        r_name = st.text_input("Full Name", placeholder="Enter your full name", key="r_name")
        r_email = st.text_input("Email", placeholder="you@example.com", key="r_email")
        r_password = st.text_input("Password (min 6 chars)", type="password", key="r_pass")
        r_confirm = st.text_input("Confirm Password", type="password", key="r_confirm")
        r_subjects = ""
        if r_role == ROLE_TEACHER:
            r_subjects = st.text_input(
                "Subjects you teach (comma separated)",
                placeholder="Mathematics, Physics",
                key="r_subjects",
            )
        r_submitted = st.form_submit_button("Create Account")

    if r_submitted:
        profile = RegistrationProfile(
            name=r_name,
            email=r_email,
            password=r_password,
            confirm_password=r_confirm,
            role=r_role,
            subjects=r_subjects.split(","),
        )
        result = session.register(profile)
        if not result.success:
            st.error(result.message)
        elif result.user:
            ui.flash(result.message, "success")
            ui.go(post_login_route(result.user, None))
        else:
            st.success(result.message)
