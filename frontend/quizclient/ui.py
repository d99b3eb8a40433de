"""
ui.py — Streamlit glue shared by every page.

Holds the per-browser-session context (storage, API client, session store,
workspace), the stylesheet, route guards and error reporting. This is the only
module in quizclient that imports Streamlit.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import streamlit as st

from quizclient import navigation
from quizclient.api_client import APIClient
from quizclient.config import configure_logging, resolve_api_base_url
from quizclient.guards import GuardState, protected_route, public_route
from quizclient.models import User
from quizclient.session import SessionStore, landing_route
from quizclient.storage import ClientStorage
from quizclient.workspace import ClientWorkspace

log = logging.getLogger(__name__)

# Route name → page script, relative to Home.py
PAGES = {
    "home":              "Home.py",
    "login":             "pages/0_Login.py",
    "register":          "pages/0_Login.py",
    "teacher_dashboard": "pages/1_Teacher_Dashboard.py",
    "teacher_module":    "pages/2_Teacher_Module.py",
    "student_dashboard": "pages/3_Student_Dashboard.py",
    "student_module":    "pages/4_Student_Module.py",
    "take_quiz":         "pages/5_Take_Quiz.py",
}

# ── Custom CSS (Calm Tutor palette) ──────────────────────────────────────────
_CSS = """
<style>
@import url('https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700&display=swap');

html, body, [class*="css"] {
    font-family: 'Inter', system-ui, sans-serif;
    background-color: #0B1220;
    color: #E6EAF2;
}
.stApp { background-color: #0B1220; }

.dash-card {
    background: #111B2E;
    border: 1px solid #22304A;
    border-radius: 12px;
    padding: 1.2rem 1.4rem;
    margin-bottom: 0.6rem;
}
.dash-card h3 { color: #E6EAF2; margin-bottom: 0.3rem; }
.dash-card p  { color: #A7B0C0; margin: 0; font-size: 0.9rem; }

.badge {
    display: inline-block;
    background: #6D5EF7;
    color: #E6EAF2;
    border-radius: 6px;
    padding: 0.15rem 0.6rem;
    font-size: 0.75rem;
    font-weight: 600;
}
.score-high   { background: #14532d; color: #bbf7d0; }
.score-medium { background: #713f12; color: #fef08a; }
.score-low    { background: #7f1d1d; color: #fecaca; }

.timer {
    font-size: 1.6rem;
    font-weight: 700;
    color: #E6EAF2;
    text-align: right;
}
.timer-low { color: #f87171; }

div.stButton > button {
    background: #6D5EF7;
    color: #E6EAF2;
    border: none;
    border-radius: 8px;
    padding: 0.45rem 1.1rem;
    font-weight: 600;
    transition: background 0.2s;
}
div.stButton > button:hover { background: #5a4dd6; }
</style>
"""


@dataclass
class AppContext:
    storage: ClientStorage
    navigator: navigation.Navigator
    api: APIClient
    session: SessionStore
    workspace: ClientWorkspace


def _request_host() -> Optional[str]:
    try:
        return st.context.headers.get("Host")
    except AttributeError:
        return None


def context() -> AppContext:
    """The per-browser-session context, created on first use."""
    ctx = st.session_state.get("app_context")
    if ctx is None:
        configure_logging()
        # plain dict: the API client reads it from worker threads
        storage = ClientStorage(st.session_state.setdefault("client_storage", {}))
        navigator = navigation.Navigator(switch=go)
        api = APIClient(resolve_api_base_url(host=_request_host()), storage, navigator)
        workspace = ClientWorkspace(st.session_state)
        session = SessionStore(api, storage, on_end=workspace.reset)
        session.init()
        ctx = AppContext(storage, navigator, api, session, workspace)
        st.session_state["app_context"] = ctx
    return ctx


def setup_page(title: str, icon: str, layout: str = "wide") -> AppContext:
    st.set_page_config(page_title=f"EduQuiz — {title}", page_icon=icon, layout=layout)
    st.markdown(_CSS, unsafe_allow_html=True)
    return context()


# ── Navigation ───────────────────────────────────────────────────────────────

def go(path: str) -> None:
    """Switch to the page for *path*, carrying its ids in session state."""
    route = navigation.match(path)
    st.session_state.update(route.params)
    previous = st.session_state.get("location")
    if previous and previous != path:
        st.session_state["previous_location"] = previous
    st.switch_page(PAGES[route.name])


def back(default: str = navigation.HOME) -> None:
    go(st.session_state.get("previous_location") or default)


def flash(message: str, level: str = "error") -> None:
    """Show *message* on the next page rendered."""
    st.session_state["flash"] = (level, message)


def _show_flash() -> None:
    item = st.session_state.pop("flash", None)
    if item:
        level, message = item
        getattr(st, level, st.error)(message)


def report(err: Exception) -> None:
    """Surface a failed action, then honour any redirect a 401 scheduled."""
    st.error(str(err) or "Something went wrong")
    ctx = context()
    if ctx.navigator.pending:
        flash("Your session has expired. Please sign in again.", "warning")
        ctx.navigator.flush(current=st.session_state.get("location"))


# ── Guards ───────────────────────────────────────────────────────────────────

def require_role(location: str, role: Optional[str] = None) -> User:
    """Stop the script unless a user with *role* is signed in."""
    ctx = context()
    ctx.navigator.flush(current=location)
    decision = protected_route(ctx.session, location, role)
    if decision.state is GuardState.LOADING:
        st.info("Loading…")
        st.stop()
    if decision.redirect:
        if decision.return_to:
            st.session_state["return_to"] = decision.return_to
            flash("Please sign in to continue.", "warning")
        go(decision.redirect)
        st.stop()
    st.session_state["location"] = location
    _show_flash()
    return ctx.session.current_user()


def require_anonymous(location: str) -> None:
    ctx = context()
    ctx.navigator.flush(current=location)
    decision = public_route(ctx.session)
    if decision.state is GuardState.LOADING:
        st.info("Loading…")
        st.stop()
    if decision.redirect:
        go(decision.redirect)
        st.stop()
    st.session_state["location"] = location
    _show_flash()


def sidebar(user: User) -> None:
    with st.sidebar:
        st.markdown(
            f"<div style='color:#A7B0C0;font-size:0.8rem;margin-bottom:0.3rem'>Signed in as</div>"
            f"<div style='color:#E6EAF2;font-weight:600'>{user.name or user.email}</div>"
            f"<div style='color:#A7B0C0;font-size:0.75rem'>{user.email} · {user.role}</div>",
            unsafe_allow_html=True,
        )
        st.divider()
        if st.button("Dashboard", key="sidebar-dashboard"):
            go(landing_route(user))
        if st.button("Sign Out", key="sidebar-logout"):
            context().session.logout()
            go(navigation.HOME)


def score_badge(percentage: float, band: str) -> str:
    return f"<span class='badge score-{band}'>{percentage:.0f}%</span>"
