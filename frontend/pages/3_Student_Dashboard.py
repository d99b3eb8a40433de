"""3_Student_Dashboard.py — Browse modules, enroll, and open enrolled courses."""
import streamlit as st

from quizclient import navigation, ui
from quizclient.api_client import APIError
from quizclient.dashboards import enroll, load_student_dashboard
from quizclient.models import ROLE_STUDENT

ctx = ui.setup_page("Student Dashboard", "🧑‍🎓")

# ── Auth guard ─────────────────────────────────────────────────────────────
user = ui.require_role(navigation.STUDENT_DASHBOARD, ROLE_STUDENT)
ui.sidebar(user)

try:
    with st.spinner("Loading modules…"):
        dashboard = load_student_dashboard(ctx.api)
except APIError as e:
    ui.report(e)
    st.stop()

st.markdown(f"## 👋 Welcome, **{user.name or user.email}**")
st.divider()

tab_browse, tab_courses = st.tabs(["Browse Modules", f"My Courses ({len(dashboard.courses)})"])

# ── Browse ────────────────────────────────────────────────────────────────────
with tab_browse:
    if not dashboard.modules:
        st.info("No modules available yet.")
    for module in dashboard.modules:
        with st.container(border=True):
            left, right = st.columns([4, 1])
            left.markdown(f"### {module.title}")
            left.caption(f"{module.subject} · Teacher: {module.teacher_name or '—'}")
            left.write(module.description)
            if dashboard.is_enrolled(module.id):
                if right.button("View →", key=f"view-{module.id}"):
                    ui.go(navigation.student_module(module.id))
            elif right.button("Enroll", key=f"enroll-{module.id}"):
                try:
                    ui.flash(enroll(ctx.api, module.id), "success")
                    st.rerun()
                except APIError as e:
                    ui.report(e)

# ── My courses ────────────────────────────────────────────────────────────────
with tab_courses:
    if not dashboard.courses:
        st.info("You are not enrolled in any modules. Browse modules to get started.")
    for enrollment in dashboard.courses:
        module = enrollment.module
        with st.container(border=True):
            left, right = st.columns([4, 1])
            left.markdown(f"### {module.title}")
            left.write(module.description)
            if right.button("Open →", key=f"course-{module.id}"):
                ui.go(navigation.student_module(module.id))
