"""1_Teacher_Dashboard.py — A teacher's modules and module creation."""
import streamlit as st

from quizclient import navigation, ui
from quizclient.api_client import APIError
from quizclient.authoring import ModuleDraft
from quizclient.dashboards import load_teacher_dashboard
from quizclient.models import ROLE_TEACHER
from quizclient.session import ValidationError

ctx = ui.setup_page("Teacher Dashboard", "👩‍🏫")

# ── Auth guard ─────────────────────────────────────────────────────────────
user = ui.require_role(navigation.TEACHER_DASHBOARD, ROLE_TEACHER)
ui.sidebar(user)

try:
    with st.spinner("Loading modules…"):
        dashboard = load_teacher_dashboard(ctx.api)
except APIError as e:
    ui.report(e)
    st.stop()

# ── Header + stats ────────────────────────────────────────────────────────────
st.markdown(f"## 👋 Welcome, **{user.name or user.email}**")
c1, c2, c3 = st.columns(3)
c1.metric("Modules", len(dashboard.modules))
c2.metric("Quizzes", dashboard.total_quizzes)
c3.metric("Subjects", len(user.subjects))
st.divider()

# ── Create module ─────────────────────────────────────────────────────────────
with st.expander("➕ Create Module"):
    with st.form("create_module", clear_on_submit=True):
        title = st.text_input("Module Title", placeholder="e.g., Introduction to Algebra")
        description = st.text_area("Description", placeholder="Describe what students will learn")
        subject = st.selectbox("Subject", user.subjects, index=None, placeholder="Select subject")
        create = st.form_submit_button("Create Module")

    if create:
        draft = ModuleDraft(title=title, description=description, subject=subject or "")
        try:
            draft.publish(ctx.api, user)
            ui.flash("Module created", "success")
            st.rerun()
        except ValidationError as e:
            st.error(str(e))
        except APIError as e:
            ui.report(e)

# ── Modules ───────────────────────────────────────────────────────────────────
st.subheader("My Modules")
if not dashboard.modules:
    st.info("You have not created any modules yet. Create your first module above.")

for module in dashboard.modules:
    with st.container(border=True):
        left, right = st.columns([4, 1])
        left.markdown(f"### {module.title}")
        left.caption(f"{module.subject} · {module.quiz_count} quizzes")
        left.write(module.description)
        if right.button("Open →", key=f"open-{module.id}"):
            ui.go(navigation.teacher_module(module.id))
