"""4_Student_Module.py — An enrolled module: quizzes, my attempts and best scores."""
import streamlit as st

from quizclient import navigation, ui
from quizclient.api_client import APIError
from quizclient.attempt import score_band
from quizclient.dashboards import load_student_module, unenroll
from quizclient.models import ROLE_STUDENT

ctx = ui.setup_page("Module", "📚")

module_id = st.session_state.get("module_id") or ""

# ── Auth guard ─────────────────────────────────────────────────────────────
user = ui.require_role(navigation.student_module(module_id), ROLE_STUDENT)
ui.sidebar(user)

if not module_id:
    ui.go(navigation.STUDENT_DASHBOARD)

try:
    with st.spinner("Loading module…"):
        detail = load_student_module(ctx.api, module_id)
except APIError as e:
    ui.report(e)
    st.stop()

top_left, top_mid, top_right = st.columns([2, 1, 1])
if top_left.button("← Back to Dashboard"):
    ui.go(navigation.STUDENT_DASHBOARD)
if top_mid.button("🔄 Refresh"):
    st.rerun()
if top_right.button("Leave Module"):
    try:
        ui.flash(unenroll(ctx.api, module_id), "success")
        ui.go(navigation.STUDENT_DASHBOARD)
    except APIError as e:
        ui.report(e)

st.markdown(f"## {detail.module.title}")
st.caption(f"{detail.module.subject} · Teacher: {detail.module.teacher_name or '—'}")
st.write(detail.module.description)
st.divider()

if not detail.quizzes:
    st.info("No quizzes in this module yet.")

for quiz in detail.quizzes:
    attempts = detail.attempts_for(quiz.id)
    best = detail.best_score(quiz.id)
    with st.container(border=True):
        left, right = st.columns([4, 1])
        left.markdown(f"### {quiz.title}")
        left.caption(
            f"{quiz.question_count} questions · {quiz.total_points} points · {quiz.duration} min"
        )
        if quiz.description:
            left.write(quiz.description)
        if best is not None:
            right.markdown(
                f"Best {ui.score_badge(best, score_band(best))}<br>"
                f"<span style='color:#A7B0C0;font-size:0.8rem'>{len(attempts)} attempts</span>",
                unsafe_allow_html=True,
            )

        if attempts:
            with st.expander(f"My Attempts ({len(attempts)})"):
                for n, attempt in enumerate(attempts):
                    when = attempt.created_at.strftime("%Y-%m-%d %H:%M") if attempt.created_at else ""
                    st.markdown(
                        f"Attempt #{len(attempts) - n} · {when} · "
                        f"Score: **{attempt.score}** / {quiz.total_points} points "
                        + ui.score_badge(attempt.percentage, score_band(attempt.percentage)),
                        unsafe_allow_html=True,
                    )

        if st.button("Retake Quiz" if attempts else "Start Quiz", key=f"take-{quiz.id}"):
            ctx.workspace.prepare_take(quiz.id)
            ui.go(navigation.take_quiz(quiz.id))
