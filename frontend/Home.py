"""
Home.py — Entry point of the EduQuiz Streamlit app.
Signed-in users go straight to their dashboard; everyone else gets the
landing page with links to sign in or register.
"""
import streamlit as st

from quizclient import navigation, ui
from quizclient.session import landing_route

ctx = ui.setup_page("Home", "🎓")

user = ctx.session.current_user()
if user is not None:
    ui.go(landing_route(user))

st.session_state["location"] = navigation.HOME

# ── Hero ──────────────────────────────────────────────────────────────────────
st.markdown("## 🎓 EduQuiz")
st.markdown(
    "<p style='color:#A7B0C0;margin-top:-0.5rem'>"
    "Course modules and timed quizzes for teachers and students.</p>",
    unsafe_allow_html=True,
)
st.divider()

col1, col2 = st.columns(2)

with col1:
    st.markdown(
        """
        <div class="dash-card">
          <h3>👩‍🏫 For teachers</h3>
          <p>Create modules for your subjects and build timed quizzes with
          single- and multiple-answer questions.</p>
        </div>
        """,
        unsafe_allow_html=True,
    )

with col2:
    st.markdown(
        """
        <div class="dash-card">
          <h3>🧑‍🎓 For students</h3>
          <p>Enroll in modules, take quizzes against the clock and track your
          best scores.</p>
        </div>
        """,
        unsafe_allow_html=True,
    )

c1, c2, _ = st.columns([1, 1, 4])
if c1.button("Sign In"):
    ui.go(navigation.LOGIN)
if c2.button("Create Account"):
    ui.go(navigation.REGISTER)
