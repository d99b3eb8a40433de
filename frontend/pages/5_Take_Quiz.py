"""
5_Take_Quiz.py — Take a timed quiz.

The QuizAttemptWorkflow for the open quiz lives in session state so an attempt
survives reruns. A fragment rerunning every second feeds elapsed seconds to
the workflow's countdown; reaching zero submits without asking.
"""
import time

import streamlit as st

from quizclient import navigation, ui
from quizclient.attempt import (
    AttemptAborted,
    AttemptState,
    QuizAttemptWorkflow,
    SubmissionFailed,
    score_band,
)
from quizclient.models import ROLE_STUDENT
from quizclient.timer import format_time

ctx = ui.setup_page("Take Quiz", "📝")

quiz_id = st.session_state.get("quiz_id") or ""

# ── Auth guard ─────────────────────────────────────────────────────────────
user = ui.require_role(navigation.take_quiz(quiz_id), ROLE_STUDENT)

if not quiz_id:
    ui.go(navigation.STUDENT_DASHBOARD)


def _leave(wf: QuizAttemptWorkflow, message: str = "", to: str = "") -> None:
    ctx.workspace.drop_attempt(wf.quiz_id)
    if message:
        ui.flash(message)
    if to:
        ui.go(to)
    ui.back(wf.back_route)


wf: QuizAttemptWorkflow = ctx.workspace.attempt(quiz_id)
if wf is None:
    wf = QuizAttemptWorkflow(ctx.api, quiz_id)
    try:
        with st.spinner("Loading quiz…"):
            wf.load()
    except AttemptAborted as e:
        _leave(wf, str(e))
    ctx.workspace.keep_attempt(wf)

quiz = wf.quiz

# ── Start screen ──────────────────────────────────────────────────────────────
if wf.state is AttemptState.START_SCREEN:
    ui.sidebar(user)
    if st.button("← Back"):
        _leave(wf)

    st.markdown(f"## {quiz.title}")
    if quiz.description:
        st.write(quiz.description)

    c1, c2, c3 = st.columns(3)
    c1.metric("Questions", len(quiz.questions))
    c2.metric("Total Points", quiz.total_points)
    c3.metric("Duration", f"{quiz.duration} min")

    if wf.history:
        st.subheader(f"📊 Your Previous Attempts ({len(wf.history)})")
        st.success(f"🏆 Best Score: {wf.best_percentage:.1f}%")
        for n, attempt in enumerate(wf.history):
            when = attempt.created_at.strftime("%Y-%m-%d %H:%M") if attempt.created_at else ""
            st.markdown(
                f"Attempt #{len(wf.history) - n} · {when} · "
                f"{attempt.score} / {attempt.total_points or quiz.total_points} points "
                + ui.score_badge(attempt.percentage, score_band(attempt.percentage)),
                unsafe_allow_html=True,
            )

    b1, b2, _ = st.columns([1, 1, 3])
    if b1.button("Start New Attempt" if wf.history else "Start Quiz", type="primary"):
        ctx.workspace.start_clock(quiz_id, time.monotonic())
        try:
            wf.start()
        except AttemptAborted as e:
            _leave(wf, str(e))
        except SubmissionFailed as e:
            st.session_state["submit_error"] = str(e)
        st.rerun()
    if b2.button("Cancel"):
        _leave(wf)

# ── In progress ───────────────────────────────────────────────────────────────
elif wf.state is AttemptState.IN_PROGRESS:

    @st.fragment(run_every=1)
    def _countdown() -> None:
        elapsed = ctx.workspace.advance_clock(quiz_id, time.monotonic())
        try:
            for _ in range(elapsed):
                wf.tick()
        except SubmissionFailed as e:
            st.session_state["submit_error"] = str(e)
            st.rerun(scope="app")
        if wf.state is AttemptState.SUBMITTED:
            st.rerun(scope="app")
        css = "timer timer-low" if wf.time_left <= 60 else "timer"
        st.markdown(f"<div class='{css}'>⏱️ {format_time(wf.time_left)}</div>", unsafe_allow_html=True)

    def _pick(question_id: str, widget_key: str) -> None:
        if wf.state is AttemptState.IN_PROGRESS and st.session_state[widget_key] is not None:
            wf.toggle(question_id, st.session_state[widget_key])

    def _flip(question_id: str, option_index: int) -> None:
        if wf.state is AttemptState.IN_PROGRESS:
            wf.toggle(question_id, option_index)

    head_left, head_right = st.columns([3, 1])
    head_left.markdown(f"## {quiz.title}")
    head_left.caption(f"{len(quiz.questions)} questions · {quiz.total_points} points")
    with head_right:
        _countdown()

    error = st.session_state.pop("submit_error", None)
    if error:
        st.error(f"{error}. Your answers are kept — please try submitting again.")

    for n, question in enumerate(quiz.questions, start=1):
        selected = wf.answers.get(question.id, [])
        hint = "(Select all that apply)" if question.is_multiple else "(Select one)"
        unit = "point" if question.points == 1 else "points"
        with st.container(border=True):
            st.markdown(f"**{n}. {question.text}**")
            st.caption(f"{hint} · {question.points} {unit}")
            if question.is_multiple:
                for i, option in enumerate(question.options):
                    st.checkbox(
                        option,
                        value=i in selected,
                        key=f"ans-{wf.attempt_id}-{question.id}-{i}",
                        on_change=_flip,
                        args=(question.id, i),
                    )
            else:
                widget_key = f"ans-{wf.attempt_id}-{question.id}"
                st.radio(
                    "answer",
                    list(range(len(question.options))),
                    index=selected[0] if selected else None,
                    format_func=lambda i, opts=question.options: opts[i],
                    key=widget_key,
                    on_change=_pick,
                    args=(question.id, widget_key),
                    label_visibility="collapsed",
                )

    if wf.awaiting_confirmation:
        st.warning("Are you sure you want to submit?")
        y, n_, _ = st.columns([1, 1, 3])
        if y.button("Yes, submit", type="primary"):
            try:
                wf.submit(confirmed=True)
            except SubmissionFailed as e:
                st.session_state["submit_error"] = str(e)
            st.rerun()
        if n_.button("Keep working"):
            wf.cancel_submit()
            st.rerun()
    elif st.button("Submit Quiz", type="primary"):
        wf.request_submit()
        st.rerun()

# ── Submitted ─────────────────────────────────────────────────────────────────
elif wf.state is AttemptState.SUBMITTED:
    result = wf.result
    st.markdown("## 🎉 Quiz Submitted!")
    st.markdown(
        f"### {result.percentage:.1f}% " + ui.score_badge(result.percentage, score_band(result.percentage)),
        unsafe_allow_html=True,
    )
    st.caption(f"{result.score} / {result.total_points} points")

    c1, c2, c3 = st.columns(3)
    c1.metric("Correct", result.correct_count)
    c2.metric("Incorrect", result.incorrect_count)
    c3.metric("Total Questions", len(quiz.questions))

    if st.button("Back to Module", type="primary"):
        _leave(wf, to=wf.back_route)
