"""
2_Teacher_Module.py — One module: its quizzes, student attempts per quiz, and
the quiz builder.

The quiz being built is a QuizDraft kept in session state; nothing reaches the
backend until "Create Quiz".
"""
import streamlit as st

from quizclient import navigation, ui
from quizclient.api_client import APIError
from quizclient.attempt import score_band
from quizclient.authoring import DEFAULT_DURATION, QuestionDraft, QuizDraft
from quizclient.dashboards import load_quiz_attempts, load_teacher_module
from quizclient.models import MULTIPLE, QUESTION_TYPES, ROLE_TEACHER, SINGLE
from quizclient.session import ValidationError

ctx = ui.setup_page("Module", "📚")

module_id = st.session_state.get("module_id") or ""

# ── Auth guard ─────────────────────────────────────────────────────────────
user = ui.require_role(navigation.teacher_module(module_id), ROLE_TEACHER)
ui.sidebar(user)

if not module_id:
    ui.go(navigation.TEACHER_DASHBOARD)

try:
    with st.spinner("Loading module…"):
        detail = load_teacher_module(ctx.api, module_id)
except APIError as e:
    ui.report(e)
    st.stop()

if st.button("← Back to Dashboard"):
    ui.go(navigation.TEACHER_DASHBOARD)

st.markdown(f"## {detail.module.title}")
st.caption(detail.module.subject)
st.write(detail.module.description)
st.divider()

# ── Quizzes ───────────────────────────────────────────────────────────────────
st.subheader(f"Quizzes ({len(detail.quizzes)})")
if not detail.quizzes:
    st.info("No quizzes yet. Build one below.")

for quiz in detail.quizzes:
    with st.container(border=True):
        st.markdown(f"### {quiz.title}")
        st.caption(
            f"{quiz.question_count} questions · {quiz.total_points} points · {quiz.duration} min"
        )
        if quiz.description:
            st.write(quiz.description)
        if st.toggle("View Student Attempts", key=f"attempts-{quiz.id}"):
            try:
                attempts = load_quiz_attempts(ctx.api, quiz.id)
            except APIError as e:
                ui.report(e)
                attempts = []
            if not attempts:
                st.caption("No attempts yet.")
            for attempt in attempts:
                when = attempt.created_at.strftime("%Y-%m-%d %H:%M") if attempt.created_at else ""
                st.markdown(
                    f"**{attempt.student_name or attempt.student_id}** · {when} · "
                    f"{attempt.score} / {attempt.total_points or quiz.total_points} points "
                    + ui.score_badge(attempt.percentage, score_band(attempt.percentage)),
                    unsafe_allow_html=True,
                )

st.divider()

# ── Quiz builder ──────────────────────────────────────────────────────────────
quiz_key = f"quiz_draft:{module_id}"
draft: QuizDraft = st.session_state.setdefault(quiz_key, QuizDraft())
question: QuestionDraft = st.session_state.setdefault("question_draft", QuestionDraft())
rev = st.session_state.setdefault("question_rev", 0)

st.subheader("🧠 Create Quiz")

c1, c2 = st.columns([3, 1])
draft.title = c1.text_input("Quiz Title", key=f"quiz-title-{module_id}")
draft.duration = int(
    c2.number_input("Duration (minutes)", min_value=1, value=DEFAULT_DURATION, key=f"quiz-duration-{module_id}")
)
draft.description = st.text_area("Description", height=68, key=f"quiz-description-{module_id}")

if draft.questions:
    st.markdown(f"**Questions Added ({len(draft.questions)}) · {draft.total_points} points**")
    for idx, q in enumerate(draft.questions):
        left, right = st.columns([6, 1])
        left.write(f"{idx + 1}. {q.text} ({q.type}, {q.points} pt)")
        if right.button("Remove", key=f"rm-{idx}"):
            draft.remove_question(idx)
            st.rerun()

with st.container(border=True):
    st.markdown("**Add Question**")
    question.text = st.text_input("Question Text", key=f"q-text-{rev}")
    t1, t2 = st.columns(2)
    new_type = t1.selectbox(
        "Type",
        QUESTION_TYPES,
        format_func=lambda t: "Single Answer" if t == SINGLE else "Multiple Answers",
        key=f"q-type-{rev}",
    )
    if new_type != question.type:
        question.set_type(new_type)
    question.points = int(
        t2.number_input("Points", min_value=1, value=1, key=f"q-points-{rev}")
    )

    label = "answers" if question.type == MULTIPLE else "answer"
    st.caption(f"Options (check correct {label})")
    for idx in range(len(question.options)):
        o1, o2 = st.columns([1, 8])
        marked = o1.checkbox(
            "correct",
            value=idx in question.correct_answers,
            key=f"q-correct-{rev}-{idx}-{question.type}-{question.correct_answers}",
            label_visibility="collapsed",
        )
        if marked != (idx in question.correct_answers):
            question.toggle_correct(idx)
            st.rerun()
        question.set_option(
            idx,
            o2.text_input(
                f"Option {idx + 1}",
                key=f"q-option-{rev}-{idx}",
                label_visibility="collapsed",
                placeholder=f"Option {idx + 1}",
            ),
        )

    b1, b2 = st.columns(2)
    if b1.button("+ Option"):
        question.add_option()
        st.rerun()
    if b2.button("Add Question"):
        try:
            draft.add_question(question)
            st.session_state["question_draft"] = QuestionDraft()
            st.session_state["question_rev"] = rev + 1
            st.rerun()
        except ValidationError as e:
            st.error(str(e))

if st.button("Create Quiz", type="primary"):
    try:
        draft.publish(ctx.api, module_id)
        for k in (quiz_key, f"quiz-title-{module_id}", f"quiz-duration-{module_id}", f"quiz-description-{module_id}"):
            st.session_state.pop(k, None)
        ui.flash("Quiz created", "success")
        st.rerun()
    except ValidationError as e:
        st.error(str(e))
    except APIError as e:
        ui.report(e)
