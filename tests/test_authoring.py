import json

import pytest

from quizclient.authoring import ModuleDraft, QuestionDraft, QuizDraft
from quizclient.models import User
from quizclient.session import ValidationError


def _question(text="2 + 2 = ?", kind="single", correct=(1,), points=1):
    q = QuestionDraft(text=text, options=["3", "4", "5", "6"], points=points)
    q.set_type(kind)
    for i in correct:
        q.toggle_correct(i)
    return q


def test_single_correct_answer_replaces():
    q = QuestionDraft(options=["a", "b", "c", "d"])
    q.toggle_correct(0)
    q.toggle_correct(2)
    assert q.correct_answers == [2]


def test_multiple_correct_answers_toggle():
    q = QuestionDraft(options=["a", "b", "c", "d"])
    q.set_type("multiple")
    q.toggle_correct(0)
    q.toggle_correct(2)
    q.toggle_correct(0)
    q.toggle_correct(3)
    assert q.correct_answers == [2, 3]


def test_switching_to_single_keeps_at_most_one():
    q = _question(kind="multiple", correct=(1, 3))
    q.set_type("single")
    assert q.correct_answers == [1]
    q.toggle_correct(2)
    assert q.correct_answers == [2]


def test_unknown_type_rejected():
    with pytest.raises(ValueError):
        QuestionDraft().set_type("essay")


def test_question_needs_text_and_a_correct_option():
    draft = QuizDraft(title="T")
    with pytest.raises(ValidationError):
        draft.add_question(_question(text="  "))
    with pytest.raises(ValidationError):
        draft.add_question(_question(correct=()))
    blank_marked = QuestionDraft(text="Q", options=["", "x", "", ""])
    blank_marked.toggle_correct(0)
    with pytest.raises(ValidationError):
        draft.add_question(blank_marked)
    assert draft.questions == []


def test_added_question_is_a_copy():
    draft = QuizDraft(title="T")
    q = _question()
    draft.add_question(q)
    q.text = "changed"
    q.toggle_correct(3)
    assert draft.questions[0].text == "2 + 2 = ?"
    assert draft.questions[0].correct_answers == [1]


def test_total_points_tracks_questions():
    draft = QuizDraft(title="T")
    draft.add_question(_question(points=1))
    draft.add_question(_question(kind="multiple", correct=(0, 1), points=3))
    assert draft.total_points == 4
    draft.remove_question(0)
    assert draft.total_points == 3


def test_publish_needs_a_question(api, stub):
    with pytest.raises(ValidationError, match="at least one question"):
        QuizDraft(title="Empty").publish(api, "m1")
    assert stub.sent == []


def test_publish_posts_quiz(api, stub):
    stub.add("POST", "/quizzes", status=201, body={"success": True, "quiz": {"_id": "qz9"}})
    draft = QuizDraft(title=" Week 1 ", description="intro", duration=15)
    draft.add_question(_question())
    draft.publish(api, "m1")

    sent = json.loads(stub.calls("POST", "/quizzes")[0].body)
    assert sent["title"] == "Week 1"
    assert sent["duration"] == 15
    assert sent["moduleId"] == "m1"
    assert sent["questions"] == [
        {
            "questionText": "2 + 2 = ?",
            "questionType": "single",
            "options": ["3", "4", "5", "6"],
            "correctAnswers": [1],
            "points": 1,
        }
    ]


def test_module_subject_must_be_one_of_the_teachers(api, stub, teacher):
    grace = User.from_dict(teacher)
    with pytest.raises(ValidationError):
        ModuleDraft(title="Algebra", description="x", subject="History").publish(api, grace)
    assert stub.sent == []

    stub.add("POST", "/modules", status=201, body={"module": {"_id": "m2"}})
    ModuleDraft(title="Algebra", description="Linear equations", subject="Mathematics").publish(api, grace)
    assert json.loads(stub.calls("POST", "/modules")[0].body) == {
        "title": "Algebra",
        "description": "Linear equations",
        "subject": "Mathematics",
    }
