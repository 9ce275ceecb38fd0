import pytest
from fastapi.testclient import TestClient

from main import app
from models import Submission

client = TestClient(app)

FAILED = {"message": "We could not process that submission. Please try again."}


@pytest.fixture
def session_id(store):
    return store.create_session("Lee packs 7 boxes with 1 toy each.", 7).id


@pytest.mark.parametrize(
    "answer, correct",
    [(7, True), (7.0, True), ("7", True), (" 7 ", True), (6.999, False), ("8", False)],
)
def test_submit_exact_numeric_equality(script_llm, session_id, answer, correct):
    script_llm("Feedback.")
    r = client.post(
        "/api/math-problem/submit", json={"sessionId": session_id, "userAnswer": answer}
    )
    assert r.status_code == 200
    body = r.json()
    assert body["isCorrect"] is correct
    assert body["correctAnswer"] == 7
    assert body["feedback"] == "Feedback."


def test_submit_integral_answer_serialised_as_int(script_llm, session_id):
    script_llm("Well done!")
    r = client.post("/api/math-problem/submit", json={"sessionId": session_id, "userAnswer": 7})
    assert isinstance(r.json()["correctAnswer"], int)


def test_submit_fractional_answer(script_llm, store):
    sid = store.create_session("Share 5 pizzas between 2.", 2.5).id
    script_llm("Yes!")
    r = client.post("/api/math-problem/submit", json={"sessionId": sid, "userAnswer": "2.5"})
    assert r.json() == {"isCorrect": True, "feedback": "Yes!", "correctAnswer": 2.5}


@pytest.mark.parametrize("payload", [{}, {"userAnswer": 3}, {"sessionId": "   ", "userAnswer": 3}])
def test_submit_missing_session_id(script_llm, payload, db):
    fake = script_llm()
    r = client.post("/api/math-problem/submit", json=payload)
    assert r.status_code == 400
    assert r.json() == {"message": "Missing sessionId"}
    assert fake.prompts == []


@pytest.mark.parametrize("answer", ["banana", "", None, True, "NaN", "4_2", "\u0664\u0662"])
def test_submit_non_numeric_answer_rejected_first(script_llm, session_id, db, answer):
    fake = script_llm()
    r = client.post(
        "/api/math-problem/submit", json={"sessionId": session_id, "userAnswer": answer}
    )
    assert r.status_code == 400
    assert r.json() == {"message": "User answer must be a number"}
    assert fake.prompts == []
    assert db.query(Submission).count() == 0


def test_submit_unknown_session(script_llm, db):
    fake = script_llm()
    r = client.post("/api/math-problem/submit", json={"sessionId": "missing", "userAnswer": 1})
    assert r.status_code == 500
    assert r.json() == FAILED
    assert fake.prompts == []
    assert db.query(Submission).count() == 0


def test_submit_empty_feedback(script_llm, session_id, db):
    script_llm("   ")
    r = client.post("/api/math-problem/submit", json={"sessionId": session_id, "userAnswer": 7})
    assert r.status_code == 500 and r.json() == FAILED
    assert db.query(Submission).count() == 0


def test_submit_body_not_json():
    r = client.post(
        "/api/math-problem/submit",
        content="sessionId=abc",
        headers={"content-type": "application/json"},
    )
    assert r.status_code == 400
    assert "message" in r.json()


def test_generate_then_submit_end_to_end(script_llm, db):
    script_llm(
        '{"problem_text": "Six friends each bring 7 stickers. How many in all?", '
        '"final_answer": 42}',
        "Brilliant! Multiplying 6 by 7 gives the total.",
    )
    g = client.post("/api/math-problem")
    assert g.status_code == 200
    sid = g.json()["sessionId"]
    assert g.json()["problem"]["problemText"]

    s = client.post("/api/math-problem/submit", json={"sessionId": sid, "userAnswer": 42})
    assert s.status_code == 200
    body = s.json()
    assert body["isCorrect"] is True
    assert body["correctAnswer"] == 42
    assert body["feedback"]

    subs = db.query(Submission).filter(Submission.session_id == sid).all()
    assert len(subs) == 1
    assert subs[0].is_correct is True
