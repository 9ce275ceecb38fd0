from fastapi.testclient import TestClient

import store as store_module
from errors import StoreFailure, TextServiceError
from main import app
from models import ProblemSession
from prompts import build_problem_prompt

client = TestClient(app)

GOOD = (
    "Here you go!\n```json\n"
    '{"problem_text": "A baker makes 6 trays of 7 muffins.", "final_answer": 42}\n'
    "```"
)
FAILED = {"message": "Unable to generate a math problem right now."}


def test_generate_ok(script_llm, db):
    fake = script_llm(GOOD)
    r = client.post("/api/math-problem")
    assert r.status_code == 200
    body = r.json()
    assert set(body) == {"sessionId", "problem"}
    assert body["problem"] == {"problemText": "A baker makes 6 trays of 7 muffins."}
    assert fake.prompts == [build_problem_prompt()]

    row = db.get(ProblemSession, body["sessionId"])
    assert row is not None
    assert row.final_answer == 42
    assert row.created_at is not None


def test_generate_never_returns_answer(script_llm):
    script_llm(GOOD)
    r = client.post("/api/math-problem")
    assert r.status_code == 200
    assert "finalAnswer" not in r.text and "final_answer" not in r.text


def test_generate_sentinel(script_llm, db):
    script_llm("  ERROR \n")
    r = client.post("/api/math-problem")
    assert r.status_code == 500
    assert r.json() == FAILED
    assert db.query(ProblemSession).count() == 0


def test_generate_empty_response(script_llm, db):
    script_llm("")
    r = client.post("/api/math-problem")
    assert r.status_code == 500 and r.json() == FAILED
    assert db.query(ProblemSession).count() == 0


def test_generate_malformed(script_llm, db):
    script_llm("Here is a problem: Ann has 3 cats. Answer: 3")
    r = client.post("/api/math-problem")
    assert r.status_code == 500 and r.json() == FAILED
    assert db.query(ProblemSession).count() == 0


def test_generate_invalid_content(script_llm, db):
    script_llm('{"problem_text": "", "final_answer": "lots"}')
    r = client.post("/api/math-problem")
    assert r.status_code == 500 and r.json() == FAILED
    assert db.query(ProblemSession).count() == 0


def test_generate_string_answer_is_coerced(script_llm, db):
    r0 = script_llm('{"problem_text": "Split 9 sweets.", "final_answer": "4.5"}')
    r = client.post("/api/math-problem")
    assert r.status_code == 200
    assert db.get(ProblemSession, r.json()["sessionId"]).final_answer == 4.5
    assert len(r0.prompts) == 1


def test_generate_text_service_down(script_llm):
    script_llm(TextServiceError("quota exceeded"))
    r = client.post("/api/math-problem")
    assert r.status_code == 500
    # internal detail stays in the logs
    assert "quota" not in r.text


def test_generate_store_failure(script_llm, monkeypatch, caplog):
    def boom(self, problem_text, final_answer):
        raise StoreFailure("disk full")

    monkeypatch.setattr(store_module.ProblemStore, "create_session", boom)
    script_llm(GOOD)
    r = client.post("/api/math-problem")
    assert r.status_code == 500 and r.json() == FAILED
    assert "disk full" in caplog.text
