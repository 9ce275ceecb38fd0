import os
import tempfile

# Point the app at a throwaway database before anything imports db.py
_TMP_DIR = tempfile.mkdtemp(prefix="math-tutor-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"

import pytest  # noqa: E402

from db import Base, SessionLocal, engine  # noqa: E402
from llm import get_text_generator  # noqa: E402
from main import app  # noqa: E402
from models import ProblemSession, Submission  # noqa: E402
from store import ProblemStore  # noqa: E402


class ScriptedTextGenerator:
    """Returns canned responses in order and records every prompt it was given."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.prompts = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.responses:
            raise AssertionError("unexpected text-generation call")
        r = self.responses.pop(0)
        if isinstance(r, Exception):
            raise r
        return r


@pytest.fixture(scope="session", autouse=True)
def _schema():
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture(autouse=True)
def _clean_tables():
    yield
    with SessionLocal() as db:
        db.query(Submission).delete()
        db.query(ProblemSession).delete()
        db.commit()


@pytest.fixture(autouse=True)
def script_llm():
    """Install a scripted text generator; by default it accepts no calls."""

    def _install(*responses):
        fake = ScriptedTextGenerator(*responses)
        app.dependency_overrides[get_text_generator] = lambda: fake
        return fake

    _install()
    yield _install
    app.dependency_overrides.pop(get_text_generator, None)


@pytest.fixture
def db():
    with SessionLocal() as s:
        yield s


@pytest.fixture
def store(db):
    return ProblemStore(db)
