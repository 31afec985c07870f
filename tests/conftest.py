import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from aceprep.db import init_db, SettingSlot, TEMPLATES_KEY, PERSONAL_BEST_KEY
from aceprep.generation import GenerationService
from aceprep.schemas import PracticeTest
from aceprep.scoring import PersonalBest
from aceprep.session import Session
from aceprep.templates import TemplateStore


@pytest.fixture
def tmp_db(tmp_path):
    """Provide an initialized temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_aceprep.db")
    init_db(db_path)
    return db_path


@pytest.fixture
def template_slot(tmp_db):
    return SettingSlot(tmp_db, TEMPLATES_KEY)


@pytest.fixture
def pb_slot(tmp_db):
    return SettingSlot(tmp_db, PERSONAL_BEST_KEY)


def make_test_payload(n=10, subject="Physics", topic="Kinematics") -> dict:
    """A practice-test reply of ``n`` MCQs whose correct answer is always 'A'."""
    return {
        "subject": subject,
        "topic": topic,
        "questions": [
            {
                "id": i,
                "type": "MCQ",
                "questionText": f"Question {i}?",
                "options": ["one", "two", "three", "four"],
                "correctAnswer": "A",
                "solution": f"Because {i}.",
            }
            for i in range(1, n + 1)
        ],
    }


def make_test(n=10, **kwargs) -> PracticeTest:
    return PracticeTest.model_validate(make_test_payload(n, **kwargs))


def reply(payload) -> SimpleNamespace:
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return SimpleNamespace(text=text)


@pytest.fixture
def fake_client():
    client = MagicMock()
    client.models.generate_content.return_value = reply(make_test_payload())
    return client


@pytest.fixture
def service(fake_client):
    return GenerationService(api_key="test-key", model="test-model", client=fake_client)


@pytest.fixture
def session(service, template_slot, pb_slot):
    return Session(
        service=service,
        templates=TemplateStore(template_slot),
        personal_best=PersonalBest(pb_slot),
    )
