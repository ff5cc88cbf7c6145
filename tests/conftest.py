"""Shared fixtures for Bills Agent tests.

No test talks to Gemini: the assistant's model is swapped for a fake
that records prompts and returns canned text (or raises).
"""

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from bills_agent.agents import BillsAssistant
from bills_agent.api import create_app
from bills_agent.config import AppSettings, GeminiSettings
from bills_agent.models import Bill
from bills_agent.orchestrator import create_app_components
from bills_agent.services.storage import JsonFileBillStorage


class FakeGeminiModel:
    """Stands in for genai.GenerativeModel."""

    def __init__(self, text: str = "You still owe $50.00 this month.", error: Exception = None):
        self.text = text
        self.error = error
        self.prompts = []

    async def generate_content_async(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


def make_assistant(model=None) -> BillsAssistant:
    """Assistant with no API key; optionally wired to a fake model."""
    assistant = BillsAssistant(settings=GeminiSettings(api_key=None))
    assistant._model = model
    return assistant


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "bills.json"


@pytest.fixture
def storage(data_file):
    return JsonFileBillStorage(data_file)


@pytest.fixture
def fake_model():
    return FakeGeminiModel()


@pytest.fixture
def rent_bill():
    return Bill(id="rent", name="Rent", due_day=1, amount=1200.0)


@pytest.fixture
def internet_bill():
    return Bill(id="net", name="Internet", due_day=31, amount=60.0, notes="Fiber")


def build_client(data_file, model=None) -> TestClient:
    bill_flow, chat_flow, _ = create_app_components(
        data_file=data_file,
        assistant=make_assistant(model),
    )
    app = create_app(
        bill_flow=bill_flow,
        chat_flow=chat_flow,
        app_settings=AppSettings(),
    )
    return TestClient(app)


@pytest.fixture
def client(data_file):
    """API client whose assistant is NOT configured."""
    return build_client(data_file)


@pytest.fixture
def chat_client(data_file, fake_model):
    """API client whose assistant answers through the fake model."""
    return build_client(data_file, fake_model)
