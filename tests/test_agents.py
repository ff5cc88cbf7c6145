"""Tests for the bills assistant.

The Gemini model is always replaced by FakeGeminiModel.
"""

import pytest

from bills_agent.agents import AssistantUnavailableError, BillsAssistant
from bills_agent.agents import ai_agents
from bills_agent.aggregation import summarize_month
from bills_agent.config import GeminiSettings
from bills_agent.models import Bill, MonthKey

from conftest import FakeGeminiModel, make_assistant


@pytest.fixture
def february():
    return summarize_month(
        [
            Bill(id="rent", name="Rent", due_day=1, amount=1200),
            Bill(id="tv", name="New TV", due_day=31, amount=499.5, is_recurring=False),
        ],
        MonthKey(2024, 2),
        {"rent"},
    )


class TestBuildPrompt:

    def test_prompt_lists_totals_bills_and_question(self, february):
        prompt = BillsAssistant.build_prompt(
            "What's left?", february.month, february.bills, february.totals
        )

        assert prompt.startswith("Month: 2024-02\n")
        assert "Total due: $1699.50" in prompt
        assert "Recurring due: $1200.00" in prompt
        assert "One-time due: $499.50" in prompt
        assert "Paid so far: $1200.00" in prompt
        assert "Remaining: $499.50" in prompt
        assert "Remaining recurring: $0.00" in prompt
        assert "- Rent (due 1) for $1200.00 - paid (recurring)" in prompt
        assert "- New TV (due 31) for $499.50 - unpaid (one-time)" in prompt
        assert prompt.endswith("\n\nQuestion: What's left?")

    def test_prompt_without_bills(self):
        empty = summarize_month([], MonthKey(2024, 2))
        prompt = BillsAssistant.build_prompt("Anything?", empty.month, [], empty.totals)
        assert "Bills:\n- (no bills recorded)\n" in prompt


class TestAsk:

    @pytest.mark.asyncio
    async def test_unavailable_without_key(self, february):
        assistant = make_assistant()
        assert assistant.is_available is False

        with pytest.raises(AssistantUnavailableError, match="GEMINI_API_KEY is not configured"):
            await assistant.ask("Hi", february.month, february.bills, february.totals)

    @pytest.mark.asyncio
    async def test_reply_is_trimmed_model_text(self, february):
        model = FakeGeminiModel(text="  You owe $499.50.  \n")
        assistant = make_assistant(model)

        reply = await assistant.ask("Hi", february.month, february.bills, february.totals)

        assert reply == "You owe $499.50."
        assert len(model.prompts) == 1
        assert "Question: Hi" in model.prompts[0]

    @pytest.mark.asyncio
    async def test_empty_reply_is_unavailable(self, february):
        assistant = make_assistant(FakeGeminiModel(text="   "))
        with pytest.raises(AssistantUnavailableError, match="No text returned from Gemini"):
            await assistant.ask("Hi", february.month, february.bills, february.totals)

    @pytest.mark.asyncio
    async def test_provider_error_is_surfaced(self, february):
        assistant = make_assistant(FakeGeminiModel(error=RuntimeError("quota exceeded")))
        with pytest.raises(AssistantUnavailableError, match="quota exceeded"):
            await assistant.ask("Hi", february.month, february.bills, february.totals)


class TestConfiguration:

    def test_model_built_when_key_configured(self, monkeypatch):
        created = {}

        def fake_model(**kwargs):
            created.update(kwargs)
            return FakeGeminiModel()

        monkeypatch.setattr(ai_agents.genai, "configure", lambda **kwargs: None)
        monkeypatch.setattr(ai_agents.genai, "GenerativeModel", fake_model)

        assistant = BillsAssistant(settings=GeminiSettings(api_key="test-key"))

        assert assistant.is_available is True
        assert created["model_name"] == "gemini-1.5-flash"
        assert created["system_instruction"] == ai_agents.SYSTEM_PROMPT
        assert created["generation_config"]["max_output_tokens"] == 1024

    def test_blank_key_is_not_configured(self):
        assert GeminiSettings(api_key="   ").is_configured is False
