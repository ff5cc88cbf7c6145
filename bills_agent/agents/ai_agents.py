"""
AI Assistant for Bills Agent

DESIGN DECISION: The assistant is a prompt formatter around one Gemini
call. It is handed the month's bills and the totals we already computed,
and asked to answer from that data only.

CRITICAL BOUNDARIES:
- CAN: Explain what is due, paid and remaining, in plain language
- CANNOT: Do its own arithmetic on data it was not given
- CANNOT: Answer when it is not configured (reported as unavailable)

Failures are NEVER silently degraded or retried. Missing configuration,
an empty reply, or a failed call all raise AssistantUnavailableError
carrying the provider's message.
"""

from typing import Iterable, Optional

import google.generativeai as genai
import structlog

from bills_agent.config import GeminiSettings, get_settings
from bills_agent.models.bill import BillWithStatus, MonthlyTotals


logger = structlog.get_logger(__name__)


SYSTEM_PROMPT = (
    "You are Bills Agent, a helpful assistant that answers questions about "
    "household bills. Always base your answers solely on the data provided, "
    "and respond with helpful financial insights. Keep responses concise "
    "and actionable."
)


class AssistantUnavailableError(Exception):
    """The assistant could not produce an answer."""
    pass


def _money(amount: float) -> str:
    return f"${amount:.2f}"


class BillsAssistant:
    """
    Answers natural-language questions about one month of bills.

    The model is created once, at construction, and only when an API
    key is configured.
    """

    def __init__(self, settings: Optional[GeminiSettings] = None):
        self._settings = settings or get_settings().gemini
        self._model = None
        if self._settings.is_configured:
            self._configure_genai()

    def _configure_genai(self):
        """Configure Google Generative AI."""
        genai.configure(api_key=self._settings.api_key)
        self._model = genai.GenerativeModel(
            model_name=self._settings.model_name,
            system_instruction=SYSTEM_PROMPT,
            generation_config={
                "temperature": self._settings.temperature,
                "max_output_tokens": self._settings.max_tokens,
            },
        )

    @property
    def is_available(self) -> bool:
        return self._model is not None

    @staticmethod
    def build_prompt(
        message: str,
        month: str,
        bills: Iterable[BillWithStatus],
        totals: MonthlyTotals,
    ) -> str:
        """
        Format the user turn: month, totals, one line per bill, question.
        """
        bill_lines = "\n".join(
            f"- {bill.name} (due {bill.due_day}) for {_money(bill.amount)} - "
            f"{'paid' if bill.is_paid else 'unpaid'} "
            f"({'recurring' if bill.is_recurring else 'one-time'})"
            for bill in bills
        ) or "- (no bills recorded)"

        return (
            f"Month: {month}\n"
            f"Total due: {_money(totals.total_due)}\n"
            f"Recurring due: {_money(totals.recurring_due)}\n"
            f"One-time due: {_money(totals.one_time_due)}\n"
            f"Paid so far: {_money(totals.paid)}\n"
            f"Remaining: {_money(totals.remaining)}\n"
            f"Remaining recurring: {_money(totals.remaining_recurring)}\n"
            f"Bills:\n{bill_lines}\n"
            f"\n"
            f"Question: {message}"
        )

    async def ask(
        self,
        message: str,
        month: str,
        bills: list[BillWithStatus],
        totals: MonthlyTotals,
    ) -> str:
        """
        Answer a question about the month.

        Raises:
            AssistantUnavailableError: Not configured, call failed,
                or no text came back
        """
        if self._model is None:
            raise AssistantUnavailableError("GEMINI_API_KEY is not configured")

        prompt = self.build_prompt(message, month, bills, totals)

        try:
            response = await self._model.generate_content_async(prompt)
            text = (response.text or "").strip()
        except Exception as e:
            logger.warning("assistant_call_failed", error=str(e), month=month)
            raise AssistantUnavailableError(str(e)) from e

        if not text:
            raise AssistantUnavailableError("No text returned from Gemini")
        return text
