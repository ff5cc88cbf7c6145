"""Tests for the dashboard's HTTP client, run against the real app."""

import pytest

from bills_agent.api import ApiError, BillsApiClient
from bills_agent.models import Bill, BillWithStatus


@pytest.fixture
def api(client):
    return BillsApiClient(client=client)


@pytest.fixture
def chat_api(chat_client):
    return BillsApiClient(client=chat_client)


class TestBillsApiClient:

    def test_health(self, api):
        assert api.health() == {"status": "ok", "chat": False}

    def test_create_and_list(self, api):
        created = api.create_bill({"name": "Water", "dueDay": 10, "amount": 40})

        assert isinstance(created, Bill)
        assert api.list_bills() == [created]

    def test_list_with_status(self, api):
        api.create_bill({"id": "water", "name": "Water", "dueDay": 10, "amount": 40})
        api.set_paid_status("water", "2024-06", True)

        bills = api.list_bills_with_status("2024-06")

        assert isinstance(bills[0], BillWithStatus)
        assert bills[0].is_paid is True
        assert bills[0].due_date_label == "06/10/2024"

    def test_update_and_delete(self, api):
        api.create_bill({"id": "water", "name": "Water", "dueDay": 10, "amount": 40})

        updated = api.update_bill("water", {"amount": 42.5})
        assert updated.amount == 42.5

        api.delete_bill("water")
        assert api.list_bills() == []

    def test_ids_are_url_quoted(self, api):
        api.create_bill({"id": "car loan", "name": "Car", "dueDay": 3, "amount": 250})
        assert api.set_paid_status("car loan", "2024-06", True) is True
        api.delete_bill("car loan")
        assert api.list_bills() == []

    def test_summary(self, api):
        api.create_bill({"name": "Water", "dueDay": 10, "amount": 40})
        summary = api.get_monthly_summary("2024-06")
        assert summary.month == "2024-06"
        assert summary.totals.remaining == 40

    def test_validation_errors_raise(self, api):
        with pytest.raises(ApiError) as excinfo:
            api.create_bill({"name": "", "dueDay": 10, "amount": 40})
        assert excinfo.value.status_code == 400
        assert excinfo.value.message == "'name' is required"

    def test_not_found_raises(self, api):
        with pytest.raises(ApiError) as excinfo:
            api.delete_bill("ghost")
        assert excinfo.value.status_code == 404
        assert excinfo.value.message == "Bill not found"

    def test_chat_unavailable(self, api):
        with pytest.raises(ApiError) as excinfo:
            api.chat("How much?")
        assert excinfo.value.status_code == 503

    def test_chat(self, chat_api, fake_model):
        assert chat_api.chat("How much?", month="2024-06") == fake_model.text
