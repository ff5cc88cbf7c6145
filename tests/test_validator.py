"""Tests for request payload validation."""

import pytest

from bills_agent.validation import BillValidator


@pytest.fixture
def validator():
    return BillValidator()


@pytest.fixture
def valid_payload():
    return {"name": "Internet", "dueDay": 31, "amount": 60, "notes": "Fiber"}


class TestBillPayload:

    def test_valid_payload(self, validator, valid_payload):
        result = validator.validate_bill_payload(valid_payload)
        assert result.is_valid
        assert result.messages == []

    def test_empty_payload_reports_every_required_field(self, validator):
        result = validator.validate_bill_payload({})
        assert result.messages == [
            "'name' is required",
            "'dueDay' must be a number between 1 and 31",
            "'amount' must be a non-negative number",
        ]

    @pytest.mark.parametrize("name", ["", "   ", None, 42])
    def test_bad_name(self, validator, valid_payload, name):
        result = validator.validate_bill_payload({**valid_payload, "name": name})
        assert result.messages == ["'name' is required"]

    @pytest.mark.parametrize("due_day", [0, 32, -1, 1.5, "5", True, None, float("nan")])
    def test_bad_due_day(self, validator, valid_payload, due_day):
        result = validator.validate_bill_payload({**valid_payload, "dueDay": due_day})
        assert result.messages == ["'dueDay' must be a number between 1 and 31"]

    @pytest.mark.parametrize("due_day", [1, 31, 15.0])
    def test_good_due_day(self, validator, valid_payload, due_day):
        assert validator.validate_bill_payload({**valid_payload, "dueDay": due_day}).is_valid

    @pytest.mark.parametrize("amount", [-0.01, "60", None, False, float("inf")])
    def test_bad_amount(self, validator, valid_payload, amount):
        result = validator.validate_bill_payload({**valid_payload, "amount": amount})
        assert result.messages == ["'amount' must be a non-negative number"]

    def test_zero_amount_is_valid(self, validator, valid_payload):
        assert validator.validate_bill_payload({**valid_payload, "amount": 0}).is_valid

    def test_notes_must_be_string(self, validator, valid_payload):
        result = validator.validate_bill_payload({**valid_payload, "notes": 7})
        assert result.messages == ["'notes' must be a string if provided"]

    def test_is_recurring_must_be_bool(self, validator, valid_payload):
        result = validator.validate_bill_payload({**valid_payload, "isRecurring": "yes"})
        assert result.messages == ["'isRecurring' must be a boolean if provided"]

    def test_id_must_be_string(self, validator, valid_payload):
        result = validator.validate_bill_payload({**valid_payload, "id": 12})
        assert result.messages == ["'id' must be a string if provided"]


class TestMonth:

    def test_valid_month(self, validator):
        assert validator.validate_month("2024-02").is_valid

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_month(self, validator, value):
        assert validator.validate_month(value).messages == ["'month' is required"]

    @pytest.mark.parametrize("value", ["2024-2", "2024-13", "02-2024", 202402])
    def test_malformed_month(self, validator, value):
        assert validator.validate_month(value).messages == [
            "'month' must be in YYYY-MM format"
        ]

    def test_custom_field_name(self, validator):
        assert validator.validate_month("bad", field="from").messages == [
            "'from' must be in YYYY-MM format"
        ]
