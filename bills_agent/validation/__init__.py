"""Validation package."""

from bills_agent.validation.validator import BillValidator

__all__ = ["BillValidator"]
