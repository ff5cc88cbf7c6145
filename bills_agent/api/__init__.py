"""REST API package."""

from bills_agent.api.app import create_app
from bills_agent.api.client import ApiError, BillsApiClient

__all__ = ["ApiError", "BillsApiClient", "create_app"]
