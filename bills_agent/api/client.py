"""
HTTP client for the Bills Agent API.

Used by the Streamlit dashboard. Responses are decoded back into the
same pydantic models the server serializes, so the dashboard works with
typed bills rather than raw dicts.
"""

from typing import Any, Optional
from urllib.parse import quote

import httpx

from bills_agent.models.bill import Bill, BillWithStatus, MonthlySummary


def _quote(bill_id: str) -> str:
    return quote(bill_id, safe="")


class ApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"HTTP {status_code}: {message}")


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        if body.get("errors"):
            return "; ".join(str(e) for e in body["errors"])
        if body.get("error"):
            return str(body["error"])
    return response.text


class BillsApiClient:
    """
    Thin synchronous client over the REST endpoints.

    Pass an existing httpx.Client (or FastAPI's TestClient) to reuse a
    connection pool; otherwise one is created for `base_url`.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:4000",
        client: Optional[httpx.Client] = None,
        timeout: float = 30.0,
    ):
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        response = self._client.request(method, path, **kwargs)
        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    def health(self) -> dict:
        return self._request("GET", "/api/health")

    def list_bills(self) -> list[Bill]:
        return [Bill.model_validate(b) for b in self._request("GET", "/api/bills")]

    def list_bills_with_status(self, month: str) -> list[BillWithStatus]:
        data = self._request("GET", "/api/bills", params={"month": month})
        return [BillWithStatus.model_validate(b) for b in data]

    def get_monthly_summary(self, month: Optional[str] = None) -> MonthlySummary:
        params = {"month": month} if month else None
        return MonthlySummary.model_validate(
            self._request("GET", "/api/summary", params=params)
        )

    def create_bill(self, payload: dict) -> Bill:
        return Bill.model_validate(self._request("POST", "/api/bills", json=payload))

    def update_bill(self, bill_id: str, payload: dict) -> Bill:
        return Bill.model_validate(
            self._request("PUT", f"/api/bills/{_quote(bill_id)}", json=payload)
        )

    def delete_bill(self, bill_id: str) -> None:
        self._request("DELETE", f"/api/bills/{_quote(bill_id)}")

    def set_paid_status(self, bill_id: str, month: str, is_paid: bool) -> bool:
        data = self._request(
            "POST",
            f"/api/bills/{_quote(bill_id)}/paid",
            json={"isPaid": is_paid, "month": month},
        )
        return bool(data["isPaid"])

    def chat(self, message: str, month: Optional[str] = None) -> str:
        payload = {"message": message}
        if month:
            payload["month"] = month
        data = self._request("POST", "/api/chat", json=payload)
        reply = data.get("reply") if data else None
        if not reply:
            raise ApiError(502, "No reply received")
        return reply
