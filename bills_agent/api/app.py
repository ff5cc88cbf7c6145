"""FastAPI application for Bills Agent.

Thin HTTP layer over the orchestrator flows. Handlers never touch the
store directly; domain exceptions are mapped to status codes here:

- ValidationFailedError, InvalidMonthKeyError -> 400 {"errors": [...]}
- NotFoundError         -> 404 {"error": "Bill not found"}
- AssistantUnavailable  -> 503 {"error": "<provider message>"}
- StorageError          -> 500 {"error": "..."}
"""

from typing import Any, Optional

import structlog
from fastapi import Body, FastAPI, Query, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from bills_agent import __version__
from bills_agent.agents import AssistantUnavailableError, BillsAssistant
from bills_agent.audit import AuditLogger, configure_logging
from bills_agent.config import AppSettings, get_settings
from bills_agent.models.month import InvalidMonthKeyError
from bills_agent.orchestrator import (
    BillManagementFlow,
    ChatFlow,
    ValidationFailedError,
    create_app_components,
)
from bills_agent.services.storage import NotFoundError, StorageError


logger = structlog.get_logger(__name__)


def _dump(value: Any) -> Any:
    """Serialize models (or lists of them) with camelCase keys."""
    return jsonable_encoder(value, by_alias=True)


def _install_error_handlers(app: FastAPI, audit_logger: AuditLogger) -> None:

    @app.exception_handler(ValidationFailedError)
    async def validation_failed(request: Request, exc: ValidationFailedError):
        return JSONResponse(status_code=400, content={"errors": exc.messages})

    @app.exception_handler(InvalidMonthKeyError)
    async def invalid_month(request: Request, exc: InvalidMonthKeyError):
        return JSONResponse(status_code=400, content={"errors": [str(exc)]})

    @app.exception_handler(RequestValidationError)
    async def request_invalid(request: Request, exc: RequestValidationError):
        messages = [
            f"'{'.'.join(str(p) for p in err.get('loc', ())[1:]) or 'body'}' "
            f"{err.get('msg', 'is invalid')}"
            for err in exc.errors()
        ]
        return JSONResponse(status_code=400, content={"errors": messages})

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(AssistantUnavailableError)
    async def assistant_unavailable(request: Request, exc: AssistantUnavailableError):
        return JSONResponse(status_code=503, content={"error": str(exc)})

    @app.exception_handler(StorageError)
    async def storage_failed(request: Request, exc: StorageError):
        audit_logger.log_error(
            error_type="storage",
            error_message=str(exc),
            details={"path": request.url.path},
        )
        return JSONResponse(status_code=500, content={"error": str(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        message = "Not found" if exc.status_code == 404 else str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": message},
            headers=getattr(exc, "headers", None),
        )


def create_app(
    bill_flow: Optional[BillManagementFlow] = None,
    chat_flow: Optional[ChatFlow] = None,
    app_settings: Optional[AppSettings] = None,
    assistant: Optional[BillsAssistant] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        bill_flow: Bill management flow (built from settings if None)
        chat_flow: Chat flow (built from settings if None)
        app_settings: App settings (loaded from environment if None)
        assistant: Assistant used when chat_flow is built here

    Returns:
        FastAPI application instance
    """
    app_settings = app_settings or get_settings().app
    configure_logging(app_settings.log_level)

    if bill_flow is None or chat_flow is None:
        default_bill_flow, default_chat_flow, _ = create_app_components(
            assistant=assistant,
        )
        bill_flow = bill_flow or default_bill_flow
        chat_flow = chat_flow or default_chat_flow

    app = FastAPI(
        title="Bills Agent API",
        description="Household bills, monthly paid status, and a bills assistant",
        version=__version__,
        debug=app_settings.debug_mode,
    )

    origins = app_settings.cors_origins_list or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
        # Credentials cannot be combined with wildcard origins
        allow_credentials="*" not in origins,
    )

    app.state.bill_flow = bill_flow
    app.state.chat_flow = chat_flow
    _install_error_handlers(app, AuditLogger())

    # ==================== API Endpoints ====================

    @app.get("/api/health")
    async def health():
        return {"status": "ok", "chat": chat_flow.is_available}

    @app.get("/api/bills")
    async def list_bills(month: Optional[str] = Query(default=None)):
        return _dump(await bill_flow.list_bills(month))

    @app.get("/api/bills/{bill_id}")
    async def get_bill(bill_id: str):
        return _dump(await bill_flow.get_bill(bill_id))

    @app.post("/api/bills", status_code=201)
    async def create_bill(payload: Optional[dict[str, Any]] = Body(default=None)):
        bill = await bill_flow.create_bill(payload or {})
        return _dump(bill)

    @app.put("/api/bills/{bill_id}")
    async def update_bill(
        bill_id: str,
        payload: Optional[dict[str, Any]] = Body(default=None),
    ):
        bill = await bill_flow.update_bill(bill_id, payload or {})
        return _dump(bill)

    @app.delete("/api/bills/{bill_id}", status_code=204)
    async def delete_bill(bill_id: str):
        await bill_flow.delete_bill(bill_id)
        return Response(status_code=204)

    @app.post("/api/bills/{bill_id}/paid")
    async def set_paid_status(
        bill_id: str,
        payload: Optional[dict[str, Any]] = Body(default=None),
    ):
        month, is_paid = await bill_flow.set_paid_status(bill_id, payload or {})
        return {"id": bill_id, "month": month, "isPaid": is_paid}

    @app.get("/api/summary")
    async def monthly_summary(month: Optional[str] = Query(default=None)):
        return _dump(await bill_flow.monthly_summary(month))

    @app.post("/api/chat")
    async def chat(payload: Optional[dict[str, Any]] = Body(default=None)):
        reply = await chat_flow.answer(payload or {})
        return {"reply": reply}

    logger.info(
        "api_initialized",
        environment=app_settings.app_environment,
        chat_available=chat_flow.is_available,
    )
    return app
