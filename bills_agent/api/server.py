"""Run the Bills Agent API under uvicorn."""

import uvicorn

from bills_agent.audit import configure_logging
from bills_agent.config import get_settings


def main() -> None:
    settings = get_settings().app
    configure_logging(settings.log_level)
    uvicorn.run(
        "bills_agent.api.app:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
        reload=settings.debug_mode,
    )


if __name__ == "__main__":
    main()
