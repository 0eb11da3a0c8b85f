"""structlog setup and the per-request ID carried in the logging context."""

import logging
import logging.config

import structlog
from structlog.contextvars import bind_contextvars, get_contextvars, unbind_contextvars

NO_REQUEST_ID = "no-request-id"


def get_request_id() -> str:
    """Request ID bound in the current context, if any."""
    return get_contextvars().get("request_id", NO_REQUEST_ID)


def set_request_id(request_id: str) -> None:
    """Bind the request ID so merge_contextvars adds it to every log line."""
    bind_contextvars(request_id=request_id)


def clear_request_id() -> None:
    unbind_contextvars("request_id")


def configure_logging() -> None:
    """JSON logs on stdout; stdlib loggers (uvicorn, sqlalchemy) share the handler."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "plain": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "processor": structlog.dev.ConsoleRenderer(colors=False),
                },
            },
            "handlers": {
                "stdout": {
                    "level": "INFO",
                    "class": "logging.StreamHandler",
                    "formatter": "plain",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {"handlers": ["stdout"], "level": "INFO"},
        }
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Module logger. Request context is merged per call, never bound at creation."""
    return structlog.get_logger(name)
