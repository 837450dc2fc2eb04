"""
Shared logging configuration for the Pulse news cache.

Every component logs through ``get_logger("news.<component>")`` with
key/value events. The host process calls ``configure_logging`` once at
startup to render them as JSON lines on stdout.
"""

import sys
import structlog
import logging
import uuid
from typing import Any, Dict, List, Optional
from contextvars import ContextVar

# Context variables for correlation IDs
request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
service_name_var: ContextVar[Optional[str]] = ContextVar('service_name', default=None)


def build_processors() -> List[Any]:
    """Processor chain shared by every news cache logger, without the renderer."""
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        add_service_context,
        add_correlation_context,
    ]


def configure_logging(service_name: str, log_level: str = "info") -> None:
    """Configure structured JSON logging for the process."""
    service_name_var.set(service_name)

    structlog.configure(
        processors=build_processors() + [structlog.processors.JSONRenderer()],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )


def add_service_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Tag events with the configured service, else the logger name prefix."""
    service_name = service_name_var.get()
    if not service_name:
        logger_name = event_dict.get("logger", "")
        service_name = logger_name.split(".")[0] if "." in logger_name else None

    if service_name:
        event_dict["service"] = service_name
    return event_dict


def add_correlation_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add the current request id, if any."""
    request_id = request_id_var.get()
    if request_id:
        event_dict["request_id"] = request_id

    return event_dict


def set_request_id(request_id: Optional[str] = None) -> str:
    """Set request ID in context."""
    if request_id is None:
        request_id = str(uuid.uuid4())
    request_id_var.set(request_id)
    return request_id


def clear_context():
    request_id_var.set(None)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
