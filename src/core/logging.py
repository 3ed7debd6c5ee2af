import json
import logging
import sys
from typing import Any

import structlog
from pythonjsonlogger import json as logging_json

from src.config import get_settings


def add_service_info(_, __, event_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Add service and environment information to the log event dictionary.

    Args:
        _ (Any): Unused.
        __ (Any): Unused.
        event_dict (dict[str, Any]): The log event dictionary.

    Returns:
        dict[str, Any]: The modified log event dictionary with service and environment info.
    """
    service = get_settings().service
    event_dict.setdefault("service", service.service_name)
    event_dict.setdefault("env", service.env)
    return event_dict


def add_log_level(
    _, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """
    Add the log level to the log event dictionary.

    Args:
        _ (Any): Unused.
        method_name (str): The name of the logging method (e.g., "info", "debug").
        event_dict (dict[str, Any]): The log event dictionary.

    Returns:
        dict[str, Any]: The modified log event dictionary with the log level.
    """
    event_dict["level"] = method_name.upper()
    return event_dict


def add_timestamp(_, __, event_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Adds an ISO-formatted timestamp to the log event dictionary.

    Args:
        _ (Any): Unused.
        __ (Any): Unused.
        event_dict (dict[str, Any]): The log event dictionary.

    Returns:
        dict[str, Any]: The modified log event dictionary with the timestamp.
    """
    event_dict["timestamp"] = structlog.processors.TimeStamper(fmt="iso")(
        None, "", {}
    )["timestamp"]
    return event_dict


def add_logger_name(
    logger: logging.Logger, _, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """
    Add the logger's name to the log event dictionary.

    Args:
        logger (logging.Logger): The logger instance.
        _ (Any): Unused.
        event_dict (dict[str, Any]): The log event dictionary.

    Returns:
        dict[str, Any]: The modified log event dictionary with the logger's name.
    """
    if logger:
        event_dict["logger"] = logger.name
    return event_dict


def add_callsite(_, __, event_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Add callsite information (module, function, line number) to the log event dictionary.

    Args:
        _ (Any): Unused.
        __ (Any): Unused.
        event_dict (dict[str, Any]): The log event dictionary.

    Returns:
        dict[str, Any]: The modified log event dictionary with callsite information.
    """
    record = event_dict.pop("_record", None)
    if record:
        event_dict["module"] = record.module
        event_dict["func"] = record.funcName
        event_dict["line"] = record.lineno
    return event_dict


class StructlogFormatter(logging.Formatter):
    """Render stdlib log records through the structlog processor chain."""

    def __init__(self, processors: list, renderer) -> None:
        super().__init__()
        self.processors = processors
        self.renderer = renderer

    def format(self, record: logging.LogRecord) -> str:
        event_dict = {
            "event": record.getMessage(),
            "_record": record,
        }
        if record.exc_info:
            event_dict["exc_info"] = record.exc_info
        for proc in self.processors:
            event_dict = proc(
                logging.getLogger(record.name),
                record.levelname.lower(),
                event_dict,
            )
        return self.renderer(None, record.levelname.lower(), event_dict)


def configure_logging() -> None:
    """
    Configures logging for the command-line tools using structlog.

    This function sets up a shared set of processors for structlog,
    configures a console renderer (JSON for production, pretty for dev),
    and attaches a StreamHandler with a structlog formatter to the root logger,
    so plain ``logging.getLogger(__name__)`` loggers render the same way.
    """
    settings = get_settings()
    log_level = settings.logger_settings.log_level.upper()
    is_dev = (
        settings.service.env == "dev"
        and not settings.logger_settings.log_json
    )

    if is_dev:
        console_renderer = structlog.dev.ConsoleRenderer(
            colors=True, sort_keys=False
        )
    else:
        console_renderer = structlog.processors.JSONRenderer(
            serializer=lambda obj, **kwargs: json.dumps(
                obj, cls=logging_json.JsonEncoder, ensure_ascii=False
            )
        )

    shared_processors = [
        add_service_info,
        add_log_level,
        add_timestamp,
        add_logger_name,
        add_callsite,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            *shared_processors,
            console_renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level, logging.INFO)
        ),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(getattr(logging, log_level, logging.INFO))
    handler.setFormatter(
        StructlogFormatter(
            [structlog.contextvars.merge_contextvars, *shared_processors],
            console_renderer,
        )
    )

    root = logging.getLogger()
    root.setLevel(getattr(logging, log_level, logging.INFO))
    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        root.addHandler(handler)


def bind_run_context(run_id: str | None = None, seed: int | None = None) -> None:
    """
    Bind harness run context variables for structured logging.

    Args:
        run_id (str | None): The ID of the current harness run. Defaults to None.
        seed (int | None): The root seed of the run. Defaults to None.
    """
    structlog.contextvars.clear_contextvars()
    if run_id:
        structlog.contextvars.bind_contextvars(run_id=run_id)
    if seed is not None:
        structlog.contextvars.bind_contextvars(seed=seed)
