from __future__ import annotations

import copy
import logging.config
from typing import Any

import structlog

from nguoncarr.infrastructure.config.schema import AppConfig

log = structlog.get_logger(__name__)

BASE_LOGGING_CONFIG: dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {},
    "handlers": {
        "default": {
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
        },
    },
    "loggers": {
        "httpx": {"level": "WARNING"},
        "httpcore": {"level": "WARNING"},
    },
}


def _app_stamp(app_name: str) -> structlog.typing.Processor:
    def stamp(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("app", app_name)
        return event_dict

    return stamp


def _shared_processors(config: AppConfig) -> list[structlog.typing.Processor]:
    """Processors applied to structlog events and foreign stdlib records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        _app_stamp(config.app_name),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
    ]


def _renderer(config: AppConfig) -> structlog.typing.Processor:
    if config.log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def build_logging_config(config: AppConfig) -> dict[str, Any]:
    """
    Stdlib dictConfig with one stderr handler rendered by structlog.

    stdout stays free for command output.
    """
    cfg = copy.deepcopy(BASE_LOGGING_CONFIG)
    cfg["formatters"]["structlog"] = {
        "()": structlog.stdlib.ProcessorFormatter,
        "foreign_pre_chain": _shared_processors(config),
        "processors": [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(config),
        ],
    }
    cfg["handlers"]["default"]["formatter"] = "structlog"
    cfg["root"] = {"handlers": ["default"], "level": config.log_level}
    return cfg


def configure_logging(config: AppConfig) -> dict[str, Any]:
    """
    Route structlog through stdlib logging and apply the dictConfig.

    Returns the applied dictConfig.
    """
    structlog.configure(
        processors=[
            *_shared_processors(config),
            structlog.processors.format_exc_info,
            # hands the event dict over to ProcessorFormatter; keep last
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    cfg = build_logging_config(config)
    logging.config.dictConfig(cfg)
    log.info(
        "logging_configured",
        log_format=config.log_format,
        log_level=config.log_level,
        debug_log=config.debug_log,
    )
    return cfg
