"""structlog configuration for tasktrack.

Two output modes, both on stderr so stdout stays clean for results:
- Human (default): colored console output
- JSON (--log-json): structured JSON lines

Two log sources share one handler:
- Registries (``tasktrack.services.users`` and friends) log successful
  mutations through stdlib ``logging`` at DEBUG.
- ``tasktrack.services.access`` logs rejected operations through
  structlog at INFO, with ``op``, ``code`` and ``status`` fields.

``-v`` opens both; without it only warnings get through.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog

ACCESS_LOGGER = "tasktrack.services.access"

# Event keys that never reach a log line verbatim.
SECRET_KEYS = frozenset({"password", "password_hash"})

_HANDLER_NAME = "tasktrack"


def redact_secrets(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor masking credential fields."""
    for key in SECRET_KEYS.intersection(event_dict):
        event_dict[key] = "***"
    return event_dict


def logger_levels(verbose: bool) -> dict[str, int]:
    """Per-logger thresholds for a run with or without ``-v``."""
    return {
        "tasktrack": logging.DEBUG if verbose else logging.WARNING,
        ACCESS_LOGGER: logging.INFO if verbose else logging.WARNING,
        "sqlalchemy": logging.WARNING,
    }


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Configure structlog processors and output routing.

    Safe to call more than once per process (every CLI invocation in a
    test run does): the handler installed by a previous call is replaced,
    handlers installed by anything else are left alone.

    Args:
        verbose: Open registry (DEBUG) and access (INFO) logging.
        log_json: Use JSON renderer instead of console renderer.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
        final: list[structlog.types.Processor] = [structlog.processors.dict_tracebacks, renderer]
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
        final = [renderer]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *final],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    for existing in [h for h in root_logger.handlers if h.get_name() == _HANDLER_NAME]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    for name, level in logger_levels(verbose).items():
        logging.getLogger(name).setLevel(level)
