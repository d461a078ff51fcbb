"""structlog setup for the tracker, its pipeline and the CLI.

Library modules only call :func:`get_logger`; the CLI (or a host application)
calls :func:`configure_logging` once. Until then structlog's defaults apply.
"""
import logging
import sys
from typing import TextIO

import structlog

LOG_FORMATS = ("console", "json")

# ultralytics logs every prediction at INFO
_NOISY_LOGGERS = ("ultralytics",)

_HANDLER_NAME = "iou_tracker"


def configure_logging(
    log_format: str = "console",
    log_level: str = "WARNING",
    stream: TextIO | None = None,
) -> None:
    """Route structlog and stdlib logging through one handler.

    Per-frame tracker events are emitted at DEBUG, pipeline throughput at INFO.
    Output goes to stderr by default so stdout stays free for piped data.

    Args:
        log_format: "console" for human-readable output, "json" for one JSON object per line.
        log_level: Standard Python log level string (DEBUG, INFO, WARNING, ERROR).
        stream: Destination stream (default: sys.stderr).

    Raises:
        ValueError: If ``log_format`` is not one of LOG_FORMATS.
    """
    if log_format not in LOG_FORMATS:
        raise ValueError(f"log_format must be one of {LOG_FORMATS}, got {log_format!r}")

    level = getattr(logging, log_level.upper(), logging.WARNING)
    stream = stream if stream is not None else sys.stderr

    shared_processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream.isatty())

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    # Replace only our own handler; leave the host's handlers alone
    root_logger = logging.getLogger()
    root_logger.handlers = [
        h for h in root_logger.handlers if h.get_name() != _HANDLER_NAME
    ] + [handler]
    root_logger.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level if level <= logging.DEBUG else max(level, logging.WARNING))


def get_logger(name: str) -> structlog.typing.FilteringBoundLogger:
    return structlog.get_logger(name)
