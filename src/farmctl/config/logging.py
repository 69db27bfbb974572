"""Log routing for farmctl.

Everything goes to stderr so stdout carries only command results. The
``farmctl`` logger tree follows ``-v``; library loggers listed in
``_PINNED_LOGGERS`` stay at their pinned level regardless.
"""

from __future__ import annotations

import logging
import sys

import structlog

_PINNED_LOGGERS: dict[str, int] = {
    "sqlalchemy": logging.WARNING,
}


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route structlog events and stdlib records through one stderr handler.

    Rebalance events (``rebalance.complete``) are emitted at debug level,
    so they only appear with *verbose*. Safe to call more than once; each
    call replaces the previous root handler.
    """
    shared = _shared_processors()
    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("farmctl").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name, level in _PINNED_LOGGERS.items():
        logging.getLogger(name).setLevel(level)
