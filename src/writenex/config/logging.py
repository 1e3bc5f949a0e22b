"""Log routing for the CLI and the file watcher.

Everything goes to stderr so stdout stays clean for ``--json`` results.
Service and infrastructure modules log through ``logging.getLogger(__name__)``;
the watcher and telemetry spans use ``structlog.get_logger``. Both reach the
same handler and renderer (console, or JSON lines with ``--log-json``).

Only the ``writenex`` logger follows ``--verbose``. Third-party loggers stay at
WARNING: watchdog's observer thread logs every inotify buffer flush at DEBUG.
"""

from __future__ import annotations

import logging
import sys

import structlog

# Name of the handler installed on the root logger, replaced on reconfigure.
HANDLER_NAME = "writenex"

_LIBRARY_LOGGERS = ("watchdog",)


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _build_handler(log_json: bool) -> logging.Handler:
    if log_json:
        # Tracebacks from watcher callbacks must stay inside one JSON line.
        final: list[structlog.types.Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        final = [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_shared_processors(),
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *final],
        )
    )
    return handler


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Point structlog and stdlib logging at a single stderr handler.

    Safe to call more than once: the previous writenex handler is swapped
    out, handlers installed by anyone else are left alone.

    Args:
        verbose: DEBUG for ``writenex.*`` loggers; otherwise WARNING.
        log_json: Render JSON lines instead of the console format.
    """
    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(_build_handler(log_json))
    root.setLevel(logging.WARNING)

    logging.getLogger("writenex").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
