"""structlog configuration for boxplan.

Everything goes to stderr, leaving stdout to command results. ``-v`` opens
the ``boxplan`` loggers to DEBUG; the per-change relation lines from
``boxplan.engine.propagation`` and the SQL echo from ``sqlalchemy.engine``
each have their own ``[logging]`` switch on top of that.
"""

from __future__ import annotations

import logging
import sys

import structlog

PROPAGATION_LOGGER = "boxplan.engine.propagation"
SQL_LOGGER = "sqlalchemy.engine"


def logger_levels(
    *,
    verbose: bool = False,
    trace_relations: bool = False,
    sql_echo: bool = False,
) -> dict[str, int]:
    """Level for each logger boxplan tunes, keyed by logger name."""
    box_level = logging.DEBUG if verbose else logging.WARNING
    return {
        "boxplan": box_level,
        PROPAGATION_LOGGER: logging.DEBUG if trace_relations else max(box_level, logging.INFO),
        "sqlalchemy": logging.WARNING,
        SQL_LOGGER: logging.INFO if sql_echo else logging.WARNING,
    }


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    trace_relations: bool = False,
    sql_echo: bool = False,
) -> None:
    """Route stdlib and structlog records through one stderr handler.

    Args:
        verbose: DEBUG for ``boxplan.*`` (relation tracing excepted).
        log_json: One JSON object per line, tracebacks as nested dicts.
        trace_relations: DEBUG for every containment count change.
        sql_echo: INFO for statements issued against the snapshot database.
    """
    stamped: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_json:
        rendering: list[structlog.types.Processor] = [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        rendering = [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]

    structlog.configure(
        processors=[*stamped, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=stamped,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *rendering],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    for name, level in logger_levels(
        verbose=verbose, trace_relations=trace_relations, sql_echo=sql_echo
    ).items():
        logging.getLogger(name).setLevel(level)
