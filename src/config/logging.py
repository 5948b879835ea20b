"""
Structured logging configuration using structlog.

Ledger events carry quantities computed in floating point (lot sums, FIFO
withdrawals, quota deficits). They are logged rounded to the lot tolerance,
so a log line shows the figure an operator would compare against a
delivery note rather than 19.999999999999996.
"""

import logging
import math
import sys
from typing import Any

import structlog
from structlog.types import Processor

from src.config.settings import get_settings

# Event keys holding kilograms, litres, dozens or units
QUANTITY_KEYS = frozenset(
    {
        "qty",
        "allocated",
        "delivered",
        "lot_remaining",
        "delivery_remaining",
        "requested",
        "available",
        "contracted",
        "received",
        "remaining",
        "total_value",
    }
)


def _decimals(tolerance: float) -> int:
    if tolerance <= 0:
        return 6
    return max(0, math.ceil(-math.log10(tolerance) - 1e-9))


def round_quantities(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Round float quantities to the precision of LEDGER_LOT_TOLERANCE."""
    digits = _decimals(get_settings().ledger.lot_tolerance)
    for key in QUANTITY_KEYS.intersection(event_dict):
        value = event_dict[key]
        if isinstance(value, float):
            event_dict[key] = round(value, digits)
    return event_dict


def add_ledger_context(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Stamp the service, environment and the item-name matching policy."""
    settings = get_settings()
    event_dict["app"] = settings.app_name
    event_dict["environment"] = settings.environment
    event_dict["matching"] = "substring" if settings.ledger.substring_matching else "exact"
    return event_dict


def configure_logging() -> None:
    """Console output while developing, JSON lines everywhere else."""
    settings = get_settings()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        round_quantities,
        add_ledger_context,
    ]

    if settings.environment == "development":
        processors = shared_processors + [structlog.dev.ConsoleRenderer(colors=True)]
    else:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
    )

    # aiosqlite logs every statement at DEBUG
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
