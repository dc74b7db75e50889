"""
Structured Logging Configuration Module

Provides JSON-formatted structured logging for authentication and ledger operations.
"""

import logging
import json
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional


TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Ledger attributes promoted to top-level keys of a JSON record
LEDGER_FIELDS = ("identity", "action", "account_id", "amount", "transaction_id", "reason")


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in LEDGER_FIELDS:
            log_entry[field] = getattr(record, field, None)

        # Remove None values
        log_entry = {k: v for k, v in log_entry.items() if v is not None}

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging(level: str = "INFO", logger_name: str = "axis_ledger",
                  fmt: str = "json") -> logging.Logger:
    """
    Setup structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        logger_name: Name of the logger
        fmt: "json" for structured output, "text" for plain lines

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(logger_name)

    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    if fmt.lower() == "text":
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    else:
        handler.setFormatter(JSONFormatter())

    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper()))
    logger.propagate = False

    return logger


def get_logger(name: str = "axis_ledger") -> logging.Logger:
    """Get logger instance"""
    return logging.getLogger(name)


def log_action(logger: logging.Logger, level: str, message: str,
               identity: Optional[str] = None, action: Optional[str] = None,
               account_id: Optional[int] = None, amount: Optional[Decimal] = None,
               transaction_id: Optional[str] = None, reason: Optional[str] = None):
    """
    Log a ledger or authentication event with structured fields.

    Args:
        logger: Logger instance
        level: Log level (info, warning, error, etc.)
        message: Log message
        identity: Principal performing the action, or the name offered at login
        action: Event name (login, deposit, withdraw_refused, ...)
        account_id: Account the event concerns
        amount: Money moved or refused, emitted as an exact decimal string
        transaction_id: Id returned to the caller for a mutation
        reason: Why a call was refused
    """
    levelno = getattr(logging, level.upper())
    if not logger.isEnabledFor(levelno):
        return

    record = logger.makeRecord(
        logger.name, levelno, __name__, 0, message, (), None
    )
    record.identity = identity
    record.action = action
    record.account_id = account_id
    record.amount = None if amount is None else str(amount)
    record.transaction_id = transaction_id
    record.reason = reason

    logger.handle(record)
