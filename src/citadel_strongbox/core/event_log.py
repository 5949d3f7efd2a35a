# Strongbox - Vault Event Logging
#
# Structured diagnostics for vault operations (vault initialized, record
# written, account renamed, decryption rejected, ...).
# Events carry paths, account names and outcomes only. Never pass
# usernames' passwords, plaintext, ciphertext or key material in details.

import logging
import sys
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional
from uuid import uuid4

import structlog


class EventType(str, Enum):
    """Types of vault events that can be logged."""
    VAULT_INITIALIZED = "vault.initialized"
    VAULT_MISSING = "vault.missing"
    VAULT_ENUMERATED = "vault.enumerated"

    ACCOUNT_CREATED = "account.created"
    ACCOUNT_RENAMED = "account.renamed"

    RECORD_WRITTEN = "record.written"
    RECORD_READ = "record.read"
    RECORD_REJECTED = "record.rejected"

    USERNAME_CHANGED = "record.username.changed"
    PASSWORD_CHANGED = "record.password.changed"

    CRYPTO_FAILURE = "crypto.failure"


class EventSeverity(str, Enum):
    """Severity levels for vault events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    def to_level(self) -> int:
        """Map severity to a stdlib logging level."""
        level_map = {
            EventSeverity.DEBUG: logging.DEBUG,
            EventSeverity.INFO: logging.INFO,
            EventSeverity.WARNING: logging.WARNING,
            EventSeverity.ERROR: logging.ERROR,
        }
        return level_map[self]


def configure_logging(level: str = "INFO", json_output: bool = False) -> None:
    """
    Configure structlog on top of stdlib logging.

    Args:
        level: Root log level name (DEBUG, INFO, ...)
        json_output: Render JSON lines instead of the console renderer
    """
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))  # structlog handles formatting
        root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))


class EventLogger:
    """
    Structured logger for vault events.

    Features:
    - Automatic event ID and UTC timestamp
    - One ``vault_event`` record per call, fields as keyword context
    - Severity mapped onto stdlib levels so normal log filtering applies
    """

    def __init__(self, name: str = "citadel_strongbox.events"):
        # Output goes through stdlib logging; entry points call configure_logging()
        self.logger = structlog.wrap_logger(
            logging.getLogger(name),
            wrapper_class=structlog.stdlib.BoundLogger,
        )

    def log_event(
        self,
        event_type: EventType,
        severity: EventSeverity,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Log a vault event.

        Args:
            event_type: Type of event (from EventType enum)
            severity: Severity level (from EventSeverity enum)
            message: Human-readable event description
            details: Additional event details (no secrets)

        Returns:
            str: Event ID (UUID) for reference
        """
        event_id = str(uuid4())

        self.logger.log(
            severity.to_level(),
            "vault_event",
            event_id=event_id,
            event_type=event_type.value,
            severity=severity.value,
            message=message,
            timestamp=datetime.now(timezone.utc).isoformat(),
            details=details or {},
        )

        return event_id


# Global logger instance
_event_logger: Optional[EventLogger] = None


def get_event_logger() -> EventLogger:
    """Get global event logger (singleton pattern)."""
    global _event_logger
    if _event_logger is None:
        _event_logger = EventLogger()
    return _event_logger


def log_vault_event(
    event_type: EventType,
    message: str,
    severity: EventSeverity = EventSeverity.INFO,
    **details: Any,
) -> str:
    """
    Convenience function for logging vault events.

    Usage:
        log_vault_event(
            EventType.ACCOUNT_RENAMED,
            "Account renamed",
            vault=str(vault_path),
            old_name="github",
            new_name="github-work",
        )
    """
    return get_event_logger().log_event(
        event_type=event_type,
        severity=severity,
        message=message,
        details=details,
    )
