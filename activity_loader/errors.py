"""
Error Codes

User-visible failure surface for the activity loader.

DISCLOSURE BOUNDARY:
====================
The page only ever shows a generic message plus a short code.
Diagnostic text goes to the developer log, never to the page.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import logging


logger = logging.getLogger("activity_loader")


USER_ERROR_MESSAGE = "Could not load activities"
USER_ERROR_CODE_LABEL = "Error code"


class ErrorCode(Enum):
    """Error codes shown to users (ERR-AL-NNN)."""
    CONFIG_NOT_SET = "ERR-AL-001"
    NETWORK_ERROR = "ERR-AL-002"
    EMPTY_DATA = "ERR-AL-003"
    CONTAINER_NOT_FOUND = "ERR-AL-004"

    @property
    def code(self) -> str:
        return self.value


@dataclass(frozen=True)
class LoaderError:
    """
    A failure to be surfaced.

    `message` is developer-facing only.
    """
    error_code: ErrorCode
    message: str

    def log(self) -> None:
        log_error(self.error_code, self.message)


class ConfigError(ValueError):
    """Raised when a configuration file cannot be read or is malformed."""


def log_error(error_code: ErrorCode, message: str) -> None:
    """Write diagnostic text to the developer log channel."""
    logger.error("[%s] %s", error_code.code, message)
