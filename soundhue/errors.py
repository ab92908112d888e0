"""
Custom error classes with structured logging.

Only malformed input is fatal to an analysis call; everything else is
recovered inside the task that hit it (see BaseTask.execute_timed).
"""

from typing import Optional, Dict, Any

from .utils.logger import get_logger

logger = get_logger(__name__)


class SoundhueError(Exception):
    """
    Base error class for all soundhue errors.

    Logs itself with its structured data when constructed.
    """

    def __init__(
        self,
        message: str,
        data: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        """
        Initialize error with structured context.

        Args:
            message: Human-readable error message
            data: Structured data describing the failure
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.data = data or {}
        self.cause = cause

        self._log_error()

    def _log_error(self):
        """Log error with structured data."""
        log_data = {"error_type": self.__class__.__name__, **self.data}

        if self.cause:
            log_data["cause"] = str(self.cause)

        logger.error(f"{self.message} | {log_data}", exc_info=self.cause is not None)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "data": self.data,
            "cause": str(self.cause) if self.cause else None,
        }


class InvalidSignalError(SoundhueError):
    """Signal cannot be analyzed at all (empty, non-finite, bad sample rate)."""
    pass


class AudioLoadError(SoundhueError):
    """Decoding an audio file into a Signal failed."""
    pass


class ConfigurationError(SoundhueError):
    """Configuration file is missing or invalid."""
    pass
