"""Graceful error handling for grading runs with user-friendly messages."""
from __future__ import annotations

import sys
import structlog
from pathlib import Path

logger = structlog.get_logger(__name__)


class GradingError(Exception):
    """Base class for fatal grading errors with user-friendly messaging."""
    
    def __init__(self, error_type: str, message: str, details: str = "", hint: str = ""):
        self.error_type = error_type
        self.message = message
        self.details = details
        self.hint = hint
        super().__init__(self.message)
    
    def get_user_message(self) -> str:
        """Return a user-friendly error message."""
        msg = f"\n❌ {self.message}"
        if self.details:
            msg += f"\n   Details: {self.details}"
        if self.hint:
            msg += f"\n   💡 Tip: {self.hint}"
        return msg


class SubmissionNotFoundError(GradingError):
    """The submission file does not exist."""
    
    def __init__(self, path: str | Path):
        self.path = Path(path)
        super().__init__(
            error_type="SUBMISSION_NOT_FOUND",
            message=f"FATAL: {self.path.name} not found!",
            details=f"Looked for {self.path}",
            hint="Did you name your file correctly?",
        )


class SubmissionReadError(GradingError):
    """The submission exists but could not be read as UTF-8 text."""
    
    def __init__(self, path: str | Path, reason: str = ""):
        self.path = Path(path)
        super().__init__(
            error_type="SUBMISSION_UNREADABLE",
            message=f"FATAL: could not read {self.path.name}",
            details=reason[:200],
            hint="Save the file as UTF-8 text.",
        )


class UnexpectedGradingError(GradingError):
    """Anything else that went wrong inside the grader itself."""
    
    def __init__(self, error: Exception):
        super().__init__(
            error_type=type(error).__name__,
            message="The grader hit an unexpected error",
            details=str(error)[:200],
        )


def exit_with_error(error: GradingError, context: str = "") -> int:
    """Log error and return a non-zero exit code with a readable message."""
    logger.error(
        "grading_failed",
        error_type=error.error_type,
        message=error.message,
        details=error.details,
        context=context,
    )
    
    print(error.get_user_message(), file=sys.stderr)
    print("", file=sys.stderr)
    return 1
