"""Base exception class for mutepuck.

All custom exceptions inherit from MutePuckError to allow catching
all daemon-specific errors in one place. The base class provides:

- `user_message`: Human-friendly message for display to users
- `technical_message`: Detailed message for logging
- `recoverable`: Whether the error can be recovered from
- `recovery_hint`: Optional suggestion for how to fix the issue
"""

from typing import Optional


class MutePuckError(Exception):
    """
    Base exception for all mutepuck errors.

    Attributes:
        user_message: Human-friendly message for display
        technical_message: Detailed message for logs
        recoverable: Whether the error can be recovered from
        recovery_hint: Optional hint for how to fix the issue
    """

    def __init__(
        self,
        user_message: str,
        technical_message: Optional[str] = None,
        recoverable: bool = False,
        recovery_hint: Optional[str] = None,
    ):
        """
        Initialize a mutepuck error.

        Args:
            user_message: Message to show to users
            technical_message: Detailed message for logs (defaults to user_message)
            recoverable: True if operation can be retried/recovered
            recovery_hint: Suggestion for how to fix the issue
        """
        super().__init__(user_message)
        self.user_message = user_message
        self.technical_message = technical_message or user_message
        self.recoverable = recoverable
        self.recovery_hint = recovery_hint

    def __str__(self) -> str:
        """Return user-friendly message."""
        return self.user_message

    def get_full_message(self) -> str:
        """Get complete error message with recovery hint."""
        msg = self.user_message
        if self.recovery_hint:
            msg += f"\n\nSuggestion: {self.recovery_hint}"
        return msg


class WorkerFailedError(MutePuckError):
    """A background worker thread died with an unexpected exception."""

    def __init__(self, worker_name: str, original_error: BaseException):
        """
        Initialize worker failure error.

        Args:
            worker_name: Name of the thread that failed
            original_error: The exception that ended the worker
        """
        if isinstance(original_error, MutePuckError):
            user_msg = original_error.user_message
            hint = original_error.recovery_hint
        else:
            user_msg = f"Worker '{worker_name}' stopped unexpectedly."
            hint = "Run with -vv to see the full traceback in the log."

        super().__init__(
            user_message=user_msg,
            technical_message=f"Worker {worker_name} failed: {original_error!r}",
            recoverable=False,
            recovery_hint=hint,
        )
        self.worker_name = worker_name
        self.original_error = original_error
