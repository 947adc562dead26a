"""Custom exceptions for the rendering context."""

from typing import Optional


class ExternalServiceError(Exception):
    """
    Exception raised when the remote compile service fails.

    Covers timeouts, transport failures, non-success status codes and
    responses that are not PDFs. The pipeline recovers by rendering locally.

    Attributes:
        message: Error description
        status_code: HTTP status of the response (None for timeouts and transport errors)
        original_error: The underlying httpx error, if any
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.original_error = original_error

        parts = [message]
        if status_code is not None:
            parts.append(f"HTTP status: {status_code}")
        if original_error:
            parts.append(f"Original error: {type(original_error).__name__}: {original_error}")

        super().__init__("\n".join(parts))


class UnrecoverableRenderError(Exception):
    """
    Exception raised when local rendering fails unexpectedly.

    Wraps the cause so the pipeline can log it and switch to the fallback page.

    Attributes:
        message: Error description
        stage: Pipeline stage that failed (e.g., 'local')
        original_error: The exception raised inside the stage
    """

    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.stage = stage
        self.original_error = original_error

        parts = [message]
        if stage:
            parts.append(f"Stage: {stage}")
        if original_error:
            parts.append(f"Original error: {type(original_error).__name__}: {original_error}")

        super().__init__("\n".join(parts))
