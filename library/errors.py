"""
Error taxonomy for the generation pipeline.

Every failure carries a machine-readable `kind` so callers can branch on it
instead of parsing the message text.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    MISSING_OPERATION = "missing-operation"
    OPERATION_ERROR = "operation-error"
    MISSING_PART = "missing-part"
    DOWNLOAD_ERROR = "download-error"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    INVALID_MESH = "invalid-mesh"


class GenerationError(Exception):
    """Base exception for every pipeline failure."""

    kind: ErrorKind = ErrorKind.OPERATION_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InputValidationError(GenerationError):
    """Rejected user input, raised before any network call."""

    kind = ErrorKind.VALIDATION

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


class MissingOperationError(GenerationError):
    """The remote call did not return a job handle."""

    kind = ErrorKind.MISSING_OPERATION

    def __init__(self, message: str = "Expected the model to return an operation."):
        super().__init__(message)


class OperationError(GenerationError):
    """The remote job finished with an error payload."""

    kind = ErrorKind.OPERATION_ERROR

    def __init__(self, message: str, operation_name: Optional[str] = None):
        self.operation_name = operation_name
        super().__init__(message)


class MissingPartError(GenerationError):
    """The job succeeded but a wanted media kind is absent from its output."""

    kind = ErrorKind.MISSING_PART

    def __init__(self, media_kind: str):
        self.media_kind = media_kind
        super().__init__(f"Failed to find the generated {media_kind} in the operation result.")


class DownloadError(GenerationError):
    """Fetching a remote media URL failed."""

    kind = ErrorKind.DOWNLOAD_ERROR

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class OperationTimeoutError(GenerationError):
    """The remote job did not finish within the allowed attempts or time."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, operation_name: str, attempts: int, elapsed: float):
        self.operation_name = operation_name
        self.attempts = attempts
        self.elapsed = elapsed
        super().__init__(
            f"Operation {operation_name} did not complete after {attempts} checks ({elapsed:.0f}s)."
        )


class GenerationCancelledError(GenerationError):
    """The request was cancelled while waiting on the remote job."""

    kind = ErrorKind.CANCELLED

    def __init__(self, message: str = "The request was cancelled."):
        super().__init__(message)


class InvalidMeshError(GenerationError):
    """The returned mesh payload is not a well-formed OBJ/glTF document."""

    kind = ErrorKind.INVALID_MESH
