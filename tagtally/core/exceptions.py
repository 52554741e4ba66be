"""Error taxonomy for the analysis pipeline."""

from typing import Optional

from tagtally.utils.constants import (
    UNAUTHORIZED_ACCESS_MESSAGE,
    INCORRECT_FORMATTING_MESSAGE,
    FAULTY_CONTENT_MESSAGE,
    FAILURE_MESSAGE,
)


class AnalysisError(Exception):
    """Base class for every error raised while analysing a request."""

    status_code: int = 500
    message: str = FAILURE_MESSAGE

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.message
        super().__init__(self.detail)


class ClientError(AnalysisError):
    """Errors detected before dispatch. The user sees the fixed message."""

    status_code = 400


class AuthError(ClientError):
    message = UNAUTHORIZED_ACCESS_MESSAGE


class FormatError(ClientError):
    message = INCORRECT_FORMATTING_MESSAGE


class ContentError(ClientError):
    message = FAULTY_CONTENT_MESSAGE


class WorkerError(AnalysisError):
    """A remote worker call failed: transport, status, decoding or contract."""

    def __init__(self, detail: Optional[str] = None, batch_index: Optional[int] = None):
        self.batch_index = batch_index
        super().__init__(detail)
