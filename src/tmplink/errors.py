"""Exceptions raised while turning clipboard content into a share link."""

from typing import Optional


class UploadError(Exception):
    """Base class for every failure a pipeline run can end with."""

    kind = "upload_error"

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class EmptyClipboard(UploadError):
    kind = "empty_clipboard"

    def __init__(self, message: str = "Clipboard is empty or does not contain text/files."):
        super().__init__(message)


class UnsupportedContent(UploadError):
    kind = "unsupported_content"

    def __init__(self, message: str = "Directory upload not supported. Please zip it first."):
        super().__init__(message)


class SizeLimitExceeded(UploadError):
    kind = "size_limit_exceeded"

    def __init__(self, size: int, limit: int, message: str = "File exceeds 100MB limit."):
        super().__init__(message)
        self.size = size
        self.limit = limit


class TransportError(UploadError):
    """Network failure or a non-2xx answer from the upload endpoint."""

    kind = "transport_error"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        detail: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message, original_error)
        self.status_code = status_code
        self.detail = detail

    @classmethod
    def from_status(cls, status_code: int, body: Optional[str]) -> "TransportError":
        detail = (body or "").strip() or None
        return cls(
            f"Upload failed ({status_code}): {detail or 'Unknown error'}",
            status_code=status_code,
            detail=detail,
        )


class MalformedResponse(UploadError):
    kind = "malformed_response"


class UploadCancelled(UploadError):
    """Raised internally when the cancellation token fires; never shown to users."""

    kind = "cancelled"

    def __init__(self, message: str = "Upload cancelled."):
        super().__init__(message)


class ClipboardUnavailable(UploadError):
    kind = "clipboard_unavailable"
