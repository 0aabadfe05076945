from tmplink.models.snapshot import ClipboardSnapshot
from tmplink.models.upload import (
    Cancelled,
    Failure,
    SanitizedUpload,
    Success,
    UploadOutcome,
    UploadResponse,
    UploadStatus,
)

__all__ = [
    'Cancelled',
    'ClipboardSnapshot',
    'Failure',
    'SanitizedUpload',
    'Success',
    'UploadOutcome',
    'UploadResponse',
    'UploadStatus',
]
