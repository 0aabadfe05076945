from dataclasses import dataclass
from typing import Optional, Union

from pydantic import BaseModel


@dataclass(frozen=True)
class SanitizedUpload:
    """Validated payload ready for the upload endpoint."""
    name: str
    content: bytes
    content_type: Optional[str] = None
    source: str = "file"

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class UploadStatus:
    stage: str
    text: str
    file_name: Optional[str] = None
    file_size: Optional[str] = None


@dataclass(frozen=True)
class Success:
    link: str
    qr_payload: Optional[str] = None
    file_name: Optional[str] = None
    file_size: Optional[str] = None
    elapsed: int = 0
    copied: bool = False


@dataclass(frozen=True)
class Failure:
    message: str
    kind: str = "upload_error"
    elapsed: int = 0


@dataclass(frozen=True)
class Cancelled:
    elapsed: int = 0


UploadOutcome = Union[Success, Failure, Cancelled]


class UploadResponse(BaseModel):
    downloadLink: str
    downloadLinkEncoded: Optional[str] = None

    @property
    def link(self) -> str:
        # The encoded variant is safe to paste anywhere; fall back when empty.
        return self.downloadLinkEncoded or self.downloadLink
