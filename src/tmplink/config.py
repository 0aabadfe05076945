from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_UPLOAD_URL = "https://tmpfile.link/api/upload"
DEFAULT_QR_ENDPOINT = "https://api.qrserver.com/v1/create-qr-code/"
MAX_UPLOAD_BYTES = 100 * 1024 * 1024
QR_MODES = ("local", "remote", "none")


def _to_bool(value: Optional[str], default: bool = True) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _to_int(name: str, value: Optional[str], default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None
    if parsed <= 0:
        raise ValueError(f"{name} must be positive, got {parsed}")
    return parsed


@dataclass(frozen=True)
class UploadConfig:
    upload_url: str = DEFAULT_UPLOAD_URL
    max_upload_bytes: int = MAX_UPLOAD_BYTES
    qr_mode: str = "local"
    qr_size: int = 180
    qr_endpoint: str = DEFAULT_QR_ENDPOINT
    timeout: float = 300.0
    notify: bool = True

    def __post_init__(self) -> None:
        if self.qr_mode not in QR_MODES:
            raise ValueError(
                f"Unsupported QR mode: {self.qr_mode!r} (expected one of {', '.join(QR_MODES)})")

    @classmethod
    def from_env(cls, *, env_path: Optional[Path] = None) -> "UploadConfig":
        load_dotenv(dotenv_path=env_path)

        timeout_raw = os.getenv("TMPLINK_TIMEOUT")
        try:
            timeout = float(timeout_raw) if timeout_raw else cls.timeout
        except ValueError:
            raise ValueError(
                f"TMPLINK_TIMEOUT must be a number, got {timeout_raw!r}") from None

        return cls(
            upload_url=os.getenv("TMPLINK_UPLOAD_URL") or cls.upload_url,
            max_upload_bytes=_to_int(
                "TMPLINK_MAX_UPLOAD_BYTES", os.getenv("TMPLINK_MAX_UPLOAD_BYTES"), cls.max_upload_bytes),
            qr_mode=(os.getenv("TMPLINK_QR_MODE") or cls.qr_mode).strip().lower(),
            qr_size=_to_int("TMPLINK_QR_SIZE", os.getenv("TMPLINK_QR_SIZE"), cls.qr_size),
            qr_endpoint=os.getenv("TMPLINK_QR_ENDPOINT") or cls.qr_endpoint,
            timeout=timeout,
            notify=_to_bool(os.getenv("TMPLINK_NOTIFY"), default=cls.notify),
        )
