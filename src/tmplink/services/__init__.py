"""Service layer for tmplink."""

from tmplink.services.cancellation import CancellationToken
from tmplink.services.notifier import DesktopNotifier, LogNotifier, Notifier
from tmplink.services.qr import LocalQrRenderer, QrRenderer, RemoteQrRenderer, build_qr_renderer
from tmplink.services.timer import ElapsedTimer
from tmplink.services.upload_pipeline import ClipboardUploadPipeline
from tmplink.services.uploader import TmpFileUploader

__all__ = [
    "CancellationToken",
    "ClipboardUploadPipeline",
    "DesktopNotifier",
    "ElapsedTimer",
    "LocalQrRenderer",
    "LogNotifier",
    "Notifier",
    "QrRenderer",
    "RemoteQrRenderer",
    "TmpFileUploader",
    "build_qr_renderer",
]
