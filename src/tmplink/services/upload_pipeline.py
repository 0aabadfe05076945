"""Clipboard to tmpfile.link upload flow.

One run reads the clipboard once, turns the content into a
``SanitizedUpload``, posts it, copies the returned link back to the clipboard
and renders a QR code for it. The run always ends in exactly one of
``Success``, ``Failure`` or ``Cancelled``; errors never escape ``run``.
"""

import asyncio
import logging
from pathlib import Path
from typing import Callable, Optional

from ulid import ULID

from tmplink.clipboard.base import ClipboardBackend
from tmplink.config import MAX_UPLOAD_BYTES, UploadConfig
from tmplink.errors import (
    ClipboardUnavailable,
    EmptyClipboard,
    SizeLimitExceeded,
    UnsupportedContent,
    UploadCancelled,
    UploadError,
)
from tmplink.models.snapshot import ClipboardSnapshot
from tmplink.models.upload import (
    Cancelled,
    Failure,
    SanitizedUpload,
    Success,
    UploadOutcome,
    UploadStatus,
)
from tmplink.services.cancellation import CancellationToken
from tmplink.services.notifier import FAILURE, SUCCESS, LogNotifier, Notifier
from tmplink.services.qr import QrRenderer, build_qr_renderer
from tmplink.services.timer import ElapsedTimer
from tmplink.services.uploader import TmpFileUploader
from tmplink.utils.filenames import infer_file_name, sanitize_file_name, snippet_file_name
from tmplink.utils.filesystem import LocalFileSystem, resolve_clipboard_path
from tmplink.utils.formatting import format_bytes

logger = logging.getLogger(__name__)


class ClipboardUploadPipeline:

    def __init__(
        self,
        clipboard: ClipboardBackend,
        uploader: Optional[TmpFileUploader] = None,
        notifier: Optional[Notifier] = None,
        qr_renderer: Optional[QrRenderer] = None,
        filesystem: Optional[LocalFileSystem] = None,
        max_upload_bytes: int = MAX_UPLOAD_BYTES,
        on_status: Optional[Callable[[UploadStatus], None]] = None,
        on_tick: Optional[Callable[[int], None]] = None,
        tick_interval: float = 1.0,
    ) -> None:
        self.clipboard = clipboard
        self.uploader = uploader or TmpFileUploader()
        self.notifier = notifier or LogNotifier()
        self.qr_renderer = qr_renderer
        self.filesystem = filesystem or LocalFileSystem()
        self.max_upload_bytes = max_upload_bytes
        self._on_status = on_status
        self._on_tick = on_tick
        self.tick_interval = tick_interval
        self._active = False
        self._task: Optional[asyncio.Task] = None
        self._token: Optional[CancellationToken] = None

    @classmethod
    def from_config(
        cls,
        config: UploadConfig,
        clipboard: ClipboardBackend,
        notifier: Optional[Notifier] = None,
        **kwargs,
    ) -> "ClipboardUploadPipeline":
        return cls(
            clipboard=clipboard,
            uploader=TmpFileUploader(config.upload_url, timeout=config.timeout),
            notifier=notifier,
            qr_renderer=build_qr_renderer(
                config.qr_mode, size=config.qr_size, endpoint=config.qr_endpoint),
            max_upload_bytes=config.max_upload_bytes,
            **kwargs,
        )

    @property
    def running(self) -> bool:
        return self._active or (self._task is not None and not self._task.done())

    def start(self) -> "asyncio.Task[UploadOutcome]":
        """Begin a run on the current event loop; pair with ``cancel()``."""
        if self.running:
            raise RuntimeError("An upload is already in progress")

        self._token = CancellationToken()
        self._task = asyncio.ensure_future(self.run(self._token))
        return self._task

    def cancel(self) -> None:
        if self._token is not None:
            self._token.cancel()

    async def run(self, token: Optional[CancellationToken] = None) -> UploadOutcome:
        if self._active:
            raise RuntimeError("An upload is already in progress")

        token = token or CancellationToken()
        run_id = str(ULID())
        timer = ElapsedTimer(on_tick=self._tick_observer(token), interval=self.tick_interval)
        self._active = True
        timer.start()
        try:
            success = await self._execute(token, run_id, timer)
            logger.info(f"[{run_id}] Uploaded {success.file_name} -> {success.link}")
            return success
        except UploadCancelled:
            timer.stop()
            logger.info(f"[{run_id}] Upload cancelled")
            return Cancelled(elapsed=timer.elapsed)
        except Exception as e:
            timer.stop()
            if token.cancelled:
                logger.info(f"[{run_id}] Upload cancelled ({e})")
                return Cancelled(elapsed=timer.elapsed)

            if isinstance(e, UploadError):
                logger.error(f"[{run_id}] {e.message}")
                failure = Failure(message=e.message, kind=e.kind, elapsed=timer.elapsed)
            else:
                logger.exception(f"[{run_id}] Unexpected upload error")
                failure = Failure(message=str(e) or type(e).__name__, elapsed=timer.elapsed)

            self._emit(token, UploadStatus(stage="failed", text="Failed"))
            await self._notify(FAILURE, "Upload Failed", failure.message)
            return failure
        finally:
            timer.stop()
            self._active = False

    async def _execute(self, token: CancellationToken, run_id: str, timer: ElapsedTimer) -> Success:
        self._emit(token, UploadStatus(stage="reading", text="Checking clipboard..."))
        token.raise_if_cancelled()

        snapshot = await self._read_clipboard()
        token.raise_if_cancelled()

        upload = await self._prepare(snapshot, token)
        token.raise_if_cancelled()
        logger.info(f"[{run_id}] Uploading {upload.name} ({upload.size} bytes)")

        response = await self.uploader.upload(upload, token)
        token.raise_if_cancelled()

        link = response.link
        copied = await self._copy_link(link)
        qr_payload = self._render_qr(link)

        token.raise_if_cancelled()
        title = "Uploaded & Copied!" if copied else "Uploaded"
        message = None if copied else "Could not copy the link to the clipboard."
        await self._notify(SUCCESS, title, message)
        self._emit(token, UploadStatus(
            stage="done",
            text="Successfully Uploaded!",
            file_name=upload.name,
            file_size=format_bytes(upload.size),
        ))

        timer.stop()
        return Success(
            link=link,
            qr_payload=qr_payload,
            file_name=upload.name,
            file_size=format_bytes(upload.size),
            elapsed=timer.elapsed,
            copied=copied,
        )

    async def _read_clipboard(self) -> ClipboardSnapshot:
        try:
            return await asyncio.to_thread(self.clipboard.read)
        except UploadError:
            raise
        except Exception as e:
            raise ClipboardUnavailable(f"Could not read clipboard: {e}", e) from e

    async def _prepare(self, snapshot: ClipboardSnapshot, token: CancellationToken) -> SanitizedUpload:
        if snapshot.has_file:
            path = resolve_clipboard_path(snapshot.file_path)
            if self.filesystem.exists(path):
                return await self._prepare_file(path, token)
            logger.warning(f"Clipboard file {path} does not exist")

        if snapshot.has_text:
            return self._prepare_text(snapshot.text, token)

        raise EmptyClipboard()

    async def _prepare_file(self, path: Path, token: CancellationToken) -> SanitizedUpload:
        stat = self.filesystem.stat(path)
        if stat.is_directory:
            raise UnsupportedContent()
        self._check_size(stat.size, "File")

        content = await asyncio.to_thread(self.filesystem.read_all, path)
        self._check_size(len(content), "File")

        name = sanitize_file_name(infer_file_name(path.name, content))
        self._emit(token, UploadStatus(
            stage="uploading",
            text=f'Uploading "{name}"...',
            file_name=name,
            file_size=format_bytes(len(content)),
        ))
        return SanitizedUpload(name=name, content=content, source="file")

    def _prepare_text(self, text: str, token: CancellationToken) -> SanitizedUpload:
        content = text.encode("utf-8")
        self._check_size(len(content), "Text")

        name = snippet_file_name()
        self._emit(token, UploadStatus(
            stage="uploading",
            text="Uploading text snippet...",
            file_name=name,
            file_size=format_bytes(len(content)),
        ))
        return SanitizedUpload(
            name=name, content=content, content_type="text/plain", source="text")

    def _check_size(self, size: int, label: str) -> None:
        if size > self.max_upload_bytes:
            limit_mb = self.max_upload_bytes // (1024 * 1024)
            raise SizeLimitExceeded(
                size, self.max_upload_bytes, f"{label} exceeds {limit_mb}MB limit.")

    async def _copy_link(self, link: str) -> bool:
        try:
            copied = await asyncio.to_thread(self.clipboard.write, link)
        except Exception as e:
            logger.warning(f"Could not copy link to clipboard: {e}")
            return False
        if not copied:
            logger.warning("Could not copy link to clipboard")
        return bool(copied)

    async def _notify(self, kind: str, title: str, message: Optional[str] = None) -> None:
        # notify-send and osascript block, keep them off the event loop
        await asyncio.to_thread(self.notifier.notify, kind, title, message)

    def _render_qr(self, link: str) -> Optional[str]:
        if self.qr_renderer is None:
            return None
        try:
            return self.qr_renderer.render(link)
        except Exception as e:
            logger.warning(f"QR code generation failed: {e}")
            return None

    def _emit(self, token: CancellationToken, status: UploadStatus) -> None:
        if self._on_status is None or token.cancelled:
            return
        try:
            self._on_status(status)
        except Exception as e:
            logger.error(f"Error in on_status: {e}")

    def _tick_observer(self, token: CancellationToken) -> Optional[Callable[[int], None]]:
        if self._on_tick is None:
            return None
        on_tick = self._on_tick

        def observer(seconds: int) -> None:
            if not token.cancelled:
                on_tick(seconds)

        return observer
