#!/usr/bin/env python3

import argparse
import asyncio
import logging
import signal
import sys
import webbrowser
from dataclasses import replace
from typing import Optional, TextIO

from tmplink.clipboard import ClipboardBackend, get_clipboard
from tmplink.config import QR_MODES, UploadConfig
from tmplink.models.upload import Cancelled, Success, UploadOutcome, UploadStatus
from tmplink.presenter import render_outcome
from tmplink.services.notifier import DesktopNotifier, LogNotifier, Notifier
from tmplink.services.qr import LocalQrRenderer
from tmplink.services.upload_pipeline import ClipboardUploadPipeline
from tmplink.utils.file_manager import FileManager

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CANCELLED = 130


class TmpLinkApp:
    """Terminal host for the upload pipeline: one run per invocation, manual retry."""

    def __init__(
        self,
        config: UploadConfig,
        clipboard: Optional[ClipboardBackend] = None,
        notifier: Optional[Notifier] = None,
        open_link: bool = False,
        allow_retry: bool = True,
        out: TextIO = sys.stdout,
    ):
        self.config = config
        self.file_manager = FileManager()
        self.clipboard = clipboard or get_clipboard(file_manager=self.file_manager)
        if notifier is None:
            notifier = DesktopNotifier() if config.notify else LogNotifier()
        self.open_link = open_link
        self.allow_retry = allow_retry
        self.out = out
        self._status_text = ""
        self.pipeline = ClipboardUploadPipeline.from_config(
            config,
            clipboard=self.clipboard,
            notifier=notifier,
            on_status=self._on_status,
            on_tick=self._on_tick,
        )

    def _interactive(self) -> bool:
        return hasattr(self.out, "isatty") and self.out.isatty()

    def _on_status(self, status: UploadStatus):
        self._status_text = status.text
        if status.stage in ("done", "failed"):
            return
        details = ""
        if status.file_size:
            details = f" [{status.file_size}]"
        self.out.write(f"⏳ {status.text}{details}\n")
        self.out.flush()

    def _on_tick(self, seconds: int):
        if self._interactive():
            self.out.write(f"\r   {self._status_text} {seconds}s")
            self.out.flush()

    async def run_once(self) -> UploadOutcome:
        loop = asyncio.get_running_loop()
        task = self.pipeline.start()

        handled = []
        for signum in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(signum, self.pipeline.cancel)
                handled.append(signum)
            except (NotImplementedError, RuntimeError):
                # Windows event loops do not support signal handlers
                pass

        try:
            return await task
        finally:
            for signum in handled:
                loop.remove_signal_handler(signum)
            if self._interactive():
                self.out.write("\n")

    async def run(self) -> int:
        while True:
            outcome = await self.run_once()
            self.out.write(render_outcome(outcome, self._qr_text(outcome)))
            self.out.flush()

            if isinstance(outcome, Success):
                if self.open_link:
                    webbrowser.open(outcome.link)
                return EXIT_OK
            if isinstance(outcome, Cancelled):
                return EXIT_CANCELLED
            if not (self.allow_retry and self._interactive() and await self._ask_retry()):
                return EXIT_FAILED

    async def _ask_retry(self) -> bool:
        try:
            answer = await asyncio.to_thread(input, "Retry? [y/N] ")
        except EOFError:
            return False
        return answer.strip().lower() in {"y", "yes"}

    def _qr_text(self, outcome: UploadOutcome) -> Optional[str]:
        renderer = self.pipeline.qr_renderer
        if not isinstance(outcome, Success) or not isinstance(renderer, LocalQrRenderer):
            return None
        if not outcome.qr_payload:
            return None
        try:
            return renderer.render_ascii(outcome.link)
        except Exception as e:
            logger.warning(f"Could not draw QR code: {e}")
            return None

    def close(self):
        self.file_manager.cleanup_all_files()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="tmplink - Upload the clipboard to tmpfile.link and copy the share link"
    )

    parser.add_argument(
        "--qr",
        choices=QR_MODES,
        default=None,
        help="QR code rendering: local, remote or none (default: TMPLINK_QR_MODE or local)"
    )

    parser.add_argument(
        "--open",
        action="store_true",
        help="Open the link in the browser after a successful upload"
    )

    parser.add_argument(
        "--no-notify",
        action="store_true",
        help="Do not show desktop notifications"
    )

    parser.add_argument(
        "--retry",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Offer a manual retry after a failed upload (default: on)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose debug logging"
    )

    return parser.parse_args(argv)


def build_config(args) -> UploadConfig:
    config = UploadConfig.from_env()
    overrides = {}
    if args.qr:
        overrides["qr_mode"] = args.qr
    if args.no_notify:
        overrides["notify"] = False
    if not overrides:
        return config
    return replace(config, **overrides)


def main(argv=None):
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s: %(message)s'
    )
    for _noisy in ("httpx", "httpcore", "PIL"):
        logging.getLogger(_noisy).setLevel(logging.WARNING)

    try:
        config = build_config(args)
        app = TmpLinkApp(
            config,
            open_link=args.open,
            allow_retry=args.retry,
        )
    except (ValueError, NotImplementedError) as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(EXIT_FAILED)

    try:
        code = asyncio.run(app.run())
    except KeyboardInterrupt:
        code = EXIT_CANCELLED
    finally:
        app.close()
    sys.exit(code)


if __name__ == "__main__":
    main()
