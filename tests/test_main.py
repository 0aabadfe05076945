"""Tests for the terminal host and outcome rendering."""

import io

import httpx
import pytest

from conftest import FakeClipboard
from tmplink import main as main_module
from tmplink.config import UploadConfig
from tmplink.main import EXIT_FAILED, EXIT_OK, TmpLinkApp, build_config, parse_args
from tmplink.models.snapshot import ClipboardSnapshot
from tmplink.models.upload import Cancelled, Failure, Success
from tmplink.presenter import render_outcome
from tmplink.services.uploader import TmpFileUploader

LINK = "https://d.tmpfile.link/public/abc/snippet.txt"


def make_app(snapshot, handler, notifier, **kwargs):
    out = io.StringIO()
    app = TmpLinkApp(
        UploadConfig(qr_mode="remote"),
        clipboard=FakeClipboard(snapshot),
        notifier=notifier,
        out=out,
        **kwargs,
    )
    app.pipeline.uploader = TmpFileUploader(transport=httpx.MockTransport(handler))
    return app, out


@pytest.mark.asyncio
async def test_successful_run_prints_link(notifier):
    app, out = make_app(
        ClipboardSnapshot(text="hello"),
        lambda r: httpx.Response(200, json={"downloadLink": LINK}),
        notifier,
    )

    code = await app.run()

    text = out.getvalue()
    assert code == EXIT_OK
    assert "✅ Upload Complete!" in text
    assert f"Link:         {LINK}" in text
    assert "QR Code:      https://api.qrserver.com/v1/create-qr-code/?" in text
    assert "⏳ Uploading text snippet... [5 Bytes]" in text


@pytest.mark.asyncio
async def test_failed_run_without_terminal_does_not_prompt(notifier, monkeypatch):
    def no_input(*args):
        raise AssertionError("should not prompt")

    monkeypatch.setattr("builtins.input", no_input)
    app, out = make_app(
        ClipboardSnapshot(),
        lambda r: httpx.Response(200, json={"downloadLink": LINK}),
        notifier,
    )

    code = await app.run()

    assert code == EXIT_FAILED
    assert "Error: Clipboard is empty or does not contain text/files." in out.getvalue()


@pytest.mark.asyncio
async def test_open_link_in_browser(notifier, monkeypatch):
    opened = []
    monkeypatch.setattr(main_module.webbrowser, "open", opened.append)
    app, _ = make_app(
        ClipboardSnapshot(text="hello"),
        lambda r: httpx.Response(200, json={"downloadLink": LINK}),
        notifier,
        open_link=True,
    )

    assert await app.run() == EXIT_OK
    assert opened == [LINK]


def test_render_success_with_ascii_qr():
    outcome = Success(link=LINK, qr_payload="data:image/png;base64,xx", file_name="snippet.txt",
                      file_size="5 Bytes", elapsed=2, copied=True)

    text = render_outcome(outcome, qr_text="██\n██\n")

    assert "> The link has been copied to your clipboard." in text
    assert "Time Elapsed: 2s" in text
    assert "Retention:    7 Days" in text
    assert text.endswith("██\n██\n")
    assert "data:image" not in text


def test_render_success_when_copy_failed():
    text = render_outcome(Success(link=LINK, copied=False))
    assert "Could not copy the link" in text
    assert "File Name:    -" in text


def test_render_failure_and_cancel():
    assert "Error: File exceeds 100MB limit." in render_outcome(Failure("File exceeds 100MB limit."))
    assert render_outcome(Cancelled()) == "Upload cancelled.\n"


def test_parse_args_and_build_config(monkeypatch):
    monkeypatch.delenv("TMPLINK_QR_MODE", raising=False)
    args = parse_args(["--qr", "none", "--no-notify", "--no-retry", "--open"])

    assert args.open is True
    assert args.retry is False

    config = build_config(args)
    assert config.qr_mode == "none"
    assert config.notify is False
