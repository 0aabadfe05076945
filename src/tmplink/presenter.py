"""Plain-text rendering of upload outcomes for the terminal."""

from typing import Optional

from tmplink.models.upload import Cancelled, Failure, Success, UploadOutcome

RETENTION = "7 Days"


def render_outcome(outcome: UploadOutcome, qr_text: Optional[str] = None) -> str:
    if isinstance(outcome, Success):
        return _render_success(outcome, qr_text)
    if isinstance(outcome, Failure):
        return (
            "❌ Upload Failed\n"
            "\n"
            f"Error: {outcome.message}\n"
            "\n"
            "Please check your network and try again.\n"
        )
    if isinstance(outcome, Cancelled):
        return "Upload cancelled.\n"
    raise TypeError(f"Unknown outcome: {outcome!r}")


def _render_success(outcome: Success, qr_text: Optional[str]) -> str:
    if outcome.copied:
        headline = "The link has been copied to your clipboard."
    else:
        headline = "Could not copy the link, copy it from below."

    lines = [
        "✅ Upload Complete!",
        "",
        f"> {headline}",
        "",
        f"Link:         {outcome.link}",
        f"File Name:    {outcome.file_name or '-'}",
        f"File Size:    {outcome.file_size or '-'}",
        f"Time Elapsed: {outcome.elapsed}s",
        f"Retention:    {RETENTION}",
    ]

    if qr_text:
        lines.extend(["", qr_text.rstrip("\n")])
    elif outcome.qr_payload and not outcome.qr_payload.startswith("data:"):
        lines.append(f"QR Code:      {outcome.qr_payload}")

    return "\n".join(lines) + "\n"
