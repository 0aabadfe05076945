"""Upload the clipboard to tmpfile.link and share the link."""

__version__ = "0.1.0"
