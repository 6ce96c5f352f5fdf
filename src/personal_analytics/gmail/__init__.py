"""Report delivery through the Gmail API."""

from .client import GmailSender, build_html_message

__all__ = ["GmailSender", "build_html_message"]
