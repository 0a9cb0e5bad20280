"""
Exception types raised by Mail Archiver.
"""

from typing import Optional


class MailArchiverError(Exception):
    """Base class for all Mail Archiver errors."""


class ConfigurationError(MailArchiverError):
    """Raised when required settings are missing or invalid."""


class SessionError(MailArchiverError):
    """Raised when the IMAP server or the transport reports a failure.

    Args:
        message: Human readable description of the failure
        operation: IMAP operation that failed (e.g. "SELECT", "UID MOVE")
        mailbox: Mailbox the operation was working on, if any
    """

    def __init__(self, message: str, operation: str = "", mailbox: Optional[str] = None):
        super().__init__(message)
        self.operation = operation
        self.mailbox = mailbox

    def __str__(self) -> str:
        text = super().__str__()
        if self.operation and self.mailbox:
            return f"{self.operation} failed for mailbox '{self.mailbox}': {text}"
        if self.operation:
            return f"{self.operation} failed: {text}"
        return text
