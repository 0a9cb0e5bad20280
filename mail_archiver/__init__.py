"""
Mail Archiver Package

Sorts IMAP mailboxes into a year/month folder structure below an archive folder.
"""

__version__ = "0.11.0"

from .archiver import MailArchiver
from .catalog import Mailbox, MailboxCatalog
from .config import ConfigManager
from .errors import ConfigurationError, MailArchiverError, SessionError
from .imap_session import IMAPSession

__all__ = [
    "ConfigManager",
    "ConfigurationError",
    "IMAPSession",
    "MailArchiver",
    "MailArchiverError",
    "Mailbox",
    "MailboxCatalog",
    "SessionError",
]
