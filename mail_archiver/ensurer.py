"""
Hierarchical folder creation.

Makes sure every segment of a target folder path exists on the server,
creating missing segments parent-first and never more than once per run.
"""

from typing import Optional

from .catalog import Mailbox, MailboxCatalog
from .reporting import ArchiveCallback


class FolderCreator:
    """Creates folders on the server."""

    def __init__(self, session):
        self.session = session

    def create(self, name: str) -> None:
        self.session.create(name)


class DryRunFolderCreator(FolderCreator):
    """Stands in for a FolderCreator without touching the server."""

    def __init__(self, creator: FolderCreator):
        super().__init__(creator.session)

    def create(self, name: str) -> None:
        pass


class FolderEnsurer:
    """Creates missing folders and keeps the catalog in sync."""

    def __init__(self, catalog: MailboxCatalog, creator,
                 callback: Optional[ArchiveCallback] = None):
        """Initialize folder ensurer.

        Args:
            catalog: Catalog checked before and updated after each creation
            creator: Object with a ``create(name)`` method
            callback: Optional callback notified about created folders
        """
        self.catalog = catalog
        self.creator = creator
        self.callback = callback

    def ensure_available(self, mailbox: Mailbox) -> None:
        """Ensure the mailbox and all of its ancestors exist.

        Args:
            mailbox: Target mailbox; its delimiter splits the path

        Raises:
            SessionError: If the server refuses to create a segment
        """
        segments = mailbox.segments()

        for depth in range(1, len(segments) + 1):
            path = mailbox.delimiter.join(segments[:depth])
            if self.catalog.contains(path):
                continue

            self.creator.create(path)
            self.catalog.record(Mailbox(path, mailbox.delimiter))

            if self.callback:
                self.callback.on_folder_created(path)
