"""
Mailbox selection rules.

Decides for each catalog entry whether it is processed, ignored or left
untouched, based on the configured include and ignore lists.
"""

from enum import Enum
from typing import Iterator, List, Optional

from .catalog import Mailbox, MailboxCatalog
from .reporting import ArchiveCallback


class Selection(Enum):
    PROCESS = "process"
    IGNORE = "ignore"
    UNTOUCHED = "untouched"


class MailboxSelector:
    """Applies include and ignore rules to mailbox names."""

    def __init__(self, mailboxes: List[str], recursive_mailboxes: List[str],
                 ignore_mailboxes: List[str]):
        """Initialize mailbox selector.

        Args:
            mailboxes: Names that are processed on exact match
            recursive_mailboxes: Prefixes whose matching mailboxes are processed
            ignore_mailboxes: Prefixes whose matching mailboxes are never processed
        """
        self.mailboxes = mailboxes
        self.recursive_mailboxes = recursive_mailboxes
        self.ignore_mailboxes = ignore_mailboxes

    def classify(self, mailbox: Mailbox) -> Selection:
        """Decide what happens to a single mailbox.

        Ignore rules win over both include rules.

        Args:
            mailbox: Mailbox to check

        Returns:
            Selection for the mailbox
        """
        name = mailbox.name

        if any(name.startswith(prefix) for prefix in self.ignore_mailboxes):
            return Selection.IGNORE

        if not mailbox.selectable:
            return Selection.UNTOUCHED

        if name in self.mailboxes:
            return Selection.PROCESS

        if any(name.startswith(prefix) for prefix in self.recursive_mailboxes):
            return Selection.PROCESS

        return Selection.UNTOUCHED

    def select(self, catalog: MailboxCatalog,
               callback: Optional[ArchiveCallback] = None) -> Iterator[Mailbox]:
        """Yield the mailboxes to process, in catalog order.

        Iterates over a snapshot, so folders recorded while the caller is
        consuming the iterator are not yielded.

        Args:
            catalog: Catalog of all mailboxes on the server
            callback: Optional callback notified about ignored mailboxes

        Yields:
            Each selected mailbox exactly once
        """
        for mailbox in catalog.list_all():
            selection = self.classify(mailbox)
            if selection is Selection.IGNORE:
                if callback:
                    callback.on_mailbox_ignored(mailbox.name)
            elif selection is Selection.PROCESS:
                yield mailbox
