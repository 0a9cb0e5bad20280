"""
In-memory snapshot of the server's mailbox hierarchy.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Set

from . import streaming


@dataclass(eq=False)
class Mailbox:
    """A folder on the IMAP server.

    Two mailboxes are equal when their names are equal.
    """

    name: str
    delimiter: str
    selectable: bool = field(default=True)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Mailbox):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def segments(self) -> List[str]:
        """Split the name into hierarchy segments using the delimiter."""
        if not self.delimiter:
            return [self.name]
        return self.name.split(self.delimiter)


class MailboxCatalog:
    """Ordered, append-only collection of mailboxes without duplicate names."""

    def __init__(self, mailboxes: Iterable[Mailbox] = ()):
        self._mailboxes: List[Mailbox] = []
        self._names: Set[str] = set()
        for mailbox in mailboxes:
            self.record(mailbox)

    @classmethod
    def load(cls, session) -> "MailboxCatalog":
        """Build the catalog from the session's mailbox listing.

        Args:
            session: Connected mail session

        Returns:
            Catalog holding every mailbox the server listed, in listing order
        """
        listed = streaming.collect(session.list_mailboxes)
        return cls(
            Mailbox(name, delimiter, "\\noselect" not in [flag.lower() for flag in flags])
            for name, delimiter, flags in listed
        )

    def list_all(self) -> List[Mailbox]:
        return list(self._mailboxes)

    def contains(self, name: str) -> bool:
        return name in self._names

    def record(self, mailbox: Mailbox) -> None:
        """Append a mailbox unless one with the same name is already known."""
        if mailbox.name in self._names:
            return
        self._mailboxes.append(mailbox)
        self._names.add(mailbox.name)

    def __len__(self) -> int:
        return len(self._mailboxes)
