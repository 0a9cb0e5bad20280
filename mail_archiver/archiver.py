"""
Main archive orchestrator.

Walks the selected mailboxes one at a time, classifies every message by its
date and moves it into the matching year/month folder below the archive root.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from . import streaming
from .catalog import Mailbox, MailboxCatalog
from .classifier import DateClassifier
from .config import ArchiveSettings
from .ensurer import DryRunFolderCreator, FolderCreator, FolderEnsurer
from .movers import Mover, build_mover
from .reporting import ArchiveCallback
from .selector import MailboxSelector


@dataclass
class MessageRef:
    """UID and date of a message in the selected mailbox."""

    uid: int
    date: Optional[datetime] = None


@dataclass
class RunCounters:
    mailboxes_processed: int = 0
    messages_moved: int = 0


@dataclass
class ArchiveContext:
    """State shared by the components during one run."""

    settings: ArchiveSettings
    catalog: MailboxCatalog
    counters: RunCounters = field(default_factory=RunCounters)


class MailArchiver:
    """Archives messages into a year/month folder structure."""

    def __init__(self, session, settings: ArchiveSettings,
                 callback: Optional[ArchiveCallback] = None):
        """Initialize mail archiver.

        Args:
            session: Connected and authenticated mail session
            settings: Archive settings for this run
            callback: Optional callback for progress updates
        """
        self.session = session
        self.settings = settings
        self.callback = callback or ArchiveCallback()
        self.context: Optional[ArchiveContext] = None

        self.selector = MailboxSelector(
            settings.mailboxes,
            settings.recursive_mailboxes,
            settings.ignore_mailboxes,
        )
        self.classifier = DateClassifier(settings.archive_folder, settings.skip_current_month)
        self.mover: Optional[Mover] = None
        self.ensurer: Optional[FolderEnsurer] = None

    def _setup(self) -> None:
        """Load the catalog and choose the move and create strategies."""
        catalog = MailboxCatalog.load(self.session)
        self.context = ArchiveContext(self.settings, catalog)

        self.mover = build_mover(self.session, self.settings.dry_run)

        creator = FolderCreator(self.session)
        if self.settings.dry_run:
            creator = DryRunFolderCreator(creator)
        self.ensurer = FolderEnsurer(catalog, creator, self.callback)

    def fetch_messages(self) -> List[MessageRef]:
        """Fetch the UID and date of every message in the selected mailbox."""
        return [MessageRef(uid, date) for uid, date in streaming.collect(self.session.fetch_dates)]

    def process_mailbox(self, mailbox: Mailbox) -> int:
        """Archive the messages of a single mailbox.

        Args:
            mailbox: Mailbox to process

        Returns:
            Number of messages moved out of the mailbox

        Raises:
            SessionError: On the first failed select, fetch, create or move
        """
        counters = self.context.counters

        count = self.session.select(mailbox.name, readonly=self.settings.dry_run)
        self.callback.on_mailbox_start(mailbox.name, count)

        messages = self.fetch_messages()

        # Sampled once so a long mailbox cannot straddle a month boundary
        now = datetime.now()

        moved = 0
        for message in messages:
            classification = self.classifier.classify(message.date, mailbox.delimiter, now)
            if classification.skipped or classification.folder == mailbox.name:
                continue

            target = Mailbox(classification.folder, mailbox.delimiter)
            self.ensurer.ensure_available(target)
            self.mover.move(message.uid, target.name)

            moved += 1
            counters.messages_moved += 1
            self.callback.on_message_moved(message.uid, mailbox.name, target.name)

        counters.mailboxes_processed += 1
        self.callback.on_mailbox_complete(mailbox.name, moved)
        return moved

    def run(self) -> Dict[str, Any]:
        """Run the complete archive process.

        Returns:
            Summary with mailboxes_processed, messages_moved and dry_run

        Raises:
            SessionError: On the first failure; summary() still reports the
                counters gathered up to that point
        """
        self._setup()

        self.callback.on_start(self.get_stats())

        for mailbox in self.selector.select(self.context.catalog, self.callback):
            self.process_mailbox(mailbox)

        summary = self.summary()
        self.callback.on_complete(summary)
        return summary

    def summary(self) -> Dict[str, Any]:
        counters = self.context.counters if self.context else RunCounters()
        return {
            "mailboxes_processed": counters.mailboxes_processed,
            "messages_moved": counters.messages_moved,
            "dry_run": self.settings.dry_run,
        }

    def get_stats(self) -> Dict[str, Any]:
        """Get run configuration and server capabilities.

        Returns:
            Dictionary describing the current run
        """
        return {
            "mailboxes": len(self.context.catalog) if self.context else 0,
            "archive_folder": self.settings.archive_folder,
            "supports_move": bool(self.mover and self.mover.native),
            "dry_run": self.settings.dry_run,
            "skip_current_month": self.settings.skip_current_month,
            "mailbox_rules": self.settings.mailboxes,
            "recursive_rules": self.settings.recursive_mailboxes,
            "ignore_rules": self.settings.ignore_mailboxes,
        }
