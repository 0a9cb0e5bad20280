"""
Date based classification of messages into archive folders.

Pure logic without any I/O: a message date is mapped to the folder it
belongs in, or to a decision to leave the message where it is.
"""

from datetime import datetime, timezone
from typing import Optional


class Classification:
    """Result of classifying a message: either skip it or move it to a folder."""

    __slots__ = ("folder",)

    def __init__(self, folder: Optional[str]):
        self.folder = folder

    @classmethod
    def skip(cls) -> "Classification":
        return cls(None)

    @classmethod
    def target(cls, folder: str) -> "Classification":
        return cls(folder)

    @property
    def skipped(self) -> bool:
        return self.folder is None

    def __eq__(self, other) -> bool:
        if not isinstance(other, Classification):
            return NotImplemented
        return self.folder == other.folder

    def __repr__(self) -> str:
        if self.skipped:
            return "Classification.skip()"
        return f"Classification.target({self.folder!r})"


class DateClassifier:
    """Maps message dates to year/month folders below the archive root."""

    def __init__(self, archive_folder: str, skip_current_month: bool = False):
        """Initialize date classifier.

        Args:
            archive_folder: Name of the archive root folder
            skip_current_month: Leave messages from the current month in place
        """
        self.archive_folder = archive_folder
        self.skip_current_month = skip_current_month

    def classify(self, date: Optional[datetime], delimiter: str, now: datetime) -> Classification:
        """Classify a single message.

        Args:
            date: Message date, None when absent or unparseable
            delimiter: Hierarchy delimiter of the source mailbox
            now: Current time, sampled once per mailbox; naive for system
                local time

        Returns:
            Classification for the message
        """
        # Messages without a usable date go to the archive root
        if date is None:
            return Classification.target(self.archive_folder)

        local = self.to_local(date, now)

        if self.skip_current_month and (local.year, local.month) == (now.year, now.month):
            return Classification.skip()

        return Classification.target(
            f"{self.archive_folder}{delimiter}{local.year:04d}{delimiter}{local.month:02d}"
        )

    @staticmethod
    def to_local(date: datetime, now: datetime) -> datetime:
        """Convert a message date into the local time of the run.

        A naive ``now`` means system local time; the message date is then
        converted with the system zone rules for its own instant, so
        daylight saving is applied per message. An aware ``now`` names the
        zone to convert into. Naive message dates are taken as UTC.
        """
        if date.tzinfo is None:
            date = date.replace(tzinfo=timezone.utc)
        if now.tzinfo is None:
            return date.astimezone()
        return date.astimezone(now.tzinfo)
