"""
Progress reporting for Mail Archiver.

The archive engine never prints directly; it reports through an
ArchiveCallback so front ends can decide how progress is shown.
"""

from typing import Any, Dict


class ArchiveCallback:
    """Callback interface for archive progress updates."""

    def on_start(self, stats: Dict[str, Any]) -> None:
        """Called when the run starts."""
        pass

    def on_mailbox_ignored(self, mailbox: str) -> None:
        """Called when a mailbox is skipped because of an ignore rule."""
        pass

    def on_mailbox_start(self, mailbox: str, message_count: int) -> None:
        """Called after a mailbox was selected for processing."""
        pass

    def on_folder_created(self, folder: str) -> None:
        """Called when a missing archive folder was created."""
        pass

    def on_message_moved(self, uid: int, source: str, target: str) -> None:
        """Called after a message was moved."""
        pass

    def on_mailbox_complete(self, mailbox: str, moved: int) -> None:
        """Called when mailbox processing is complete."""
        pass

    def on_complete(self, summary: Dict[str, Any]) -> None:
        """Called with the final run summary."""
        pass

    def on_error(self, error: str, details: str = "") -> None:
        """Called when an error aborts the run."""
        pass


class ConsoleReporter(ArchiveCallback):
    """Prints progress to stdout."""

    def __init__(self, verbose: bool = True):
        """Initialize console reporter.

        Args:
            verbose: Whether to print per-mailbox and per-message progress
        """
        self.verbose = verbose

    def on_start(self, stats: Dict[str, Any]) -> None:
        if stats.get("dry_run"):
            print("[i] DRY RUN - nothing will be changed on the IMAP server")
        if self.verbose:
            print(f"[i] {stats['mailboxes']} mailbox(es) on server, "
                  f"archive folder: {stats['archive_folder']}, "
                  f"move support: {'yes' if stats['supports_move'] else 'no'}")

    def on_mailbox_ignored(self, mailbox: str) -> None:
        if self.verbose:
            print(f"[i] Ignore mailbox '{mailbox}'")

    def on_mailbox_start(self, mailbox: str, message_count: int) -> None:
        if self.verbose:
            print(f"\n[i] Processing mailbox {mailbox} ({message_count} messages)")

    def on_folder_created(self, folder: str) -> None:
        if self.verbose:
            print(f"  - Created mailbox {folder}")

    def on_message_moved(self, uid: int, source: str, target: str) -> None:
        if self.verbose:
            print(f"  - Moved UID {uid} from {source} → {target}")

    def on_mailbox_complete(self, mailbox: str, moved: int) -> None:
        if self.verbose:
            print(f"[i] {mailbox}: {moved} message(s) moved")

    def on_complete(self, summary: Dict[str, Any]) -> None:
        line = (f"\n[done] Processed {summary['mailboxes_processed']} mailbox(es) "
                f"and moved {summary['messages_moved']} message(s)")
        if summary["dry_run"]:
            line += " (DRY RUN)"
        print(line)

    def on_error(self, error: str, details: str = "") -> None:
        print(f"[!] {error}")
        if details and self.verbose:
            print(f"    {details}")
