"""
Tests for ConsoleReporter.
"""

from mail_archiver.reporting import ArchiveCallback, ConsoleReporter


def test_base_callback_ignores_everything():
    callback = ArchiveCallback()

    callback.on_mailbox_start("INBOX", 3)
    callback.on_complete({"mailboxes_processed": 0, "messages_moved": 0, "dry_run": False})


def test_verbose_output(capsys):
    reporter = ConsoleReporter(verbose=True)

    reporter.on_mailbox_ignored("Trash")
    reporter.on_mailbox_start("INBOX", 2)
    reporter.on_folder_created("Archive/2023")
    reporter.on_message_moved(7, "INBOX", "Archive/2023/11")

    out = capsys.readouterr().out
    assert "[i] Ignore mailbox 'Trash'" in out
    assert "[i] Processing mailbox INBOX (2 messages)" in out
    assert "  - Created mailbox Archive/2023" in out
    assert "  - Moved UID 7 from INBOX → Archive/2023/11" in out


def test_quiet_output_keeps_errors_and_summary(capsys):
    reporter = ConsoleReporter(verbose=False)

    reporter.on_mailbox_start("INBOX", 2)
    reporter.on_message_moved(7, "INBOX", "Archive/2023/11")
    reporter.on_error("SELECT failed for mailbox 'INBOX': NO")
    reporter.on_complete({"mailboxes_processed": 3, "messages_moved": 12, "dry_run": True})

    out = capsys.readouterr().out
    assert "Processing mailbox" not in out
    assert "[!] SELECT failed for mailbox 'INBOX': NO" in out
    assert "[done] Processed 3 mailbox(es) and moved 12 message(s) (DRY RUN)" in out
