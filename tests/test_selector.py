"""
Tests for MailboxSelector.
"""

from mail_archiver.catalog import Mailbox, MailboxCatalog
from mail_archiver.selector import MailboxSelector, Selection
from tests.fakes import RecordingCallback


def _catalog(*names, noselect=()):
    return MailboxCatalog(Mailbox(name, "/", name not in noselect) for name in names)


def test_ignore_wins_over_exact_match():
    selector = MailboxSelector(["A/B"], [], ["A"])

    assert selector.classify(Mailbox("A/B", "/")) is Selection.IGNORE


def test_ignore_wins_over_recursive_match():
    selector = MailboxSelector([], ["Projects"], ["Projects/Old"])

    assert selector.classify(Mailbox("Projects/Old/2019", "/")) is Selection.IGNORE
    assert selector.classify(Mailbox("Projects/New", "/")) is Selection.PROCESS


def test_exact_match_does_not_include_children():
    selector = MailboxSelector(["INBOX"], [], [])

    assert selector.classify(Mailbox("INBOX", "/")) is Selection.PROCESS
    assert selector.classify(Mailbox("INBOX/Sub", "/")) is Selection.UNTOUCHED


def test_unmatched_mailbox_is_untouched_and_not_reported():
    selector = MailboxSelector(["INBOX"], [], ["Trash"])
    callback = RecordingCallback()

    selected = list(selector.select(_catalog("INBOX", "Sent", "Trash"), callback))

    assert [m.name for m in selected] == ["INBOX"]
    assert callback.named("on_mailbox_ignored") == [("Trash",)]


def test_mailbox_matching_several_rules_is_selected_once():
    selector = MailboxSelector(["Lists"], ["Lists", "L"], [])

    selected = list(selector.select(_catalog("INBOX", "Lists", "Lists/python")))

    assert [m.name for m in selected] == ["Lists", "Lists/python"]


def test_selection_keeps_catalog_order():
    selector = MailboxSelector(["Work"], ["INBOX"], [])

    selected = list(selector.select(_catalog("Work", "INBOX", "INBOX/a", "Other")))

    assert [m.name for m in selected] == ["Work", "INBOX", "INBOX/a"]


def test_noselect_mailbox_is_untouched():
    selector = MailboxSelector([], ["Shared"], [])
    catalog = _catalog("Shared", "Shared/team", noselect=("Shared",))

    selected = list(selector.select(catalog))

    assert [m.name for m in selected] == ["Shared/team"]


def test_folders_recorded_during_selection_are_not_yielded():
    selector = MailboxSelector([], ["Archive"], [])
    catalog = _catalog("Archive")

    selected = []
    for mailbox in selector.select(catalog):
        selected.append(mailbox.name)
        catalog.record(Mailbox("Archive/2023", "/"))

    assert selected == ["Archive"]
    assert catalog.contains("Archive/2023")
