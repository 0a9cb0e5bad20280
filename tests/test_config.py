#!/usr/bin/env python3
"""
Tests for ConfigManager functionality.
"""

import json

import pytest

from mail_archiver.config import ConfigManager
from mail_archiver.errors import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("IMAP_USER", raising=False)
    monkeypatch.delenv("IMAP_PASS", raising=False)


def _write(path, data):
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f)
    return str(path)


def test_default_config():
    """Test default configuration loading."""
    config_manager = ConfigManager("nonexistent.json", "nonexistent_local.json")

    assert config_manager.config["mail_settings"]["imap_port"] == 993
    assert config_manager.config["mail_settings"]["archive_folder"] == "Archive"
    assert config_manager.config["archive_settings"]["dry_run"] is False
    assert config_manager.config["archive_settings"]["skip_current_month"] is False


def test_defaults_are_not_shared_between_instances():
    first = ConfigManager("nonexistent.json", "nonexistent_local.json")
    first.config["mail_settings"]["mailboxes"].append("INBOX")

    second = ConfigManager("nonexistent.json", "nonexistent_local.json")

    assert second.config["mail_settings"]["mailboxes"] == []


def test_config_merging(tmp_path):
    """Test configuration file merging."""
    main_file = _write(tmp_path / "config.json", {
        "mail_settings": {"imap_host": "imap.example.com", "mailboxes": ["INBOX"]},
        "archive_settings": {"dry_run": True, "skip_current_month": True},
    })
    local_file = _write(tmp_path / "local.json", {
        "archive_settings": {"dry_run": False},
    })

    config_manager = ConfigManager(main_file, local_file)

    assert config_manager.config["archive_settings"]["dry_run"] is False
    assert config_manager.config["archive_settings"]["skip_current_month"] is True
    assert config_manager.config["mail_settings"]["imap_host"] == "imap.example.com"
    assert config_manager.config["mail_settings"]["imap_port"] == 993


def test_malformed_file_falls_back_to_defaults(tmp_path, capsys):
    broken = tmp_path / "config.json"
    broken.write_text("{not json", encoding="utf-8")

    config_manager = ConfigManager(str(broken), "nonexistent_local.json")

    assert config_manager.config["mail_settings"]["archive_folder"] == "Archive"
    assert "[!] Error parsing" in capsys.readouterr().out


def test_credentials_from_environment(monkeypatch):
    monkeypatch.setenv("IMAP_USER", "me@example.com")
    monkeypatch.setenv("IMAP_PASS", "app-password")

    config_manager = ConfigManager("nonexistent.json", "nonexistent_local.json")

    assert config_manager.username == "me@example.com"
    assert config_manager.password == "app-password"


def test_overrides_ignore_unset_values():
    config_manager = ConfigManager("nonexistent.json", "nonexistent_local.json")

    config_manager.apply_overrides({
        "imap_host": "imap.example.com",
        "imap_port": None,
        "user": "me",
        "recursive_mailboxes": ["Lists"],
        "dry_run": True,
    })

    assert config_manager.config["mail_settings"]["imap_host"] == "imap.example.com"
    assert config_manager.config["mail_settings"]["imap_port"] == 993
    assert config_manager.config["mail_settings"]["recursive_mailboxes"] == ["Lists"]
    assert config_manager.config["archive_settings"]["dry_run"] is True
    assert config_manager.username == "me"


def test_unknown_override_is_rejected():
    config_manager = ConfigManager("nonexistent.json", "nonexistent_local.json")

    with pytest.raises(ConfigurationError):
        config_manager.apply_overrides({"target_folder": "x"})


def _valid_manager():
    config_manager = ConfigManager("nonexistent.json", "nonexistent_local.json")
    config_manager.apply_overrides({"imap_host": "imap.example.com", "user": "me", "mailboxes": ["INBOX"]})
    return config_manager


def test_validate_accepts_complete_config():
    _valid_manager().validate()


@pytest.mark.parametrize("overrides, message", [
    ({"imap_host": ""}, "no host, port or user"),
    ({"imap_port": 0}, "no host, port or user"),
    ({"imap_port": "abc"}, "invalid IMAP port"),
    ({"user": ""}, "no host, port or user"),
    ({"archive_folder": ""}, "no archive folder"),
    ({"mailboxes": []}, "at least one mailbox"),
])
def test_validate_rejects_incomplete_config(overrides, message):
    config_manager = _valid_manager()
    config_manager.apply_overrides(overrides)

    with pytest.raises(ConfigurationError, match=message):
        config_manager.validate()


def test_recursive_mailboxes_alone_are_enough():
    config_manager = _valid_manager()
    config_manager.apply_overrides({"mailboxes": [], "recursive_mailboxes": ["INBOX"]})

    config_manager.validate()


def test_settings_objects():
    config_manager = _valid_manager()
    config_manager.password = "secret"
    config_manager.apply_overrides({"ignore_mailboxes": ["Trash"], "skip_current_month": True, "timeout": 60})

    connection = config_manager.get_connection_settings()
    settings = config_manager.get_archive_settings()

    assert (connection.host, connection.port, connection.user, connection.password, connection.timeout) == \
        ("imap.example.com", 993, "me", "secret", 60)
    assert settings.archive_folder == "Archive"
    assert settings.mailboxes == ["INBOX"]
    assert settings.ignore_mailboxes == ["Trash"]
    assert settings.skip_current_month is True
    assert settings.dry_run is False
