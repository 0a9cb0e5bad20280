"""
Configuration management for Mail Archiver.

Handles loading and validation of configuration files with support for
local overrides and credentials taken from the environment.
"""

import copy
import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List

from dotenv import load_dotenv

from .errors import ConfigurationError


@dataclass
class ConnectionSettings:
    """IMAP server address and credentials."""

    host: str
    port: int
    user: str
    password: str
    timeout: int = 30


@dataclass
class ArchiveSettings:
    """Read-only archiving options for a single run."""

    archive_folder: str
    mailboxes: List[str] = field(default_factory=list)
    recursive_mailboxes: List[str] = field(default_factory=list)
    ignore_mailboxes: List[str] = field(default_factory=list)
    skip_current_month: bool = False
    dry_run: bool = False
    verbose: bool = True


class ConfigManager:
    """Handles configuration loading and validation."""

    DEFAULT_CONFIG = {
        "mail_settings": {
            "imap_host": "",
            "imap_port": 993,
            "archive_folder": "Archive",
            "mailboxes": [],
            "recursive_mailboxes": [],
            "ignore_mailboxes": []
        },
        "archive_settings": {
            "skip_current_month": False,
            "dry_run": False,
            "verbose": True,
            "timeout": 30
        }
    }

    def __init__(self, config_file: str = "config.json", local_config_file: str = "config.local.json"):
        """Initialize configuration manager.

        Args:
            config_file: Main configuration file path
            local_config_file: Local overrides configuration file path
        """
        self.config_file = config_file
        self.local_config_file = local_config_file
        self.config = self._load_config()
        self._load_credentials()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from files with fallback to defaults."""
        config = copy.deepcopy(self.DEFAULT_CONFIG)

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                user_config = json.load(f)
            self._merge_config(config, user_config)
        except FileNotFoundError:
            pass
        except json.JSONDecodeError as e:
            print(f"[!] Error parsing {self.config_file}: {e}, using default configuration")

        # Load local overrides
        try:
            with open(self.local_config_file, "r", encoding="utf-8") as f:
                local_config = json.load(f)
            self._merge_config(config, local_config)
        except FileNotFoundError:
            pass
        except json.JSONDecodeError as e:
            print(f"[!] Error parsing {self.local_config_file}: {e}, ignoring local config")

        return config

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> None:
        """Recursively merge configuration dictionaries.

        Args:
            base: Base configuration dictionary to merge into
            override: Override configuration dictionary to merge from
        """
        for section, values in override.items():
            if section not in base:
                base[section] = values
            elif isinstance(values, dict) and isinstance(base[section], dict):
                self._merge_config(base[section], values)
            else:
                base[section] = values

    def _load_credentials(self) -> None:
        """Read IMAP credentials from the environment or a .env file."""
        load_dotenv()
        self.username = os.getenv("IMAP_USER", "")
        self.password = os.getenv("IMAP_PASS", "")

    def apply_overrides(self, overrides: Dict[str, Any]) -> None:
        """Apply command line overrides on top of the loaded configuration.

        Keys with a value of None are ignored, so unset flags keep the
        configured value. Recognised keys are the option names of
        ``mail_settings`` and ``archive_settings`` plus ``user`` and ``password``.

        Args:
            overrides: Flat mapping of option name to value
        """
        for key, value in overrides.items():
            if value is None:
                continue
            if key == "user":
                self.username = value
            elif key == "password":
                self.password = value
            elif key in self.config["mail_settings"]:
                self.config["mail_settings"][key] = value
            elif key in self.config["archive_settings"]:
                self.config["archive_settings"][key] = value
            else:
                raise ConfigurationError(f"unknown configuration option '{key}'")

    def validate(self) -> None:
        """Check that everything needed for a run is present.

        Raises:
            ConfigurationError: If host, port, user or archive folder is missing,
                or no mailbox to process was configured
        """
        mail = self.config["mail_settings"]

        try:
            port = int(mail["imap_port"])
        except (TypeError, ValueError):
            raise ConfigurationError(f"invalid IMAP port: {mail['imap_port']!r}")

        if not mail["imap_host"] or port < 1 or not self.username:
            raise ConfigurationError("no host, port or user supplied")

        if not mail["archive_folder"]:
            raise ConfigurationError("no archive folder supplied")

        if not mail["mailboxes"] and not mail["recursive_mailboxes"]:
            raise ConfigurationError("please supply at least one mailbox to process")

    def get_mail_settings(self) -> Dict[str, Any]:
        """Get mail server settings."""
        return self.config["mail_settings"]

    def get_archive_config(self) -> Dict[str, Any]:
        """Get archive processing settings."""
        return self.config["archive_settings"]

    def get_connection_settings(self) -> ConnectionSettings:
        """Build connection settings from the merged configuration."""
        mail = self.config["mail_settings"]
        return ConnectionSettings(
            host=mail["imap_host"],
            port=int(mail["imap_port"]),
            user=self.username,
            password=self.password,
            timeout=int(self.config["archive_settings"]["timeout"]),
        )

    def get_archive_settings(self) -> ArchiveSettings:
        """Build archive settings from the merged configuration."""
        mail = self.config["mail_settings"]
        settings = self.config["archive_settings"]
        return ArchiveSettings(
            archive_folder=mail["archive_folder"],
            mailboxes=list(mail["mailboxes"]),
            recursive_mailboxes=list(mail["recursive_mailboxes"]),
            ignore_mailboxes=list(mail["ignore_mailboxes"]),
            skip_current_month=bool(settings["skip_current_month"]),
            dry_run=bool(settings["dry_run"]),
            verbose=bool(settings["verbose"]),
        )
