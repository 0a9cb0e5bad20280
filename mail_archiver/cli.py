"""
Command Line Interface for Mail Archiver.

Provides the CLI entry point for sorting mailboxes into a year/month
folder structure.
"""

import argparse
import getpass
import sys
from typing import List, Optional

from . import __version__
from .archiver import MailArchiver
from .config import ConfigManager
from .errors import ConfigurationError, MailArchiverError
from .imap_session import IMAPSession
from .reporting import ConsoleReporter


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="mail-archiver",
        description="Automatically sort your emails into a year-month folder structure.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-H", "--host", help="IMAP host")
    parser.add_argument("-p", "--port", type=int, help="IMAP port (default: 993)")
    parser.add_argument("-u", "--user", help="IMAP user (default: $IMAP_USER)")
    parser.add_argument(
        "--password", "--pw",
        help="IMAP password (default: $IMAP_PASS, prompted if still empty)",
    )
    parser.add_argument("-a", "--archive", help="Main archive folder (default: Archive)")
    parser.add_argument(
        "--mbox", action="append",
        help="Mailbox to process; may be given multiple times",
    )
    parser.add_argument(
        "--rmbox", action="append",
        help="Mailbox prefix to process recursively; may be given multiple times",
    )
    parser.add_argument(
        "--imbox", action="append",
        help="Mailbox prefix to ignore (overrides --mbox and --rmbox); may be given multiple times",
    )
    parser.add_argument(
        "--skip-current", action="store_true", default=None,
        help="Skip mails from the current month",
    )
    parser.add_argument(
        "--dry", action="store_true", default=None,
        help="Perform a dry run, nothing will be changed on the IMAP server",
    )
    parser.add_argument(
        "--config", default="config.json",
        help="Path to the configuration file (default: config.json)",
    )
    parser.add_argument(
        "--local-config", default="config.local.json",
        help="Path to the local override file (default: config.local.json)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true",
        help="Only print warnings, errors and the final summary",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ConfigManager:
    """Load configuration files and apply command line overrides."""
    config_manager = ConfigManager(args.config, args.local_config)
    config_manager.apply_overrides({
        "imap_host": args.host,
        "imap_port": args.port,
        "user": args.user,
        "password": args.password,
        "archive_folder": args.archive,
        "mailboxes": args.mbox,
        "recursive_mailboxes": args.rmbox,
        "ignore_mailboxes": args.imbox,
        "skip_current_month": args.skip_current,
        "dry_run": args.dry,
        "verbose": False if args.quiet else None,
    })
    return config_manager


def prompt_password() -> str:
    """Ask for the IMAP password without echoing it."""
    try:
        return getpass.getpass("Please enter password: ")
    except (EOFError, OSError) as e:
        raise ConfigurationError(f"error while reading password from stdin: {e}")


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point for Mail Archiver."""
    args = parse_args(argv)

    try:
        config_manager = build_config(args)
        config_manager.validate()
        if not config_manager.password:
            config_manager.password = prompt_password()
    except ConfigurationError as e:
        print(f"[!] {e}")
        return 1
    except KeyboardInterrupt:
        print("\n[!] Interrupted by user")
        return 1

    connection = config_manager.get_connection_settings()
    settings = config_manager.get_archive_settings()
    reporter = ConsoleReporter(settings.verbose)

    if settings.verbose:
        print(f"Mail Archiver v{__version__}")
        print("=" * 40)
        print(f"[i] Connecting to {connection.host}:{connection.port} as {connection.user}")

    session = IMAPSession(connection)
    archiver = MailArchiver(session, settings, reporter)

    try:
        session.connect()
        session.identify()
        archiver.run()
        return 0

    except MailArchiverError as e:
        reporter.on_error(str(e))
        reporter.on_complete(archiver.summary())
        return 1
    except KeyboardInterrupt:
        print("\n[!] Interrupted by user")
        reporter.on_complete(archiver.summary())
        return 1
    finally:
        session.logout()


if __name__ == "__main__":
    sys.exit(main())
