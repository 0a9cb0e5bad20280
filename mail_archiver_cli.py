#!/usr/bin/env python3
"""
Mail Archiver - sorts IMAP mailboxes into a year/month folder structure.

Usage:
  1) Set env vars IMAP_USER/IMAP_PASS or edit .env file
  2) Adjust mailboxes and archive folder in config.json, or pass them as flags
  3) Run: python mail_archiver_cli.py --mbox INBOX --archive Archive --dry
"""

import sys
from mail_archiver.cli import main

if __name__ == "__main__":
    sys.exit(main())
