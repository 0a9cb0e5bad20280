"""
IMAP session management.

Wraps an imaplib connection and exposes the operations the archive engine
needs: listing, selecting, date fetching, moving and folder creation. Every
server or transport failure is raised as SessionError.
"""

import email
import email.utils
import imaplib
import re
import socket
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List, Optional, Set, Tuple

from . import __version__
from .config import ConnectionSettings
from .errors import SessionError

_LIST_RE = re.compile(
    r'^\((?P<flags>[^)]*)\)\s+(?P<delimiter>"(?:[^"\\]|\\.)*"|NIL)\s+(?P<name>.*)$',
    re.IGNORECASE,
)
_LITERAL_RE = re.compile(r"\{\d+\}$")
_UID_RE = re.compile(r"\bUID\s+(\d+)", re.IGNORECASE)
_HEADER_ITEM_RE = re.compile(r"BODY\[HEADER\.FIELDS", re.IGNORECASE)

DATE_FETCH_ITEMS = "(UID BODY.PEEK[HEADER.FIELDS (DATE)])"


def quote_mailbox(name: str) -> str:
    """Quote a mailbox name for use as an IMAP astring."""
    return '"' + name.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _unquote(value: str) -> str:
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return re.sub(r"\\(.)", r"\1", value[1:-1])
    return value


def _decode(value) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def parse_list_line(item) -> Optional[Tuple[str, str, List[str]]]:
    """Parse one entry of a LIST response.

    Args:
        item: Either the raw response line, or a (line, literal) tuple when
            the server sent the mailbox name as a literal

    Returns:
        Tuple of (name, delimiter, flags), or None for unparseable entries.
        A NIL delimiter is returned as an empty string.
    """
    literal = None
    if isinstance(item, tuple):
        line, literal = _decode(item[0]), _decode(item[1])
    else:
        line = _decode(item)

    match = _LIST_RE.match(line.strip())
    if not match:
        return None

    flags = match.group("flags").split()
    raw_delimiter = match.group("delimiter")
    delimiter = "" if raw_delimiter.upper() == "NIL" else _unquote(raw_delimiter)

    name = match.group("name").strip()
    if literal is not None and _LITERAL_RE.search(name):
        name = literal
    else:
        name = _unquote(name)

    return name, delimiter, flags


def parse_date_header(raw) -> Optional[datetime]:
    """Extract the Date header from a header block.

    Returns:
        Parsed datetime, or None if the header is missing or invalid
    """
    if not raw:
        return None
    if isinstance(raw, str):
        raw = raw.encode("utf-8")

    value = email.message_from_bytes(raw).get("Date")
    if not value:
        return None

    try:
        return email.utils.parsedate_to_datetime(str(value).strip())
    except (TypeError, ValueError, IndexError):
        return None


def parse_fetch_response(data) -> Iterator[Tuple[int, Optional[datetime]]]:
    """Parse a UID FETCH response for the Date header field.

    Some servers put the UID before the header literal, others (e.g. Proton
    Bridge) send it in the trailing line after the literal. Both are handled.

    Yields:
        Tuples of (uid, date)
    """
    pending = False
    pending_date: Optional[datetime] = None

    for item in data:
        if item is None:
            continue

        if isinstance(item, tuple):
            meta = _decode(item[0])
            date = parse_date_header(item[1])
            match = _UID_RE.search(meta)
            if match:
                yield int(match.group(1)), date
                pending = False
            else:
                pending, pending_date = True, date
        else:
            line = _decode(item)
            match = _UID_RE.search(line)
            if not match:
                continue
            if pending:
                yield int(match.group(1)), pending_date
                pending = False
            elif _HEADER_ITEM_RE.search(line):
                # Header sent inline as NIL or "" instead of a literal
                yield int(match.group(1)), None


class IMAPSession:
    """A single authenticated IMAP connection."""

    def __init__(self, settings: ConnectionSettings, conn: Optional[imaplib.IMAP4] = None):
        """Initialize IMAP session.

        Args:
            settings: Server address and credentials
            conn: Already connected imaplib connection; when omitted,
                connect() opens a TLS connection
        """
        self.settings = settings
        self.conn = conn
        self._capabilities: Optional[Set[str]] = None
        self._selected: Optional[str] = None
        self._exists = 0

    @contextmanager
    def _guard(self, operation: str, mailbox: Optional[str] = None):
        try:
            yield
        except SessionError:
            raise
        except (imaplib.IMAP4.error, OSError) as e:
            raise SessionError(str(e), operation, mailbox) from e

    def _check(self, typ: str, data, operation: str, mailbox: Optional[str] = None) -> None:
        if typ != "OK":
            detail = " ".join(_decode(d) for d in (data or []) if isinstance(d, (bytes, str)))
            raise SessionError(detail or typ, operation, mailbox)

    def connect(self) -> None:
        """Open the TLS connection and log in."""
        with self._guard("LOGIN"):
            socket.setdefaulttimeout(self.settings.timeout)
            self.conn = imaplib.IMAP4_SSL(self.settings.host, self.settings.port)
            typ, data = self.conn.login(self.settings.user, self.settings.password)
            self._check(typ, data, "LOGIN")

    def capabilities(self) -> Set[str]:
        """Return the server capabilities, queried once after login."""
        if self._capabilities is None:
            with self._guard("CAPABILITY"):
                typ, data = self.conn.capability()
                self._check(typ, data, "CAPABILITY")
            self._capabilities = {
                cap.upper() for line in data if line for cap in _decode(line).split()
            }
        return self._capabilities

    def supports_move(self) -> bool:
        return "MOVE" in self.capabilities()

    def identify(self) -> bool:
        """Announce the client via the RFC 2971 ID command when supported.

        Returns:
            True if the server accepted the ID command
        """
        if "ID" not in self.capabilities():
            return False

        fields = f'("name" "mail-archiver" "version" "{__version__}")'
        with self._guard("ID"):
            typ, _ = self.conn.xatom("ID", fields)
        return typ == "OK"

    def list_mailboxes(self) -> Iterator[Tuple[str, str, List[str]]]:
        """List every mailbox on the server.

        Yields:
            Tuples of (name, delimiter, flags)
        """
        with self._guard("LIST"):
            typ, data = self.conn.list()
            self._check(typ, data, "LIST")

        for item in data:
            if item is None:
                continue
            parsed = parse_list_line(item)
            if parsed is not None:
                yield parsed

    def select(self, mailbox: str, readonly: bool = False) -> int:
        """Select a mailbox.

        Args:
            mailbox: Mailbox name
            readonly: Use EXAMINE semantics

        Returns:
            Number of messages in the mailbox
        """
        with self._guard("SELECT", mailbox):
            typ, data = self.conn.select(quote_mailbox(mailbox), readonly)
            self._check(typ, data, "SELECT", mailbox)

        self._selected = mailbox
        try:
            self._exists = int(_decode(data[0]))
        except (TypeError, ValueError, IndexError):
            self._exists = 0
        return self._exists

    def fetch_dates(self) -> Iterator[Tuple[int, Optional[datetime]]]:
        """Fetch UID and Date header of every message in the selected mailbox.

        Yields:
            Tuples of (uid, date); date is None when missing or invalid
        """
        if not self._exists:
            return

        with self._guard("UID FETCH", self._selected):
            typ, data = self.conn.uid("FETCH", "1:*", DATE_FETCH_ITEMS)
            self._check(typ, data, "UID FETCH", self._selected)

        yield from parse_fetch_response(data)

    def move(self, uid: int, target: str) -> None:
        with self._guard("UID MOVE", target):
            typ, data = self.conn.uid("MOVE", str(uid), quote_mailbox(target))
            self._check(typ, data, "UID MOVE", target)

    def copy(self, uid: int, target: str) -> None:
        with self._guard("UID COPY", target):
            typ, data = self.conn.uid("COPY", str(uid), quote_mailbox(target))
            self._check(typ, data, "UID COPY", target)

    def mark_deleted(self, uid: int) -> None:
        with self._guard("UID STORE", self._selected):
            typ, data = self.conn.uid("STORE", str(uid), "+FLAGS", r"(\Deleted)")
            self._check(typ, data, "UID STORE", self._selected)

    def expunge(self) -> None:
        with self._guard("EXPUNGE", self._selected):
            typ, data = self.conn.expunge()
            self._check(typ, data, "EXPUNGE", self._selected)

    def create(self, mailbox: str) -> None:
        with self._guard("CREATE", mailbox):
            typ, data = self.conn.create(quote_mailbox(mailbox))
            self._check(typ, data, "CREATE", mailbox)

    def logout(self) -> None:
        """Close the connection, ignoring errors from an already dead socket."""
        if self.conn is None:
            return
        try:
            self.conn.logout()
        except (imaplib.IMAP4.error, OSError):
            pass
        self.conn = None
