"""
Message move strategies.

Moving a message uses UID MOVE (RFC 6851) when the server supports it and
falls back to COPY + STORE \\Deleted + EXPUNGE otherwise. The choice is made
once per session by build_mover().
"""


class Mover:
    """Moves a single message out of the currently selected mailbox."""

    native = False

    def __init__(self, session):
        self.session = session

    def move(self, uid: int, target: str) -> None:
        raise NotImplementedError


class NativeMover(Mover):
    """Uses the server's atomic UID MOVE command."""

    native = True

    def move(self, uid: int, target: str) -> None:
        self.session.move(uid, target)


class CopyDeleteMover(Mover):
    """Copies the message, flags the original deleted and expunges.

    A failing step is raised as is; steps that already succeeded are not
    rolled back.
    """

    def move(self, uid: int, target: str) -> None:
        self.session.copy(uid, target)
        self.session.mark_deleted(uid)
        self.session.expunge()


class DryRunMover(Mover):
    """Reports every move as successful without contacting the server."""

    def __init__(self, mover: Mover):
        super().__init__(mover.session)
        self.mover = mover
        self.native = mover.native

    def move(self, uid: int, target: str) -> None:
        pass


def build_mover(session, dry_run: bool = False) -> Mover:
    """Choose the move strategy for a session.

    Args:
        session: Connected mail session
        dry_run: Wrap the strategy so nothing is changed on the server

    Returns:
        Mover implementing the selected strategy
    """
    if session.supports_move():
        mover: Mover = NativeMover(session)
    else:
        mover = CopyDeleteMover(session)

    if dry_run:
        return DryRunMover(mover)
    return mover
