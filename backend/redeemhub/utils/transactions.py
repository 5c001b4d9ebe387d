from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session


@contextmanager
def smart_transaction(session: Session) -> Iterator[Session]:
    """
    Run the block in one transaction: commit on success, roll back on error.

    If the session already has a transaction open (a caller is composing
    several service calls) a SAVEPOINT is used instead, so only the block's
    own writes are undone on error and the outer owner decides the commit.
    """
    if session.in_transaction():
        cm = session.begin_nested()
    else:
        cm = session.begin()
    with cm:
        yield session


@contextmanager
def savepoint(session: Session) -> Iterator[Session]:
    """SAVEPOINT for a single row inside a larger transaction (bulk inserts)."""
    with session.begin_nested():
        yield session
