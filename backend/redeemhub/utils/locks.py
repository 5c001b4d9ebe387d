import os
import re
from contextlib import contextmanager
from typing import Iterator

from filelock import FileLock, Timeout

from redeemhub.config import settings
from redeemhub.exceptions import ConcurrencyError

_UNSAFE = re.compile(r"[^A-Za-z0-9_-]")


@contextmanager
def resource_lock(name: str) -> Iterator[None]:
    """
    Inter-process lock on a named resource (e.g. "product_3", "code_NET-AB120042").

    Raises ConcurrencyError when the lock is not acquired within
    LOCK_TIMEOUT_SECONDS.
    """
    os.makedirs(settings.LOCK_DIR, exist_ok=True)
    lockfile = os.path.join(settings.LOCK_DIR, f"{_UNSAFE.sub('_', name)}.lock")
    lock = FileLock(lockfile)
    try:
        lock.acquire(timeout=settings.LOCK_TIMEOUT_SECONDS)
    except Timeout:
        raise ConcurrencyError(name)
    try:
        yield
    finally:
        lock.release()
