"""pytest configuration: isolated sqlite database, no seeding, no scheduler."""
import os
import tempfile

_TMP = tempfile.mkdtemp(prefix="redeemhub-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP, 'test.db')}"
os.environ["SEED_SAMPLE_DATA"] = "false"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["LOCK_DIR"] = os.path.join(_TMP, "locks")

import pytest  # noqa: E402

from redeemhub.db import SessionLocal, init_db  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_db():
    init_db(reset=True, seed=False)
    yield


@pytest.fixture
def db():
    s = SessionLocal()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def lookup():
    """Read a row through a separate session, so assertions see committed state only."""

    def _lookup(model, pk):
        with SessionLocal() as s:
            return s.get(model, pk)

    return _lookup
