"""Shared pytest fixtures for familyhub tests."""

import tempfile
import os
from datetime import datetime, timedelta, UTC
import pytest

from familyhub.database.factories import create_sqlite_database
from familyhub.domain.entities import ProfileRole
from familyhub.domain.store import DomainStore


class TickingClock:
    """Clock that moves forward one minute every time it is read."""

    def __init__(self, start=datetime(2024, 1, 1, 8, 0, tzinfo=UTC)):
        self.now = start

    def __call__(self):
        current = self.now
        self.now += timedelta(minutes=1)
        return current


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def store(clock):
    """Create an empty, tolerant store with a deterministic clock."""
    return DomainStore(clock=clock)


@pytest.fixture
def strict_store(clock):
    """Create an empty store that raises on missing ids."""
    return DomainStore(clock=clock, strict=True)


@pytest.fixture
def family(store):
    """Add a parent and two children; returns their profile IDs by name."""
    return {
        "alex": store.add_profile("Alex", role=ProfileRole.PARENT),
        "sam": store.add_profile("Sam"),
        "kim": store.add_profile("Kim"),
    }


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def invoke(cli_runner, temp_db):
    """Invoke the CLI against the temporary database."""
    from familyhub.cli.main import cli

    def run(*args, input=None):
        return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], input=input)

    return run
