"""Shared fixtures: an in-memory database and a recording notifier."""

from collections.abc import AsyncGenerator

import aiosqlite
import pytest
import pytest_asyncio

from institute.app.auth import SecurityManager, UserQueries
from institute.app.inquiries import Inquiry, NotificationError
from institute.app.schema import initialize_tables

TEST_SECRET_KEY = "test-secret-key-that-is-long-enough-for-hs512"  # noqa: S105
TEST_PASSWORD = "correct-horse-battery"  # noqa: S105


class RecordingNotifier:
    """Notifier that remembers alerts instead of sending them."""

    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[tuple[Inquiry, list[str]]] = []

    async def send_inquiry_alert(self, inquiry: Inquiry, recipients: list[str]) -> None:
        if self.fail:
            msg = "mail provider unavailable"
            raise NotificationError(msg)
        self.sent.append((inquiry, recipients))


@pytest.fixture
def security_manager() -> SecurityManager:
    """Security manager with a fixed key and short password rule."""
    return SecurityManager(secret_key=TEST_SECRET_KEY, password_min_length=8)


@pytest_asyncio.fixture
async def connection() -> AsyncGenerator[aiosqlite.Connection, None]:
    """Fresh in-memory database with all tables created."""
    async with aiosqlite.connect(":memory:") as db_connection:
        await initialize_tables(db_connection)
        yield db_connection


@pytest_asyncio.fixture
async def user_queries(
    connection: aiosqlite.Connection,
    security_manager: SecurityManager,
) -> UserQueries:
    return UserQueries(connection, security_manager)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()
