"""
Tests for the SQLite ticket/feedback read adapter against a real database file.
"""

import aiosqlite
import pytest
from datetime import datetime, timezone

from database.adapter import ConnectionError
from database.sqlite_adapter import SQLiteAdapter
from models.stats import TicketStats


async def seed(db_path, tickets, feedback=0):
    now = datetime.now(timezone.utc).isoformat()
    async with aiosqlite.connect(db_path) as conn:
        for index, (guild_id, status) in enumerate(tickets):
            await conn.execute(
                "INSERT INTO tickets (ticket_id, guild_id, creator_id, status, created_at) "
                "VALUES (?, ?, ?, ?, ?)",
                (f"T-{index}", guild_id, 42, status, now)
            )
        for index in range(feedback):
            await conn.execute(
                "INSERT INTO feedback (ticket_id, guild_id, user_id, rating, created_at) "
                "VALUES (?, ?, ?, ?, ?)",
                (f"T-{index}", 1, 42, 5, now)
            )
        await conn.commit()


class TestSQLiteAdapter:
    """Test cases for SQLiteAdapter."""

    @pytest.fixture
    def db_path(self, tmp_path):
        return str(tmp_path / "db" / "tickets.db")

    @pytest.mark.asyncio
    async def test_connect_creates_schema(self, db_path):
        adapter = SQLiteAdapter(db_path)

        await adapter.connect()

        assert await adapter.is_connected()
        assert await adapter.count_feedback() == 0

    @pytest.mark.asyncio
    async def test_ticket_stats_per_guild(self, db_path):
        adapter = SQLiteAdapter(db_path)
        await adapter.connect()
        await seed(db_path, [
            (1, 'open'), (1, 'open'), (1, 'closed'), (1, 'closed'), (1, 'closed'),
            (2, 'open'), (2, 'closed'), (2, 'closed')
        ], feedback=4)

        assert await adapter.get_ticket_stats(1) == TicketStats(total_tickets=5, open_tickets=2)
        assert await adapter.get_ticket_stats(2) == TicketStats(total_tickets=3, open_tickets=1)
        assert await adapter.count_feedback() == 4

    @pytest.mark.asyncio
    async def test_ticket_stats_unknown_guild(self, db_path):
        async with SQLiteAdapter(db_path) as adapter:
            assert await adapter.get_ticket_stats(999) == TicketStats()

    @pytest.mark.asyncio
    async def test_connect_failure(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding='utf-8')
        adapter = SQLiteAdapter(str(blocker / "tickets.db"))

        with pytest.raises(ConnectionError):
            await adapter.connect()

        assert not await adapter.is_connected()
