"""
SQLite database adapter implementation for the Discord ticket bot.
"""
import aiosqlite
import logging
from pathlib import Path

from database.adapter import DatabaseAdapter, DatabaseError, ConnectionError
from models.stats import TicketStats


logger = logging.getLogger(__name__)


class SQLiteAdapter(DatabaseAdapter):
    """
    SQLite implementation of the DatabaseAdapter interface.

    Reads ticket and feedback counts from the tables the ticket lifecycle
    and feedback subsystems write to.
    """

    def __init__(self, connection_string: str, **kwargs):
        """
        Initialize SQLite adapter.

        Args:
            connection_string: Path to SQLite database file
            **kwargs: Additional configuration (timeout)
        """
        super().__init__(connection_string, **kwargs)
        self.db_path = connection_string
        self.timeout = kwargs.get('timeout', 30.0)
        self._schema_initialized = False

    async def connect(self) -> None:
        """
        Verify the database is reachable and make sure the schema exists.

        Raises:
            ConnectionError: If connection cannot be established
        """
        try:
            db_path = Path(self.db_path)
            db_path.parent.mkdir(parents=True, exist_ok=True)

            async with self._connect() as conn:
                await conn.execute("SELECT 1")

            if not self._schema_initialized:
                await self._initialize_schema()
                self._schema_initialized = True

            logger.info(f"Connected to SQLite database: {self.db_path}")

        except Exception as e:
            logger.error(f"Failed to connect to SQLite database: {e}")
            raise ConnectionError(f"Failed to connect to SQLite database: {e}")

    async def disconnect(self) -> None:
        """Connections are opened per query; nothing persistent to close."""
        logger.info("Disconnected from SQLite database")

    async def is_connected(self) -> bool:
        """
        Check if database is accessible.

        Returns:
            bool: True if database is accessible, False otherwise
        """
        try:
            async with self._connect() as conn:
                await conn.execute("SELECT 1")
                return True
        except Exception:
            return False

    def _connect(self) -> aiosqlite.Connection:
        """Open a connection; enter it with ``async with`` before use."""
        return aiosqlite.connect(self.db_path, timeout=self.timeout)

    async def _initialize_schema(self) -> None:
        """Create the ticket and feedback tables if they do not exist yet."""
        try:
            async with self._connect() as conn:
                await conn.execute("""
                    CREATE TABLE IF NOT EXISTS tickets (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        ticket_id TEXT UNIQUE NOT NULL,
                        guild_id INTEGER NOT NULL,
                        channel_id INTEGER,
                        creator_id INTEGER NOT NULL,
                        category_id TEXT NULL,
                        status TEXT DEFAULT 'open',
                        created_at TIMESTAMP NOT NULL,
                        closed_at TIMESTAMP NULL
                    )
                """)

                await conn.execute("""
                    CREATE TABLE IF NOT EXISTS feedback (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        ticket_id TEXT NOT NULL,
                        guild_id INTEGER NOT NULL,
                        user_id INTEGER NOT NULL,
                        rating INTEGER NOT NULL,
                        comment TEXT NULL,
                        created_at TIMESTAMP NOT NULL
                    )
                """)

                await conn.execute("""
                    CREATE INDEX IF NOT EXISTS idx_tickets_status
                    ON tickets(guild_id, status)
                """)

                await conn.commit()
                logger.info("SQLite schema initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize SQLite schema: {e}")
            raise DatabaseError(f"Failed to initialize schema: {e}", operation="initialize_schema")

    async def get_ticket_stats(self, guild_id: int) -> TicketStats:
        """
        Get ticket counts for one guild.

        Args:
            guild_id: Discord guild ID

        Returns:
            TicketStats: Total and open ticket counts

        Raises:
            DatabaseError: If retrieval fails
        """
        try:
            async with self._connect() as conn:
                conn.row_factory = aiosqlite.Row
                cursor = await conn.execute("""
                    SELECT COUNT(*) AS total,
                           COALESCE(SUM(CASE WHEN status = 'open' THEN 1 ELSE 0 END), 0) AS open
                    FROM tickets WHERE guild_id = ?
                """, (guild_id,))
                row = await cursor.fetchone()

                return TicketStats(total_tickets=row['total'], open_tickets=row['open'])

        except Exception as e:
            logger.error(f"Failed to get ticket stats for guild {guild_id}: {e}")
            raise DatabaseError(f"Failed to retrieve ticket stats: {e}", operation="get_ticket_stats")

    async def count_feedback(self) -> int:
        """
        Count every feedback entry.

        Returns:
            int: Number of feedback rows

        Raises:
            DatabaseError: If retrieval fails
        """
        try:
            async with self._connect() as conn:
                conn.row_factory = aiosqlite.Row
                cursor = await conn.execute("SELECT COUNT(*) AS total FROM feedback")
                row = await cursor.fetchone()
                return row['total']

        except Exception as e:
            logger.error(f"Failed to count feedback: {e}")
            raise DatabaseError(f"Failed to count feedback: {e}", operation="count_feedback")
