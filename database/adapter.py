"""
Abstract read interface onto the ticket and feedback stores.

Tickets and feedback are written by the ticket lifecycle and feedback
subsystems; the category core and the statistics commands only read counts.
"""
from abc import ABC, abstractmethod

from errors.exceptions import DatabaseError
from models.stats import TicketStats


class ConnectionError(DatabaseError):
    """Exception raised when database connection fails."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, operation="connect", **kwargs)


class DatabaseAdapter(ABC):
    """
    Abstract base class for ticket/feedback database adapters.

    This interface defines the counts the statistics aggregator consumes and
    the connection management every adapter must provide.
    """

    def __init__(self, connection_string: str, **kwargs):
        """
        Initialize the database adapter.

        Args:
            connection_string: Database connection string
            **kwargs: Additional configuration parameters
        """
        self.connection_string = connection_string
        self.config = kwargs

    @abstractmethod
    async def connect(self) -> None:
        """
        Establish connection to the database.

        Raises:
            ConnectionError: If connection cannot be established
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """
        Close the database connection and cleanup resources.
        """
        pass

    @abstractmethod
    async def is_connected(self) -> bool:
        """
        Check if the database connection is active.

        Returns:
            bool: True if connected, False otherwise
        """
        pass

    @abstractmethod
    async def get_ticket_stats(self, guild_id: int) -> TicketStats:
        """
        Get ticket counts for one guild.

        Args:
            guild_id: Discord guild ID

        Returns:
            TicketStats: Total and open ticket counts (zeros for unknown guilds)

        Raises:
            DatabaseError: If retrieval fails
        """
        pass

    @abstractmethod
    async def count_feedback(self) -> int:
        """
        Count every feedback entry across all guilds.

        Returns:
            int: Flat number of feedback entries

        Raises:
            DatabaseError: If retrieval fails
        """
        pass

    async def __aenter__(self):
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.disconnect()
