"""
Bot-wide statistics for the owner commands.

Read-only: nothing here writes to any store, so any number of callers can
aggregate concurrently. One ticket-stats query is issued per server, which
keeps this suitable for small to moderate server counts.
"""

import logging
from typing import List, Sequence

from database.adapter import DatabaseAdapter
from models.stats import BotWideStats, RankedServer, TenantInfo

logger = logging.getLogger(__name__)

DEFAULT_SERVER_LIST_LIMIT = 20


class StatsAggregator:
    """Rolls up ticket and feedback counts across servers."""

    def __init__(self, database: DatabaseAdapter):
        """
        Initialize StatsAggregator.

        Args:
            database: Read adapter onto the ticket and feedback stores
        """
        self.database = database

    async def compute_bot_wide_stats(self, tenants: Sequence[TenantInfo]) -> BotWideStats:
        """
        Aggregate counts across the given servers.

        Args:
            tenants: Platform snapshot of the servers the bot is in

        Returns:
            BotWideStats: Immutable aggregate snapshot

        Raises:
            DatabaseError: If a count cannot be read
        """
        total_tickets = 0
        open_tickets = 0
        for tenant in tenants:
            stats = await self.database.get_ticket_stats(tenant.tenant_id)
            total_tickets += stats.total_tickets
            open_tickets += stats.open_tickets

        total_feedback = await self.database.count_feedback()

        snapshot = BotWideStats(
            server_count=len(tenants),
            user_count=sum(tenant.member_count for tenant in tenants),
            total_tickets=total_tickets,
            open_tickets=open_tickets,
            closed_tickets=total_tickets - open_tickets,
            total_feedback=total_feedback
        )
        logger.debug(f"Computed bot-wide stats: {snapshot}")
        return snapshot

    async def rank_servers(self, tenants: Sequence[TenantInfo],
                           limit: int = DEFAULT_SERVER_LIST_LIMIT) -> List[RankedServer]:
        """
        Rank servers by member count.

        Ties keep their input order (the sort is stable). Only the servers
        that make the cut are looked up in the ticket store.

        Args:
            tenants: Platform snapshot of the servers, in platform order
            limit: Maximum number of servers to return

        Returns:
            List[RankedServer]: Top servers with their ticket totals
        """
        if limit <= 0:
            return []

        top = sorted(tenants, key=lambda tenant: tenant.member_count, reverse=True)[:limit]

        ranked = []
        for position, tenant in enumerate(top, start=1):
            stats = await self.database.get_ticket_stats(tenant.tenant_id)
            ranked.append(RankedServer(rank=position, tenant=tenant, total_tickets=stats.total_tickets))
        return ranked
