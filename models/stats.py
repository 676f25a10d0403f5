"""
Read-only statistics snapshots used by the owner commands.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TicketStats:
    """Ticket counts for a single guild, as reported by the ticket store."""
    total_tickets: int = 0
    open_tickets: int = 0

    @property
    def closed_tickets(self) -> int:
        return self.total_tickets - self.open_tickets


@dataclass(frozen=True)
class TenantInfo:
    """
    Platform-supplied metadata for one guild the bot is in.

    Attributes:
        tenant_id: Discord guild ID
        name: Guild display name
        member_count: Number of members reported by Discord
        owner_id: Discord user ID of the guild owner
    """
    tenant_id: int
    name: str
    member_count: int = 0
    owner_id: Optional[int] = None


@dataclass(frozen=True)
class BotWideStats:
    """Aggregate counts across every guild the bot is in."""
    server_count: int
    user_count: int
    total_tickets: int
    open_tickets: int
    closed_tickets: int
    total_feedback: int


@dataclass(frozen=True)
class RankedServer:
    """A guild in the member-count ranking, annotated with its ticket total."""
    rank: int
    tenant: TenantInfo
    total_tickets: int
