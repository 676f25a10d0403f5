# Models package for category, tenant and statistics data structures

from .category import CategoryDefinition, normalize_category_id
from .tenant import TenantConfig
from .stats import TicketStats, TenantInfo, BotWideStats, RankedServer

__all__ = [
    'CategoryDefinition',
    'normalize_category_id',
    'TenantConfig',
    'TicketStats',
    'TenantInfo',
    'BotWideStats',
    'RankedServer'
]
