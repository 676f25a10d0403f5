# Core package for the global category catalog and bot-wide statistics

from .category_registry import CategoryRegistry
from .tenant_config_store import TenantConfigStore
from .consistency_coordinator import ConsistencyCoordinator, CascadeResult
from .stats_aggregator import StatsAggregator

__all__ = [
    'CategoryRegistry',
    'TenantConfigStore',
    'ConsistencyCoordinator',
    'CascadeResult',
    'StatsAggregator'
]
