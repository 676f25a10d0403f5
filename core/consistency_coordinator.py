"""
Consistency Coordinator for Discord Ticket Bot.

Every mutation of the global category catalog or of a server's enabled
categories goes through this module, which keeps the two documents consistent
enough for readers:

- Removing a global category strips it from every server that enabled it.
- Servers can only enable categories that exist in the catalog.

The shared configuration document and the server collection are persisted
independently, with no transaction spanning both. If the collection write
fails after a category was removed from the catalog, servers keep an orphan
reference; readers treat unknown IDs as disabled, so this is tolerated rather
than rolled back.

Locks are always taken in the same order: shared document, then server
collection.
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple

from core.category_registry import CategoryRegistry
from core.tenant_config_store import TenantConfigStore
from errors.exceptions import CategoryNotFoundError
from models.category import CategoryDefinition
from models.tenant import TenantConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CascadeResult:
    """Outcome of removing a global category."""
    category: CategoryDefinition
    affected_tenants: int


class ConsistencyCoordinator:
    """
    Orchestrates registry mutations and their cascade into server records.
    """

    def __init__(self, registry: CategoryRegistry, tenant_store: TenantConfigStore):
        """
        Initialize ConsistencyCoordinator.

        Args:
            registry: Loaded category registry
            tenant_store: Server configuration collection
        """
        self.registry = registry
        self.tenants = tenant_store

    async def add_global_category(self, category_id: str, label: str,
                                  emoji: str, description: str) -> CategoryDefinition:
        """
        Add a category to the global catalog.

        Raises:
            DuplicateCategoryError: If the normalized ID already exists
            ValidationError: If the ID normalizes to nothing
            DatabaseError: If the shared document cannot be written
        """
        async with self.registry.lock:
            return await self.registry.add(category_id, label, emoji, description)

    async def remove_global_category_cascade(self, category_id: str) -> CascadeResult:
        """
        Remove a category from the catalog and from every server that enabled it.

        Args:
            category_id: ID of the category to remove

        Returns:
            CascadeResult: The removed definition and how many servers were changed

        Raises:
            CategoryNotFoundError: If the category does not exist (nothing changes)
            DatabaseError: If either document cannot be read or written
        """
        async with self.registry.lock:
            category = await self.registry.remove(category_id)

            async with self.tenants.lock:
                try:
                    configs = await self.tenants.load_all()

                    affected = 0
                    for config in configs.values():
                        if config.disable(category_id):
                            affected += 1

                    if affected:
                        await self.tenants.save_all(configs)
                except Exception as e:
                    logger.warning(
                        f"Category {category_id} removed from catalog but server cascade failed; "
                        f"orphan references remain until cleaned: {e}"
                    )
                    raise

        logger.info(f"Removed global category {category_id}; disabled in {affected} server(s)")
        return CascadeResult(category=category, affected_tenants=affected)

    def list_global_categories(self) -> Tuple[CategoryDefinition, ...]:
        return self.registry.list()

    async def enable_category(self, tenant_id: int, category_id: str) -> bool:
        """
        Enable a global category for one server.

        Args:
            tenant_id: Discord guild ID
            category_id: ID of the global category

        Returns:
            bool: False if the category was already enabled

        Raises:
            CategoryNotFoundError: If the category is not in the catalog
            DatabaseError: If the collection cannot be read or written
        """
        async with self.registry.lock:
            if category_id not in self.registry:
                raise CategoryNotFoundError(
                    f"Category {category_id} not found",
                    category_id=category_id
                )

            async with self.tenants.lock:
                configs = await self.tenants.load_all()
                config = configs.setdefault(tenant_id, TenantConfig(tenant_id=tenant_id))

                changed = config.enable(category_id)
                if changed:
                    await self.tenants.save_all(configs)

        return changed

    async def disable_category(self, tenant_id: int, category_id: str) -> bool:
        """
        Disable a category for one server.

        Unknown IDs can still be disabled so servers can clear orphan references.

        Returns:
            bool: False if the category was not enabled
        """
        async with self.registry.lock:
            async with self.tenants.lock:
                configs = await self.tenants.load_all()
                config = configs.get(tenant_id)
                if config is None or not config.disable(category_id):
                    return False

                await self.tenants.save_all(configs)

        return True

    async def resolve_enabled_categories(self, tenant_id: int) -> List[CategoryDefinition]:
        """
        Get the categories a server has enabled, in catalog order.

        IDs that are no longer in the catalog are treated as disabled.
        """
        config = await self.tenants.get(tenant_id)
        enabled = set(config.enabled_categories)
        return [category for category in self.registry.list() if category.id in enabled]
