"""
Per-server configuration collection.

All server records live in one collection document keyed by guild ID. There
is no per-record update: callers take a snapshot with ``load_all``, change it
in memory and write the whole collection back with ``save_all`` while holding
the collection lock.
"""

import logging
from typing import Any, Dict, Optional

from database.document_store import DocumentStore
from errors.exceptions import DatabaseError
from models.tenant import TenantConfig

logger = logging.getLogger(__name__)


class TenantCollection(dict):
    """
    Snapshot of the collection: ``Dict[int, TenantConfig]`` keyed by guild ID.

    Entries that are not valid server records (a key that is not a guild ID, or
    a record that cannot be parsed) are kept verbatim in ``unparsed`` and written
    back where they were. ``stored_keys`` maps every stored key, in document
    order, to the guild ID it parsed as, or None.
    """

    def __init__(self):
        super().__init__()
        self.stored_keys: Dict[str, Optional[int]] = {}
        self.unparsed: Dict[str, Any] = {}


def _parse_tenant_id(key: str) -> Optional[int]:
    try:
        tenant_id = int(key)
    except (TypeError, ValueError):
        return None
    return tenant_id if tenant_id > 0 else None


class TenantConfigStore:
    """Reads and replaces the collection of per-server records."""

    def __init__(self, store: DocumentStore, document_name: str = "server_configs.json"):
        """
        Initialize TenantConfigStore.

        Args:
            store: Document store holding the collection document
            document_name: Name of the collection document
        """
        self.store = store
        self.document_name = document_name

    @property
    def lock(self):
        """Single-writer lock of the collection document."""
        return self.store.lock(self.document_name)

    async def load_all(self) -> TenantCollection:
        """
        Load an in-memory snapshot of every server record.

        Returns:
            TenantCollection: Records keyed by guild ID, in document order

        Raises:
            DatabaseError: If the document cannot be read or is not a JSON object
        """
        raw = await self.store.load(self.document_name, default={})
        if not isinstance(raw, dict):
            raise DatabaseError(
                f"{self.document_name} must contain a JSON object",
                operation=f"load:{self.document_name}"
            )

        configs = TenantCollection()
        for key, data in raw.items():
            tenant_id = _parse_tenant_id(key)
            configs.stored_keys[key] = tenant_id
            if tenant_id is None:
                logger.warning(f"Keeping server configuration entry {key!r} as is: not a guild ID")
                configs.unparsed[key] = data
                continue

            try:
                configs[tenant_id] = TenantConfig.from_dict(tenant_id, data)
            except ValueError as e:
                logger.warning(f"Keeping server configuration for {key} as is: {e}")
                configs.unparsed[key] = data
        return configs

    async def save_all(self, configs: Dict[int, TenantConfig]) -> None:
        """
        Replace the whole collection with a snapshot.

        Entries kept verbatim by ``load_all`` go back unchanged unless the
        snapshot now holds a record for the same guild.

        Raises:
            DatabaseError: If the document cannot be written
        """
        stored_keys = getattr(configs, 'stored_keys', {})
        unparsed = getattr(configs, 'unparsed', {})

        document: Dict[str, Any] = {}
        written = set()
        for key, tenant_id in stored_keys.items():
            if tenant_id in configs and tenant_id not in written:
                document[key] = configs[tenant_id].to_dict()
                written.add(tenant_id)
            elif key in unparsed:
                document[key] = unparsed[key]

        for tenant_id, config in configs.items():
            if tenant_id not in written:
                document[str(tenant_id)] = config.to_dict()

        await self.store.replace(self.document_name, document)
        logger.debug(f"Saved {len(configs)} server configurations")

    async def get(self, tenant_id: int) -> TenantConfig:
        """
        Get one server's record.

        Args:
            tenant_id: Discord guild ID

        Returns:
            TenantConfig: The stored record, or an empty default record
        """
        configs = await self.load_all()
        return configs.get(tenant_id) or TenantConfig(tenant_id=tenant_id)
