"""
Per-server (tenant) configuration record.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

ENABLED_CATEGORIES_KEY = 'enabledCategories'


@dataclass
class TenantConfig:
    """
    Configuration record for one Discord guild.

    Only ``enabled_categories`` is owned by the category core; every other key
    of the stored record is kept in ``settings`` and written back untouched.

    Attributes:
        tenant_id: Discord guild ID
        enabled_categories: Ordered IDs of the global categories this guild enabled
        settings: Remaining guild settings, opaque to the category core
        enabled_position: Index of ``enabledCategories`` in the stored record, None if absent
        enabled_was_null: Whether the stored record held ``enabledCategories: null``
    """
    tenant_id: int
    enabled_categories: List[str] = field(default_factory=list)
    settings: Dict[str, Any] = field(default_factory=dict)
    enabled_position: Optional[int] = field(default=None, repr=False, compare=False)
    enabled_was_null: bool = field(default=False, repr=False, compare=False)

    def __post_init__(self):
        """Validate the record after initialization."""
        if not isinstance(self.tenant_id, int) or self.tenant_id <= 0:
            raise ValueError(f"Invalid tenant_id: {self.tenant_id}")

        if not isinstance(self.enabled_categories, list):
            raise ValueError("enabled_categories must be a list")

    def has_category(self, category_id: str) -> bool:
        return category_id in self.enabled_categories

    def enable(self, category_id: str) -> bool:
        """Enable a category. Returns False if it was already enabled."""
        if category_id in self.enabled_categories:
            return False
        self.enabled_categories.append(category_id)
        return True

    def disable(self, category_id: str) -> bool:
        """Disable a category. Returns False if it was not enabled."""
        if category_id not in self.enabled_categories:
            return False
        self.enabled_categories = [c for c in self.enabled_categories if c != category_id]
        return True

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the stored record.

        ``enabledCategories`` goes back where it was loaded from. A record that
        never held the key only gains it once something is enabled, and a
        stored null stays null while the list is empty.
        """
        if self.enabled_categories:
            value: Any = list(self.enabled_categories)
        elif self.enabled_was_null:
            value = None
        elif self.enabled_position is None:
            return dict(self.settings)
        else:
            value = []

        items = list(self.settings.items())
        position = len(items) if self.enabled_position is None else self.enabled_position
        items.insert(position, (ENABLED_CATEGORIES_KEY, value))
        return dict(items)

    @classmethod
    def from_dict(cls, tenant_id: int, data: Dict[str, Any]) -> 'TenantConfig':
        """
        Create a record from its stored form.

        Raises:
            ValueError: If the record is not an object or ``enabledCategories`` is not a list
        """
        if not isinstance(data, dict):
            raise ValueError(f"Server configuration must be an object, got {type(data).__name__}")

        keys = list(data)
        position = keys.index(ENABLED_CATEGORIES_KEY) if ENABLED_CATEGORIES_KEY in data else None
        enabled = data.get(ENABLED_CATEGORIES_KEY)
        if enabled is not None and not isinstance(enabled, list):
            raise ValueError("enabledCategories must be a list")

        settings = {k: v for k, v in data.items() if k != ENABLED_CATEGORIES_KEY}
        return cls(
            tenant_id=tenant_id,
            enabled_categories=list(enabled or []),
            settings=settings,
            enabled_position=position,
            enabled_was_null=position is not None and enabled is None
        )
