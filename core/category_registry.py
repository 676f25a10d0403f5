"""
Global Category Registry for Discord Ticket Bot.

The registry owns the catalog of ticket categories every server can enable.
It lives in the shared configuration document under ``ticketCategories``;
every other key of that document belongs to someone else and is written back
exactly as it was loaded.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from database.document_store import DocumentStore
from errors.exceptions import CategoryNotFoundError, DuplicateCategoryError, ValidationError
from models.category import CategoryDefinition, normalize_category_id

logger = logging.getLogger(__name__)

CATEGORIES_KEY = 'ticketCategories'


class CategoryRegistry:
    """
    Owns the shared catalog of category definitions.

    Loaded once at startup and then mutated in memory, with the whole shared
    document persisted after every mutation. Callers that need to serialize
    mutations hold ``store.lock(document_name)``; the consistency coordinator
    does this for every mutating path.
    """

    def __init__(self, store: DocumentStore, document_name: str = "config.json"):
        """
        Initialize CategoryRegistry.

        Args:
            store: Document store holding the shared configuration document
            document_name: Name of the shared configuration document
        """
        self.store = store
        self.document_name = document_name
        self._document: Dict[str, Any] = {}
        self._categories: Dict[str, CategoryDefinition] = {}
        self._loaded = False

    @property
    def lock(self):
        """Single-writer lock of the shared configuration document."""
        return self.store.lock(self.document_name)

    async def load(self) -> None:
        """
        Load the registry from the shared document, creating it if it is missing.

        Raises:
            DatabaseError: If the document cannot be read or created
        """
        if not await self.store.exists(self.document_name):
            await self.store.replace(self.document_name, {CATEGORIES_KEY: {}})
            logger.info(f"Created {self.document_name} with an empty category catalog")

        document = await self.store.load(self.document_name, default={CATEGORIES_KEY: {}})
        raw_categories = document.get(CATEGORIES_KEY) or {}

        self._document = document
        self._categories = {
            category_id: CategoryDefinition.from_dict(category_id, data)
            for category_id, data in raw_categories.items()
        }
        self._loaded = True
        logger.info(f"Loaded {len(self._categories)} global categories from {self.document_name}")

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            raise RuntimeError(f"Category registry used before {self.document_name} was loaded")

    async def _persist(self) -> None:
        document = dict(self._document)
        document[CATEGORIES_KEY] = {
            category_id: category.to_dict()
            for category_id, category in self._categories.items()
        }
        await self.store.replace(self.document_name, document)
        self._document = document

    async def add(self, category_id: str, label: str, emoji: str, description: str) -> CategoryDefinition:
        """
        Add a category to the catalog.

        Args:
            category_id: Requested ID; normalized before use
            label: Display name
            emoji: Display emoji
            description: What the category is for

        Returns:
            CategoryDefinition: The created definition

        Raises:
            ValidationError: If the ID is empty after normalization
            DuplicateCategoryError: If the normalized ID already exists
            DatabaseError: If the document cannot be written
            RuntimeError: If called before load
        """
        self._ensure_loaded()
        normalized_id = normalize_category_id(category_id)
        if not normalized_id:
            raise ValidationError(
                f"Category ID {category_id!r} is empty after normalization",
                field='id',
                value=category_id,
                user_message="❌ Category ID must contain at least one letter, digit or underscore."
            )

        if normalized_id in self._categories:
            raise DuplicateCategoryError(
                f"Category {normalized_id} already exists",
                category_id=normalized_id
            )

        category = CategoryDefinition(
            id=normalized_id,
            label=label,
            emoji=emoji,
            description=description
        )
        self._categories[normalized_id] = category
        try:
            await self._persist()
        except Exception:
            del self._categories[normalized_id]
            raise

        logger.info(f"Added global category {normalized_id}")
        return category

    async def remove(self, category_id: str) -> CategoryDefinition:
        """
        Remove a category from the catalog.

        Args:
            category_id: ID of the category to remove (matched exactly)

        Returns:
            CategoryDefinition: The removed definition

        Raises:
            CategoryNotFoundError: If no category has this ID
            DatabaseError: If the document cannot be written
            RuntimeError: If called before load
        """
        self._ensure_loaded()
        if category_id not in self._categories:
            raise CategoryNotFoundError(
                f"Category {category_id} not found",
                category_id=category_id
            )

        previous = dict(self._categories)
        category = self._categories.pop(category_id)
        try:
            await self._persist()
        except Exception:
            self._categories = previous
            raise

        logger.info(f"Removed global category {category_id}")
        return category

    def list(self) -> Tuple[CategoryDefinition, ...]:
        """Return an ordered snapshot of all definitions, in insertion order."""
        return tuple(self._categories.values())

    def get(self, category_id: str) -> Optional[CategoryDefinition]:
        return self._categories.get(category_id)

    def __contains__(self, category_id: object) -> bool:
        return category_id in self._categories

    def __len__(self) -> int:
        return len(self._categories)
