"""
Category definition model shared by every server.
"""
import re
from dataclasses import dataclass
from typing import Any, Dict

_INVALID_ID_CHARS = re.compile(r'[^a-z0-9_]')


def normalize_category_id(raw_id: str) -> str:
    """Lowercase the ID and drop every character outside ``[a-z0-9_]``."""
    return _INVALID_ID_CHARS.sub('', (raw_id or '').lower())


@dataclass(frozen=True)
class CategoryDefinition:
    """
    A ticket category available for servers to enable.

    Attributes:
        id: Normalized unique slug, immutable once created
        label: Display name
        emoji: Emoji shown next to the label
        description: What this category is for
    """
    id: str
    label: str
    emoji: str
    description: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the document representation (the ID is the mapping key)."""
        return {
            'label': self.label,
            'emoji': self.emoji,
            'description': self.description
        }

    @classmethod
    def from_dict(cls, category_id: str, data: Dict[str, Any]) -> 'CategoryDefinition':
        """Create a definition from its document entry."""
        return cls(
            id=category_id,
            label=data.get('label', category_id),
            emoji=data.get('emoji', ''),
            description=data.get('description', '')
        )

    def display(self) -> str:
        return f"{self.emoji} **{self.label}** ({self.id})"
