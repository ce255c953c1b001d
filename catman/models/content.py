"""
Content Models

Read-only snapshots of `content_sections` and `content_items` rows.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ContentSection:
    """A named, independently visible and unlockable group of items"""
    id: str
    name: str
    is_visible: bool = True
    created_at: Optional[str] = None
    items_count: int = 0

    @classmethod
    def from_row(cls, row):
        counts = row.get('content_items') or []
        items_count = counts[0].get('count', 0) if counts and isinstance(counts[0], dict) else len(counts)
        return cls(
            id=row['id'],
            name=row['name'],
            is_visible=bool(row.get('is_visible', True)),
            created_at=row.get('created_at'),
            items_count=items_count,
        )

    def __repr__(self):
        return f'<ContentSection {self.name}>'


@dataclass(frozen=True)
class ContentItem:
    """A titled link belonging to one section"""
    id: str
    title: str
    url: str
    description: Optional[str] = None
    order_index: int = 0
    section_id: Optional[str] = None

    @classmethod
    def from_row(cls, row):
        return cls(
            id=row['id'],
            title=row['title'],
            url=row['url'],
            description=row.get('description') or None,
            order_index=row.get('order_index') or 0,
            section_id=row.get('section_id'),
        )

    def __repr__(self):
        return f'<ContentItem {self.title}>'
