"""
Dashboard Services

Loads the member dashboard: visible sections, then every section's items
concurrently.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List

from catman.dashboard.unlock import SectionUnlockGate, hint_for
from catman.models import ContentItem, ContentSection
from catman.services.content import fetch_items, fetch_visible_sections

logger = logging.getLogger(__name__)


@dataclass
class SectionData:
    section: ContentSection
    items: List[ContentItem] = field(default_factory=list)
    unlocked: bool = False

    @property
    def hint(self):
        return hint_for(self.section.name)


def fetch_sections_with_items(client, max_workers=4):
    """Visible sections paired with their items, in section name order.
    
    Raises the first backend error met; nothing is returned partially.
    """
    sections = fetch_visible_sections(client)
    if not sections:
        return []
    
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(sections)))) as pool:
        futures = [pool.submit(fetch_items, client, section.id) for section in sections]
        items = [future.result() for future in futures]
    
    return [SectionData(section=section, items=section_items)
            for section, section_items in zip(sections, items)]


def apply_unlock_state(section_data, gate: SectionUnlockGate):
    for data in section_data:
        data.unlocked = gate.is_unlocked(data.section.id)
    return section_data
