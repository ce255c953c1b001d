"""
Models Package

Exports all models for easy importing.
"""

from catman.models.content import ContentItem, ContentSection
from catman.models.user import Member, Role, UserProfile

__all__ = ['ContentItem', 'ContentSection', 'Member', 'Role', 'UserProfile']
