"""
Services Package

Exports all services for easy importing.
"""

from catman.services.backend import create_backend_client, error_message
from catman.services.content import (
    create_item,
    create_section,
    delete_item,
    delete_section,
    fetch_all_sections,
    fetch_items,
    fetch_user_profiles,
    fetch_visible_sections,
    save_section_password,
    update_item,
    update_section,
    update_user_role,
)
from catman.services.notifications import notify, notify_error

__all__ = [
    'create_backend_client',
    'error_message',
    'create_item',
    'create_section',
    'delete_item',
    'delete_section',
    'fetch_all_sections',
    'fetch_items',
    'fetch_user_profiles',
    'fetch_visible_sections',
    'save_section_password',
    'update_item',
    'update_section',
    'update_user_role',
    'notify',
    'notify_error',
]
