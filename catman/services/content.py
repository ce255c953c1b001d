"""
Content Service

Row-level reads and writes against the Supabase tables. Every function
takes the request's client and lets backend errors propagate to the view.
"""

import logging

from catman.models import ContentItem, ContentSection, Role, UserProfile

logger = logging.getLogger(__name__)

SECTIONS = 'content_sections'
ITEMS = 'content_items'
SECRETS = 'content_section_secrets'
USER_ROLES = 'user_roles'
PROFILES = 'profiles'


# --- Sections ---------------------------------------------------------------

def fetch_visible_sections(client):
    """Sections members may see, ordered by name."""
    response = (
        client.table(SECTIONS)
        .select('*')
        .eq('is_visible', True)
        .order('name')
        .execute()
    )
    return [ContentSection.from_row(row) for row in response.data or []]


def fetch_all_sections(client):
    """Every section with its item count, newest first (admin listing)."""
    response = (
        client.table(SECTIONS)
        .select('*, content_items(count)')
        .order('created_at', desc=True)
        .execute()
    )
    return [ContentSection.from_row(row) for row in response.data or []]


def create_section(client, name, is_visible):
    response = client.table(SECTIONS).insert({'name': name, 'is_visible': is_visible}).execute()
    rows = response.data or []
    return ContentSection.from_row(rows[0]) if rows else None


def update_section(client, section_id, name, is_visible):
    client.table(SECTIONS).update({'name': name, 'is_visible': is_visible}).eq('id', section_id).execute()


def delete_section(client, section_id):
    client.table(SECTIONS).delete().eq('id', section_id).execute()


def save_section_password(client, section_id, password):
    client.table(SECRETS).upsert({'section_id': section_id, 'password': password}).execute()


# --- Items ------------------------------------------------------------------

def fetch_items(client, section_id):
    """Items of one section in `order_index` order."""
    response = (
        client.table(ITEMS)
        .select('*')
        .eq('section_id', section_id)
        .order('order_index')
        .execute()
    )
    return [ContentItem.from_row(row) for row in response.data or []]


def create_item(client, section_id, title, url, description=None, order_index=0):
    client.table(ITEMS).insert({
        'title': title,
        'description': description,
        'url': url,
        'section_id': section_id,
        'order_index': order_index,
    }).execute()


def update_item(client, item_id, title, url, description=None):
    client.table(ITEMS).update({
        'title': title,
        'description': description,
        'url': url,
    }).eq('id', item_id).execute()


def delete_item(client, item_id):
    client.table(ITEMS).delete().eq('id', item_id).execute()


# --- Users ------------------------------------------------------------------

def fetch_user_profiles(client):
    """Registered users with their role, newest first."""
    response = (
        client.table(PROFILES)
        .select('id, email, display_name, created_at, user_roles!inner(role)')
        .order('created_at', desc=True)
        .execute()
    )
    return [UserProfile.from_row(row) for row in response.data or []]


def update_user_role(client, user_id, role):
    """Replace every role row of `user_id` with a single row for `role`.

    A user may hold one row per role (`user_id, role` is unique), so the old
    rows are removed rather than rewritten in place.
    """
    role = Role(role)
    client.table(USER_ROLES).delete().eq('user_id', user_id).execute()
    client.table(USER_ROLES).insert({'user_id': user_id, 'role': role.value}).execute()
    logger.info('Role of user %s set to %s', user_id, role.value)
    return role
