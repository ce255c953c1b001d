"""
Supabase Client Service

Builds Supabase clients whose auth session is persisted in the Flask
session cookie instead of process memory.
"""

import logging

from flask import session
from supabase import Client, ClientOptions, create_client
from supabase_auth import SyncSupportedStorage

logger = logging.getLogger(__name__)

SESSION_KEY_PREFIX = 'sb:'


class FlaskSessionStorage(SyncSupportedStorage):
    """Auth storage backed by the signed Flask session of the current request."""

    def __init__(self, prefix=SESSION_KEY_PREFIX):
        self.prefix = prefix

    def get_item(self, key):
        return session.get(self.prefix + key)

    def set_item(self, key, value):
        session[self.prefix + key] = value

    def remove_item(self, key):
        session.pop(self.prefix + key, None)


def clear_stored_session():
    """Drop every stored auth key (session, PKCE verifier) from the Flask session."""
    for key in [k for k in session.keys() if k.startswith(SESSION_KEY_PREFIX)]:
        session.pop(key, None)


def create_backend_client(config) -> Client:
    """Create a Supabase client for the current request.
    
    Args:
        config: Flask config mapping with SUPABASE_URL and SUPABASE_ANON_KEY
    
    Returns:
        Supabase client using the anon key and the PKCE flow
    """
    url = config.get('SUPABASE_URL')
    key = config.get('SUPABASE_ANON_KEY')
    if not url or not key:
        raise RuntimeError('SUPABASE_URL and SUPABASE_ANON_KEY must be configured')
    
    timeout = config.get('SUPABASE_TIMEOUT', 30)
    # No refresh timer thread: get_session() refreshes expired tokens in-request
    options = ClientOptions(
        flow_type='pkce',
        storage=FlaskSessionStorage(),
        auto_refresh_token=False,
        persist_session=True,
        postgrest_client_timeout=timeout,
        storage_client_timeout=timeout,
    )
    logger.debug('Creating Supabase client for %s', url)
    return create_client(url, key, options=options)


def create_service_client(url, service_role_key) -> Client:
    """Create a service-role client for operator scripts (bypasses RLS)."""
    if not url or not service_role_key:
        raise RuntimeError('SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be configured')
    options = ClientOptions(auto_refresh_token=False, persist_session=False)
    return create_client(url, service_role_key, options=options)


def error_message(error):
    """Human-readable message of a backend exception."""
    return getattr(error, 'message', None) or str(error)
