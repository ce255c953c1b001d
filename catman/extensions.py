"""
Flask Extensions

The Supabase client is built once per request: its auth session lives in
the signed Flask session cookie, so no client is shared between users.
"""

from flask import current_app, g
from flask_login import LoginManager

# Login manager; users are resolved from the Supabase session, never stored locally
login_manager = LoginManager()


class SupabaseBackend:
    """Per-request access to the hosted Supabase backend."""

    def __init__(self, app=None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app, client_factory=None):
        if client_factory is None:
            from catman.services.backend import create_backend_client
            client_factory = create_backend_client
        app.extensions['supabase'] = client_factory

    @property
    def client(self):
        """Supabase client bound to the current request."""
        if 'supabase_client' not in g:
            factory = current_app.extensions['supabase']
            g.supabase_client = factory(current_app.config)
        return g.supabase_client


# Backend instance
backend = SupabaseBackend()
