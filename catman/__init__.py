"""
CatmanAI Learning Platform - Application Factory

This module provides the Flask application factory pattern for creating
and configuring the application instance.
"""

import logging

from flask import Flask

from catman.config import Config
from catman.extensions import backend, login_manager


def create_app(config_class=Config, backend_factory=None):
    """Create and configure the Flask application.
    
    Args:
        config_class: Configuration class to use (default: Config)
        backend_factory: Callable building a Supabase client from the app
            config (default: catman.services.backend.create_backend_client)
    
    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    app.config.from_object(config_class)
    
    logging.getLogger('catman').setLevel(app.config.get('LOG_LEVEL', 'INFO'))
    
    # Initialize extensions
    backend.init_app(app, backend_factory)
    login_manager.init_app(app)
    login_manager.login_view = 'auth.auth'
    login_manager.login_message = '請先登入'
    login_manager.login_message_category = 'info'
    
    # Register blueprints
    from catman.auth import auth_bp
    from catman.admin import admin_bp
    from catman.dashboard import dashboard_bp
    
    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp, url_prefix='/admin')
    app.register_blueprint(dashboard_bp)
    
    from catman.auth.resolver import get_auth_state, release_resolver
    
    # Users come from the resolved Supabase session, never from a local table
    @login_manager.request_loader
    def load_member(request):
        from catman.models import Member
        state = get_auth_state()
        if not state.is_authenticated:
            return None
        return Member.from_auth_state(state)
    
    # Context processor for role flags
    @app.context_processor
    def inject_role_flags():
        """Inject `user_role` and `is_admin` into templates from the auth state."""
        from flask_login import current_user
        role = getattr(current_user, 'role', None)
        return dict(user_role=role, is_admin=getattr(current_user, 'is_admin', False),
                    site_name=app.config['SITE_NAME'])
    
    app.teardown_appcontext(release_resolver)
    
    return app
