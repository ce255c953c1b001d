"""
Admin Decorator
"""

from functools import wraps

from flask import redirect, url_for

from catman.auth.resolver import get_auth_state


def admin_required(f):
    """Decorator to ensure the request comes from a signed-in admin.
    
    Anyone else, signed in or not, is sent back to the landing page.
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        if not get_auth_state().is_admin:
            return redirect(url_for('dashboard.index'))
        return f(*args, **kwargs)
    return wrapper
