"""
Admin Blueprint

Admin access is granted by the `admin` role in `user_roles`, resolved from
the signed-in Supabase session.
"""

from flask import Blueprint

admin_bp = Blueprint('admin', __name__)

from catman.admin import routes  # noqa: E402, F401
