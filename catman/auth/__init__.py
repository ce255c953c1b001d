"""
Auth Blueprint

Sign-in, sign-up and sign-out are delegated to Supabase Auth.
"""

from flask import Blueprint

auth_bp = Blueprint('auth', __name__)

from catman.auth import routes  # noqa: E402, F401
