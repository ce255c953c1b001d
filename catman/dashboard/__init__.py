"""
Dashboard Blueprint

Landing page and the member dashboard.
"""

from flask import Blueprint

dashboard_bp = Blueprint('dashboard', __name__)

from catman.dashboard import routes  # noqa: E402, F401
