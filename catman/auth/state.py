"""
Auth State

The single session/role object shared with views, templates and
Flask-Login. Only the resolver writes to it.
"""

from dataclasses import dataclass
from typing import Any, Optional

from catman.models.user import Role


@dataclass
class AuthState:
    user: Any = None
    session: Any = None
    role: Optional[Role] = None
    loading: bool = True

    @property
    def is_authenticated(self):
        return self.user is not None

    @property
    def is_admin(self):
        return self.role is Role.ADMIN

    @property
    def user_id(self):
        return getattr(self.user, 'id', None)

    def clear(self):
        """Unauthenticated: user, session and role go away together."""
        self.user = None
        self.session = None
        self.role = None
        self.loading = False

    def as_dict(self):
        """Public view of the state (no tokens)."""
        return {
            'user': {'id': self.user_id, 'email': getattr(self.user, 'email', None)} if self.user else None,
            'role': self.role.value if self.role else None,
            'loading': self.loading,
        }
