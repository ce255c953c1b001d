"""
User Models
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from flask_login import UserMixin


class Role(str, Enum):
    """Effective privilege level of a signed-in user"""
    ADMIN = 'admin'
    MEMBER = 'member'

    @classmethod
    def from_rows(cls, rows):
        """Reduce `user_roles` rows to one role: admin if any row says so."""
        if any((row or {}).get('role') == cls.ADMIN.value for row in rows or []):
            return cls.ADMIN
        return cls.MEMBER

    @property
    def label(self):
        return '管理員' if self is Role.ADMIN else '會員'


class Member(UserMixin):
    """Flask-Login user built from the resolved auth state."""

    def __init__(self, user_id, email, role=None):
        self.id = user_id
        self.email = email
        self.role = role

    @classmethod
    def from_auth_state(cls, state):
        return cls(state.user.id, getattr(state.user, 'email', None), state.role)

    @property
    def is_admin(self):
        return self.role is Role.ADMIN

    def __repr__(self):
        return f'<Member {self.email}>'


@dataclass(frozen=True)
class UserProfile:
    """Row of the admin user list (`profiles` joined with `user_roles`)"""
    id: str
    email: str
    display_name: Optional[str]
    role: Role
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row):
        roles = row.get('user_roles') or []
        if isinstance(roles, dict):
            roles = [roles]
        return cls(
            id=row['id'],
            email=row.get('email') or '',
            display_name=row.get('display_name'),
            role=Role.from_rows(roles),
            created_at=row.get('created_at'),
        )
