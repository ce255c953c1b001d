"""
Notification Service

Transient user-facing notifications, shown once on the next rendered page.
"""

from flask import flash


def notify(title, description=None, category='success'):
    """Flash a notification with an optional description line."""
    message = f'{title}：{description}' if description else title
    flash(message, category)


def notify_error(title, description=None):
    notify(title, description, 'danger')
