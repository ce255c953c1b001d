"""
Session/Role Resolver

Follows the Supabase auth state of the current request and derives the
effective role of the signed-in user.

Role lookups are never issued from inside the auth-state callback: the
callback only queues them, and the queue is drained once the backend call
that fired the event has returned.
"""

import logging
from collections import deque

from flask import current_app, g, url_for

from catman.auth.state import AuthState
from catman.extensions import backend
from catman.models.user import Role
from catman.services.backend import clear_stored_session, error_message
from catman.services.notifications import notify, notify_error

logger = logging.getLogger(__name__)


class SessionRoleResolver:
    """Keeps an `AuthState` in sync with the backend's auth events."""

    def __init__(self, client, redirect_url=None):
        self.client = client
        self.redirect_url = redirect_url
        self.state = AuthState()
        self._deferred = deque()
        self._pending_lookup = None
        self._subscription = None

    # -- lifecycle ------------------------------------------------------------

    def start(self):
        """Subscribe to auth events and run the initial session check."""
        self._subscription = self.client.auth.on_auth_state_change(self._on_auth_state_change)
        try:
            session = self.client.auth.get_session()
        except Exception:
            logger.exception('Error restoring auth session')
            session = None
        self._apply_session(session)
        self.run_deferred()
        return self.state

    def stop(self):
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def run_deferred(self):
        """Run queued work, including work queued while draining."""
        while self._deferred:
            func, args = self._deferred.popleft()
            func(*args)

    # -- auth events ----------------------------------------------------------

    def _on_auth_state_change(self, event, session):
        logger.debug('Auth state change: %s', event)
        self._apply_session(session)

    def _apply_session(self, session):
        user = getattr(session, 'user', None) if session is not None else None
        if user is None:
            self._pending_lookup = None
            self.state.clear()
            return
        if session is self.state.session and session is self._pending_lookup:
            return
        self.state.session = session
        self.state.user = user
        self.state.loading = True
        self._pending_lookup = session
        self._deferred.append((self._fetch_role, (session,)))

    def _fetch_role(self, session):
        if self._pending_lookup is session:
            self._pending_lookup = None
        if self.state.session is not session:
            # Superseded by a later event (e.g. sign-out) before it ran
            return
        try:
            self._authorize(session)
            response = (
                self.client.table('user_roles')
                .select('role')
                .eq('user_id', session.user.id)
                .execute()
            )
            self.state.role = Role.from_rows(response.data)
        except Exception:
            logger.exception('Error fetching user roles')
            self.state.role = Role.MEMBER
        finally:
            self.state.loading = False

    def _authorize(self, session):
        # A session restored from storage fires no event, so the database
        # client may still carry the anon key.
        token = getattr(session, 'access_token', None)
        if token:
            self.client.postgrest.auth(token)

    # -- actions --------------------------------------------------------------

    def sign_in(self, email, password):
        """Sign in with email and password. Returns the error or None."""
        try:
            self.client.auth.sign_in_with_password({'email': email, 'password': password})
        except Exception as error:
            logger.warning('Sign-in failed for %s: %s', email, error_message(error))
            notify_error('登入失敗', error_message(error))
            return error
        finally:
            self.run_deferred()
        notify('登入成功', '歡迎回來！')
        return None

    def sign_up(self, email, password, display_name=None):
        """Register a new account; the backend mails a confirmation link."""
        options = {'email_redirect_to': self.redirect_url}
        if display_name:
            options['data'] = {'display_name': display_name}
        try:
            self.client.auth.sign_up({'email': email, 'password': password, 'options': options})
        except Exception as error:
            logger.warning('Sign-up failed for %s: %s', email, error_message(error))
            notify_error('註冊失敗', error_message(error))
            return error
        finally:
            self.run_deferred()
        notify('註冊成功', '請檢查您的電子郵件以確認帳戶。')
        return None

    def sign_in_with_google(self):
        """Start the Google OAuth flow.
        
        Returns:
            Tuple of (provider URL to redirect to, error)
        """
        try:
            response = self.client.auth.sign_in_with_oauth({
                'provider': 'google',
                'options': {'redirect_to': self.redirect_url},
            })
        except Exception as error:
            logger.warning('Google sign-in failed: %s', error_message(error))
            notify_error('Google 登入失敗', error_message(error))
            return None, error
        return response.url, None

    def exchange_code(self, code):
        """Finish an OAuth redirect by trading the auth code for a session."""
        try:
            self.client.auth.exchange_code_for_session({
                'auth_code': code,
                'redirect_to': self.redirect_url,
            })
        except Exception as error:
            logger.warning('OAuth code exchange failed: %s', error_message(error))
            notify_error('登入失敗', error_message(error))
            return error
        finally:
            self.run_deferred()
        notify('登入成功', '歡迎回來！')
        return None

    def sign_out(self):
        """Sign out. Local state is cleared even when the backend call fails."""
        error = None
        try:
            self.client.auth.sign_out()
        except Exception as exc:
            logger.exception('Error signing out')
            error = exc
        self._deferred.clear()
        self._pending_lookup = None
        self.state.clear()
        clear_stored_session()
        notify('已登出', '您已成功登出。')
        return error


def auth_redirect_url():
    return current_app.config.get('AUTH_REDIRECT_URL') or url_for('auth.callback', _external=True)


def get_resolver():
    """Resolver of the current request, started on first use."""
    if 'auth_resolver' not in g:
        resolver = SessionRoleResolver(backend.client, redirect_url=auth_redirect_url())
        g.auth_resolver = resolver
        resolver.start()
    return g.auth_resolver


def get_auth_state():
    return get_resolver().state


def release_resolver(exc=None):
    resolver = g.pop('auth_resolver', None)
    if resolver is not None:
        resolver.stop()
