import itertools
from collections import defaultdict
from types import SimpleNamespace

import pytest

from catman import create_app
from catman.config import TestConfig


class FakeAPIError(Exception):
    def __init__(self, message):
        super().__init__(message)
        self.message = message


class FakeAuthError(Exception):
    def __init__(self, message):
        super().__init__(message)
        self.message = message


class FakeQuery:
    """Chainable stand-in for a postgrest request builder."""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = 'select'
        self.columns = '*'
        self.payload = None
        self.on_conflict = ''
        self.filters = []
        self.orders = []

    def select(self, columns='*', **kwargs):
        self.columns = columns
        return self

    def insert(self, payload, **kwargs):
        self.op, self.payload = 'insert', payload
        return self

    def update(self, payload, **kwargs):
        self.op, self.payload = 'update', payload
        return self

    def upsert(self, payload, on_conflict='', **kwargs):
        self.op, self.payload, self.on_conflict = 'upsert', payload, on_conflict
        return self

    def delete(self, **kwargs):
        self.op = 'delete'
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False, **kwargs):
        self.orders.append((column, desc))
        return self

    def _matches(self, row):
        return all(row.get(column) == value for column, value in self.filters)

    def execute(self):
        self.db.executed.append((self.table, self.op, list(self.filters), self.payload))
        if self.table in self.db.failures:
            raise FakeAPIError(self.db.failures[self.table])
        return SimpleNamespace(data=getattr(self, '_' + self.op)())

    def _select(self):
        rows = [dict(row) for row in self.db.tables[self.table] if self._matches(row)]
        if 'user_roles' in self.columns:
            for row in rows:
                row['user_roles'] = [{'role': r['role']} for r in self.db.tables['user_roles']
                                     if r['user_id'] == row['id']]
            if '!inner' in self.columns:
                rows = [row for row in rows if row['user_roles']]
        if 'content_items(count)' in self.columns:
            for row in rows:
                count = sum(1 for item in self.db.tables['content_items'] if item['section_id'] == row['id'])
                row['content_items'] = [{'count': count}]
        for column, desc in reversed(self.orders):
            rows.sort(key=lambda r: (r.get(column) is None, r.get(column)), reverse=desc)
        return rows

    def _insert(self):
        payloads = self.payload if isinstance(self.payload, list) else [self.payload]
        inserted = []
        for payload in payloads:
            row = dict(payload)
            self._check_unique(row)
            row.setdefault('id', f'{self.table}-{next(self.db.ids)}')
            row.setdefault('created_at', f'2024-01-{next(self.db.days):02d}T00:00:00Z')
            self.db.tables[self.table].append(row)
            inserted.append(dict(row))
        return inserted

    def _update(self):
        updated = []
        for row in self.db.tables[self.table]:
            if self._matches(row):
                self._check_unique(dict(row, **self.payload), skip=row)
                row.update(self.payload)
                updated.append(dict(row))
        return updated

    def _check_unique(self, candidate, skip=None):
        keys = self.db.unique_keys.get(self.table)
        if not keys:
            return
        for row in self.db.tables[self.table]:
            if row is not skip and all(row.get(key) == candidate.get(key) for key in keys):
                raise FakeAPIError('duplicate key value violates unique constraint')

    def _upsert(self):
        keys = self.on_conflict.split(',') if self.on_conflict else [next(iter(self.payload))]
        for row in self.db.tables[self.table]:
            if all(row.get(key) == self.payload.get(key) for key in keys):
                row.update(self.payload)
                return [dict(row)]
        return self._insert()

    def _delete(self):
        kept, removed = [], []
        for row in self.db.tables[self.table]:
            (removed if self._matches(row) else kept).append(row)
        self.db.tables[self.table] = kept
        return removed


class FakeSubscription:
    def __init__(self, auth, callback):
        self.auth = auth
        self.callback = callback

    def unsubscribe(self):
        if self.callback in self.auth.listeners:
            self.auth.listeners.remove(self.callback)


class FakeAuth:
    """Supabase auth client double: users, one current session, events."""

    def __init__(self, db):
        self.db = db
        self.users = {}
        self.listeners = []
        self.current = None
        self.calls = []
        self.failures = {}
        self.oauth_codes = {}
        self.refresh_on_get_session = False

    def on_auth_state_change(self, callback):
        self.listeners.append(callback)
        return FakeSubscription(self, callback)

    def _notify(self, event, session):
        self.db.in_callback = True
        try:
            for callback in list(self.listeners):
                callback(event, session)
        finally:
            self.db.in_callback = False

    def _fail(self, method):
        if method in self.failures:
            raise FakeAuthError(self.failures.pop(method))

    def _start_session(self, email):
        user = self.users[email]
        self.current = SimpleNamespace(
            access_token=f'token-{user.id}',
            refresh_token=f'refresh-{user.id}',
            user=user,
        )
        self._notify('SIGNED_IN', self.current)
        return SimpleNamespace(user=user, session=self.current)

    def get_session(self):
        self.calls.append(('get_session', None))
        if self.refresh_on_get_session and self.current is not None:
            self._notify('TOKEN_REFRESHED', self.current)
        return self.current

    def sign_in_with_password(self, credentials):
        self.calls.append(('sign_in_with_password', credentials))
        self._fail('sign_in_with_password')
        user = self.users.get(credentials['email'])
        if user is None or user.password != credentials['password']:
            raise FakeAuthError('Invalid login credentials')
        return self._start_session(credentials['email'])

    def sign_up(self, credentials):
        self.calls.append(('sign_up', credentials))
        self._fail('sign_up')
        user = self.db.add_user(credentials['email'], credentials['password'], role=None)
        return SimpleNamespace(user=user, session=None)

    def sign_in_with_oauth(self, credentials):
        self.calls.append(('sign_in_with_oauth', credentials))
        self._fail('sign_in_with_oauth')
        return SimpleNamespace(provider=credentials['provider'],
                               url='https://accounts.google.example/o/oauth2/auth')

    def exchange_code_for_session(self, params):
        self.calls.append(('exchange_code_for_session', params))
        self._fail('exchange_code_for_session')
        email = self.oauth_codes.pop(params['auth_code'], None)
        if email is None:
            raise FakeAuthError('invalid flow state, no valid flow state found')
        return self._start_session(email)

    def sign_out(self):
        self.calls.append(('sign_out', None))
        self._fail('sign_out')
        self.current = None
        self._notify('SIGNED_OUT', None)

    def called(self, method):
        return [args for name, args in self.calls if name == method]


class FakeSupabase:
    """In-memory double of the supabase client used by the app."""

    def __init__(self):
        self.tables = defaultdict(list)
        self.failures = {}
        self.executed = []
        self.unique_keys = {'user_roles': ('user_id', 'role')}
        self.callback_queries = []
        self.in_callback = False
        self.ids = itertools.count(1)
        self.days = itertools.count(1)
        self.auth = FakeAuth(self)
        self.postgrest = SimpleNamespace(tokens=[])
        self.postgrest.auth = self.postgrest.tokens.append

    def table(self, name):
        if self.in_callback:
            self.callback_queries.append(name)
        return FakeQuery(self, name)

    def fail_table(self, name, message='relation error'):
        self.failures[name] = message

    # -- fixtures helpers -----------------------------------------------------

    def add_user(self, email, password, role='member', display_name=None):
        user = SimpleNamespace(id=f'user-{next(self.ids)}', email=email, password=password)
        self.auth.users[email] = user
        self.tables['profiles'].append({
            'id': user.id,
            'email': email,
            'display_name': display_name,
            'created_at': f'2024-01-{next(self.days):02d}T00:00:00Z',
        })
        if role:
            self.tables['user_roles'].append({'user_id': user.id, 'role': role})
        return user

    def add_section(self, name, is_visible=True, items=()):
        section = {'id': f'section-{next(self.ids)}', 'name': name, 'is_visible': is_visible,
                   'created_at': f'2024-01-{next(self.days):02d}T00:00:00Z'}
        self.tables['content_sections'].append(section)
        for index, (title, url) in enumerate(items):
            self.tables['content_items'].append({
                'id': f'item-{next(self.ids)}', 'section_id': section['id'],
                'title': title, 'url': url, 'description': None, 'order_index': index,
            })
        return section

    def restore_session(self, email):
        """Pretend a session was already stored (no auth event fires)."""
        user = self.auth.users[email]
        self.auth.current = SimpleNamespace(access_token=f'token-{user.id}',
                                            refresh_token=f'refresh-{user.id}', user=user)


@pytest.fixture()
def fake_backend():
    return FakeSupabase()


@pytest.fixture()
def app(fake_backend):
    return create_app(TestConfig, backend_factory=lambda config: fake_backend)


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def member(fake_backend):
    return fake_backend.add_user('member@example.com', 'memberpass')


@pytest.fixture()
def admin(fake_backend):
    user = fake_backend.add_user('admin@example.com', 'adminpass', role='member')
    fake_backend.tables['user_roles'].append({'user_id': user.id, 'role': 'admin'})
    return user


@pytest.fixture()
def login(client):
    def _login(email, password):
        return client.post('/auth/signin', data={'email': email, 'password': password})
    return _login
