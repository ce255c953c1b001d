"""Promote an existing user to admin.

Usage: python scripts/make_admin.py user@example.com

Needs SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY in the environment.
"""
import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from catman.config import Config  # noqa: E402
from catman.models import Role  # noqa: E402
from catman.services.backend import create_service_client  # noqa: E402


def make_admin(client, email):
    """Add an admin row in `user_roles` for the profile with this email.

    Existing member rows stay; any admin row makes the user an admin.
    """
    response = client.table('profiles').select('id, email').eq('email', email).execute()
    if not response.data:
        return None
    user_id = response.data[0]['id']
    client.table('user_roles').upsert(
        {'user_id': user_id, 'role': Role.ADMIN.value},
        on_conflict='user_id,role',
    ).execute()
    return user_id


if __name__ == '__main__':
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(2)

    email = sys.argv[1]
    client = create_service_client(Config.SUPABASE_URL, Config.SUPABASE_SERVICE_ROLE_KEY)
    user_id = make_admin(client, email)
    if user_id is None:
        print(f'No profile found for {email}')
        sys.exit(1)
    print(f'User {email} ({user_id}) promoted to admin')
