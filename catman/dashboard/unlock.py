"""
Section Unlock Gate

Password gate in front of each section's item list. The accepted passwords
are fixed in code and shipped to every member, so this is presentation
gating only and protects nothing.
"""

import logging

from flask import session

from catman.services.notifications import notify, notify_error

logger = logging.getLogger(__name__)

META_SECTION_NAME = 'Meta 學員專區'
SECTION_PASSWORDS = {
    META_SECTION_NAME: ('meta', 'symptom'),
}
DEFAULT_SECTION_PASSWORDS = ('symptom',)

UNLOCKED_SESSION_KEY = 'unlocked_sections'


def passwords_for(section_name):
    """Allow-list of passwords accepted by the section with this name."""
    return SECTION_PASSWORDS.get(section_name, DEFAULT_SECTION_PASSWORDS)


def hint_for(section_name):
    return '提示: 密碼為 ' + ' 或 '.join(f'"{p}"' for p in passwords_for(section_name))


class SectionUnlockGate:
    """One `unlocked` flag per section id, all locked by default."""

    def __init__(self, sections, unlocked_ids=()):
        self.sections = {section.id: section for section in sections}
        self.unlocked = {section_id: False for section_id in self.sections}
        for section_id in unlocked_ids:
            if section_id in self.unlocked:
                self.unlocked[section_id] = True

    def is_unlocked(self, section_id):
        return self.unlocked.get(section_id, False)

    def submit_password(self, section_id, candidate):
        """Unlock `section_id` when `candidate` is on its allow-list.
        
        Returns:
            True if unlocked, False on a wrong password, None for an unknown section
        """
        section = self.sections.get(section_id)
        if section is None:
            return None
        
        if candidate in passwords_for(section.name):
            self.unlocked[section_id] = True
            notify('解鎖成功', f'{section.name} 已解鎖！')
            return True
        
        logger.info('Wrong password for section %s', section_id)
        notify_error('密碼錯誤', '請輸入正確的密碼')
        return False

    @property
    def unlocked_ids(self):
        return [section_id for section_id, unlocked in self.unlocked.items() if unlocked]


def load_unlocked_ids(user_id):
    """Unlocked section ids of `user_id` in this browser session.

    Every dashboard action is a full page load, so unlocks are kept in the
    session until sign-out instead of resetting on reload. Ids stored for
    another account are ignored.
    """
    stored = session.get(UNLOCKED_SESSION_KEY)
    if not isinstance(stored, dict) or stored.get('user_id') != user_id:
        return []
    return list(stored.get('section_ids', []))


def save_unlocked_ids(user_id, section_ids):
    session[UNLOCKED_SESSION_KEY] = {'user_id': user_id, 'section_ids': list(section_ids)}


def reset_unlocked():
    session.pop(UNLOCKED_SESSION_KEY, None)
