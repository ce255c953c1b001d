"""
Admin Routes

User role management and content CRUD. Every write goes to Supabase and
the page is re-fetched afterwards.
"""

import logging

from flask import redirect, render_template, request, url_for

from catman.admin import admin_bp
from catman.admin.decorators import admin_required
from catman.auth.resolver import get_auth_state
from catman.extensions import backend
from catman.services import content
from catman.services.backend import error_message
from catman.services.notifications import notify, notify_error

logger = logging.getLogger(__name__)


def _section_form():
    name = request.form.get('name', '').strip()
    is_visible = request.form.get('is_visible') == 'on'
    password = request.form.get('password', '')
    return name, is_visible, password


def _item_form():
    title = request.form.get('title', '').strip()
    url = request.form.get('url', '').strip()
    description = request.form.get('description', '').strip() or None
    return title, url, description


@admin_bp.route('/')
@admin_required
def admin_dashboard():
    """Users, sections and the items of the selected section."""
    client = backend.client
    users, sections, items = [], [], []
    selected_id = request.args.get('section')
    
    try:
        users = content.fetch_user_profiles(client)
    except Exception as e:
        logger.exception('Error loading users')
        notify_error('載入用戶失敗', error_message(e))
    
    try:
        sections = content.fetch_all_sections(client)
    except Exception as e:
        logger.exception('Error loading sections')
        notify_error('載入專區失敗', error_message(e))
    
    selected = next((s for s in sections if s.id == selected_id), None)
    if selected is not None:
        try:
            items = content.fetch_items(client, selected.id)
        except Exception as e:
            logger.exception('Error loading items')
            notify_error('載入內容失敗', error_message(e))
    
    return render_template('admin/dashboard.html',
                           users=users,
                           sections=sections,
                           selected_section=selected,
                           items=items,
                           current_user_id=get_auth_state().user_id)


@admin_bp.route('/users/<user_id>/role', methods=['POST'])
@admin_required
def update_user_role(user_id):
    """Promote a member to admin or demote an admin to member."""
    if user_id == get_auth_state().user_id:
        notify_error('更新失敗', '無法更改自己的角色')
        return redirect(url_for('admin.admin_dashboard'))
    
    try:
        role = content.update_user_role(backend.client, user_id, request.form.get('role', ''))
        notify('用戶角色已更新', f'已成功更改為{role.label}')
    except ValueError:
        notify_error('更新失敗', '無效的角色')
    except Exception as e:
        logger.exception('Error updating role of %s', user_id)
        notify_error('更新失敗', error_message(e))
    
    return redirect(url_for('admin.admin_dashboard'))


@admin_bp.route('/sections', methods=['POST'])
@admin_required
def create_section():
    """Add a section, optionally with an unlock password."""
    name, is_visible, password = _section_form()
    if not name:
        notify_error('操作失敗', '專區名稱為必填')
        return redirect(url_for('admin.admin_dashboard'))
    
    try:
        section = content.create_section(backend.client, name, is_visible)
        notify('專區已新增')
    except Exception as e:
        logger.exception('Error creating section %s', name)
        notify_error('操作失敗', error_message(e))
        return redirect(url_for('admin.admin_dashboard'))
    
    if password and section is not None:
        _save_password(section.id, password)
    
    return redirect(url_for('admin.admin_dashboard', section=section.id if section else None))


@admin_bp.route('/sections/<section_id>/edit', methods=['POST'])
@admin_required
def edit_section(section_id):
    name, is_visible, password = _section_form()
    if not name:
        notify_error('操作失敗', '專區名稱為必填')
        return redirect(url_for('admin.admin_dashboard', section=section_id))
    
    try:
        content.update_section(backend.client, section_id, name, is_visible)
        notify('專區已更新')
    except Exception as e:
        logger.exception('Error updating section %s', section_id)
        notify_error('操作失敗', error_message(e))
        return redirect(url_for('admin.admin_dashboard', section=section_id))
    
    if password:
        _save_password(section_id, password)
    
    return redirect(url_for('admin.admin_dashboard', section=section_id))


def _save_password(section_id, password):
    # The section itself is already saved; a failed secret keeps it
    try:
        content.save_section_password(backend.client, section_id, password)
    except Exception:
        logger.exception('Password save error for section %s', section_id)
        notify_error('密碼設定失敗', '專區已保存但密碼設定失敗')


@admin_bp.route('/sections/<section_id>/delete', methods=['POST'])
@admin_required
def delete_section(section_id):
    """Delete a section; its items go with it."""
    try:
        content.delete_section(backend.client, section_id)
        notify('專區已刪除')
    except Exception as e:
        logger.exception('Error deleting section %s', section_id)
        notify_error('刪除失敗', error_message(e))
    
    return redirect(url_for('admin.admin_dashboard'))


@admin_bp.route('/sections/<section_id>/items', methods=['POST'])
@admin_required
def create_item(section_id):
    """Append an item to the end of a section."""
    title, url, description = _item_form()
    if not title or not url:
        notify_error('操作失敗', '標題和連結為必填')
        return redirect(url_for('admin.admin_dashboard', section=section_id))
    
    client = backend.client
    try:
        order_index = len(content.fetch_items(client, section_id))
        content.create_item(client, section_id, title, url, description, order_index)
        notify('內容已新增')
    except Exception as e:
        logger.exception('Error creating item in section %s', section_id)
        notify_error('操作失敗', error_message(e))
    
    return redirect(url_for('admin.admin_dashboard', section=section_id))


@admin_bp.route('/items/<item_id>/edit', methods=['POST'])
@admin_required
def edit_item(item_id):
    section_id = request.form.get('section_id')
    title, url, description = _item_form()
    if not title or not url:
        notify_error('操作失敗', '標題和連結為必填')
        return redirect(url_for('admin.admin_dashboard', section=section_id))
    
    try:
        content.update_item(backend.client, item_id, title, url, description)
        notify('內容已更新')
    except Exception as e:
        logger.exception('Error updating item %s', item_id)
        notify_error('操作失敗', error_message(e))
    
    return redirect(url_for('admin.admin_dashboard', section=section_id))


@admin_bp.route('/items/<item_id>/delete', methods=['POST'])
@admin_required
def delete_item(item_id):
    section_id = request.form.get('section_id')
    try:
        content.delete_item(backend.client, item_id)
        notify('內容已刪除')
    except Exception as e:
        logger.exception('Error deleting item %s', item_id)
        notify_error('刪除失敗', error_message(e))
    
    return redirect(url_for('admin.admin_dashboard', section=section_id))
