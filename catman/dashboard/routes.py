"""
Dashboard Routes

Landing page, member dashboard and section unlocking.
"""

import logging

from flask import current_app, jsonify, redirect, render_template, request, url_for
from flask_login import current_user, login_required

from catman.auth.resolver import get_auth_state
from catman.dashboard import dashboard_bp
from catman.dashboard.services import apply_unlock_state, fetch_sections_with_items
from catman.dashboard.unlock import SectionUnlockGate, load_unlocked_ids, save_unlocked_ids
from catman.extensions import backend
from catman.services.content import fetch_visible_sections
from catman.services.notifications import notify_error

logger = logging.getLogger(__name__)

FEATURES = [
    {'icon': '🎓', 'title': '系統化課程',
     'description': '從基礎到進階，循序漸進學會使用各種AI工具，包括ChatGPT、Midjourney、Claude等熱門應用'},
    {'icon': '💼', 'title': '實戰案例',
     'description': '真實工作場景應用，學會如何用AI提升工作效率，包括文案寫作、圖片設計、數據分析等'},
    {'icon': '🚀', 'title': '最新趨勢',
     'description': '緊跟AI發展前沿，第一時間分享最新工具和技巧，讓你始終保持競爭優勢'},
    {'icon': '👥', 'title': '社群交流',
     'description': '加入活躍的學習社群，與同樣熱愛AI的夥伴交流心得，互相學習成長'},
    {'icon': '📱', 'title': '隨時學習',
     'description': '支援手機、平板、電腦多平台學習，隨時隨地都能提升你的AI技能'},
    {'icon': '🎯', 'title': '個人化指導',
     'description': '根據你的需求和程度，提供客製化學習建議和專業指導'},
]


@dashboard_bp.route('/')
def index():
    """Marketing landing page"""
    return render_template('index.html', features=FEATURES)


@dashboard_bp.route('/dashboard')
@login_required
def dashboard():
    """Member dashboard: visible sections, items shown once unlocked"""
    try:
        sections = fetch_sections_with_items(
            backend.client, current_app.config.get('ITEM_FETCH_WORKERS', 4))
    except Exception:
        logger.exception('Error fetching sections')
        notify_error('載入失敗', '無法載入內容區域')
        sections = []
    
    gate = SectionUnlockGate([data.section for data in sections], load_unlocked_ids(current_user.id))
    apply_unlock_state(sections, gate)
    
    active = request.args.get('section')
    if not any(data.section.id == active for data in sections):
        active = sections[0].section.id if sections else None
    
    return render_template('dashboard/dashboard.html',
                           sections=sections,
                           active_section=active)


@dashboard_bp.route('/dashboard/sections/<section_id>/unlock', methods=['POST'])
@login_required
def unlock_section(section_id):
    """Check a section password and remember the unlock for this session"""
    try:
        sections = fetch_visible_sections(backend.client)
    except Exception:
        logger.exception('Error fetching sections')
        notify_error('載入失敗', '無法載入內容區域')
        return redirect(url_for('dashboard.dashboard'))
    
    gate = SectionUnlockGate(sections, load_unlocked_ids(current_user.id))
    if gate.submit_password(section_id, request.form.get('password', '')):
        save_unlocked_ids(current_user.id, gate.unlocked_ids)
    
    return redirect(url_for('dashboard.dashboard', section=section_id))


@dashboard_bp.route('/api/auth-state')
@login_required
def api_auth_state():
    """Return JSON of the resolved session and role"""
    return jsonify(get_auth_state().as_dict())
