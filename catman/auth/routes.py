"""
Auth Routes

User authentication routes backed by Supabase Auth.
"""

from flask import redirect, render_template, request, url_for
from flask_login import current_user

from catman.auth import auth_bp
from catman.auth.resolver import get_resolver
from catman.dashboard.unlock import reset_unlocked
from catman.services.notifications import notify_error

MIN_PASSWORD_LENGTH = 6


@auth_bp.route('/auth')
def auth():
    """Sign-in / sign-up page"""
    if current_user.is_authenticated:
        return redirect(url_for('dashboard.dashboard'))
    return render_template('auth/auth.html', tab=request.args.get('tab', 'signin'))


@auth_bp.route('/auth/signin', methods=['POST'])
def signin():
    """Email/password sign-in"""
    email = request.form.get('email', '').strip()
    password = request.form.get('password', '')
    
    if not email or not password:
        notify_error('登入失敗', '請輸入電子郵件和密碼')
        return redirect(url_for('auth.auth'))
    
    error = get_resolver().sign_in(email, password)
    if error is not None:
        return redirect(url_for('auth.auth'))
    reset_unlocked()
    
    next_page = request.args.get('next')
    if next_page and next_page.startswith('/') and not next_page.startswith('//'):
        return redirect(next_page)
    return redirect(url_for('dashboard.dashboard'))


@auth_bp.route('/auth/signup', methods=['POST'])
def signup():
    """Account registration; the backend sends a confirmation mail"""
    email = request.form.get('email', '').strip()
    password = request.form.get('password', '')
    display_name = request.form.get('display_name', '').strip() or None
    
    # Validation
    if not email or '@' not in email:
        notify_error('註冊失敗', '請提供有效的電子郵件地址')
        return redirect(url_for('auth.auth', tab='signup'))
    
    if len(password) < MIN_PASSWORD_LENGTH:
        notify_error('註冊失敗', f'密碼至少需要{MIN_PASSWORD_LENGTH}個字符')
        return redirect(url_for('auth.auth', tab='signup'))
    
    error = get_resolver().sign_up(email, password, display_name)
    if error is not None:
        return redirect(url_for('auth.auth', tab='signup'))
    return redirect(url_for('auth.auth'))


@auth_bp.route('/auth/google')
def google():
    """Start the Google OAuth flow"""
    provider_url, error = get_resolver().sign_in_with_google()
    if error is not None or not provider_url:
        return redirect(url_for('auth.auth'))
    return redirect(provider_url)


@auth_bp.route('/auth/callback')
def callback():
    """OAuth / email-confirmation return point.
    
    Always ends in a redirect so the one-time code never stays in the
    address bar.
    """
    error_description = request.args.get('error_description')
    if error_description:
        notify_error('登入失敗', error_description)
        return redirect(url_for('auth.auth'))
    
    resolver = get_resolver()
    code = request.args.get('code')
    if code:
        if resolver.exchange_code(code) is None:
            reset_unlocked()
    
    if resolver.state.is_authenticated:
        return redirect(url_for('dashboard.dashboard'))
    return redirect(url_for('auth.auth'))


@auth_bp.route('/auth/logout', methods=['GET', 'POST'])
def logout():
    """Sign out and return to the landing page"""
    get_resolver().sign_out()
    reset_unlocked()
    return redirect(url_for('dashboard.index'))
