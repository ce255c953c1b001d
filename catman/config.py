"""
Configuration settings for the CatmanAI learning platform
"""
import os


class Config:
    """Flask application configuration"""
    
    # Flask secret key for sessions (also signs the stored Supabase session)
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production-12345'
    
    # Supabase project (auth + database)
    SUPABASE_URL = os.environ.get('SUPABASE_URL', '')
    SUPABASE_ANON_KEY = os.environ.get('SUPABASE_ANON_KEY', '')
    # Only used by scripts/make_admin.py, never by request handlers
    SUPABASE_SERVICE_ROLE_KEY = os.environ.get('SUPABASE_SERVICE_ROLE_KEY', '')
    SUPABASE_TIMEOUT = int(os.environ.get('SUPABASE_TIMEOUT', '30'))
    
    # Where sign-up confirmation mails and OAuth logins return to.
    # Empty means the external URL of the auth callback view.
    AUTH_REDIRECT_URL = os.environ.get('AUTH_REDIRECT_URL', '')
    
    # Application settings
    SITE_NAME = 'CatmanAI'
    ITEM_FETCH_WORKERS = int(os.environ.get('ITEM_FETCH_WORKERS', '4'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class TestConfig(Config):
    """Testing configuration"""
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    SUPABASE_URL = 'https://test-project.supabase.co'
    SUPABASE_ANON_KEY = 'test-anon-key'
    AUTH_REDIRECT_URL = 'https://catman.example/auth/callback'
    LOG_LEVEL = 'DEBUG'
