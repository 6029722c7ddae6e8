import os
from datetime import timedelta
from dotenv import load_dotenv

basedir = os.path.abspath(os.path.dirname(__file__))
load_dotenv(os.path.join(basedir, '..', '.env'))


def _env_flag(name, default='False'):
    return os.environ.get(name, default).lower() in ('true', '1', 't', 'yes')


class Config:
    """Base configuration"""

    # Security Configuration
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    @staticmethod
    def get_database_url():
        """Get properly formatted database URL string"""
        database_url = os.environ.get('DATABASE_URL')

        if database_url:
            # Ensure we're using postgresql:// not postgres://
            if database_url.startswith('postgres://'):
                database_url = database_url.replace('postgres://', 'postgresql://', 1)
            return database_url
        else:
            # Fallback for local development
            return 'sqlite:///' + os.path.join(basedir, '..', 'instance', 'bengal_portal.db')

    SQLALCHEMY_DATABASE_URI = None  # Will be set in __init__
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'echo': False,
    }

    # Session Configuration
    PERMANENT_SESSION_LIFETIME = timedelta(hours=24)
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    SESSION_COOKIE_NAME = 'bengal_auth'

    CORS_ORIGINS = [
        'http://localhost:3000',
        'http://127.0.0.1:3000',
    ]
    CORS_SUPPORTS_CREDENTIALS = True

    # Portal store
    STORE_KEY_PREFIX = os.environ.get('STORE_KEY_PREFIX', 'bengal_')
    SEED_DEMO_DATA = _env_flag('SEED_DEMO_DATA', 'True')

    # Business settings
    TIMEZONE = os.environ.get('TIMEZONE', 'Europe/London')
    COMPANY_NAME = os.environ.get('COMPANY_NAME', 'Bengal Welding')
    SERVICE_EMAIL = os.environ.get('SERVICE_EMAIL', 'client@bengalwelding.co.uk')
    PORTAL_BASE_URL = os.environ.get('PORTAL_BASE_URL', 'http://localhost:3000')
    PAYMENT_CHECKOUT_URL = os.environ.get('PAYMENT_CHECKOUT_URL', 'https://www.paypal.com/checkoutnow')
    WARRANTY_HORIZON_DAYS = int(os.environ.get('WARRANTY_HORIZON_DAYS', 90))

    # Assistant
    OPENAI_API_KEY = os.environ.get('OPENAI_API_KEY')
    ASSISTANT_MODEL = os.environ.get('ASSISTANT_MODEL', 'gpt-4o-mini')

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    def __init__(self):
        """Initialize configuration with proper database URL"""
        self.SQLALCHEMY_DATABASE_URI = self.get_database_url()


class DevelopmentConfig(Config):
    """Development configuration for local testing"""
    DEBUG = True

    def __init__(self):
        super().__init__()

        # Relaxed settings for development
        self.SESSION_COOKIE_SECURE = False

        self.CORS_ORIGINS = [
            'http://localhost:3000',
            'http://127.0.0.1:3000',
            'http://localhost:5173',
        ]

        dev_database_url = os.environ.get('DEV_DATABASE_URL')
        if dev_database_url:
            if dev_database_url.startswith('postgres://'):
                dev_database_url = dev_database_url.replace('postgres://', 'postgresql://', 1)
            self.SQLALCHEMY_DATABASE_URI = dev_database_url


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    SEED_DEMO_DATA = _env_flag('SEED_DEMO_DATA', 'False')

    def __init__(self):
        super().__init__()

        # Ensure SECRET_KEY is set for production
        secret_key = os.environ.get('SECRET_KEY')
        if not secret_key:
            raise ValueError("SECRET_KEY environment variable is required for production")
        self.SECRET_KEY = secret_key

        database_url = os.environ.get('DATABASE_URL')
        if not database_url:
            raise ValueError("DATABASE_URL environment variable is required for production")

        if database_url.startswith('postgres://'):
            database_url = database_url.replace('postgres://', 'postgresql://', 1)
        self.SQLALCHEMY_DATABASE_URI = database_url

        origins = os.environ.get('CORS_ORIGINS')
        if origins:
            self.CORS_ORIGINS = [o.strip() for o in origins.split(',') if o.strip()]

        self.SQLALCHEMY_ENGINE_OPTIONS = {
            'pool_recycle': 3600,
            'pool_pre_ping': True,
            'echo': False,
        }


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    SECRET_KEY = 'testing-secret-key'
    SEED_DEMO_DATA = False
    OPENAI_API_KEY = None

    def __init__(self):
        super().__init__()
        self.SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
        self.SESSION_COOKIE_SECURE = False
        self.CORS_ORIGINS = ['*']


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config_name():
    """Detect environment from environment variables"""

    # Check explicit environment setting
    flask_env = os.environ.get('FLASK_ENV', '').lower()
    if flask_env in ['production', 'testing', 'development']:
        return flask_env

    # Check for testing environment
    if os.environ.get('TESTING') or os.environ.get('CI'):
        return 'testing'

    # Default to development
    return 'development'


__all__ = [
    'config',
    'get_config_name',
]
