import os
from datetime import timedelta


class Config:
    """Base configuration"""

    # Secret keys for sessions and bearer tokens
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY') or 'dev-jwt-key-change-in-production'
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=int(os.environ.get('JWT_EXPIRES_DAYS', 30)))
    JWT_TOKEN_LOCATION = ['headers']

    # Database configuration
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(os.path.abspath(os.path.dirname(__file__)), 'instance', 'household_finance.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False  # Set to True for SQL query logging during development
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 300,
    }

    # Mobile client origins
    CORS_ORIGINS = [o.strip() for o in os.environ.get('CORS_ORIGINS', '*').split(',') if o.strip()]

    # Rate Limiting
    RATELIMIT_ENABLED = True
    RATELIMIT_STORAGE_URI = 'memory://'
    RATELIMIT_STRATEGY = 'fixed-window'
    RATELIMIT_HEADERS_ENABLED = True

    # Security Headers
    SECURITY_HEADERS = {
        'Strict-Transport-Security': 'max-age=31536000; includeSubDomains',
        'X-Content-Type-Options': 'nosniff',
        'X-Frame-Options': 'SAMEORIGIN',
        'Referrer-Policy': 'strict-origin-when-cross-origin'
    }

    # Household domain settings
    DEFAULT_CURRENCY = 'HUF'
    DEFAULT_TRANSACTION_CATEGORY = 'Other'
    INVITE_CODE_MAX_ATTEMPTS = 50
    INVITATION_CODE_MAX_ATTEMPTS = 50
    AUDIT_LOG_PAGE_SIZE = 50

    @classmethod
    def init_app(cls, app):
        pass


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    SQLALCHEMY_ECHO = False  # Set to True only when debugging SQL queries


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False

    # MUST set these environment variables in production
    SECRET_KEY = os.environ.get('SECRET_KEY')
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY')
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or os.environ.get('SQLALCHEMY_DATABASE_URI')

    PREFERRED_URL_SCHEME = 'https'

    @classmethod
    def init_app(cls, app):
        Config.init_app(app)

        if not app.config.get('SECRET_KEY'):
            raise ValueError("SECRET_KEY environment variable must be set in production!")
        if not app.config.get('JWT_SECRET_KEY'):
            raise ValueError("JWT_SECRET_KEY environment variable must be set in production!")

        # Warn if using SQLite in production
        if 'sqlite' in (app.config.get('SQLALCHEMY_DATABASE_URI') or ''):
            import warnings
            warnings.warn("Using SQLite in production is not recommended. Use PostgreSQL or MySQL.")


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    RATELIMIT_ENABLED = False
    JWT_SECRET_KEY = 'testing-jwt-secret-key-with-enough-length'


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
