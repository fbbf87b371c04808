import os
import logging
import click
from datetime import date
from logging.handlers import RotatingFileHandler
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
from config import config
from extensions import db, migrate, login_manager, jwt, limiter, cors
from utils.errors import HouseholdFinanceError


def configure_logging(app):
    """Configure application logging"""
    if not app.debug and not app.testing:
        # Create logs directory if it doesn't exist
        if not os.path.exists('logs'):
            os.mkdir('logs')

        # File handler for errors
        file_handler = RotatingFileHandler(
            'logs/household_finance.log',
            maxBytes=10240000,  # 10MB
            backupCount=10
        )
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s '
            '[in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)
        app.logger.addHandler(file_handler)

        app.logger.setLevel(logging.INFO)
        app.logger.info('Household Finance startup')
    else:
        # Development logging to console
        app.logger.setLevel(logging.DEBUG)
        app.logger.info('Household Finance startup (DEBUG mode)')


def create_app(config_name=None):
    """Application factory pattern"""

    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config[config_name])
    config[config_name].init_app(app)

    # Configure logging
    configure_logging(app)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    jwt.init_app(app)
    limiter.init_app(app)
    cors.init_app(app, resources={r'/api/*': {'origins': app.config['CORS_ORIGINS']}})

    # Add security headers
    @app.after_request
    def add_security_headers(response):
        """Add security headers to all responses"""
        headers = app.config.get('SECURITY_HEADERS', {})
        for header, value in headers.items():
            response.headers[header] = value
        return response

    # Bearer-token authentication for Flask-Login
    @login_manager.user_loader
    def load_user(user_id):
        from models.users import User
        return db.session.get(User, int(user_id))

    @login_manager.request_loader
    def load_user_from_token(request):
        """Resolve ``current_user`` from ``Authorization: Bearer <token>``.

        The user row is read fresh on every request; a bad, expired or
        missing token leaves the request anonymous.
        """
        from flask_jwt_extended import decode_token
        from flask_jwt_extended.exceptions import JWTExtendedException
        from jwt.exceptions import PyJWTError
        from models.users import User

        header = request.headers.get('Authorization', '')
        scheme, _, token = header.partition(' ')
        if scheme.lower() != 'bearer' or not token:
            return None
        try:
            claims = decode_token(token.strip())
            user_id = int(claims['sub'])
        except (JWTExtendedException, PyJWTError, KeyError, ValueError):
            return None

        user = db.session.get(User, user_id, populate_existing=True)
        if user is None or not user.is_active:
            return None
        return user

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify(message='Authentication required.'), 401

    # Import models to ensure they're registered with SQLAlchemy
    with app.app_context():
        import models  # noqa: F401

    # Register blueprints
    from blueprints.auth import users_bp
    from blueprints.household import household_bp
    from blueprints.recurring import recurring_bp
    from blueprints.transactions import transactions_bp
    from blueprints.savings import savings_bp
    from blueprints.audit_logs import audit_logs_bp
    from blueprints.stats import stats_bp
    from blueprints.shopping import shopping_bp

    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(household_bp, url_prefix='/api/households')
    app.register_blueprint(recurring_bp, url_prefix='/api/recurring')
    app.register_blueprint(transactions_bp, url_prefix='/api/transactions')
    app.register_blueprint(savings_bp, url_prefix='/api/savings')
    app.register_blueprint(audit_logs_bp, url_prefix='/api/audit-logs')
    app.register_blueprint(stats_bp, url_prefix='/api/stats')
    app.register_blueprint(shopping_bp, url_prefix='/api/shopping')

    # Create database tables
    with app.app_context():
        from init_db import create_tables
        create_tables()

    # Register error handlers
    register_error_handlers(app)

    # Register CLI commands
    register_commands(app)

    return app


def register_error_handlers(app):
    """Register global error handlers; every error leaves as JSON."""

    @app.errorhandler(HouseholdFinanceError)
    def household_finance_error(error):
        db.session.rollback()
        if error.status_code >= 500:
            app.logger.error(f'{error.__class__.__name__}: {error.message} {error.details}')
            return jsonify(message=error.default_message), error.status_code
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def http_error(error):
        # 404 / 405 / 429 and friends
        return jsonify(message=error.description), error.code

    @app.errorhandler(Exception)
    def internal_error(error):
        db.session.rollback()
        app.logger.exception(f'Internal Server Error: {error}')
        return jsonify(message='Internal server error'), 500


def register_commands(app):
    """Register Flask CLI commands."""

    @app.cli.command('init-db')
    def init_db():
        """Create all database tables."""
        from init_db import create_tables
        tables = create_tables()
        click.echo(f'SUCCESS: {len(tables)} tables ready: {", ".join(tables)}')

    @app.cli.group()
    def recurring():
        """Recurring item maintenance."""
        pass

    @recurring.command('autopay')
    @click.option('--year', type=int, default=None, help='Year to settle (default: this year).')
    @click.option('--month', type=click.IntRange(1, 12), default=None,
                  help='Month 1-12 to settle (default: this month).')
    def autopay(year, month):
        """Pay every due auto-pay item whose payment date has arrived."""
        from services.recurring_service import RecurringService
        today = date.today()
        created = RecurringService.run_autopay(year or today.year, month or today.month, today=today)
        if not created:
            click.echo('No auto-pay items to settle.')
            return
        for txn in created:
            click.echo(f'Paid recurring item {txn.recurring_item_id}: {txn.amount} on {txn.transaction_date}')
        click.echo(f'SUCCESS: {len(created)} transaction(s) created.')


if __name__ == '__main__':
    app = create_app()
    # SECURITY: Only bind to localhost in development
    # Never use 0.0.0.0 with debug mode - it exposes the debugger to the network
    app.run(host='127.0.0.1', port=5000, debug=True)
