import os
import logging
from flask import Flask, request, jsonify
from flask_login import LoginManager
from flask_cors import CORS

from bengal_portal.config import config, get_config_name
from bengal_portal.errors import PortalError
from bengal_portal.models import db
from bengal_portal.services.portal import init_portal, get_portal

def create_app(config_name=None, store=None, **overrides):
    """
    Application factory

    Args:
        config_name (str): key into bengal_portal.config.config; detected
            from the environment when omitted
        store: key-value store for the portal collections; defaults to the
            database-backed store
        **overrides: assistant / payment_gateway replacements, passed to
            the portal services
    """
    if config_name is None:
        config_name = get_config_name()

    app = Flask(__name__)

    try:
        config_instance = config[config_name]()
        app.config.from_object(config_instance)
        app.logger.info(f"✓ Configuration loaded successfully for {config_name} environment")
    except Exception as config_error:
        app.logger.error(f"❌ Configuration loading failed: {config_error}")
        raise

    _configure_logging(app, config_name)

    # Instance folder holds the default SQLite file
    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError as e:
        app.logger.warning(f"Could not create instance directory: {e}")

    db.init_app(app)
    app.logger.info("✓ Database initialized successfully")

    cors_origins = app.config.get('CORS_ORIGINS', [])
    CORS(app,
         origins=cors_origins,
         supports_credentials=app.config.get('CORS_SUPPORTS_CREDENTIALS', True),
         methods=['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS'],
         allow_headers=['Content-Type', 'Authorization', 'X-Requested-With', 'Accept', 'Origin'],
         max_age=86400
    )
    app.logger.info(f"✓ CORS configured with {len(cors_origins)} allowed origins")

    login_manager = LoginManager()
    login_manager.init_app(app)
    login_manager.session_protection = 'strong'

    @login_manager.unauthorized_handler
    def handle_unauthorized():
        """JSON instead of a redirect to a login page"""
        app.logger.warning(f"Unauthorized access attempt to {request.path} from {request.remote_addr}")
        return jsonify({
            'error': 'Authentication required',
            'message': 'You must be logged in to access this endpoint',
            'code': 'UNAUTHORIZED'
        }), 401

    @login_manager.user_loader
    def load_user(user_id):
        """The cookie is only honoured while it matches the stored portal session"""
        user = get_portal().identity.current()
        if user is None or user.id != user_id:
            return None
        return user

    registered_blueprints = _register_blueprints(app)

    @app.route('/')
    def index():
        return jsonify({
            'message': f"{app.config.get('COMPANY_NAME', 'Bengal Welding')} Portal API",
            'status': 'running',
            'version': '1.0.0',
            'environment': config_name,
            'endpoints': {
                'health': '/api/health',
                'auth': '/api/auth',
                'jobs': '/api/jobs',
                'quotes': '/api/quotes',
                'customers': '/api/customers',
                'assistant': '/api/assistant'
            },
            'blueprint_status': {
                'registered': registered_blueprints,
                'total_routes': len(list(app.url_map.iter_rules()))
            }
        })

    _register_error_handlers(app)

    with app.app_context():
        db.create_all()
        app.logger.info("✓ Database tables created/verified successfully")

    init_portal(app, store=store, **overrides)

    app.logger.info(f"✓ Portal API created successfully ({config_name})")
    return app

def _configure_logging(app, config_name):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)

    if config_name == 'production':
        logging.basicConfig(level=level)
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        app.logger.addHandler(handler)
        app.logger.setLevel(level)
        app.logger.info("✓ Production logging configured")
    elif app.debug:
        logging.basicConfig(level=logging.DEBUG)
        app.logger.setLevel(logging.DEBUG)
        app.logger.info("✓ Debug logging enabled")
    else:
        app.logger.setLevel(level)

def _register_blueprints(app):
    from bengal_portal import routes

    blueprint_table = [
        (routes.auth_bp, '/api/auth', 'auth_bp'),
        (routes.jobs_bp, '/api/jobs', 'jobs_bp'),
        (routes.quotes_bp, '/api/quotes', 'quotes_bp'),
        (routes.customers_bp, '/api/customers', 'customers_bp'),
        (routes.assistant_bp, '/api/assistant', 'assistant_bp'),
        (routes.health_bp, '/api', 'health_bp'),
    ]

    registered = []
    for blueprint, url_prefix, name in blueprint_table:
        if blueprint is None:
            app.logger.error(f"❌ {name} was not imported; skipping registration")
            continue
        app.register_blueprint(blueprint, url_prefix=url_prefix)
        registered.append(name)
        app.logger.info(f"✓ Registered {name} blueprint at {url_prefix}")

    return registered

def _register_error_handlers(app):

    @app.errorhandler(PortalError)
    def portal_error(error):
        if error.status_code >= 500:
            app.logger.error(f"{error.code}: {error.message}")
        else:
            app.logger.info(f"{request.method} {request.path} rejected: {error.code} {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({
            'error': 'Not Found',
            'message': f'The requested endpoint {request.path} does not exist',
            'code': 'NOT_FOUND'
        }), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({
            'error': 'Method Not Allowed',
            'message': f'The method {request.method} is not allowed for endpoint {request.path}',
            'code': 'METHOD_NOT_ALLOWED'
        }), 405

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        app.logger.error(f"Internal server error: {error}")
        return jsonify({
            'error': 'Internal Server Error',
            'message': 'An unexpected error occurred. Please try again later.',
            'code': 'INTERNAL_ERROR'
        }), 500

def main():
    app = create_app()
    port = int(os.environ.get('PORT', 5000))
    app.run(
        debug=app.config.get('DEBUG', False),
        host='0.0.0.0',
        port=port
    )

if __name__ == '__main__':
    main()
