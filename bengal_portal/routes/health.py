# bengal_portal/routes/health.py
from flask import Blueprint, jsonify, current_app
from sqlalchemy import text
from datetime import datetime

from bengal_portal.models import db
from bengal_portal.services.portal import EXTENSION_KEY

health_bp = Blueprint('health', __name__)

CRITICAL_BLUEPRINTS = ['auth', 'jobs', 'quotes', 'customers']

@health_bp.route('/health', methods=['GET'])
def health_check():
    """
    Health check endpoint to verify service status
    Tests database connectivity, portal services, blueprint imports and registration
    """
    health_status = {
        'status': 'healthy',
        'app': current_app.config.get('COMPANY_NAME', 'Bengal Welding') + ' Portal API',
        'version': '1.0.0',
        'timestamp': datetime.utcnow().isoformat() + 'Z',
        'checks': {}
    }

    overall_healthy = True

    # Database connection
    try:
        db.session.execute(text('SELECT 1'))
        db.session.commit()

        db_url = current_app.config.get('SQLALCHEMY_DATABASE_URI', '')
        if 'sqlite' in db_url.lower():
            db_type = 'SQLite'
        elif 'postgresql' in db_url.lower():
            db_type = 'PostgreSQL'
        else:
            db_type = 'Unknown'

        health_status['checks']['database'] = {
            'status': 'healthy',
            'type': db_type,
            'connected': True
        }
    except Exception as db_error:
        current_app.logger.error(f"Database health check failed: {db_error}")
        health_status['checks']['database'] = {
            'status': 'unhealthy',
            'connected': False,
            'error': str(db_error)
        }
        overall_healthy = False

    # Portal services and store
    portal = current_app.extensions.get(EXTENSION_KEY)
    health_status['checks']['portal'] = {
        'status': 'healthy' if portal else 'unhealthy',
        'store': type(portal.store).__name__ if portal else None,
        'assistant_configured': bool(current_app.config.get('OPENAI_API_KEY'))
    }
    if portal is None:
        overall_healthy = False

    # Blueprint imports
    from bengal_portal.routes import validate_blueprints
    imports = validate_blueprints()
    health_status['checks']['imports'] = {
        'status': 'healthy' if imports['all_critical_present'] else 'unhealthy',
        **imports
    }
    if not imports['all_critical_present']:
        current_app.logger.error(f"Critical blueprints failed to import: {imports['critical_missing']}")
        overall_healthy = False

    # Application state
    registered_blueprints = [bp.name for bp in current_app.blueprints.values()]
    missing_blueprints = [bp for bp in CRITICAL_BLUEPRINTS if bp not in registered_blueprints]
    health_status['checks']['application'] = {
        'status': 'healthy' if not missing_blueprints else 'warning',
        'blueprints': {
            'registered': registered_blueprints,
            'missing_critical': missing_blueprints,
        },
        'routes': {
            'total': len(list(current_app.url_map.iter_rules())),
            'api_routes': len([r for r in current_app.url_map.iter_rules() if r.rule.startswith('/api/')])
        }
    }
    if missing_blueprints:
        current_app.logger.warning(f"Missing critical blueprints: {missing_blueprints}")

    status_code = 200
    if not overall_healthy:
        health_status['status'] = 'unhealthy'
        status_code = 503
    elif any(check.get('status') == 'warning' for check in health_status['checks'].values()):
        health_status['status'] = 'degraded'

    return jsonify(health_status), status_code

@health_bp.route('/health/simple', methods=['GET'])
def simple_health_check():
    """Minimal response for load balancers"""
    try:
        db.session.execute(text('SELECT 1'))
        db.session.commit()
        return jsonify({'status': 'healthy', 'message': 'Service is running'}), 200
    except Exception as e:
        current_app.logger.error(f"Simple health check failed: {e}")
        return jsonify({'status': 'unhealthy', 'message': 'Database connection failed'}), 503
