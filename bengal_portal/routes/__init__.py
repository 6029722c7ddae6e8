"""
Routes package for the Bengal Welding customer portal API.
Each module holds one Flask blueprint; app.py registers them under /api.
"""

import importlib
import logging

logger = logging.getLogger(__name__)

# Blueprint import registry - tracks successful and failed imports
blueprint_registry = {
    'successful': [],
    'failed': [],
    'blueprints': {}
}

def safe_import_blueprint(module_name, blueprint_name, description):
    """
    Import a blueprint, recording the failure instead of raising

    Args:
        module_name (str): module under bengal_portal.routes (e.g. 'auth')
        blueprint_name (str): blueprint variable name (e.g. 'auth_bp')
        description (str): human-readable name for logging

    Returns:
        Blueprint or None
    """
    try:
        module = importlib.import_module(f'{__name__}.{module_name}')
        blueprint = getattr(module, blueprint_name)

        if not (hasattr(blueprint, 'name') and hasattr(blueprint, 'url_prefix')):
            raise AttributeError(f"{blueprint_name} is not a valid Flask Blueprint")

        blueprint_registry['successful'].append(description)
        blueprint_registry['blueprints'][blueprint_name] = blueprint
        logger.info(f"✓ {description} blueprint imported successfully")
        return blueprint

    except ImportError as e:
        logger.error(f"❌ Import error for {description}: {str(e)}")
        blueprint_registry['failed'].append({
            'name': description,
            'error': 'ImportError',
            'details': str(e)
        })
        return None

    except AttributeError as e:
        logger.error(f"❌ Blueprint {blueprint_name} not found in {module_name}: {str(e)}")
        blueprint_registry['failed'].append({
            'name': description,
            'error': 'AttributeError',
            'details': str(e)
        })
        return None

auth_bp = safe_import_blueprint('auth', 'auth_bp', 'Authentication')
jobs_bp = safe_import_blueprint('jobs', 'jobs_bp', 'Jobs')
quotes_bp = safe_import_blueprint('quotes', 'quotes_bp', 'Quotes')
customers_bp = safe_import_blueprint('customers', 'customers_bp', 'Customers')
assistant_bp = safe_import_blueprint('assistant', 'assistant_bp', 'Assistant')
health_bp = safe_import_blueprint('health', 'health_bp', 'Health Check')

successful_count = len(blueprint_registry['successful'])
failed_count = len(blueprint_registry['failed'])

if failed_count > 0:
    logger.warning(f"❌ Failed imports: {failed_count}")
    for failure in blueprint_registry['failed']:
        logger.warning(f"  - {failure['name']}: {failure['error']} - {failure['details']}")

critical_blueprints = ['Authentication', 'Jobs', 'Quotes', 'Customers']
missing_critical = [bp for bp in critical_blueprints if bp not in blueprint_registry['successful']]

if missing_critical:
    logger.error(f"🚨 CRITICAL: Missing essential blueprints: {', '.join(missing_critical)}")

__all__ = [
    'auth_bp',
    'jobs_bp',
    'quotes_bp',
    'customers_bp',
    'assistant_bp',
    'health_bp',
    'blueprint_registry',
    'validate_blueprints',
]

def validate_blueprints():
    """
    Returns:
        dict: counts and names of imported and failed blueprints
    """
    return {
        'successful_imports': successful_count,
        'failed_imports': failed_count,
        'critical_missing': missing_critical,
        'all_critical_present': len(missing_critical) == 0,
        'successful_blueprints': blueprint_registry['successful'],
        'failed_blueprints': [f['name'] for f in blueprint_registry['failed']],
    }
