from flask import Blueprint, jsonify, current_app

SERVICE_NAME = 'Sparse Matrix API'
SERVICE_VERSION = '1.0.0'

main_bp = Blueprint('main', __name__)

@main_bp.route('/')
def index():
    return jsonify({'message': SERVICE_NAME, 'version': SERVICE_VERSION, 'status': 'running'})

@main_bp.route('/health')
def health_check():
    """Liveness plus the number of stored matrices"""
    stats = current_app.extensions['matrix_service'].get_storage_stats()
    return jsonify({
        'status': 'healthy',
        'matrices': stats['total_matrices'],
        'persistent': stats['persistent']
    })

@main_bp.route('/api-info')
def api_info():
    """List every registered route with its HTTP methods"""
    endpoints = {}
    for rule in sorted(current_app.url_map.iter_rules(), key=lambda r: r.rule):
        if rule.endpoint == 'static':
            continue
        methods = sorted(rule.methods - {'HEAD', 'OPTIONS'})
        endpoints.setdefault(rule.rule, []).extend(methods)

    return jsonify({
        'name': SERVICE_NAME,
        'version': SERVICE_VERSION,
        'description': 'Load, combine and export sparse integer matrices',
        'endpoints': endpoints
    })
