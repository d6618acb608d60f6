from flask import Blueprint, jsonify

from sparsecalc import __version__

main_bp = Blueprint('main', __name__)


@main_bp.route('/')
def index():
    """Root endpoint"""
    return jsonify({
        'message': 'Sparse Matrix Calculator API',
        'version': __version__,
        'status': 'running'
    })


@main_bp.route('/health')
def health_check():
    """Health check endpoint"""
    return jsonify({
        'status': 'healthy',
        'message': 'API is running successfully'
    })


@main_bp.route('/api-info')
def api_info():
    """API information endpoint"""
    return jsonify({
        'name': 'Sparse Matrix Calculator API',
        'version': __version__,
        'description': 'Addition, subtraction and multiplication of sparse integer matrices',
        'endpoints': {
            'main': '/',
            'health': '/health',
            'api_info': '/api-info',
            'operations': '/api/v1/operations',
            'parse': '/api/v1/matrices/parse',
            'calculate': '/api/v1/matrices/calculate',
            'calculate_upload': '/api/v1/matrices/calculate/upload'
        }
    })
