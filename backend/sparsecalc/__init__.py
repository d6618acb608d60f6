from flask import Flask
from flask_cors import CORS
from dotenv import load_dotenv
import logging
import os

__version__ = '1.0.0'

# Load environment variables
load_dotenv()


def create_app(config_name='development'):
    """Application factory pattern"""
    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'dev-secret-key')
    app.config['MAX_CONTENT_LENGTH'] = int(os.environ.get('SPARSECALC_MAX_UPLOAD_BYTES', 1024 * 1024))
    app.config['LOG_LEVEL'] = os.environ.get('LOG_LEVEL', 'INFO').upper()
    if config_name == 'testing':
        app.config['TESTING'] = True

    logging.getLogger('sparsecalc').setLevel(app.config['LOG_LEVEL'])
    app.logger.setLevel(app.config['LOG_LEVEL'])

    # Enable CORS
    CORS(app)

    # Register blueprints
    from sparsecalc.routes.main import main_bp
    from sparsecalc.routes.api import api_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(api_bp, url_prefix='/api/v1')

    return app
