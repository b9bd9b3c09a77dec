from flask import Flask
from flask_cors import CORS
from dotenv import load_dotenv
import logging
import os

# Load environment variables
load_dotenv()

def create_app(config_name='development', overrides=None):
    """Application factory pattern"""
    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'dev-secret-key')
    app.config['MAX_CONTENT_LENGTH'] = int(os.environ.get('MAX_CONTENT_LENGTH', 16 * 1024 * 1024))
    app.config['DENSE_VIEW_LIMIT'] = int(os.environ.get('DENSE_VIEW_LIMIT', 400))
    app.config['LOG_LEVEL'] = os.environ.get('LOG_LEVEL', 'INFO').upper()

    if config_name == 'testing':
        app.config['TESTING'] = True
        app.config['MATRIX_STORAGE_DIR'] = None
    else:
        app.config['MATRIX_STORAGE_DIR'] = os.environ.get('MATRIX_STORAGE_DIR') or None

    if overrides:
        app.config.update(overrides)

    # Logging
    logging.basicConfig(format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    app.logger.setLevel(app.config['LOG_LEVEL'])
    logging.getLogger(__name__).setLevel(app.config['LOG_LEVEL'])

    # Enable CORS
    CORS(app)

    # Matrix storage shared by the blueprints
    from matrix_app.models.matrix_storage import MatrixStorage
    from matrix_app.services.matrix_service import MatrixService

    storage = MatrixStorage(app.config['MATRIX_STORAGE_DIR'])
    app.extensions['matrix_service'] = MatrixService(
        storage, dense_view_limit=app.config['DENSE_VIEW_LIMIT']
    )

    # Register blueprints
    from matrix_app.routes.main import main_bp
    from matrix_app.routes.api import api_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(api_bp, url_prefix='/api/v1')

    return app
