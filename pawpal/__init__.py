import logging
import os
from flask import Flask, send_from_directory
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from flask_cors import CORS
from flask_bcrypt import Bcrypt
from flask_migrate import Migrate
from flask_restx import Api
from sqlalchemy.exc import SQLAlchemyError
from pawpal.config import Config
from pawpal.errors import PawPalError

logger = logging.getLogger(__name__)

migrate = Migrate()
db = SQLAlchemy()
jwt = JWTManager()
bcrypt = Bcrypt()


def build_api():
    return Api(
        title='PawPal API',
        version='1.0',
        description='Pet adoption marketplace API',
        doc='/docs',
        prefix='/api',
        ui_config={
            'displayOperationId': True,
            'docExpansion': 'none',
            'filter': True,
            'defaultModelsExpandDepth': 1,
            'defaultModelExpandDepth': 1
        },
        security=[{'BearerAuth': []}],
        authorizations={
            'BearerAuth': {
                'type': 'apiKey',
                'in': 'header',
                'name': 'Authorization',
                'description': 'Enter your JWT token as "Bearer <token>"'
            }
        }
    )


def register_error_handlers(api):
    @api.errorhandler(PawPalError)
    def handle_pawpal_error(error):
        if error.code >= 500:
            logger.error(f"Unhandled application error: {error.message}")
        return error.to_dict(), error.code

    @api.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        db.session.rollback()
        logger.exception(f"Database error: {error}")
        return {'message': 'Database error'}, 500


def create_app(config_class=Config):
    app = Flask(__name__, static_url_path='/static')
    app.config.from_object(config_class)
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    bcrypt.init_app(app)

    api = build_api()
    api.init_app(app)
    register_error_handlers(api)

    # Create the upload directory if it doesn't exist
    os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)

    # Route for serving uploaded files
    @app.route('/uploads/<path:filename>')
    def uploaded_file(filename):
        return send_from_directory(os.path.abspath(app.config['UPLOAD_FOLDER']), filename)

    # Enable CORS
    CORS(app, resources={r"/*": {"origins": app.config.get('CORS_ORIGINS', '*')}},
         supports_credentials=app.config.get('CORS_SUPPORTS_CREDENTIALS', True),
         allow_headers=app.config.get('CORS_ALLOW_HEADERS', ["Content-Type", "Authorization"]),
         methods=app.config.get('CORS_METHODS', ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]))

    # Register API namespaces
    from .routes import NAMESPACES
    for namespace in NAMESPACES:
        api.add_namespace(namespace)

    with app.app_context():
        from . import models  # noqa: F401
        db.create_all()  # Create all tables

    return app
