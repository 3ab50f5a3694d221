# brainsync/app.py (main application)
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
import os
import logging

from .api_routes import api_bp
from .config import LOG_LEVEL, flask_settings


def configure_logging():
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def create_app(overrides=None, store=None):
    """Build the Flask app.

    ``overrides`` updates app.config; ``store`` replaces the Firestore-backed
    catalog store (tests pass one backed by an in-memory client).
    """
    app = Flask(__name__)
    app.config.update(flask_settings())
    if overrides:
        app.config.update(overrides)
    if store is not None:
        app.extensions['catalog_store'] = store

    app.register_blueprint(api_bp, url_prefix='/api')

    @app.after_request
    def after_request(response):
        """Security and CORS headers"""
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['Access-Control-Allow-Origin'] = '*'
        response.headers['Access-Control-Allow-Methods'] = 'GET, POST, DELETE, OPTIONS'
        response.headers['Access-Control-Allow-Headers'] = 'Content-Type, Authorization'
        return response

    @app.errorhandler(404)
    def route_not_found(error):
        return jsonify({'message': 'Route not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({'message': 'Method not allowed'}), 405

    @app.errorhandler(413)
    def payload_too_large(error):
        return jsonify({'message': 'Payload too large'}), 413

    @app.errorhandler(Exception)
    def unhandled_error(error):
        if isinstance(error, HTTPException):
            return jsonify({'message': error.description}), error.code
        app.logger.exception(f"❌ Unhandled error: {error}")
        return jsonify({'message': 'Something went wrong!'}), 500

    return app


def main():
    configure_logging()
    app = create_app()

    if os.environ.get('RAILWAY_ENVIRONMENT'):
        app.logger.setLevel(logging.INFO)
        app.logger.info("🚂 Running on Railway")

    port = int(os.environ.get("PORT", 5000))
    app.logger.info(f"🚀 BrainSync API starting on port {port}")

    if os.environ.get('RAILWAY_ENVIRONMENT'):
        app.run(host="0.0.0.0", port=port, debug=False)
    else:
        app.run(host="0.0.0.0", port=port, debug=True)


if __name__ == "__main__":
    main()
