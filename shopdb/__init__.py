"""Flask application factory."""
import atexit
import logging
import os

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from shopdb.database import init_db


def create_app(config_object='config.Config'):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)

    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Error tracking in production only
    if app.config.get('SENTRY_DSN') and app.config.get('ENV') == 'production':
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration

        sentry_sdk.init(
            dsn=app.config['SENTRY_DSN'],
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,
            environment=app.config.get('ENV'),
            release=os.getenv('GIT_COMMIT', 'unknown')
        )

    from shopdb.blueprints.metrics import setup_metrics_instrumentation
    setup_metrics_instrumentation(app)

    # Initialize the store; its pool is released at shutdown
    store = init_db(app)
    atexit.register(store.dispose)

    # Error Handlers
    from shopdb.exceptions import ShopError

    @app.errorhandler(ShopError)
    def handle_shop_error(error):
        """Render typed service failures."""
        if error.status_code >= 500:
            app.logger.error(f"{error.kind} [{error.status_code}]: {error.message}")
        else:
            app.logger.info(f"{error.kind} [{error.status_code}]: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'status': 'error', 'error': error.name, 'message': error.description}), error.code

    @app.errorhandler(Exception)
    def internal_error(error):
        app.logger.exception(f"Unhandled Exception: {error}")
        return jsonify({'status': 'error', 'error': 'Internal', 'message': 'Internal Server Error'}), 500

    # Register blueprints
    from shopdb.blueprints.rpc import rpc_bp
    from shopdb.blueprints.metrics import metrics_bp

    app.register_blueprint(rpc_bp)
    app.register_blueprint(metrics_bp)

    # Register CLI commands
    from shopdb.cli_commands import init_cli_commands
    init_cli_commands(app)

    return app
