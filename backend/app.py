"""
FLASK APP MAIN ENTRY POINT - AUTHENTICATOR BACKEND SERVER
==========================================================

Builds the Flask app: loads configuration, enables CORS for the frontend,
prepares the account database and registers the API blueprint.

Run locally with:
    flask --app backend.app run --port 4000
or:
    authenticator serve
"""
import logging

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from backend.config import Config, ENV_PREFIX, configure_logging
from core.otp_core import InvalidSecretError
from database.db_manager import AccountNotFoundError, init_db

logger = logging.getLogger(__name__)


def create_app(test_config=None) -> Flask:
    """
    Application factory.

    Arguments:
        test_config: mapping applied last, overriding defaults and
            AUTHENTICATOR_* environment variables
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    app.config.from_prefixed_env(ENV_PREFIX)
    if test_config is not None:
        app.config.from_mapping(test_config)

    configure_logging(app.config["LOG_LEVEL"])

    # The frontend runs on a different port during development
    CORS(app, origins=app.config["CORS_ORIGINS"])

    init_db(app.config["DATABASE"])

    from backend.routes import accounts_bp
    app.register_blueprint(accounts_bp)

    _register_error_handlers(app)

    @app.route('/', methods=['GET'])
    def index():
        """List the available endpoints."""
        return jsonify({
            "service": "totp-authenticator",
            "endpoints": sorted(
                f"{','.join(sorted(rule.methods - {'HEAD', 'OPTIONS'}))} {rule.rule}"
                for rule in app.url_map.iter_rules()
                if rule.endpoint != 'static'
            ),
        })

    logger.info("App ready, database=%s", app.config["DATABASE"])
    return app


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(InvalidSecretError)
    def handle_invalid_secret(e):
        return jsonify({"error": "Invalid secret key"}), 400

    @app.errorhandler(AccountNotFoundError)
    def handle_not_found(e):
        return jsonify({"error": str(e)}), 404

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        return jsonify({"error": e.description}), e.code


if __name__ == '__main__':
    create_app().run(debug=True, host='0.0.0.0', port=4000)
