"""
FLASK APP FACTORY - AUTHINATOR HTTP API

Builds the Flask app that serves the TOTP REST API, enables CORS and
registers the routes blueprint. Started by `authinator serve`.
"""

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from .. import config
from .routes import totp_bp


def create_app(data_file: str = None) -> Flask:
    """
    Create the API app.

    Arguments:
        data_file: path of the JSON data file; falls back to
            AUTHINATOR_DATA_FILE, then "totp.json"
    """
    app = Flask(__name__)
    app.config["DATA_FILE"] = config.data_file(data_file)
    app.json.sort_keys = False

    # Frontends on another origin may call the API
    CORS(app)

    app.register_blueprint(totp_bp)

    @app.errorhandler(HTTPException)
    def http_error(e):
        # 404 / 405 from routing as JSON, like every other error response
        return jsonify({"error": e.description}), e.code

    return app
