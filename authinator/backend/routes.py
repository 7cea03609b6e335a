"""
AUTHINATOR API ROUTES - FLASK BLUEPRINT

REST endpoints over the secret store and the TOTP engine.

    GET    /totps          list entries
    POST   /totps          create an entry, body {"name": ..., "secret": ...}
    GET    /totps/<name>   current code + seconds until it expires
    DELETE /totps/<name>   remove an entry

Examples:
    curl http://localhost:8055/totps
    curl -X POST -H "Content-Type: application/json" \\
         -d '{"name":"example","secret":"JBSWY3DPEHPK3PXP"}' http://localhost:8055/totps
    curl http://localhost:8055/totps/example
    curl -X DELETE http://localhost:8055/totps/example
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from ..core import otp_core
from ..core.errors import DerivationError, DuplicateNameError, NotFoundError, StorageError
from ..database import SecretStore

logger = logging.getLogger(__name__)

totp_bp = Blueprint("totp", __name__)


def _store() -> SecretStore:
    # Stores on the same path share one writer lock, so a fresh handle per
    # request is safe under the threaded server.
    return SecretStore(current_app.config["DATA_FILE"])


@totp_bp.errorhandler(StorageError)
def storage_error(e):
    logger.error("Storage failure: %s", e)
    return jsonify({"error": "Storage error"}), 500


@totp_bp.route("/totps", methods=["GET"])
def list_entries():
    entries = _store().list()
    return jsonify([{"name": e.name, "secret": e.secret} for e in entries])


@totp_bp.route("/totps", methods=["POST"])
def create_entry():
    """
    CREATE A TOTP ENTRY

    Input (JSON body):
      {"name": "github", "secret": "JBSWY3DPEHPK3PXP"}

    Output:
      201 {"message": "..."}
      400 name or secret missing / not strings
      409 name already taken
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid input"}), 400
    name = data.get("name")
    secret = data.get("secret")
    if not isinstance(name, str) or not isinstance(secret, str) or not name or not secret:
        return jsonify({"error": "Invalid input: 'name' and 'secret' are required"}), 400

    try:
        _store().add(name, secret)
    except DuplicateNameError as e:
        return jsonify({"error": str(e)}), 409

    logger.info("Created TOTP entry %r", name)
    return jsonify({"message": f"TOTP entry '{name}' created successfully."}), 201


@totp_bp.route("/totps/<path:name>", methods=["GET"])
def get_code(name):
    """
    CURRENT TOTP CODE FOR ONE ENTRY

    Output:
      {"code": "123456", "expires_in": 17}
    """
    try:
        entry = _store().find(name)
    except NotFoundError:
        return jsonify({"error": "No entry found with that name."}), 404

    try:
        derived = otp_core.derive(entry.secret)
    except DerivationError as e:
        logger.warning("Could not derive code for %r: %s", name, e)
        return jsonify({"error": "Error generating TOTP code"}), 500

    return jsonify({"code": derived.code, "expires_in": derived.expires_in})


@totp_bp.route("/totps/<path:name>", methods=["DELETE"])
def delete_entry(name):
    try:
        _store().remove(name)
    except NotFoundError:
        return jsonify({"error": "No entry found with that name."}), 404

    logger.info("Removed TOTP entry %r", name)
    return jsonify({"message": f"Entry '{name}' has been removed."})
