"""
AUTHENTICATOR API ROUTES - FLASK BLUEPRINT

REST endpoints for managing accounts and reading their current TOTP codes.

EXAMPLES:
curl -X POST http://localhost:4000/api/accounts -H "Content-Type: application/json" \
     -d '{"label": "GitHub", "secret": "JBSW Y3DP EHPK 3PXP", "issuer": "GitHub"}'
curl http://localhost:4000/api/accounts
curl -X DELETE http://localhost:4000/api/accounts/1
"""

import base64
import io
import logging
import time

import qrcode
from flask import Blueprint, abort, current_app, jsonify, request

from core.base32 import random_secret
from core.otp_core import (
    DEFAULT_TIME_STEP,
    InvalidSecretError,
    format_otpauth_uri,
    generate_code,
    mask_secret,
    normalize_secret,
    remaining_seconds,
    validate_secret,
)
from database.db_manager import (
    add_account,
    delete_account,
    get_account,
    list_accounts,
)

logger = logging.getLogger(__name__)

accounts_bp = Blueprint('accounts', __name__, url_prefix='/api')


def _db_path() -> str:
    return current_app.config["DATABASE"]


def _get_account_or_404(account_id: int) -> dict:
    account = get_account(account_id, db_path=_db_path())
    if account is None:
        abort(404, description=f"Account {account_id} not found")
    return account


def _code_or_none(account: dict, now: int):
    """A stored secret that no longer computes yields None rather than failing the list."""
    try:
        return generate_code(account["secret"], now)
    except InvalidSecretError:
        logger.warning("Account %s has an unusable secret %s",
                       account["id"], mask_secret(account["secret"]))
        return None


@accounts_bp.route('/accounts', methods=['GET'])
def get_accounts():
    """
    LIST ACCOUNTS WITH THEIR CURRENT CODE

      curl http://localhost:4000/api/accounts

    All codes in one response are computed at the same timestamp.
    """
    now = int(time.time())
    remaining = remaining_seconds(now)
    return jsonify([
        {
            "id": account["id"],
            "label": account["label"],
            "issuer": account["issuer"],
            "secret": account["secret"],
            "code": _code_or_none(account, now),
            "remaining": remaining,
            "period": DEFAULT_TIME_STEP,
        }
        for account in list_accounts(db_path=_db_path())
    ])


@accounts_bp.route('/accounts', methods=['POST'])
def create_account():
    """
    ADD AN ACCOUNT

    Input (JSON body):
      {
        "label": "GitHub",            # required
        "secret": "JBSWY3DPEHPK3PXP", # required, Base32; spaces are removed
        "issuer": "GitHub"            # optional
      }

    The secret must produce a code before it is stored; otherwise 400
    {"error": "Invalid secret key"}.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    label = str(data.get('label') or '').strip()
    secret = normalize_secret(str(data.get('secret') or ''))
    issuer = str(data.get('issuer') or current_app.config["DEFAULT_ISSUER"]).strip()

    if not label or not secret:
        return jsonify({"error": "Label and secret are required"}), 400

    # InvalidSecretError is turned into a 400 by the app error handler
    validate_secret(secret)

    account_id = add_account(label, secret, issuer, db_path=_db_path())
    return jsonify({"success": True, "id": account_id}), 201


@accounts_bp.route('/accounts/<int:account_id>', methods=['DELETE'])
def remove_account(account_id):
    """
    DELETE AN ACCOUNT

      curl -X DELETE http://localhost:4000/api/accounts/1
    """
    delete_account(account_id, db_path=_db_path())
    return jsonify({"success": True})


@accounts_bp.route('/accounts/<int:account_id>/code', methods=['GET'])
def get_account_code(account_id):
    """Current code and countdown for a single account."""
    account = _get_account_or_404(account_id)
    now = int(time.time())
    return jsonify({
        "id": account_id,
        "code": generate_code(account["secret"], now),
        "remaining": remaining_seconds(now),
        "period": DEFAULT_TIME_STEP,
    })


@accounts_bp.route('/accounts/<int:account_id>/otpauth_uri', methods=['GET'])
def get_account_uri(account_id):
    """
    URI FOR IMPORTING THE ACCOUNT INTO ANOTHER AUTHENTICATOR APP

      curl http://localhost:4000/api/accounts/1/otpauth_uri
    """
    account = _get_account_or_404(account_id)
    uri = format_otpauth_uri(account["secret"], account["label"], account["issuer"])
    return jsonify({"id": account_id, "uri": uri})


@accounts_bp.route('/accounts/<int:account_id>/qr_code', methods=['GET'])
def get_account_qr_code(account_id):
    """
    QR CODE (PNG data URI) OF THE ACCOUNT'S otpauth URI

    Scan it with Google Authenticator / Microsoft Authenticator.
    """
    account = _get_account_or_404(account_id)
    uri = format_otpauth_uri(account["secret"], account["label"], account["issuer"])

    qr = qrcode.QRCode(
        version=None,
        box_size=current_app.config["QR_BOX_SIZE"],
        border=current_app.config["QR_BORDER"],
    )
    qr.add_data(uri)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buffer = io.BytesIO()
    img.save(buffer, format='PNG')
    img_str = base64.b64encode(buffer.getvalue()).decode()

    return jsonify({"id": account_id, "qr_code": f"data:image/png;base64,{img_str}"})


@accounts_bp.route('/secrets', methods=['POST'])
def create_secret():
    """
    GENERATE A RANDOM BASE32 SECRET

      curl -X POST http://localhost:4000/api/secrets
    """
    return jsonify({"secret": random_secret()})
