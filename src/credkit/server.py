"""
Web service exposing the credential encoders

Flask application factory serving the default partner configuration, the
signature endpoints and the credential packing endpoint. Requires the
``server`` extra (Flask).
"""

import logging
from typing import Any, Dict, Optional

from .config.partner_config import PartnerConfig, fallback_partner_config
from .encoding.signature import SignatureEncoder
from .encoding.packer import CredentialPacker
from .encoding.types import EncodingErrorCodes
from .exceptions import CredkitError, ValidationError

logger = logging.getLogger(__name__)


def _read_json_body(request) -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError(
            "Request body must be a JSON object",
            EncodingErrorCodes.INVALID_FIELD_TYPE
        )
    return data


def _error_body(error: CredkitError) -> Dict[str, Any]:
    return {'error': {'code': error.error_code, 'message': error.message}}


def _error_status(error: CredkitError) -> int:
    return 400 if isinstance(error, ValidationError) else 500


def create_app(partner_config: Optional[PartnerConfig] = None):
    """
    Create the Flask application.

    Args:
        partner_config: Defaults served from ``/api/config`` (fallback defaults if None)

    Returns:
        flask.Flask: Configured application
    """
    try:
        from flask import Flask, jsonify, request  # type: ignore
    except ImportError:
        raise ImportError("Flask is required for the web service. Install with: pip install credkit-python[server]")

    app = Flask(__name__)
    partner_config = partner_config or fallback_partner_config()
    encoder = SignatureEncoder()
    packer = CredentialPacker()

    @app.route('/api/config', methods=['GET'])
    def get_config():
        return jsonify(partner_config.to_dict())

    @app.route('/api/generate-signature', methods=['POST'])
    def generate_signature():
        try:
            data = _read_json_body(request)
            signature = encoder.compute(data.get('partnerId'), data.get('partnerKey'))
        except CredkitError as e:
            logger.info(f"Signature generation rejected: {e.message}")
            return jsonify({'success': False, 'error': e.message}), _error_status(e)

        return jsonify({'success': True, 'signature': signature})

    @app.route('/signature', methods=['POST'])
    def signature():
        try:
            data = _read_json_body(request)
            digest = encoder.compute(data.get('partnerId'), data.get('partnerKey'))
        except CredkitError as e:
            logger.info(f"Signature request rejected: {e.message}")
            return jsonify(_error_body(e)), _error_status(e)

        return jsonify({'digest': digest})

    @app.route('/pack', methods=['POST'])
    def pack():
        try:
            data = _read_json_body(request)
            encoded = packer.pack(data.get('agentId'), data.get('username'), data.get('password'))
        except CredkitError as e:
            logger.info(f"Pack request rejected: {e.message}")
            return jsonify(_error_body(e)), _error_status(e)

        return jsonify({'encoded': encoded})

    logger.info(f"Created signature web service (partner config source: {partner_config.source})")
    return app


def run_server(
    host: str = "127.0.0.1",
    port: int = 8080,
    partner_config: Optional[PartnerConfig] = None
) -> None:
    """Run the web service with Flask's built-in server."""
    app = create_app(partner_config)
    logger.info(f"Starting signature web service on {host}:{port}")
    app.run(host=host, port=port)
