"""
Zebra Proxy - Main Application
==============================

HTTP front end that forwards print payloads to the configured printer.

Run: python -m zebra_proxy
"""

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from flask import Blueprint, Flask, current_app, jsonify, request, send_file
from flask_cors import CORS
from werkzeug.exceptions import RequestEntityTooLarge

from . import __version__
from .config import PORT, HOST, DEBUG, LOG_LEVEL, LOG_DIR, MAX_PAYLOAD_BYTES
from .exceptions import PrintProxyError, RenderServiceError, BackendNotSupportedError
from .handlers import create_printer, BaseHandler
from .logging_config import setup_logging
from .models import PrinterConfig, PrinterKind
from .storage import content_type_for

logger = logging.getLogger(__name__)

api = Blueprint('api', __name__)

PREVIEW_LENGTH = 200


# =============================================================================
# Helpers
# =============================================================================

def _printer_config() -> PrinterConfig:
    return current_app.config['PRINTER_CONFIG']


def _printer() -> BaseHandler:
    """Fresh handler for the configured printer."""
    return create_printer(_printer_config())


def _label_printer():
    """Handler of the virtual printer; other types have no saved labels."""
    printer = _printer()
    if not printer.supports_labels():
        raise BackendNotSupportedError(
            f'Endpoint only available for virtual printers (current type: {printer.kind})'
        )
    return printer


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _read_payload() -> bytes:
    """Print data from a JSON body ("data" field), text, or raw bytes."""
    if request.is_json:
        body = request.get_json(silent=True)
        if isinstance(body, dict) and body.get('data'):
            data = body['data']
        elif body:
            data = body
        else:
            return b''
        if not isinstance(data, str):
            data = json.dumps(data)
        return data.encode('utf-8')

    return request.get_data()


# =============================================================================
# Health & Info Endpoints
# =============================================================================

@api.route('/health', methods=['GET'])
def health():
    """Health check."""
    return jsonify({
        'status': 'ok',
        'version': __version__,
        'printerType': _printer_config().kind,
        'timestamp': _timestamp(),
    })


@api.route('/printer/info', methods=['GET'])
def printer_info():
    """Active printer configuration."""
    return jsonify(_printer_config().to_dict())


# =============================================================================
# Printing
# =============================================================================

@api.route('/print', methods=['POST'])
def print_payload():
    """Forward the request body to the printer."""
    payload = _read_payload()
    if not payload:
        return jsonify({
            'success': False,
            'error': 'No print data provided',
            'message': 'Please provide data to print in the request body',
        }), 400

    preview = payload[:PREVIEW_LENGTH].decode('utf-8', errors='replace')
    logger.info(f"Received print request, data length: {len(payload)} bytes")
    logger.debug(f"Print data preview: {preview}{'...' if len(payload) > PREVIEW_LENGTH else ''}")

    outcome = _printer().send(payload)

    return jsonify({
        'success': True,
        'message': 'Print job sent successfully',
        'printerType': _printer_config().kind,
        'result': outcome.to_dict(),
        'timestamp': _timestamp(),
    })


@api.route('/printer/test', methods=['GET'])
def test_printer():
    """Render a sample label through the virtual printer."""
    outcome = _label_printer().test_connection()

    return jsonify({
        'success': True,
        'message': 'Virtual printer test successful',
        'result': outcome.to_dict(),
        'timestamp': _timestamp(),
    })


# =============================================================================
# Saved Labels (virtual printer)
# =============================================================================

@api.route('/labels', methods=['GET'])
def list_labels():
    """List saved labels, newest first."""
    labels = _label_printer().list_labels()

    return jsonify({
        'success': True,
        'labels': [label.to_dict() for label in labels],
        'count': len(labels),
        'timestamp': _timestamp(),
    })


@api.route('/labels/<path:filename>', methods=['GET'])
def get_label(filename):
    """Serve a saved label inline."""
    path = _label_printer().store.path_for(filename)

    return send_file(
        path,
        mimetype=content_type_for(filename),
        download_name=path.name,
        as_attachment=False,
    )


@api.route('/labels/<path:filename>', methods=['DELETE'])
def delete_label(filename):
    """Delete a saved label."""
    _label_printer().delete_label(filename)

    return jsonify({
        'success': True,
        'message': f'Label {filename} deleted successfully',
        'timestamp': _timestamp(),
    })


# =============================================================================
# Application Setup
# =============================================================================

def _available_endpoints(config: PrinterConfig) -> list:
    endpoints = [
        'GET /health',
        'POST /print',
        'GET /printer/info',
    ]
    if config.kind.lower() == PrinterKind.VIRTUAL.value:
        endpoints.extend([
            'GET /printer/test (virtual only)',
            'GET /labels (virtual only)',
            'GET /labels/:filename (virtual only)',
            'DELETE /labels/:filename (virtual only)',
        ])
    return endpoints


def create_app(printer_config: Optional[PrinterConfig] = None) -> Flask:
    """
    Build the Flask application.

    The printer configuration is read once (from the environment unless
    given) and validated here, so a bad configuration fails at startup.
    """
    if printer_config is None:
        printer_config = PrinterConfig.from_env()

    create_printer(printer_config)

    app = Flask(__name__)
    app.config['PRINTER_CONFIG'] = printer_config
    app.config['MAX_CONTENT_LENGTH'] = MAX_PAYLOAD_BYTES
    CORS(app)

    app.register_blueprint(api)

    @app.errorhandler(PrintProxyError)
    def handle_print_error(e):
        logger.error(f"{type(e).__name__}: {e.message}")
        body = {
            'success': False,
            'error': e.message,
            'printerType': printer_config.kind,
            'timestamp': _timestamp(),
        }
        if isinstance(e, RenderServiceError):
            body['statusCode'] = e.status_code
        return jsonify(body), e.http_status

    @app.errorhandler(RequestEntityTooLarge)
    def handle_payload_too_large(e):
        limit = app.config['MAX_CONTENT_LENGTH']
        logger.warning(f"Rejected print payload over {limit} bytes")
        return jsonify({
            'success': False,
            'error': f'Payload too large (limit {limit} bytes)',
            'printerType': printer_config.kind,
            'timestamp': _timestamp(),
        }), 413

    @app.errorhandler(404)
    def handle_not_found(e):
        return jsonify({
            'error': f'Endpoint {request.path} not found',
            'availableEndpoints': _available_endpoints(printer_config),
        }), 404

    return app


# =============================================================================
# Main
# =============================================================================

def main():
    """Run the service."""
    setup_logging(LOG_LEVEL, LOG_DIR)
    app = create_app()
    config = app.config['PRINTER_CONFIG']

    print("=" * 60)
    print("  Zebra Proxy")
    print("=" * 60)
    print(f"  Version: {__version__}")
    print(f"  Port: {PORT}")
    print(f"  Printer type: {config.kind}")
    print("=" * 60)
    print("  API Endpoints:")
    for endpoint in _available_endpoints(config):
        print(f"    {endpoint}")
    if config.kind.lower() == PrinterKind.VIRTUAL.value:
        print("=" * 60)
        print(f"  Labels will be saved to: {config.virtual.save_directory}")
    print("=" * 60)

    app.run(host=HOST, port=PORT, debug=DEBUG, threaded=True)


if __name__ == '__main__':
    main()
