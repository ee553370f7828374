"""
Flask API for chatbond
JSON endpoints for chat analysis
"""

import json
import logging
from datetime import datetime

from flask import Flask, request, jsonify

from . import config
from .exceptions import ClassificationTimeout, ParseError
from .pipeline import analyze_content

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config['MAX_CONTENT_LENGTH'] = 16 * 1024 * 1024  # 16MB max upload

MAX_UPLOAD_BYTES = 5 * 1024 * 1024


def _flag(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).lower() in ("1", "true", "on", "yes")


def _read_request():
    """
    Pull (content, format, enrich) from a multipart upload or a JSON body.

    Returns None for content when the request carries nothing to analyze.
    """
    if 'file' in request.files and request.files['file'].filename:
        upload = request.files['file']
        raw = upload.read()
        if len(raw) > MAX_UPLOAD_BYTES:
            raise ValueError("File too large! Maximum size is 5MB.")
        fmt = request.form.get('format')
        if fmt is None and upload.filename.lower().endswith('.json'):
            fmt = 'json'
        return raw.decode('utf-8', errors='replace'), fmt or 'plain', _flag(request.form.get('enrich', False))

    data = request.get_json(silent=True) or {}
    enrich = _flag(data.get('enrich', False))
    if 'content' in data and str(data['content']).strip():
        return data['content'], data.get('format', 'plain'), enrich
    if 'messages' in data:
        # Pre-structured {sender, text, timestamp} records
        return json.dumps(data['messages']), 'json', enrich
    return None, None, enrich


@app.route('/api/analyze', methods=['POST'])
def api_analyze():
    """JSON API endpoint for analysis."""
    try:
        content, fmt, enrich = _read_request()
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    if content is None:
        return jsonify({"error": "Provide a 'file' upload or JSON with 'content' or 'messages'"}), 400

    try:
        bundle = analyze_content(content, fmt, use_enrichment=enrich or None)
    except ParseError as e:
        logger.warning(f"Parse failed: {e}")
        return jsonify({"error": str(e)}), 400
    except ClassificationTimeout as e:
        logger.error(f"Classification timed out: {e}")
        return jsonify({"error": str(e)}), 504

    return jsonify(bundle.to_dict())


@app.route('/api/health')
def health():
    """Health check with the active configuration."""
    valid, msg = config.validate_config()
    return jsonify({
        'status': 'ok' if valid else 'degraded',
        'message': msg,
        'timestamp': datetime.now().isoformat(),
        'config': config.get_config_summary(),
    })


if __name__ == '__main__':
    valid, msg = config.validate_config()
    if not valid:
        logger.warning(f"Config validation: {msg}")

    logger.info("Starting server")
    app.run(debug=True, host='0.0.0.0', port=5000)
