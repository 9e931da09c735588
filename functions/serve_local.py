#!/usr/bin/env python3
"""Local development server for RenoQuote Python functions.

This server mimics the Firebase Functions emulator endpoints.

Usage:
    cd functions
    source venv/bin/activate
    python serve_local.py

This will start a Flask server on port 5002 that handles:
- GET/POST /<project>/us-central1/list_templates
- POST /<project>/us-central1/calculate_estimate
- POST /<project>/us-central1/contractor_pricing
- POST /<project>/us-central1/technician_payout
- POST /<project>/us-central1/submit_project
- POST /<project>/us-central1/list_projects
- POST /<project>/us-central1/request_quotes
"""

import os

# Set environment for local development
os.environ.setdefault('FUNCTIONS_EMULATOR', 'true')
os.environ.setdefault('GCLOUD_PROJECT', 'renoquote-dev')
os.environ.setdefault('FIRESTORE_EMULATOR_HOST', '127.0.0.1:8081')

from flask import Flask, request, jsonify
from flask_cors import CORS

from utils.logging_config import configure_logging

# Import the main module after setting env vars
from main import (
    list_templates,
    calculate_estimate,
    contractor_pricing,
    technician_payout,
    submit_project,
    list_projects,
    request_quotes,
)

PROJECT = os.environ['GCLOUD_PROJECT']

ENDPOINTS = {
    'list_templates': list_templates,
    'calculate_estimate': calculate_estimate,
    'contractor_pricing': contractor_pricing,
    'technician_payout': technician_payout,
    'submit_project': submit_project,
    'list_projects': list_projects,
    'request_quotes': request_quotes,
}

app = Flask(__name__)
CORS(app)


def wrap_firebase_function(firebase_fn):
    """Wrap a Firebase function to work with Flask.

    Firebase HTTPS functions receive a Flask request already, so the
    current request is passed straight through.
    """
    def wrapper():
        response = firebase_fn(request)
        return response.get_data(), response.status_code, dict(response.headers)
    return wrapper


def _register(name, firebase_fn):
    app.add_url_rule(
        f'/{PROJECT}/us-central1/{name}',
        endpoint=name,
        view_func=wrap_firebase_function(firebase_fn),
        methods=['GET', 'POST', 'OPTIONS'],
    )


for _name, _fn in ENDPOINTS.items():
    _register(_name, _fn)


# Health check
@app.route('/health', methods=['GET'])
def health():
    return jsonify({'status': 'ok', 'service': 'renoquote-python-functions'})


if __name__ == '__main__':
    configure_logging()
    port = int(os.environ.get('PORT', 5002))
    print(f"""
╔════════════════════════════════════════════════════════════════╗
║  RenoQuote Python Functions - Local Development Server         ║
╠════════════════════════════════════════════════════════════════╣
║                                                                ║
║  Server running on: http://127.0.0.1:{port}                     ║
║                                                                ║
║  Endpoints (POST /{PROJECT}/us-central1/<name>):
""")
    for name in ENDPOINTS:
        print(f"║  • {name}")
    print("╚════════════════════════════════════════════════════════════════╝")
    app.run(host='127.0.0.1', port=port, debug=True, threaded=True)
