#!/usr/bin/env python3
"""
Entry point for the Team Registration API.

Usage:
    python run.py

Environment Variables:
    FLASK_ENV: development or production (default: development)
    PORT: Port to run on (default: 3000)
    EXPOSURE_USERNAME / EXPOSURE_PASSWORD: Exposure Events director login.
        When either is missing the credentials are prompted for.
"""
import getpass
import logging
import os
import sys

from exposure.errors import ApiError
from registration_api.app import create_app


def prompt_credentials():
    """Ask for the Exposure login on the console."""
    print("Exposure Events API Authentication")
    username = input("Username: ").strip()
    password = getpass.getpass("Password: ")
    return username, password


def run_server():
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    app = create_app()
    port = int(os.getenv('PORT', 3000))
    debug = os.getenv('FLASK_ENV', 'development') == 'development'

    username = app.config['EXPOSURE_USERNAME']
    password = app.config['EXPOSURE_PASSWORD']
    if not username or not password:
        username, password = prompt_credentials()
        # Keep the prompted login for later re-authentication
        app.exposure.policy.username = username
        app.exposure.policy.password = password

    try:
        result = app.credentials.authenticate(username, password)
    except ApiError as e:
        print(f"Authentication failed: {e.message}")
        sys.exit(1)

    print(f"Authenticated as account {result['account_id']} ({result['email']})")
    print(f"Starting Team Registration API on port {port}...")
    # The reloader would start a second process and prompt again
    app.run(host='0.0.0.0', port=port, debug=debug, use_reloader=False)


if __name__ == '__main__':
    run_server()
