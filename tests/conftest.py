"""
Pytest configuration and fixtures for team registration API tests.
"""
import json
import os
import sys
import pytest

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

# Set testing environment before importing app
os.environ['FLASK_ENV'] = 'testing'

from registration_api.app import create_app


@pytest.fixture
def make_response(mocker):
    """Factory for fake requests.Response objects."""
    def _make(status_code=200, body=None, content_type='application/json', text=None):
        resp = mocker.MagicMock()
        resp.status_code = status_code
        resp.headers = {'Content-Type': content_type} if content_type else {}
        if text is None:
            text = json.dumps(body) if body is not None else ''
        resp.text = text
        if body is not None:
            resp.json.return_value = body
        else:
            resp.json.side_effect = ValueError("No JSON object could be decoded")
        return resp
    return _make


@pytest.fixture
def login_body():
    """Login response with plain-text key material."""
    return {
        'Id': 4242,
        'Email': 'director@example.com',
        'ApiKey': 'plain-api-key',
        'ApiSecretKey': 'plain-secret-key',
    }


@pytest.fixture
def app(mocker):
    """Create application for testing, with all outbound HTTP mocked."""
    app = create_app('testing')
    app.credentials.session = mocker.MagicMock()
    app.exposure.session = mocker.MagicMock()
    app.email.session = mocker.MagicMock()
    return app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def authenticated_app(app, make_response, login_body):
    """App whose credential store already holds key material."""
    app.credentials.session.post.return_value = make_response(200, login_body)
    app.credentials.authenticate('director', 'secret')
    return app


@pytest.fixture
def authenticated_client(authenticated_app):
    return authenticated_app.test_client()
