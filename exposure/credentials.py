"""
Credential store for the Exposure Events API.

Holds the API key / secret pair obtained from the login exchange. The upstream
sometimes hands the key material back base64-encoded and sometimes as plain
text, so the store sniffs which one it got before keeping it.
"""
import base64
import binascii
import logging
import re
import threading
from dataclasses import dataclass
from typing import Optional, Tuple

import requests

from .auth_state import AuthState, AuthStateMachine
from .errors import AuthenticationError, MissingCredentialsError, TransportError
from .signing import API_PREFIX

logger = logging.getLogger(__name__)

_BASE64_CHARS = re.compile(r"^[A-Za-z0-9+/]+=*$")


def looks_base64(value: Optional[str]) -> bool:
    """
    Guess whether a key string is base64-encoded.

    True when the string uses the base64 alphabet and decoding then
    re-encoding it gives back the exact same string. Plain text that happens
    to be base64-shaped (e.g. 'abcd1234') is misread as encoded; that matches
    what the upstream integration has always done.
    """
    if not value:
        return False
    if "==" not in value and not _BASE64_CHARS.match(value):
        return False
    try:
        decoded = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        return False
    return base64.b64encode(decoded).decode("ascii") == value


def decode_key_material(api_key: str, api_secret_key: str) -> Tuple[str, str]:
    """Decode both values when both look base64, otherwise keep both as-is."""
    if looks_base64(api_key) and looks_base64(api_secret_key):
        logger.debug("Decoding base64 API keys")
        return (
            base64.b64decode(api_key).decode("utf-8", errors="replace"),
            base64.b64decode(api_secret_key).decode("utf-8", errors="replace"),
        )
    return api_key, api_secret_key


@dataclass
class Credentials:
    api_key: Optional[str] = None
    api_secret_key: Optional[str] = None
    account_id: Optional[object] = None
    email: Optional[str] = None
    authenticated: bool = False


class CredentialStore:
    """
    Owns the Exposure key material for the lifetime of the process.

    Logins and logouts are serialized; readiness checks never wait on a
    login in flight.
    """

    def __init__(self, host: str, session: requests.Session = None, timeout: float = None):
        self.host = host.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout
        self._credentials = Credentials()
        self._machine = AuthStateMachine()
        self._login_lock = threading.Lock()
        self._state_lock = threading.Lock()

    @property
    def state(self) -> AuthState:
        return self._machine.state

    @property
    def api_key(self) -> Optional[str]:
        return self._credentials.api_key

    @property
    def api_secret_key(self) -> Optional[str]:
        return self._credentials.api_secret_key

    def authenticate(self, username: str, password: str) -> dict:
        """Run the login exchange and keep the returned key material."""
        if not username or not password:
            raise MissingCredentialsError("Username and password are required")

        with self._login_lock:
            with self._state_lock:
                self._machine.transition('login')

            try:
                data = self._login_exchange(username, password)
                credentials = self._credentials_from(data)
            except Exception:
                with self._state_lock:
                    self._credentials = Credentials()
                    self._machine.transition('fail')
                raise

            with self._state_lock:
                self._credentials = credentials
                self._machine.transition('succeed')

        logger.info(f"Authenticated with Exposure Events (account {data.get('Id')})")
        return {'account_id': data.get('Id'), 'email': data.get('Email')}

    def _login_exchange(self, username: str, password: str) -> dict:
        auth_url = f"{self.host}{API_PREFIX}/authenticate"
        logger.info(f"Authenticating with Exposure Events as {username}")

        try:
            resp = self.session.post(
                auth_url,
                json={'Username': username, 'Password': password},
                headers={'Content-Type': 'application/json', 'Accept': 'application/json'},
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"Authentication request failed: {e}")
            raise TransportError(f"Network error calling Exposure Events: {e}", e) from e

        if not 200 <= resp.status_code < 300:
            logger.error(f"Authentication failed with status {resp.status_code}")
            raise AuthenticationError(f"Authentication failed: {resp.status_code} - {resp.text}")

        try:
            data = resp.json()
        except ValueError as e:
            raise AuthenticationError(f"Authentication failed: unreadable response - {e}") from e

        if not isinstance(data, dict):
            raise AuthenticationError("Authentication failed: unexpected response body")
        return data

    @staticmethod
    def _credentials_from(data: dict) -> Credentials:
        api_key = data.get('ApiKey') or ''
        api_secret_key = data.get('ApiSecretKey') or ''
        if not isinstance(api_key, str) or not isinstance(api_secret_key, str):
            raise AuthenticationError("Authentication failed: unexpected response body")

        api_key, api_secret_key = decode_key_material(api_key, api_secret_key)
        return Credentials(
            api_key=api_key,
            api_secret_key=api_secret_key,
            account_id=data.get('Id'),
            email=data.get('Email'),
            authenticated=True
        )

    def is_ready(self) -> bool:
        with self._state_lock:
            creds = self._credentials
            return bool(creds.authenticated and creds.api_key and creds.api_secret_key)

    def snapshot(self) -> Tuple[Optional[str], Optional[str]]:
        """Key and secret read together so a request never mixes two logins."""
        with self._state_lock:
            return self._credentials.api_key, self._credentials.api_secret_key

    def account_info(self) -> dict:
        with self._state_lock:
            return {
                'account_id': self._credentials.account_id,
                'email': self._credentials.email,
                'is_authenticated': self._credentials.authenticated,
            }

    def logout(self):
        with self._login_lock:
            with self._state_lock:
                self._credentials = Credentials()
                self._machine.transition('logout')
        logger.info("Logged out of Exposure Events")
