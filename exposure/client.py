import json
import logging
import threading
from datetime import datetime, timezone
from typing import Any, Callable
from urllib.parse import urlencode

import requests

from .credentials import CredentialStore
from .errors import ApiError, AuthenticationError, NotAuthenticatedError, TransportError
from .outcome import UpstreamOutcome, normalize_response, unwrap
from .signing import API_PREFIX, build_headers

logger = logging.getLogger(__name__)

BODY_VERBS = ('POST', 'PUT')


def build_endpoint(path: str, **params) -> str:
    """Append the non-empty query parameters to an endpoint path."""
    query = {k: v for k, v in params.items() if v not in (None, '')}
    if not query:
        return path
    return f"{path}?{urlencode(query)}"


class ReauthPolicy:
    """
    Logs in with the configured account when a call finds the store empty.

    Callers that pile up behind a login in progress reuse its result
    instead of starting their own exchange.
    """

    def __init__(self, store: CredentialStore, username: str = None, password: str = None):
        self.store = store
        self.username = username
        self.password = password
        self._lock = threading.Lock()

    def reauthenticate(self):
        with self._lock:
            if self.store.is_ready():
                return

            logger.info("Not authenticated with Exposure Events, logging in")
            try:
                self.store.authenticate(self.username, self.password)
            except ApiError as e:
                raise AuthenticationError(f"Re-authentication failed: {e.message}") from e


class ExposureClient:
    """Signed request client for the Exposure Events API."""

    def __init__(
        self,
        store: CredentialStore,
        policy: ReauthPolicy,
        host: str,
        api_prefix: str = API_PREFIX,
        session: requests.Session = None,
        timeout: float = None,
        clock: Callable[[], datetime] = None
    ):
        self.store = store
        self.policy = policy
        self.host = host.rstrip('/')
        self.api_prefix = api_prefix
        self.session = session or requests.Session()
        self.timeout = timeout
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def request(self, endpoint: str, verb: str = 'GET', body: Any = None,
                retry_count: int = 0) -> UpstreamOutcome:
        """Send one signed call; logs in and retries once if not authenticated."""
        verb = verb.upper()
        if not endpoint.startswith('/'):
            endpoint = '/' + endpoint

        if not self.store.is_ready():
            if retry_count > 0:
                raise NotAuthenticatedError(
                    "Not authenticated. Please authenticate first using the /authenticate endpoint."
                )
            self.policy.reauthenticate()
            return self.request(endpoint, verb, body, retry_count=retry_count + 1)

        api_key, secret_key = self.store.snapshot()
        if not api_key or not secret_key:
            # logged out between the readiness check and now
            raise NotAuthenticatedError("Not authenticated with Exposure Events")
        headers = build_headers(api_key, secret_key, verb, endpoint, self.clock(), self.api_prefix)

        data = None
        if body is not None and verb in BODY_VERBS:
            data = json.dumps(body)

        url = f"{self.host}{self.api_prefix}{endpoint}"
        try:
            resp = self.session.request(verb, url, data=data, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Exposure API request error for {verb} {endpoint}: {e}")
            raise TransportError(f"Network error calling Exposure Events: {e}", e) from e

        outcome = normalize_response(resp)
        if not 200 <= resp.status_code < 300:
            logger.warning(f"Exposure API returned {resp.status_code} for {verb} {endpoint}")
        return outcome

    def fetch(self, endpoint: str, verb: str = 'GET', body: Any = None) -> Any:
        return unwrap(self.request(endpoint, verb, body))

    def get(self, endpoint: str) -> Any:
        return self.fetch(endpoint)

    def post(self, endpoint: str, body: Any = None) -> Any:
        return self.fetch(endpoint, 'POST', body)

    def put(self, endpoint: str, body: Any = None) -> Any:
        return self.fetch(endpoint, 'PUT', body)
