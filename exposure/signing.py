"""
Request signing for the Exposure Events API.

Every signed call carries two headers:

    Authentication: {API KEY}.{SIGNATURE}
    Timestamp:      2012-09-27T20:33:55.3564453Z

where SIGNATURE is base64(HMAC-SHA256(secret, MESSAGE)) and MESSAGE is
"{API KEY}&{HTTP VERB}&{TIMESTAMP}&{RELATIVE URI}" upper-cased. The relative
URI is the API path without its query string.
"""
import base64
import hashlib
import hmac
from datetime import datetime, timezone
from typing import Dict

API_PREFIX = "/api/v1"

HEADER_AUTHENTICATION = "Authentication"
HEADER_TIMESTAMP = "Timestamp"


def sign(api_key: str, http_verb: str, timestamp: str, relative_uri: str, secret_key: str) -> str:
    """Compute the base64 HMAC-SHA256 signature for one request."""
    message = f"{api_key}&{http_verb}&{timestamp}&{relative_uri}".upper()
    digest = hmac.new(
        secret_key.encode("utf-8"),
        message.encode("utf-8"),
        hashlib.sha256
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def format_timestamp(moment: datetime) -> str:
    """
    Format a moment as ISO-8601 UTC with seven fractional digits.

    Precision is milliseconds; the remaining four digits are always zero,
    e.g. 2025-11-07T10:48:05.6990000Z.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    else:
        moment = moment.astimezone(timezone.utc)
    millis = moment.microsecond // 1000
    return f"{moment:%Y-%m-%dT%H:%M:%S}.{millis:03d}0000Z"


def relative_uri(endpoint: str, prefix: str = API_PREFIX) -> str:
    """Signed path: prefix plus the endpoint's path, query string dropped."""
    return prefix + endpoint.split("?", 1)[0]


def build_headers(
    api_key: str,
    secret_key: str,
    verb: str,
    endpoint: str,
    moment: datetime,
    prefix: str = API_PREFIX
) -> Dict[str, str]:
    """Build the signed envelope for a single outbound call."""
    timestamp = format_timestamp(moment)
    signature = sign(api_key, verb, timestamp, relative_uri(endpoint, prefix), secret_key)

    return {
        HEADER_AUTHENTICATION: f"{api_key}.{signature}",
        HEADER_TIMESTAMP: timestamp,
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
