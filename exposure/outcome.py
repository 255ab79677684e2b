from dataclasses import dataclass
from typing import Any, Union

import requests

from .errors import UpstreamError


@dataclass(frozen=True)
class Success:
    body: Any


@dataclass(frozen=True)
class Failure:
    http_status: int
    message: str


UpstreamOutcome = Union[Success, Failure]


def _declares_json(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


def normalize_response(response: requests.Response) -> UpstreamOutcome:
    """Classify a transport response as Success or Failure."""
    if not 200 <= response.status_code < 300:
        try:
            message = response.text
        except Exception:
            message = ""
        if not message:
            message = f"Upstream request failed with status {response.status_code}"
        return Failure(http_status=response.status_code, message=message)

    content_type = response.headers.get("Content-Type") or ""
    if _declares_json(content_type):
        try:
            return Success(body=response.json())
        except ValueError:
            pass  # mislabelled body, hand back the text

    return Success(body=response.text)


def unwrap(outcome: UpstreamOutcome) -> Any:
    """Return the body of a Success, raise UpstreamError for a Failure."""
    if isinstance(outcome, Failure):
        raise UpstreamError(outcome.http_status, outcome.message)
    return outcome.body
