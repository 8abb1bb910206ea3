"""
HTTP transport and response status handling.

The translator never opens connections itself. It hands a fully built
ProviderRequest to a Transport and gets a TransportResponse back:

- HttpTransport: real requests through httpx
- ReplayTransport: canned responses for tests and offline runs

raise_for_status() turns any non-successful response into a TranslationError
with a descriptive message.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

import httpx

from stringsync.logger import get_logger
from stringsync.translator.exceptions import (
    TranslationError,
    NO_RESPONSE,
    EMPTY_BODY,
    CLIENT_ERROR,
    SERVER_ERROR,
    UNEXPECTED_STATUS,
    EMPTY_MOCKED_RESPONSE,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProviderRequest:
    """A provider-specific HTTP request, built fresh for every call."""
    method: str
    path: str
    headers: Dict[str, str]
    body: bytes
    params: Tuple[Tuple[str, str], ...] = ()


@dataclass(frozen=True)
class TransportResponse:
    """Raw provider response."""
    status_code: int
    content: bytes
    headers: Dict[str, str] = field(default_factory=dict)

    def json(self) -> Any:
        return json.loads(self.content)


# Seconds; 'read' is the one a single number overrides
DEFAULT_TIMEOUTS = {'connect': 10.0, 'write': 60.0, 'read': 120.0, 'pool': 10.0}


def get_httpx_timeout(timeout_config: Any) -> httpx.Timeout:
    """
    Build the httpx.Timeout for provider requests.

    A number sets how long to wait for a provider's answer (the read timeout);
    translation requests to chat models can take minutes. A dict may override
    any of connect, write, read and pool. Missing values use DEFAULT_TIMEOUTS.
    """
    timeouts = dict(DEFAULT_TIMEOUTS)
    if isinstance(timeout_config, dict):
        unknown = set(timeout_config) - set(DEFAULT_TIMEOUTS)
        if unknown:
            raise ValueError(f"Unknown timeout setting(s): {', '.join(sorted(unknown))}")
        timeouts.update({name: float(value) for name, value in timeout_config.items()})
    elif timeout_config:
        timeouts['read'] = float(timeout_config)
    return httpx.Timeout(**timeouts)


class HttpTransport:
    """Synchronous transport backed by a single httpx.Client."""

    def __init__(self, timeout: Union[float, Dict[str, float]] = 120, client: Optional[httpx.Client] = None):
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=get_httpx_timeout(timeout))

    def send(self, request: ProviderRequest, base_url: str) -> TransportResponse:
        url = base_url.rstrip('/') + request.path
        logger.debug(f"  {request.method} {url} ({len(request.body)} bytes)")

        try:
            response = self._client.request(
                request.method,
                url,
                params=list(request.params) or None,
                headers=request.headers,
                content=request.body,
            )
        except httpx.TimeoutException as e:
            raise TranslationError(
                f"No response received. Underlying error: request timed out ({e})",
                code=NO_RESPONSE,
                details={'url': url},
            ) from e
        except httpx.RequestError as e:
            raise TranslationError(
                f"No response received. Underlying error: {e}",
                code=NO_RESPONSE,
                details={'url': url},
            ) from e

        logger.debug(f"  Received {len(response.content)} bytes with status {response.status_code}")
        return TransportResponse(
            status_code=response.status_code,
            content=response.content,
            headers=dict(response.headers),
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class ReplayTransport:
    """
    Transport that replays canned responses in order.

    Every request it receives is recorded in ``requests`` as a
    (request, base_url) tuple. Once the responses run out it fails with an
    empty_mocked_response error.
    """

    def __init__(self, responses: Iterable[TransportResponse] = ()):
        self._responses = list(responses)
        self.requests: List[Tuple[ProviderRequest, str]] = []

    def add(self, status_code: int, body: Any = b'') -> 'ReplayTransport':
        """Queue a response; dicts and lists are JSON-encoded."""
        if isinstance(body, (dict, list)):
            body = json.dumps(body).encode('utf-8')
        elif isinstance(body, str):
            body = body.encode('utf-8')
        self._responses.append(TransportResponse(status_code=status_code, content=body))
        return self

    def send(self, request: ProviderRequest, base_url: str) -> TransportResponse:
        self.requests.append((request, base_url))
        if not self._responses:
            raise TranslationError(
                "Mocked behavior was set, but no mocked response was provided.",
                code=EMPTY_MOCKED_RESPONSE,
            )
        return self._responses.pop(0)


def raise_for_status(
    response: TransportResponse,
    provider: str,
    parse_error: Optional[Callable[[bytes], Optional[str]]] = None,
) -> None:
    """
    Check a provider response and raise a TranslationError if it failed.

    Args:
        response: Raw response from the transport
        provider: Provider display name, used in messages
        parse_error: Provider-specific extraction of the error detail from a
            4xx body; returns None when the body carries no structured error

    Raises:
        TranslationError: For empty successful bodies and any non-2xx status
    """
    status_code = response.status_code
    details = {'provider': provider, 'status_code': status_code}

    if 200 <= status_code < 300:
        if not response.content or not response.content.strip():
            raise TranslationError(
                f"{provider}: No data in response. Status code: {status_code}.",
                code=EMPTY_BODY,
                details=details,
            )
        return

    if 400 <= status_code < 500:
        detail = None
        if parse_error and response.content:
            try:
                detail = parse_error(response.content)
            except (ValueError, TypeError, KeyError, AttributeError, TranslationError):
                detail = None

        if detail:
            details['detail'] = detail
            message = f"{provider}: Client error. Status code: {status_code}. Error details: {detail}"
        else:
            message = f"{provider}: Client error. Status code: {status_code}. No additional error information."
        logger.error(message)
        raise TranslationError(message, code=CLIENT_ERROR, details=details)

    if 500 <= status_code < 600:
        logger.error(f"{provider} API server error: {status_code} - {response.content[:500]!r}")
        raise TranslationError(
            f"{provider}: Server error. Status code: {status_code}.",
            code=SERVER_ERROR,
            details=details,
        )

    raise TranslationError(
        f"{provider}: Unexpected status code: {status_code}.",
        code=UNEXPECTED_STATUS,
        details=details,
    )
