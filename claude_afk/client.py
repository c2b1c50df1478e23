"""HTTP client for the claude-afk backend.

Thin, stateless wrapper: one method per endpoint, no retries. Transport
problems raise TransportFailure and unexpected bodies raise DecodeFailure;
deciding whether to retry is the poller's job.
"""

import logging
from typing import Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from claude_afk.constants import HTTP_TIMEOUT
from claude_afk.errors import DecodeFailure, TransportFailure
from claude_afk.models import (
    DecisionStatusResponse,
    NotifyPayload,
    NotifyResponse,
    PairingInitResponse,
    PairingStatusResponse,
    SimpleNotifyPayload,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def auth_headers(device_token: str) -> dict:
    """Bearer header for token-scoped endpoints.

    >>> auth_headers("abc")
    {'Authorization': 'Bearer abc'}
    """
    return {"Authorization": f"Bearer {device_token}"}


class BackendClient:
    """Request/response wrapper over the pairing, notify and decision endpoints.

    Usable as a context manager; an injected httpx.Client is left open for
    its owner to close.
    """

    def __init__(
        self,
        backend_url: str,
        device_token: Optional[str] = None,
        http: Optional[httpx.Client] = None,
        timeout: float = HTTP_TIMEOUT,
    ):
        self.backend_url = backend_url.rstrip("/")
        self.device_token = device_token
        self._owns_http = http is None
        self._http = http or httpx.Client(timeout=timeout)

    def __enter__(self) -> "BackendClient":
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self):
        if self._owns_http:
            self._http.close()

    def url(self, path: str) -> str:
        """Join the base URL with an absolute API path.

        >>> BackendClient("https://example.test/", http=object()).url("/api/notify")
        'https://example.test/api/notify'
        """
        return f"{self.backend_url}{path}"

    def _token_headers(self) -> dict:
        if not self.device_token:
            raise TransportFailure("No device token configured")
        return auth_headers(self.device_token)

    def _request(self, method: str, path: str, *, headers: Optional[dict] = None,
                 json: Optional[dict] = None) -> httpx.Response:
        url = self.url(path)
        try:
            resp = self._http.request(method, url, headers=headers, json=json)
            resp.raise_for_status()
        except httpx.TimeoutException as e:
            raise TransportFailure(f"{method} {path} timed out") from e
        except httpx.HTTPStatusError as e:
            raise TransportFailure(f"{method} {path} returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise TransportFailure(f"{method} {path} failed: {e}") from e
        except httpx.InvalidURL as e:
            raise TransportFailure(f"Invalid backend URL {url!r}: {e}") from e
        logger.debug("%s %s -> %d", method, url, resp.status_code)
        return resp

    @staticmethod
    def _decode(resp: httpx.Response, model: Type[M]) -> M:
        try:
            return model.model_validate(resp.json())
        except ValueError as e:
            # ValidationError is a ValueError subclass; so is JSONDecodeError
            kind = "shape" if isinstance(e, ValidationError) else "JSON"
            raise DecodeFailure(f"Bad {kind} in response from {resp.request.url.path}: {e}") from e

    # --- Pairing (unauthenticated) ---

    def initiate_pairing(self) -> PairingInitResponse:
        resp = self._request("POST", "/api/pairing/initiate")
        return self._decode(resp, PairingInitResponse)

    def pairing_status(self, pairing_id: str) -> PairingStatusResponse:
        resp = self._request("GET", f"/api/pairing/{pairing_id}/status")
        return self._decode(resp, PairingStatusResponse)

    # --- Notifications and decisions (token-scoped) ---

    def submit_request(self, payload: NotifyPayload) -> NotifyResponse:
        """POST a permission request; the response carries the decision id to poll."""
        resp = self._request(
            "POST", "/api/notify",
            headers=self._token_headers(),
            json=payload.model_dump(),
        )
        return self._decode(resp, NotifyResponse)

    def decision_status(self, decision_id: str) -> DecisionStatusResponse:
        resp = self._request(
            "GET", f"/api/decision/{decision_id}/status",
            headers=self._token_headers(),
        )
        return self._decode(resp, DecisionStatusResponse)

    def notify_simple(self, payload: SimpleNotifyPayload) -> None:
        """Fire-and-forget push; only the HTTP status matters."""
        self._request(
            "POST", "/api/notify/simple",
            headers=self._token_headers(),
            json=payload.model_dump(),
        )
