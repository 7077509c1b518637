"""HTTP transport used by the learndot client.

A thin wrapper around a ``requests.Session`` that sends one request, decodes
the body, and maps failures onto the learndot exception types. It never
retries.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import requests

from .exceptions import BackendError, TransportError
from .throttle import DelayStrategy, NoDelay

log = logging.getLogger(__name__)


@dataclass
class RequestConfig:
    """Configuration for a single request."""

    method: str = "POST"
    url: str = ""
    params: Mapping[str, Any] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Optional[Any] = None
    timeout: float = 30


@dataclass(frozen=True)
class TransportResponse:
    """Status line and decoded body of a backend response.

    ``body`` is the decoded JSON document when the response declared a JSON
    content type, otherwise the raw bytes.
    """

    status_code: int
    message: str
    body: Any

    @property
    def ok(self) -> bool:
        return self.status_code == 200


def _encode_params(params: Mapping[str, Any]) -> dict:
    # the backend expects JSON-style booleans in the query string
    return {
        key: ("true" if value else "false") if isinstance(value, bool) else value
        for key, value in params.items()
    }


def _decode_body(resp: requests.Response) -> Any:
    content_type = resp.headers.get("Content-Type", "")
    if "json" in content_type.lower() and resp.content:
        return resp.json()
    return resp.content


class Transport:
    """Sends requests to the backend and enforces the 200-only status policy."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        delay: Optional[DelayStrategy] = None,
        timeout: float = 30,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        # a caller-supplied session stays open; the caller owns it
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.delay = delay or NoDelay()
        self.timeout = timeout
        self.log = logger or log

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def send(self, config: RequestConfig) -> TransportResponse:
        """Perform the request described by ``config``.

        Raises:
            TransportError: if no response was received.
            BackendError: if the response status is anything but 200.
        """
        # copy so the caller's mappings are never mutated by requests
        headers = dict(config.headers)
        params = _encode_params(config.params)
        data = json.dumps(config.body) if config.body is not None else None

        self.log.debug("%s: %s", config.method, config.url)
        self.log.debug("  * Query params: %r", params)
        self.log.debug("  * Conditions: %r", config.body)

        try:
            resp = self.session.request(
                method=config.method,
                url=config.url,
                params=params,
                headers=headers,
                data=data,
                timeout=config.timeout,
            )
        except requests.RequestException as exc:
            self.log.warning("Request to %s failed: %s", config.url, exc)
            raise TransportError(f"{config.method} {config.url} failed: {exc}", exc) from exc

        try:
            self.log.debug("%s: %s", resp.status_code, resp.reason)
            if resp.status_code != 200:
                raise BackendError(resp.status_code, resp.reason or "", config.url)
            try:
                body = _decode_body(resp)
            except ValueError as exc:
                raise BackendError(
                    resp.status_code, f"Invalid JSON in response: {exc}", config.url
                ) from exc
            return TransportResponse(resp.status_code, resp.reason or "", body)
        finally:
            self.delay.after_request()

    def request(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        params: Optional[Mapping[str, Any]] = None,
        body: Optional[Any] = None,
    ) -> TransportResponse:
        return self.send(
            RequestConfig(
                method=method.upper(),
                url=url,
                params=params or {},
                headers=headers,
                body=body,
                timeout=self.timeout,
            )
        )

    def post(
        self,
        url: str,
        headers: Mapping[str, str],
        params: Optional[Mapping[str, Any]] = None,
        body: Optional[Any] = None,
    ) -> TransportResponse:
        return self.request("POST", url, headers, params, body)

    def get(
        self,
        url: str,
        headers: Mapping[str, str],
        params: Optional[Mapping[str, Any]] = None,
    ) -> TransportResponse:
        return self.request("GET", url, headers, params)
