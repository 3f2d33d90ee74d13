"""HTTP transport for the KeyEnv REST API.

:class:`Transport` sends exactly one request per call and turns the outcome into
either a decoded JSON payload or a :class:`~keyenv.exceptions.KeyEnvError`.
It never retries and never swallows a failure.
"""
from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Optional, Union

import httpx
from pydantic import SecretStr

from keyenv.exceptions import (
    KeyEnvConnectionError,
    KeyEnvError,
    KeyEnvTimeoutError,
    error_for_status,
)
from keyenv.metrics import keyenv_api_call_latency_seconds, keyenv_api_call_total
from keyenv.utils.envelope import unwrap
from keyenv.utils.logging_utils import redact_sensitive_data
from keyenv.version import __version__

logger = logging.getLogger(__name__)

__all__ = ["Transport", "USER_AGENT"]

USER_AGENT = f"keyenv-python/{__version__}"
METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})
SLOW_CALL_SECONDS = 1.0


class Transport:
    """Authenticated JSON-over-HTTPS transport bound to one token and base URL."""

    def __init__(
        self,
        token: Union[str, SecretStr],
        *,
        base_url: str,
        timeout: float,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self._token = token if isinstance(token, SecretStr) else SecretStr(token)
        self.base_url = httpx.URL(base_url)
        self.timeout = timeout
        # Same timeout for connect, read, write and pool acquisition
        self.http_client = http_client or httpx.Client(timeout=httpx.Timeout(timeout))
        self.last_status_code: Optional[int] = None

    # ---------------------- lifecycle --------------------------------------
    def close(self) -> None:
        """Close the underlying HTTPX client."""
        self.http_client.close()

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    # ---------------------- request pipeline -------------------------------
    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token.get_secret_value()}",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }

    def url_for(self, path: str) -> httpx.URL:
        """Resolve *path* against the base URL (an absolute path replaces the base path)."""
        return self.base_url.join(path)

    def send(self, method: str, path: str, body: Optional[Any] = None) -> Any:
        """
        Send one request and return the decoded payload.

        :param method: GET, POST, PUT or DELETE
        :param path: API path, e.g. ``/api/v1/projects``
        :param body: Optional JSON-serializable request body
        :return: The response JSON with any ``"data"`` envelope removed, or None for 204
        :raises KeyEnvError: On any non-2xx status, timeout or connection failure
        """
        method = method.upper()
        if method not in METHODS:
            raise ValueError(f"Unknown HTTP method: {method}")

        url = self.url_for(path)
        logger.debug(
            "KeyEnv API request",
            extra={
                "log_type": "request",
                "method": method,
                "path": path,
                "body": redact_sensitive_data(body) if body is not None else None,
            }
        )

        kwargs: Dict[str, Any] = {"headers": self._headers()}
        if body is not None:
            kwargs["content"] = json.dumps(body)

        status = "error"
        start_time = time.monotonic()
        try:
            # Injected clients get the configured timeout too
            response = self.http_client.request(method, url, timeout=httpx.Timeout(self.timeout), **kwargs)
            status = str(response.status_code)
        except httpx.TimeoutException as exc:
            status = "timeout"
            logger.error(
                "KeyEnv API request timed out",
                extra={"log_type": "timeout", "method": method, "path": path, "timeout": self.timeout}
            )
            raise KeyEnvTimeoutError("Request timeout", status=408) from exc
        except httpx.TransportError as exc:
            status = "connection_error"
            logger.error(
                "KeyEnv API connection failed",
                extra={"log_type": "connection_error", "method": method, "path": path, "error": str(exc)}
            )
            raise KeyEnvConnectionError(str(exc) or "Connection failed", status=0) from exc
        finally:
            latency = time.monotonic() - start_time
            keyenv_api_call_latency_seconds.labels(method=method).observe(latency)
            keyenv_api_call_total.labels(method=method, status=status).inc()
            if latency > SLOW_CALL_SECONDS:
                logger.warning(
                    "Slow KeyEnv API call",
                    extra={"log_type": "slow_api_call", "method": method, "path": path, "latency": latency}
                )

        return self._handle_response(method, path, response)

    def _handle_response(self, method: str, path: str, response: httpx.Response) -> Any:
        status_code = response.status_code
        self.last_status_code = status_code
        if status_code == 204:
            return None

        text = response.text
        try:
            payload = json.loads(text) if text.strip() else {}
        except ValueError as exc:
            logger.warning(
                "KeyEnv API returned a malformed body",
                extra={"log_type": "malformed_response", "method": method, "path": path, "status_code": status_code}
            )
            raise KeyEnvError(text or "Unknown error", status=status_code) from exc

        if not response.is_success:
            body = payload if isinstance(payload, dict) else {}
            message = body.get("error") or "Unknown error"
            error_class = error_for_status(status_code)
            logger.warning(
                "KeyEnv API error",
                extra={
                    "log_type": "api_error",
                    "method": method,
                    "path": path,
                    "status_code": status_code,
                    "error": message,
                    "code": body.get("code"),
                }
            )
            raise error_class(
                str(message),
                status=status_code,
                code=body.get("code"),
                details=body.get("details"),
            )

        return unwrap(payload, "data")

    # Convenience wrappers -------------------------------------------------
    def get(self, path: str) -> Any:
        return self.send("GET", path)

    def post(self, path: str, body: Optional[Any] = None) -> Any:
        return self.send("POST", path, body)

    def put(self, path: str, body: Optional[Any] = None) -> Any:
        return self.send("PUT", path, body)

    def delete(self, path: str) -> Any:
        return self.send("DELETE", path)
