"""
HTTP Transport for the remote version-control host.

Handles HTTP communication, bounded timeouts and error handling. Requests
are never retried here; retry policy belongs to the caller.
"""

import time
from typing import Any

import httpx

from gandalf.exceptions import RemoteGatewayError
from gandalf.logging import log_http_request, log_http_response


class HTTPTransport:
    """
    HTTP transport layer with basic authentication.

    Handles:
    - Separate timeouts for reads and mutations
    - Translating timeouts and connection failures into RemoteGatewayError
    - Error response parsing into RemoteGatewayError with the status code
    """

    def __init__(
        self,
        base_url: str,
        username: str = "",
        password: str = "",
        timeout: float = 6.0,
        mutation_timeout: float = 30.0,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            base_url: Base URL of the REST API (e.g., "https://stash.example.com/rest")
            username: Basic auth user name
            password: Basic auth password
            timeout: Timeout in seconds for read requests
            mutation_timeout: Timeout in seconds for requests that change state
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.mutation_timeout = mutation_timeout

        auth = httpx.BasicAuth(username, password) if username else None
        self._client = httpx.Client(
            base_url=self.base_url,
            auth=auth,
            timeout=mutation_timeout,
            headers={"Accept": "application/json"},
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Make a request and parse the JSON response.

        GET requests use the read timeout, everything else the mutation
        timeout.

        Args:
            method: HTTP method
            path: API path relative to the base URL
            params: Query parameters
            body: JSON request body

        Returns:
            Parsed JSON response (empty dict for empty bodies)

        Raises:
            RemoteGatewayError: On timeouts, connection and HTTP errors
        """
        response = self._send(method, path, params=params, body=body)
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise RemoteGatewayError(
                "INVALID_RESPONSE",
                f"remote host returned a non-JSON body for {method} {path}",
                status_code=response.status_code,
                cause=e,
            ) from e

    def request_bytes(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> bytes:
        """
        Make a request and return the raw response body.

        Raises:
            RemoteGatewayError: On timeouts, connection and HTTP errors
        """
        return self._send(method, path, params=params).content

    def _send(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> httpx.Response:
        timeout = self.timeout if method.upper() == "GET" else self.mutation_timeout
        log_http_request(method, f"{self.base_url}{path}", params=params, body=body)

        started = time.monotonic()
        try:
            response = self._client.request(
                method, path, params=params, json=body, timeout=timeout
            )
        except httpx.TimeoutException as e:
            raise RemoteGatewayError(
                "TIMEOUT",
                f"{method} {path} timed out after {timeout}s",
                cause=e,
            ) from e
        except httpx.RequestError as e:
            raise RemoteGatewayError("CONNECTION_ERROR", str(e), cause=e) from e

        log_http_response(
            response.status_code,
            f"{self.base_url}{path}",
            elapsed_ms=(time.monotonic() - started) * 1000,
        )

        if response.status_code >= 400:
            raise self._parse_error_response(response)
        return response

    def _parse_error_response(self, response: httpx.Response) -> RemoteGatewayError:
        """
        Parse an error response into a RemoteGatewayError.

        The remote host reports errors as
        ``{"errors": [{"message": ..., "exceptionName": ...}]}``.

        Args:
            response: HTTP response with error status

        Returns:
            RemoteGatewayError carrying the status code, with an
            ``httpx.HTTPStatusError`` for the response as its cause
        """
        try:
            data = response.json()
        except ValueError:
            data = {}

        errors = data.get("errors") if isinstance(data, dict) else None
        if errors:
            message = "; ".join(e.get("message", "") for e in errors if isinstance(e, dict))
        else:
            message = f"HTTP {response.status_code}"

        status_code = response.status_code

        if status_code == 401:
            code = "AUTHENTICATION_ERROR"
        elif status_code == 403:
            code = "AUTHORIZATION_ERROR"
        elif status_code == 404:
            code = "NOT_FOUND"
        elif status_code == 409:
            code = "CONFLICT"
        elif status_code >= 500:
            code = "SERVER_ERROR"
        else:
            code = "VALIDATION_ERROR"

        message = message or f"HTTP {status_code}"
        cause = httpx.HTTPStatusError(message, request=response.request, response=response)
        return RemoteGatewayError(code, message, status_code=status_code, cause=cause)
