"""
Base REST client.

Wraps one requests.Session with the retry loop both API clients share:
transport errors, 429 and 5xx are retried with exponential backoff, any other
HTTP error is raised at once. The last exception is re-raised unchanged.
"""

import threading
import time
from typing import Any, Dict, Optional

import requests

from connectors.core.exceptions import RequestCancelled
from connectors.core.logging_config import LoggerMixin

# Status codes worth another attempt
RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class ApiClient(LoggerMixin):
    """
    Session-backed REST client with retry logic.

    Args:
        base_url: API root, without trailing slash
        timeout: Per-request timeout in seconds
        max_retries: Total attempts per request
        backoff_seconds: First backoff delay, doubled on each retry
    """

    service_name = "API"

    def __init__(self, base_url: str, timeout: int = 30, max_retries: int = 3, backoff_seconds: float = 1.0):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.backoff_seconds = backoff_seconds
        self.session = requests.Session()

    def _request(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        cancellation: Optional[threading.Event] = None,
        method: str = "GET",
        json: Optional[Dict[str, Any]] = None
    ) -> requests.Response:
        """
        Make a request with retry logic.

        Args:
            endpoint: Path relative to base_url
            params: Query parameters
            json: JSON request body
            cancellation: Checked before every attempt and while backing off

        Returns:
            The successful response

        Raises:
            RequestCancelled: When cancellation is signalled
            requests.exceptions.RequestException: The last failure once retries are exhausted,
                or the first non-retryable HTTP error
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"

        for attempt in range(self.max_retries):
            if cancellation is not None and cancellation.is_set():
                raise RequestCancelled(f"{self.service_name} request to {endpoint} cancelled")

            try:
                self.logger.debug(f"[{self.service_name}] {method} {url} params={params}")
                response = self.session.request(method, url, params=params, json=json, timeout=self.timeout)
                self._after_response(response)
                response.raise_for_status()
                return response

            except requests.exceptions.RequestException as e:
                if not self._should_retry(e) or attempt == self.max_retries - 1:
                    self.logger.error(f"[{self.service_name}] Request to {endpoint} failed after {attempt + 1} attempt(s): {e}")
                    raise

                wait_time = self.backoff_seconds * (2 ** attempt)  # Exponential backoff
                self.logger.warning(
                    f"[{self.service_name}] Request failed (attempt {attempt + 1}/{self.max_retries}), "
                    f"retrying in {wait_time}s: {e}"
                )
                if cancellation is not None:
                    if cancellation.wait(wait_time):
                        raise RequestCancelled(f"{self.service_name} request to {endpoint} cancelled") from e
                else:
                    time.sleep(wait_time)

    def _get_json(self, endpoint: str, params: Optional[Dict[str, Any]] = None,
                  cancellation: Optional[threading.Event] = None) -> Any:
        return self._request(endpoint, params=params, cancellation=cancellation).json()

    def _post_json(self, endpoint: str, body: Dict[str, Any], cancellation: Optional[threading.Event] = None) -> Any:
        return self._request(endpoint, cancellation=cancellation, method="POST", json=body).json()

    def _should_retry(self, error: requests.exceptions.RequestException) -> bool:
        response = getattr(error, "response", None)
        if response is None:
            # Connection errors, timeouts
            return True
        return response.status_code in RETRYABLE_STATUS_CODES

    def _after_response(self, response: requests.Response):
        """Hook for response bookkeeping before the status is checked."""
        pass

    def close(self):
        self.session.close()
