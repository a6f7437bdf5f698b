#!/usr/bin/env python3
"""
Asana REST API Transport

One authenticated HTTP exchange per call, no retries. Responses with a
status code >= 400 are turned into AsanaAPIError subclasses carrying the
status code and the first message of the API's error envelope.

Usage as library:
    from asana_cli import AsanaClient, load_config
    client = AsanaClient(load_config())
    raw = client.request("GET", "/users/me")
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import requests

from .config import Config
from .errors import (
    AsanaAPIError,
    AsanaDecodeError,
    AsanaError,
    AsanaFileError,
    AsanaRateLimitError,
    AsanaTransportError,
    api_error_class,
)

# Configure logging
logger = logging.getLogger(__name__)

# Constants
ASANA_BASE_URL = "https://app.asana.com/api/1.0"
DOWNLOAD_CHUNK_SIZE = 64 * 1024


def api_error_from_response(
    status_code: int,
    body: bytes,
    headers: Optional[Mapping[str, str]] = None,
) -> AsanaAPIError:
    """
    Build the error for a failed response.

    If the body is an error envelope {"errors": [{"message", "help"}]} with
    at least one entry, the first message is used; otherwise the raw body is
    surfaced verbatim.
    """
    message = None
    help_text = None
    try:
        envelope = json.loads(body)
        errors = envelope.get("errors") if isinstance(envelope, dict) else None
        if isinstance(errors, list) and errors and isinstance(errors[0], dict):
            message = str(errors[0].get("message") or "")
            help_text = errors[0].get("help")
    except ValueError:
        pass

    if message is None:
        message = body.decode("utf-8", errors="replace")

    error_cls = api_error_class(status_code)
    text = f"API error ({status_code}): {message}"

    if error_cls is AsanaRateLimitError:
        retry_after = None
        if headers and headers.get("Retry-After"):
            try:
                retry_after = int(headers["Retry-After"])
            except ValueError:
                pass
        return AsanaRateLimitError(text, status_code, help_text, retry_after=retry_after)

    return error_cls(text, status_code, help_text)


def decode_data(raw: bytes) -> Any:
    """Decode a success body and return its "data" member."""
    try:
        payload = json.loads(raw)
    except ValueError as e:
        raise AsanaDecodeError(f"parsing response: {e}") from e

    if not isinstance(payload, dict) or "data" not in payload:
        raise AsanaDecodeError("parsing response: missing 'data' in response body")
    return payload["data"]


class AsanaClient:
    """
    Asana REST API transport.

    Holds the bearer token and workspace GID from an explicit Config; nothing
    is read from the environment here.
    """

    def __init__(
        self,
        config: Config,
        session: Optional[requests.Session] = None,
        base_url: str = ASANA_BASE_URL,
    ):
        self._token = config.token
        self._workspace = config.workspace
        self._timeout = config.timeout
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()

    @property
    def workspace(self) -> str:
        return self._workspace

    def _auth_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/json",
        }

    def _url(self, endpoint: str) -> str:
        return f"{self._base_url}/{endpoint.lstrip('/')}"

    def _check(self, resp: requests.Response) -> bytes:
        body = resp.content or b""
        logger.debug(f"Response status {resp.status_code} ({len(body)} bytes)")
        if resp.status_code >= 400:
            raise api_error_from_response(resp.status_code, body, resp.headers)
        return body

    def request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, str]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> bytes:
        """
        Make one authenticated request and return the raw response body.

        Content-Type is only set when a body is sent.

        Raises:
            AsanaTransportError: If the request could not be executed
            AsanaAPIError: If the API returned a status code >= 400
        """
        headers = self._auth_headers()
        data = None
        if body is not None:
            headers["Content-Type"] = "application/json"
            data = json.dumps(body)

        logger.debug(f"{method} {endpoint}")
        try:
            resp = self._session.request(
                method=method,
                url=self._url(endpoint),
                headers=headers,
                params=params,
                data=data,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise AsanaTransportError(f"executing request: {e}") from e

        return self._check(resp)

    def request_data(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, str]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Make a request and return the decoded "data" member."""
        return decode_data(self.request(method, endpoint, params=params, body=body))

    def upload(self, endpoint: str, file_path: str) -> bytes:
        """
        POST a local file as a multipart/form-data body with a single "file" field.

        The part is named after the file's base name. Empty files are sent
        as an empty part.

        Raises:
            AsanaFileError: If the file cannot be opened or read
            AsanaTransportError: If the request could not be executed
            AsanaAPIError: If the API returned a status code >= 400
        """
        path = Path(file_path)
        try:
            fh = open(path, "rb")
        except OSError as e:
            raise AsanaFileError(f"opening file: {e}") from e

        logger.debug(f"POST {endpoint} (multipart upload of {path.name})")
        with fh:
            try:
                # requests sets the multipart Content-Type with its boundary
                resp = self._session.request(
                    method="POST",
                    url=self._url(endpoint),
                    headers=self._auth_headers(),
                    files={"file": (path.name, fh)},
                    timeout=self._timeout,
                )
            except requests.RequestException as e:
                raise AsanaTransportError(f"executing request: {e}") from e
            except OSError as e:
                raise AsanaFileError(f"reading file: {e}") from e

        return self._check(resp)

    def download(self, url: str, dest_path: str) -> None:
        """
        Stream a pre-signed download URL to a local file.

        Download URLs are already signed by Asana, so no bearer token is sent.
        The destination is created or truncated.

        Raises:
            AsanaError: If the URL is empty
            AsanaTransportError: If the request could not be executed
            AsanaAPIError: If the download returned a status code >= 400
            AsanaFileError: If the destination cannot be written
        """
        if not url:
            raise AsanaError("attachment has no download URL")

        logger.debug(f"GET {url[:50]}... -> {dest_path}")
        try:
            resp = self._session.get(url, stream=True, timeout=self._timeout)
        except requests.RequestException as e:
            raise AsanaTransportError(f"downloading file: {e}") from e

        try:
            if resp.status_code >= 400:
                raise api_error_class(resp.status_code)(
                    f"download failed with status {resp.status_code}",
                    resp.status_code,
                )

            try:
                with open(dest_path, "wb") as out:
                    for chunk in resp.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                        if chunk:
                            out.write(chunk)
            except requests.RequestException as e:
                # RequestException subclasses OSError, so it is matched first
                raise AsanaTransportError(f"downloading file: {e}") from e
            except OSError as e:
                raise AsanaFileError(f"writing file: {e}") from e
        finally:
            resp.close()
