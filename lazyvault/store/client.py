"""HTTP client for a Vault-style KV version 2 secret store.

Owns request construction, status classification, and response decoding.
Each worker thread gets its own ``requests`` session so concurrent directory
listings never share connection state.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

import requests

from ..errors import AccessDenied, DecodeFailed, RequestFailed
from .types import Entry, Secret

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT = 10.0


class VaultClient:
    """Read-only access to list, get, and mount-discovery endpoints."""

    def __init__(
        self,
        addr: str,
        token: str,
        *,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ) -> None:
        self.addr = addr.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._session_factory = session_factory
        self._local = threading.local()

    def _session(self) -> requests.Session:
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._session_factory()
            session.headers.update(
                {
                    "X-Vault-Token": self.token,
                    "Accept": "application/json",
                }
            )
            self._local.session = session
        return session

    def _get(self, url: str, params: dict[str, str] | None = None) -> requests.Response:
        try:
            return self._session().get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise RequestFailed(f"Failed to perform request to {url}: {exc}") from exc

    @staticmethod
    def _decode(response: requests.Response, url: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise DecodeFailed(f"Failed to parse response body {response.text!r} from {url}: {exc}") from exc

    def secret_url(self, mount: str, path: str) -> str:
        """Return the browser UI address of the secret at ``path``."""
        return f"{self.addr}/ui/vault/secrets/{mount}/show{path}"

    def list_dir(self, mount: str, path: str) -> list[Entry]:
        """List one container level.

        Raises ``AccessDenied`` on 403 so the caller can decide whether a
        forbidden branch is an error.
        """
        url = f"{self.addr}/v1/{mount}/metadata{path}"
        response = self._get(url, params={"list": "true"})
        if response.status_code == 403:
            raise AccessDenied(f"Forbidden to list {path} on {url}")
        if response.status_code != 200:
            raise RequestFailed(f"Got {response.status_code} {response.reason} on url {url}")

        body = self._decode(response, url)
        data = body.get("data") if isinstance(body, dict) else None
        if data is None:
            return []
        keys = data.get("keys") if isinstance(data, dict) else None
        if keys is None:
            return []
        if not isinstance(keys, list) or not all(isinstance(key, str) for key in keys):
            raise DecodeFailed(f"Unexpected key listing in response from {url}: {keys!r}")
        return [Entry.from_key(key) for key in keys]

    def get_secret(self, mount: str, path: str) -> Secret:
        """Fetch the latest version of the secret at ``path``.

        A deleted secret is still listed and answers 404 with a well-formed
        body that carries metadata but no data. Only a non-200 answer whose
        body has neither ``data`` nor ``metadata`` is an error.
        """
        url = f"{self.addr}/v1/{mount}/data{path}"
        response = self._get(url)
        try:
            body = response.json()
        except ValueError as exc:
            if response.status_code != 200:
                raise RequestFailed(f"Got {response.status_code} {response.reason} on url {url}") from exc
            raise DecodeFailed(f"Failed to parse response body {response.text!r} from {url}: {exc}") from exc

        envelope = body.get("data") if isinstance(body, dict) else None
        if envelope is None:
            envelope = {}
        if not isinstance(envelope, dict):
            raise DecodeFailed(f"Unexpected secret envelope from {url}: {envelope!r}")
        data = envelope.get("data")
        metadata = envelope.get("metadata")
        if data is not None and not isinstance(data, dict):
            raise DecodeFailed(f"Unexpected secret data from {url}: {data!r}")
        if metadata is not None and not isinstance(metadata, dict):
            raise DecodeFailed(f"Unexpected secret metadata from {url}: {metadata!r}")

        secret = Secret(data=data, metadata=metadata, url=self.secret_url(mount, path))
        if response.status_code != 200:
            if secret.is_empty():
                raise RequestFailed(f"Got {response.status_code} {response.reason} on url {url}")
            logger.info("Treating %s answer from %s as a valid secret", response.status_code, url)
        return secret

    def list_mounts(self) -> list[str]:
        """Return the sorted names of every key/value mount visible to the token."""
        url = f"{self.addr}/v1/sys/internal/ui/mounts"
        response = self._get(url)
        if response.status_code == 403:
            raise AccessDenied(f"Forbidden to list mounts on {url}")
        if response.status_code != 200:
            raise RequestFailed(f"Got {response.status_code} {response.reason} on url {url}")

        body = self._decode(response, url)
        data = body.get("data") if isinstance(body, dict) else None
        secret_mounts = data.get("secret") if isinstance(data, dict) else None
        if not isinstance(secret_mounts, dict):
            raise DecodeFailed(f"Unexpected mount listing in response from {url}")

        names: list[str] = []
        for name, mount in secret_mounts.items():
            if isinstance(mount, dict) and mount.get("type") == "kv":
                names.append(name.rstrip("/"))
        return sorted(names)


__all__ = ["DEFAULT_REQUEST_TIMEOUT", "VaultClient"]
