"""HashiCorp Vault backend client built on hvac."""

import functools
import logging
from typing import Any, Dict, List, Optional

import hvac
import requests
from hvac.exceptions import InvalidPath, VaultError
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from vaultsync.backend.base import BaseBackendClient, MountInfo, SecretResponse
from vaultsync.backend.exceptions import BackendError
from vaultsync.resources.base import EnableOptions

logger = logging.getLogger(__name__)


def _unwrap(response: Any) -> Any:
    """
    Extract the 'data' payload from an hvac API response.

    hvac >= 2.x returns the full response envelope for sys endpoints,
    older versions returned the inner dict. Normalize both.
    """
    if isinstance(response, dict) and isinstance(response.get("data"), dict):
        return response["data"]
    return response


def _to_response(raw: Any) -> Optional[SecretResponse]:
    if not raw:
        return None
    if not isinstance(raw, dict):
        return SecretResponse()
    return SecretResponse(
        data=raw.get("data") or {},
        warnings=list(raw.get("warnings") or []),
    )


def _mounts_from_listing(listing: Any) -> Dict[str, MountInfo]:
    mounts = {}
    for path, entry in (_unwrap(listing) or {}).items():
        # Older servers mix response metadata into the top level
        if isinstance(entry, dict) and "type" in entry:
            mounts[path] = MountInfo.from_listing(path, entry)
    return mounts


class VaultBackendClient(BaseBackendClient):
    """
    Backend client for HashiCorp Vault (and API-compatible servers).

    Transport retries for transient HTTP failures live here, on the
    requests session; callers never retry.

    Usage:
        client = VaultBackendClient(url="https://vault:8200", token="s.xxx")
        mounts = client.list_mounts()
        client.write("aws/roles/deploy", {"policy": "..."})
    """

    RETRY_STATUSES = (412, 500, 502, 503)

    def __init__(
        self,
        url: str,
        token: Optional[str] = None,
        namespace: Optional[str] = None,
        verify: bool = True,
        retries: int = 3,
        timeout: int = 30,
    ):
        """
        Args:
            url: Backend address (e.g. https://vault:8200)
            token: Token used for every request
            namespace: Enterprise namespace, if any
            verify: Verify TLS certificates
            retries: Transport-level retries for transient failures
            timeout: Per-request timeout in seconds
        """
        self.url = url
        session = requests.Session()
        adapter = HTTPAdapter(
            max_retries=Retry(
                total=retries,
                backoff_factor=0.5,
                status_forcelist=self.RETRY_STATUSES,
                allowed_methods=None,
                raise_on_status=False,
            )
        )
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        self._client = hvac.Client(
            url=url,
            token=token,
            namespace=namespace,
            verify=verify,
            timeout=timeout,
            session=session,
        )
        logger.info(f"Initialized VaultBackendClient: url={url}")

    def _call(self, description: str, path: str, func, *args, **kwargs):
        """Run func, wrapping client errors. Bind hvac kwargs with functools.partial."""
        try:
            return func(*args, **kwargs)
        except VaultError as e:
            raise BackendError(f"{description} failed for [{path}]: {e}", path=path) from e
        except requests.RequestException as e:
            raise BackendError(f"{description} failed for [{path}]: {e}", path=path) from e

    def read(self, path: str) -> Optional[SecretResponse]:
        try:
            raw = self._call("Read", path, self._client.read, path)
        except BackendError as e:
            if isinstance(e.__cause__, InvalidPath):
                return None
            raise
        return _to_response(raw)

    def write(self, path: str, data: Optional[Dict[str, Any]] = None) -> Optional[SecretResponse]:
        raw = self._call("Write", path, self._client.write_data, path, data=data or {})
        return _to_response(raw)

    def list(self, path: str) -> Optional[List[str]]:
        try:
            raw = self._call("List", path, self._client.list, path)
        except BackendError as e:
            if isinstance(e.__cause__, InvalidPath):
                return None
            raise
        if not raw:
            return None
        keys = (raw.get("data") or {}).get("keys")
        if keys is None:
            return None
        if not isinstance(keys, list) or not all(isinstance(k, str) for k in keys):
            raise BackendError(f"Unexpected list response for [{path}]", path=path)
        return keys

    def delete(self, path: str) -> None:
        self._call("Delete", path, self._client.delete, path)

    def list_mounts(self) -> Dict[str, MountInfo]:
        listing = self._call(
            "List mounts", "sys/mounts", self._client.sys.list_mounted_secrets_engines
        )
        return _mounts_from_listing(listing)

    def list_auth_methods(self) -> Dict[str, MountInfo]:
        listing = self._call("List auth methods", "sys/auth", self._client.sys.list_auth_methods)
        return _mounts_from_listing(listing)

    def enable_mount(self, path: str, options: EnableOptions) -> None:
        enable = functools.partial(
            self._client.sys.enable_secrets_engine,
            backend_type=options.type,
            path=path.rstrip("/"),
            description=options.description or None,
            config=options.tuning_config() or None,
            options=options.options or None,
            local=options.local,
            seal_wrap=options.seal_wrap,
        )
        self._call("Enable secrets engine", path, enable)

    def enable_auth_method(self, path: str, options: EnableOptions) -> None:
        enable = functools.partial(
            self._client.sys.enable_auth_method,
            method_type=options.type,
            path=path.rstrip("/"),
            description=options.description or None,
            config=options.tuning_config() or None,
            local=options.local,
            seal_wrap=options.seal_wrap,
        )
        self._call("Enable auth method", path, enable)
