"""Shared fixtures: an in-memory backend and a configuration tree builder."""

import json
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

from vaultsync.backend.base import BaseBackendClient, MountInfo, SecretResponse
from vaultsync.backend.exceptions import BackendError


class FakeBackend(BaseBackendClient):
    """
    In-memory backend.

    Written paths become readable and listable; deleting sys/mounts/<path>
    or sys/auth/<path> drops the mount. Every call is recorded.
    """

    def __init__(self):
        self.mounts: Dict[str, MountInfo] = {
            "secret/": MountInfo("secret/", "kv", options={"version": "2"}),
            "sys/": MountInfo("sys/", "system"),
        }
        self.auth_methods: Dict[str, MountInfo] = {
            "token/": MountInfo("token/", "token"),
        }
        self.data: Dict[str, Dict[str, Any]] = {}
        self.responses: Dict[str, SecretResponse] = {}
        self.writes: List[Tuple[str, Dict[str, Any]]] = []
        self.deletes: List[str] = []
        self.enabled: List[Tuple[str, str]] = []
        self.fail_paths: Dict[str, str] = {}
        self.on_list: Optional[Callable[[str], None]] = None
        self._lock = threading.Lock()

    # -- helpers for tests ---------------------------------------------------

    def add_mount(self, path: str, type_: str, **options) -> None:
        self.mounts[path] = MountInfo(path, type_, options=options or None)

    def add_auth(self, path: str, type_: str) -> None:
        self.auth_methods[path] = MountInfo(path, type_)

    def put_secret(self, path: str, values: Dict[str, Any]) -> None:
        """Store a KV v2 secret at a logical path under secret/."""
        mount, _, rest = path.partition("/")
        self.data[f"{mount}/data/{rest}"] = {"data": values, "metadata": {}}

    def written(self, path: str) -> List[Dict[str, Any]]:
        return [data for p, data in self.writes if p == path]

    def written_paths(self) -> List[str]:
        return [p for p, _ in self.writes]

    # -- BaseBackendClient ---------------------------------------------------

    def _check(self, path: str) -> None:
        if path in self.fail_paths:
            raise BackendError(self.fail_paths[path], path=path)

    def read(self, path):
        self._check(path)
        with self._lock:
            if path not in self.data:
                return None
            return SecretResponse(data=dict(self.data[path]))

    def write(self, path, data=None):
        with self._lock:
            self.writes.append((path, data))
        self._check(path)
        with self._lock:
            self.data[path] = data or {}
        return self.responses.get(path)

    def list(self, path):
        if self.on_list is not None:
            self.on_list(path)
        self._check(path)
        prefix = path.rstrip("/") + "/"
        with self._lock:
            names = sorted({
                p[len(prefix):].split("/")[0]
                for p in self.data
                if p.startswith(prefix) and len(p) > len(prefix)
            })
        return names or None

    def delete(self, path):
        self._check(path)
        self.deletes.append(path)
        if path.startswith("sys/mounts/"):
            self.mounts.pop(path[len("sys/mounts/"):], None)
        elif path.startswith("sys/auth/"):
            self.auth_methods.pop(path[len("sys/auth/"):], None)
        else:
            self.data.pop(path, None)

    def list_mounts(self):
        return dict(self.mounts)

    def list_auth_methods(self):
        return dict(self.auth_methods)

    def enable_mount(self, path, options):
        self._check(path)
        self.enabled.append((path, options.type))
        self.mounts[path] = MountInfo(path, options.type, options.description, options.options or None)

    def enable_auth_method(self, path, options):
        self._check(path)
        self.enabled.append((path, options.type))
        self.auth_methods[path] = MountInfo(path, options.type, options.description)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def config_root(tmp_path):
    root = tmp_path / "config"
    root.mkdir()
    return root


@pytest.fixture
def write_config(config_root):
    """
    Write a file under the configuration root.

    Dicts are serialized as JSON; strings are written as-is.
    """
    def _write(relative: str, content: Any):
        file_path = config_root / relative
        file_path.parent.mkdir(parents=True, exist_ok=True)
        if not isinstance(content, str):
            content = json.dumps(content)
        file_path.write_text(content)
        return file_path
    return _write
