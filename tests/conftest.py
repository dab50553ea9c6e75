"""pytest configuration for vaultprov tests."""

import sys
from pathlib import Path

import pytest
from hvac.exceptions import InvalidRequest

# Add src directory to path so tests can import vaultprov
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from vaultprov.api.interface import VaultAPI  # noqa: E402
from vaultprov.config import build_config  # noqa: E402


class FakeClient:
    """Stand-in for an hvac client handle."""

    def __init__(self, token):
        self.token = token


class FakeVault(VaultAPI):
    """In-memory VaultAPI that records every call.

    Tokens issued by create_token are "tok1", "tok2", ... in order.
    """

    def __init__(self, config=None, mounts=None):
        self.config = config or build_config(host="vault.test", parent_token="root-token")
        self.root_client = FakeClient(self.config.parent_token)
        self.mounts = dict(mounts) if mounts is not None else {"sys/": {"type": "system"}}
        self.tunes = {}
        self.store = {}
        self.clients_created = []
        self.writes = []
        self.reads = []
        self.token_requests = []
        self.revoked = []
        self._token_counter = 0
        # Method name -> exception raised on the next calls
        self.errors = {}
        # Overrides for server responses
        self.token_response = None
        self.read_responses = {}

    def _maybe_fail(self, method):
        if method in self.errors:
            raise self.errors[method]

    def new_client(self, config):
        self._maybe_fail("new_client")
        client = FakeClient(config.parent_token)
        self.clients_created.append(client)
        return client

    def client(self):
        return self.root_client

    def get_config(self):
        return self.config

    def set_token(self, client, token):
        client.token = token

    def token_auth(self):
        return self.root_client

    def create_token(self, token_auth, **opts):
        self.token_requests.append((token_auth.token, opts))
        self._maybe_fail("create_token")
        if self.token_response is not None:
            return self.token_response
        self._token_counter += 1
        return {"auth": {"client_token": f"tok{self._token_counter}"}}

    def mount(self, path, backend_type, description=None, config=None):
        self._maybe_fail("mount")
        if path in self.mounts:
            raise InvalidRequest(f"path is already in use at {path}")
        self.mounts[path] = {
            "type": backend_type,
            "description": description,
            "config": dict(config or {}),
        }

    def list_mounts(self):
        self._maybe_fail("list_mounts")
        return dict(self.mounts)

    def mount_config(self, path):
        self._maybe_fail("mount_config")
        config = dict((self.mounts.get(path) or {}).get("config") or {})
        config.update(self.tunes.get(path, {}))
        return config

    def tune_mount(self, path, config):
        self._maybe_fail("tune_mount")
        self.tunes.setdefault(path, {}).update({k: v for k, v in config.items() if v})

    def write(self, client, path, data):
        self.writes.append((client.token, path, dict(data)))
        self._maybe_fail("write")
        self.store[path] = dict(data)
        return None

    def read(self, client, path):
        self.reads.append((client.token, path))
        self._maybe_fail("read")
        if path in self.read_responses:
            return self.read_responses[path]
        if path not in self.store:
            return None
        return {"data": dict(self.store[path])}

    def revoke(self, client, lease_id):
        self._maybe_fail("revoke")
        self.revoked.append((client.token, lease_id))


@pytest.fixture
def fake_vault():
    """An empty in-memory Vault with only the sys/ mount."""
    return FakeVault()


@pytest.fixture
def vault_config():
    """A connection configuration pointing at a test server."""
    return build_config(host="vault.test", parent_token="root-token")
