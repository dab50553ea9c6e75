"""HashiCorp Vault implementation of the capability interfaces.

HvacVaultAPI is a thin pass-through to the hvac client. It only translates
transport failures from requests into ConnectivityError; errors reported by
the Vault server (hvac.exceptions.VaultError and subclasses) are left for the
orchestration layer to interpret.
"""

import functools
import logging
from typing import Any

import hvac
import requests

from ..config import VaultConnectionConfig
from ..exceptions import ClientCreationError, ConnectivityError
from .interface import VaultAPI

logger = logging.getLogger(__name__)

# Lease settings accepted by enable/tune
LEASE_CONFIG_KEYS = ("default_lease_ttl", "max_lease_ttl")


def _translate_transport_errors(func):
    """Re-raise requests transport failures as ConnectivityError."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.error("Transport failure during %s: %s", func.__name__, e)
            raise ConnectivityError(f"Vault request failed in transport: {e}") from e

    return wrapper


def _unwrap_mounts(response: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Extract the path -> metadata mapping from a sys/mounts response.

    Vault returns the mounts both under "data" and at the top level next to
    request metadata (request_id, lease_id, ...). Only mount paths end with "/".
    """
    data = response.get("data")
    if isinstance(data, dict):
        return dict(data)
    return {k: v for k, v in response.items() if k.endswith("/") and isinstance(v, dict)}


class HvacVaultAPI(VaultAPI):
    """VaultAPI backed by an hvac.Client bound to the parent token."""

    def __init__(self, client: hvac.Client | None = None, config: VaultConnectionConfig | None = None):
        """Initialize the API wrapper.

        Args:
            client: Parent-token client (see init_api for the usual way to build one)
            config: Connection configuration the client was built from
        """
        self._client = client
        self._config = config

    # Client and configuration handling

    def new_client(self, config: VaultConnectionConfig) -> hvac.Client:
        try:
            return hvac.Client(
                url=config.address,
                token=config.parent_token or None,
                cert=config.cert,
                verify=config.verify,
                timeout=config.timeout,
                namespace=config.namespace,
            )
        except Exception as e:
            logger.error("Failed to create Vault client for %s: %s", config.address, e)
            raise ClientCreationError(f"Failed to create Vault client: {e}") from e

    def client(self) -> hvac.Client:
        return self._client

    def set_client(self, client: hvac.Client) -> None:
        self._client = client

    def get_config(self) -> VaultConnectionConfig:
        return self._config

    def set_config(self, config: VaultConnectionConfig) -> None:
        """Set the configuration used for new clients. Not called by new_client()."""
        self._config = config

    def set_token(self, client: hvac.Client, token: str) -> None:
        client.token = token

    # Tokens

    def token_auth(self) -> Any:
        return self._client.auth.token

    @_translate_transport_errors
    def create_token(self, token_auth: Any, **opts: Any) -> dict[str, Any]:
        return token_auth.create(**opts)

    # Mounts

    @_translate_transport_errors
    def mount(
        self,
        path: str,
        backend_type: str,
        description: str | None = None,
        config: dict[str, Any] | None = None,
    ) -> None:
        self._client.sys.enable_secrets_engine(
            backend_type=backend_type,
            path=path,
            description=description,
            config=config or None,
        )

    @_translate_transport_errors
    def list_mounts(self) -> dict[str, dict[str, Any]]:
        return _unwrap_mounts(self._client.sys.list_mounted_secrets_engines())

    @_translate_transport_errors
    def mount_config(self, path: str) -> dict[str, Any]:
        response = self._client.sys.read_mount_configuration(path=path)
        return response.get("data", response)

    @_translate_transport_errors
    def tune_mount(self, path: str, config: dict[str, Any]) -> None:
        settings = {k: config[k] for k in LEASE_CONFIG_KEYS if config.get(k)}
        self._client.sys.tune_mount_configuration(path=path, **settings)

    # Logical reads and writes

    @_translate_transport_errors
    def write(self, client: hvac.Client, path: str, data: dict[str, Any]) -> dict[str, Any] | None:
        response = client.write_data(path, data=data)
        # write_data returns a requests.Response for 204 No Content
        if isinstance(response, dict):
            return response
        return None

    @_translate_transport_errors
    def read(self, client: hvac.Client, path: str) -> dict[str, Any] | None:
        return client.read(path)

    @_translate_transport_errors
    def revoke(self, client: hvac.Client, lease_id: str) -> None:
        client.sys.revoke_lease(lease_id=lease_id)
