"""Vault connection configuration.

Connection settings are an explicit dataclass built by a pure function from
documented defaults plus caller overrides. Nothing is read from the process
environment unless load_config_from_env() is called.
"""

import dataclasses
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_SCHEME = "https"
DEFAULT_PORT = "8200"
DEFAULT_TIMEOUT = 30

VALID_SCHEMES = ("http", "https")

# Environment variable for each configuration field
ENV_VARS = {
    "scheme": "VAULT_SCHEME",
    "host": "VAULT_HOST",
    "port": "VAULT_PORT",
    "ca_cert": "VAULT_CACERT",
    "client_cert": "VAULT_CLIENT_CERT",
    "client_key": "VAULT_CLIENT_KEY",
    "parent_token": "VAULT_TOKEN",
    "namespace": "VAULT_NAMESPACE",
    "timeout": "VAULT_TIMEOUT",
}


@dataclass(frozen=True)
class VaultConnectionConfig:
    """Settings used to build a Vault client.

    Attributes:
        scheme: URL scheme, "http" or "https" (default: "https")
        host: Hostname or IP address of the Vault server (required by build_config)
        port: Port of the Vault server (default: "8200")
        ca_cert: Path to the PEM CA cert used to verify the server cert
        client_cert: Path to the client cert for mutual TLS
        client_key: Path to the client key for mutual TLS
        parent_token: Token that child tokens are issued from (default: "")
        namespace: Vault Enterprise namespace (default: None)
        timeout: Request timeout in seconds (default: 30)
    """

    scheme: str = DEFAULT_SCHEME
    host: str = ""
    port: str = DEFAULT_PORT
    ca_cert: str | None = None
    client_cert: str | None = None
    client_key: str | None = None
    parent_token: str = ""
    namespace: str | None = None
    timeout: int = DEFAULT_TIMEOUT

    @property
    def address(self) -> str:
        """Vault server URL, e.g. "https://vault.example.com:8200"."""
        return f"{self.scheme}://{self.host}:{self.port}"

    @property
    def verify(self) -> str | bool:
        """Value for the TLS verify option: the CA cert path, or True."""
        return self.ca_cert or True

    @property
    def cert(self) -> tuple[str, str] | None:
        """Client cert/key pair for mutual TLS, or None when not configured."""
        if self.client_cert and self.client_key:
            return (self.client_cert, self.client_key)
        return None

    def with_token(self, token: str) -> "VaultConnectionConfig":
        """Return a copy of this configuration bound to another token."""
        return dataclasses.replace(self, parent_token=token)


def build_config(**overrides) -> VaultConnectionConfig:
    """Build a connection configuration from defaults plus overrides.

    Overrides whose value is None keep the default.

    Args:
        **overrides: Field values (see VaultConnectionConfig)

    Returns:
        Validated VaultConnectionConfig

    Raises:
        ConfigError: If a field is unknown, host is missing or a value is invalid
    """
    field_names = {f.name for f in dataclasses.fields(VaultConnectionConfig)}
    unknown = sorted(set(overrides) - field_names)
    if unknown:
        raise ConfigError(f"Unknown configuration field(s): {', '.join(unknown)}")

    values = {k: v for k, v in overrides.items() if v is not None}

    host = str(values.get("host", "")).strip()
    if not host:
        raise ConfigError("Field 'host' must be set")
    values["host"] = host

    scheme = str(values.get("scheme", DEFAULT_SCHEME)).lower()
    if scheme not in VALID_SCHEMES:
        raise ConfigError(f"Field 'scheme' must be one of {VALID_SCHEMES}, got '{scheme}'")
    values["scheme"] = scheme

    port = str(values.get("port", DEFAULT_PORT))
    if not port.isdigit() or not 0 < int(port) < 65536:
        raise ConfigError(f"Field 'port' must be a valid TCP port, got '{port}'")
    values["port"] = port

    try:
        timeout = int(values.get("timeout", DEFAULT_TIMEOUT))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Field 'timeout' must be an integer: {e}") from e
    if timeout <= 0:
        raise ConfigError("Field 'timeout' must be positive")
    values["timeout"] = timeout

    if bool(values.get("client_cert")) != bool(values.get("client_key")):
        raise ConfigError("Fields 'client_cert' and 'client_key' must be set together")

    return VaultConnectionConfig(**values)


def load_config_from_env(
    environ: Mapping[str, str] | None = None, **overrides
) -> VaultConnectionConfig:
    """Build a connection configuration from VAULT_* environment variables.

    Args:
        environ: Mapping to read from (default: os.environ)
        **overrides: Values that take precedence over the environment

    Returns:
        Validated VaultConnectionConfig
    """
    if environ is None:
        environ = os.environ

    values = {}
    for field_name, env_var in ENV_VARS.items():
        value = environ.get(env_var)
        if value:
            values[field_name] = value

    values.update({k: v for k, v in overrides.items() if v is not None})

    config = build_config(**values)
    logger.debug("Loaded Vault connection config for %s", config.address)
    return config
