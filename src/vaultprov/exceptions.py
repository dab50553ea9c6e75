"""Exception hierarchy for Vault provisioning operations.

Every failure surfaced by vaultprov is a subclass of VaultProvError so callers
can catch the whole family, while each subclass identifies one failure mode.
"""


class VaultProvError(Exception):
    """Base class for all vaultprov errors."""


class ConnectivityError(VaultProvError):
    """Raised when the Vault server cannot be reached."""


class ClientCreationError(VaultProvError):
    """Raised when a client bound to a credential cannot be created."""


class MountError(VaultProvError):
    """Raised when the server rejects a mount request."""


class WriteError(VaultProvError):
    """Raised when writing to a path fails on the server."""


class ReadError(VaultProvError):
    """Raised when reading from a path fails on the server."""


class SecretNotFoundError(ReadError):
    """Raised when no secret exists at the requested path."""


class SecretDataMissingError(ReadError):
    """Raised when a secret exists but carries no data."""


class SecretKeyMissingError(ReadError):
    """Raised when the secret data does not contain the requested key."""


class SecretValueNullError(ReadError):
    """Raised when the requested key is present but its value is null."""


class TokenError(VaultProvError):
    """Raised when token issuance returns no usable token."""


class TokenAuthMissingError(TokenError):
    """Raised when the token creation response has no auth block."""


class EmptyClientTokenError(TokenError):
    """Raised when the token creation response has an empty client token."""


class ConfigError(VaultProvError):
    """Raised for invalid connection settings or provisioning plans."""
