"""Token-scoped secret storage.

A scoped secret lives at <mount>/<token> and is written and read with a client
bound to that token. Whoever holds the token can read exactly that one secret.
A new client is created for every call; the parent-token client is never
re-pointed at another token, so concurrent callers cannot overwrite each
other's client token.
"""

import logging
from typing import Any

from hvac.exceptions import VaultError

from .api.interface import ClientReader, ClientWriter
from .exceptions import (
    ReadError,
    SecretDataMissingError,
    SecretKeyMissingError,
    SecretNotFoundError,
    SecretValueNullError,
    WriteError,
)
from .logging_utils import log_debug, log_error, mask_token

logger = logging.getLogger(__name__)

DEFAULT_SCOPED_MOUNT = "cubbyhole"


def _bound_client(api: ClientWriter | ClientReader, token: str) -> Any:
    """Create a fresh client bound to token."""
    client = api.new_client(api.get_config())
    api.set_token(client, token)
    return client


def _without_token(error: Exception, token: str) -> str:
    """Return the error text with token masked.

    hvac errors end with the request URL, which holds the scoped path.
    """
    text = str(error)
    if token:
        text = text.replace(token, mask_token(token))
    return text


def write_mount(api: ClientWriter, path: str, token: str, data: dict[str, Any]) -> None:
    """Write data to path using a new client bound to token.

    Raises:
        ClientCreationError: If the client cannot be created
        WriteError: If the server rejects the write
    """
    client = _bound_client(api, token)
    try:
        api.write(client, path, data)
    except VaultError as e:
        message = _without_token(e, token)
        log_error(logger, "Scoped write failed", scoped_path=path, error=message)
        raise WriteError(f"Failed to write secret: {message}") from e


def read_mount(api: ClientReader, path: str, token: str) -> dict[str, Any]:
    """Read the data stored at path using a new client bound to token.

    Returns:
        The data mapping of the secret

    Raises:
        ClientCreationError: If the client cannot be created
        ReadError: If the server rejects the read
        SecretNotFoundError: If nothing is stored at path
        SecretDataMissingError: If the secret has no data
    """
    client = _bound_client(api, token)
    try:
        secret = api.read(client, path)
    except VaultError as e:
        message = _without_token(e, token)
        log_error(logger, "Scoped read failed", scoped_path=path, error=message)
        raise ReadError(f"Failed to read secret: {message}") from e

    if secret is None:
        raise SecretNotFoundError("No secret is stored at the requested path")
    data = secret.get("data")
    if data is None:
        raise SecretDataMissingError("Secret has no data")
    return data


class ScopedSecretStore:
    """Stores one secret per token under a mount (cubbyhole by default)."""

    def __init__(self, api: ClientWriter | ClientReader, mount: str = DEFAULT_SCOPED_MOUNT):
        self.api = api
        self.mount = mount.rstrip("/")

    def path_for(self, token: str) -> str:
        """Return the path of the secret owned by token."""
        return f"{self.mount}/{token}"

    def write(self, token: str, key: str, value: Any) -> None:
        """Store {key: value} at the path owned by token.

        Raises:
            ClientCreationError: If the token-bound client cannot be created
            WriteError: If the server rejects the write
        """
        write_mount(self.api, self.path_for(token), token, {key: value})
        log_debug(logger, "Wrote scoped secret", token=token, key=key)

    def read(self, token: str, key: str) -> Any:
        """Return the value stored under key at the path owned by token.

        Raises:
            ClientCreationError: If the token-bound client cannot be created
            ReadError: If the server rejects the read
            SecretNotFoundError: If no secret exists for token
            SecretDataMissingError: If the secret has no data
            SecretKeyMissingError: If the data does not contain key
            SecretValueNullError: If the value stored under key is null
        """
        data = read_mount(self.api, self.path_for(token), token)
        if key not in data:
            raise SecretKeyMissingError(f"Secret data has no key '{key}'")
        value = data[key]
        if value is None:
            raise SecretValueNullError(f"Value for key '{key}' is null")
        log_debug(logger, "Read scoped secret", token=token, key=key)
        return value
