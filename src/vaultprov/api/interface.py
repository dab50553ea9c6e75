"""Capability interfaces for talking to a Vault server.

Each interface exposes a single primitive so that the orchestration code can
ask only for what it uses, and tests can substitute any one of them with a
small fake. The composite interfaces at the bottom bundle the capabilities an
operation needs.
"""

from abc import ABC, abstractmethod
from typing import Any

from ..config import VaultConnectionConfig


class Mounter(ABC):
    """Objects that can mount Vault backends."""

    @abstractmethod
    def mount(
        self,
        path: str,
        backend_type: str,
        description: str | None = None,
        config: dict[str, Any] | None = None,
    ) -> None:
        """Enable a secrets engine of backend_type at path.

        Args:
            path: Mount path (e.g. "cubbyhole/")
            backend_type: Engine type (e.g. "cubbyhole", "pki")
            description: Human-readable description of the mount
            config: Lease settings (default_lease_ttl, max_lease_ttl)
        """
        pass


class MountLister(ABC):
    """Objects that can list mounted Vault backends."""

    @abstractmethod
    def list_mounts(self) -> dict[str, dict[str, Any]]:
        """Return a mapping of mount paths to their metadata."""
        pass


class MountConfigGetter(ABC):
    """Objects that can read the lease configuration of a mount."""

    @abstractmethod
    def mount_config(self, path: str) -> dict[str, Any]:
        """Return the tuning configuration of the mount at path."""
        pass


class MountTuner(ABC):
    """Objects that can change the lease configuration of a mount."""

    @abstractmethod
    def tune_mount(self, path: str, config: dict[str, Any]) -> None:
        """Apply lease settings (default_lease_ttl, max_lease_ttl) to path."""
        pass


class ConfigGetter(ABC):
    """Objects that expose the connection configuration of their client."""

    @abstractmethod
    def get_config(self) -> VaultConnectionConfig:
        pass


class ClientCreator(ABC):
    """Objects that can create new Vault clients."""

    @abstractmethod
    def new_client(self, config: VaultConnectionConfig) -> Any:
        """Create a new client handle from config.

        Raises:
            ClientCreationError: If the client cannot be created
        """
        pass


class ClientGetter(ABC):
    """Objects that expose their parent-token client."""

    @abstractmethod
    def client(self) -> Any:
        pass


class TokenSetter(ABC):
    """Objects that can bind a client handle to a token."""

    @abstractmethod
    def set_token(self, client: Any, token: str) -> None:
        pass


class MountWriter(ABC):
    """Objects that can write to a path in a Vault backend."""

    @abstractmethod
    def write(self, client: Any, path: str, data: dict[str, Any]) -> dict[str, Any] | None:
        """Write data to path using client.

        Returns:
            The server response, or None when the server returns no body
        """
        pass


class MountReader(ABC):
    """Objects that can read data from a path in a Vault backend."""

    @abstractmethod
    def read(self, client: Any, path: str) -> dict[str, Any] | None:
        """Read path using client.

        Returns:
            The server response, or None when nothing exists at path
        """
        pass


class Tokener(ABC):
    """Objects that can issue Vault tokens."""

    @abstractmethod
    def token_auth(self) -> Any:
        """Return the token auth handle of the parent-token client."""
        pass

    @abstractmethod
    def create_token(self, token_auth: Any, **opts: Any) -> dict[str, Any]:
        """Create a child token using token_auth.

        Args:
            token_auth: Handle returned by token_auth()
            **opts: Token creation options (num_uses, ttl, policies, ...)

        Returns:
            The raw token creation response
        """
        pass


class Revoker(ABC):
    """Objects that can revoke a lease, such as an issued certificate."""

    @abstractmethod
    def revoke(self, client: Any, lease_id: str) -> None:
        pass


class ClientWriter(ClientCreator, ConfigGetter, TokenSetter, MountWriter):
    """Write to a mount after creating a new client."""


class ClientReader(ClientCreator, ConfigGetter, TokenSetter, MountReader):
    """Read from a mount after creating a new client."""


class MountReaderWriter(ClientGetter, MountWriter, MountReader):
    """Role and certificate operations with the parent-token client."""


class PKIChecker(ClientCreator, ConfigGetter, MountWriter):
    """Check whether a root CA is configured.

    This uses a writer on purpose: the check is an issuance attempt.
    """


class PKIRevoker(ClientGetter, Revoker):
    """Revoke issued certificates."""


class MountAdmin(Mounter, MountLister, MountConfigGetter, MountTuner):
    """Everything needed to manage backend mounts."""


class VaultAPI(
    Tokener,
    MountAdmin,
    ClientCreator,
    ClientGetter,
    ConfigGetter,
    TokenSetter,
    MountWriter,
    MountReader,
    Revoker,
):
    """The full set of lower-level Vault interactions."""
