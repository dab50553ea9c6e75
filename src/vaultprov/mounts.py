"""Backend mount management.

Mount paths are compared exactly as Vault lists them, including the trailing
slash: "cubbyhole" and "cubbyhole/" are different paths.
"""

import logging
from typing import Any

from hvac.exceptions import VaultError

from .api.interface import MountAdmin
from .exceptions import MountError
from .logging_utils import log_error, log_info
from .models import MountConfiguration

logger = logging.getLogger(__name__)

# Multipliers for the duration suffixes Vault accepts on lease TTLs
_TTL_UNITS = {"s": 1, "m": 60, "h": 3600, "d": 86400}


def ttl_seconds(value: Any) -> int | None:
    """Convert a lease TTL to seconds.

    Vault reports mount TTLs as integer seconds while plans usually carry
    duration strings such as "1h". Returns None for values that are not a
    plain number or a number with one s/m/h/d suffix.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip().lower()
    if text.isdigit():
        return int(text)
    if len(text) > 1 and text[-1] in _TTL_UNITS and text[:-1].isdigit():
        return int(text[:-1]) * _TTL_UNITS[text[-1]]
    return None


class MountManager:
    """Mounts, lists and tunes Vault backends.

    Nothing here retries. Mounting a path that is already in use fails;
    callers that want idempotent setup use ensure_mounted().
    """

    def __init__(self, api: MountAdmin):
        self.api = api

    def mount(self, path: str, config: MountConfiguration) -> None:
        """Mount a backend of config.type at path.

        Raises:
            MountError: If the server rejects the mount
            ConnectivityError: If the server cannot be reached
        """
        try:
            self.api.mount(
                path,
                config.type,
                description=config.description,
                config=config.lease_config(),
            )
        except VaultError as e:
            log_error(logger, "Mount rejected", path=path, type=config.type, error=e)
            raise MountError(f"Failed to mount {config.type} backend at {path}: {e}") from e

        log_info(logger, "Mounted backend", path=path, type=config.type)

    def list_mounts(self) -> dict[str, dict[str, Any]]:
        """Return the mounted paths and their metadata."""
        return self.api.list_mounts()

    def is_mounted(self, path: str) -> bool:
        """Return True if path is an exact key of the mount listing."""
        return path in self.list_mounts()

    def ensure_mounted(self, path: str, config: MountConfiguration) -> bool:
        """Mount path unless it is already mounted.

        Returns:
            True if the backend was mounted by this call, False if it existed
        """
        if self.is_mounted(path):
            logger.debug("Backend already mounted at %s", path)
            return False
        self.mount(path, config)
        return True

    def mount_config(self, path: str) -> dict[str, Any]:
        """Return the lease configuration of the mount at path."""
        return self.api.mount_config(path)

    def tune_mount(
        self,
        path: str,
        default_lease_ttl: str | None = None,
        max_lease_ttl: str | None = None,
    ) -> None:
        """Set lease TTLs on an existing mount. TTL values are not validated locally."""
        self.api.tune_mount(
            path,
            {"default_lease_ttl": default_lease_ttl, "max_lease_ttl": max_lease_ttl},
        )
        log_info(
            logger,
            "Tuned mount",
            path=path,
            default_lease_ttl=default_lease_ttl,
            max_lease_ttl=max_lease_ttl,
        )

    def lease_config_matches(
        self,
        path: str,
        default_lease_ttl: str | None = None,
        max_lease_ttl: str | None = None,
    ) -> bool:
        """Return True if the mount already has the given TTLs.

        TTLs left as None are not compared. A TTL that cannot be converted to
        seconds never matches, so it is always sent to the server.
        """
        current = self.mount_config(path) or {}
        for key, wanted in (("default_lease_ttl", default_lease_ttl), ("max_lease_ttl", max_lease_ttl)):
            if wanted is None:
                continue
            wanted_seconds = ttl_seconds(wanted)
            if wanted_seconds is None or wanted_seconds != ttl_seconds(current.get(key)):
                return False
        return True
