"""Idempotent setup workflows built from the managers.

These are the sequences a provisioning tool runs: make sure mounts and roles
exist with the desired settings, and hand a secret to a downstream consumer
through a single-use token.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from .api.interface import VaultAPI
from .logging_utils import log_info
from .models import MountConfiguration, ProvisioningPlan
from .mounts import MountManager
from .pki import PKIManager
from .scoped_secrets import DEFAULT_SCOPED_MOUNT, ScopedSecretStore
from .tokens import TokenIssuer

logger = logging.getLogger(__name__)


@dataclass
class PlanResult:
    """What apply_plan() changed on the server."""

    mounted: list[str] = field(default_factory=list)
    tuned: list[str] = field(default_factory=list)
    roles_written: list[str] = field(default_factory=list)
    ca_access_configured: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.mounted or self.tuned or self.roles_written or self.ca_access_configured)


def apply_plan(api: VaultAPI, plan: ProvisioningPlan) -> PlanResult:
    """Bring the server in line with plan.

    Mounts are created when missing. Existing mounts are tuned only when the
    plan sets lease TTLs that differ from the server's. Roles and CA access
    URLs are written only when missing or different, so a second run over an
    unchanged server reports no changes.
    """
    result = PlanResult()
    mounts = MountManager(api)

    for spec in plan.mounts:
        if mounts.ensure_mounted(spec.path, spec):
            result.mounted.append(spec.path)
        elif spec.lease_config() and not mounts.lease_config_matches(
            spec.path, spec.default_lease_ttl, spec.max_lease_ttl
        ):
            mounts.tune_mount(spec.path, spec.default_lease_ttl, spec.max_lease_ttl)
            result.tuned.append(spec.path)

    for role in plan.roles:
        pki = PKIManager(api, mount=role.mount)
        if pki.ensure_role(role.name, role.allowed_domains, role.allow_subdomains):
            result.roles_written.append(role.name)

    if plan.ca_access is not None:
        access = plan.ca_access
        result.ca_access_configured = PKIManager(api, mount=access.mount).ensure_ca_access(
            access.scheme, access.host_port, access.mount
        )

    log_info(
        logger,
        "Applied provisioning plan",
        mounted=result.mounted,
        tuned=result.tuned,
        roles_written=result.roles_written,
    )
    return result


def share_secret(api: VaultAPI, key: str, value: Any, mount: str = DEFAULT_SCOPED_MOUNT) -> str:
    """Store {key: value} behind a fresh single-use child token.

    The scoped mount is created first if it is missing.

    Returns:
        The child token; its holder can read the secret exactly once
    """
    mount = mount.rstrip("/")
    MountManager(api).ensure_mounted(
        f"{mount}/",
        MountConfiguration(type="cubbyhole", description="A cubbyhole mount for configs"),
    )
    token = TokenIssuer(api).issue_child_token()
    ScopedSecretStore(api, mount=mount).write(token, key, value)
    log_info(logger, "Shared secret", key=key, token=token)
    return token


def fetch_shared_secret(api: VaultAPI, token: str, key: str, mount: str = DEFAULT_SCOPED_MOUNT) -> Any:
    """Read a secret stored by share_secret()."""
    return ScopedSecretStore(api, mount=mount).read(token, key)
