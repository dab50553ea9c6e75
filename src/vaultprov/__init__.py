"""Idempotent provisioning of HashiCorp Vault backends and credentials.

This package mounts and tunes secrets engines, issues single-use child tokens,
stores token-scoped secrets, and manages PKI roles and certificates.
"""

from .api import HvacVaultAPI, VaultAPI, get_vault_api, init_api
from .bootstrap import PlanResult, apply_plan, fetch_shared_secret, share_secret
from .config import VaultConnectionConfig, build_config, load_config_from_env
from .exceptions import (
    ClientCreationError,
    ConfigError,
    ConnectivityError,
    EmptyClientTokenError,
    MountError,
    ReadError,
    SecretDataMissingError,
    SecretKeyMissingError,
    SecretNotFoundError,
    SecretValueNullError,
    TokenAuthMissingError,
    TokenError,
    VaultProvError,
    WriteError,
)
from .models import MountConfiguration, MountSpec, ProvisioningPlan, RoleSpec
from .mounts import MountManager
from .pki import PKIManager
from .plan import load_provisioning_plan
from .scoped_secrets import ScopedSecretStore
from .tokens import TokenIssuer

__all__ = [
    "ClientCreationError",
    "ConfigError",
    "ConnectivityError",
    "EmptyClientTokenError",
    "HvacVaultAPI",
    "MountConfiguration",
    "MountError",
    "MountManager",
    "MountSpec",
    "PKIManager",
    "PlanResult",
    "ProvisioningPlan",
    "ReadError",
    "RoleSpec",
    "ScopedSecretStore",
    "SecretDataMissingError",
    "SecretKeyMissingError",
    "SecretNotFoundError",
    "SecretValueNullError",
    "TokenAuthMissingError",
    "TokenError",
    "TokenIssuer",
    "VaultAPI",
    "VaultConnectionConfig",
    "VaultProvError",
    "WriteError",
    "apply_plan",
    "build_config",
    "fetch_shared_secret",
    "get_vault_api",
    "init_api",
    "load_config_from_env",
    "load_provisioning_plan",
    "share_secret",
]
