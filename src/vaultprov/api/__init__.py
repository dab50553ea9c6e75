"""Vault API capability interfaces and the hvac-backed implementation."""

from .factory import get_vault_api, init_api
from .hvac_api import HvacVaultAPI
from .interface import (
    ClientCreator,
    ClientGetter,
    ClientReader,
    ClientWriter,
    ConfigGetter,
    MountAdmin,
    MountConfigGetter,
    Mounter,
    MountLister,
    MountReader,
    MountReaderWriter,
    MountTuner,
    MountWriter,
    PKIChecker,
    PKIRevoker,
    Revoker,
    Tokener,
    TokenSetter,
    VaultAPI,
)

__all__ = [
    "ClientCreator",
    "ClientGetter",
    "ClientReader",
    "ClientWriter",
    "ConfigGetter",
    "HvacVaultAPI",
    "MountAdmin",
    "MountConfigGetter",
    "Mounter",
    "MountLister",
    "MountReader",
    "MountReaderWriter",
    "MountTuner",
    "MountWriter",
    "PKIChecker",
    "PKIRevoker",
    "Revoker",
    "Tokener",
    "TokenSetter",
    "VaultAPI",
    "get_vault_api",
    "init_api",
]
