"""Pydantic models for mounts, PKI roles and provisioning plans."""

from typing import Any

from pydantic import BaseModel, Field


class MountConfiguration(BaseModel):
    """Flattened settings for a backend mount."""

    type: str = Field(..., min_length=1, examples=["cubbyhole", "pki"])
    description: str = ""
    default_lease_ttl: str | None = Field(default=None, examples=["1h"])
    max_lease_ttl: str | None = Field(default=None, examples=["87600h"])

    def lease_config(self) -> dict[str, Any]:
        """Lease settings in the form Vault expects, omitting unset values."""
        config = {}
        if self.default_lease_ttl:
            config["default_lease_ttl"] = self.default_lease_ttl
        if self.max_lease_ttl:
            config["max_lease_ttl"] = self.max_lease_ttl
        return config


class MountSpec(MountConfiguration):
    """A mount entry in a provisioning plan."""

    path: str = Field(..., min_length=1, examples=["cubbyhole/", "pki/"])


class RoleSpec(BaseModel):
    """A PKI role entry in a provisioning plan."""

    name: str = Field(..., min_length=1)
    allowed_domains: str = Field(..., min_length=1, examples=["example.com"])
    allow_subdomains: bool = False
    mount: str = "pki"


class CAAccess(BaseModel):
    """Where clients fetch the CA certificate and CRL from."""

    scheme: str = Field(default="https", pattern="^https?$")
    host_port: str = Field(..., min_length=1, examples=["vault.example.com:8200"])
    mount: str = "pki"


class ProvisioningPlan(BaseModel):
    """Desired state of a Vault server: mounts, PKI roles and CA URLs."""

    mounts: list[MountSpec] = Field(default_factory=list)
    roles: list[RoleSpec] = Field(default_factory=list)
    ca_access: CAAccess | None = None
