"""Tests for the provisioning workflows."""

import pytest

from vaultprov.bootstrap import apply_plan, fetch_shared_secret, share_secret
from vaultprov.exceptions import SecretNotFoundError
from vaultprov.models import MountConfiguration
from vaultprov.mounts import MountManager
from vaultprov.plan import parse_provisioning_plan
from vaultprov.scoped_secrets import ScopedSecretStore
from vaultprov.tokens import TokenIssuer


def test_cubbyhole_end_to_end(fake_vault):
    """Test mount, child token, scoped write and read back."""
    mounts = MountManager(fake_vault)
    mounts.mount(
        "cubbyhole/",
        MountConfiguration(type="cubbyhole", description="A cubbyhole mount for configs"),
    )
    assert mounts.is_mounted("cubbyhole/") is True

    token = TokenIssuer(fake_vault).issue_child_token()
    assert token == "tok1"

    store = ScopedSecretStore(fake_vault)
    store.write(token, "config", "payload")
    assert store.read(token, "config") == "payload"


def test_share_and_fetch_secret(fake_vault):
    """Test share_secret mounts the cubbyhole and hands back a token."""
    token = share_secret(fake_vault, "config", "payload")

    assert fake_vault.mounts["cubbyhole/"]["type"] == "cubbyhole"
    assert fake_vault.store == {f"cubbyhole/{token}": {"config": "payload"}}
    assert fetch_shared_secret(fake_vault, token, "config") == "payload"


def test_share_secret_reuses_existing_mount(fake_vault):
    """Test an existing mount is not mounted again."""
    fake_vault.mounts["cubbyhole/"] = {"type": "cubbyhole", "description": "existing"}

    share_secret(fake_vault, "config", "payload")

    assert fake_vault.mounts["cubbyhole/"]["description"] == "existing"


def test_fetch_with_other_token_fails(fake_vault):
    """Test a secret is only reachable through the token it was shared with."""
    share_secret(fake_vault, "config", "payload")

    with pytest.raises(SecretNotFoundError):
        fetch_shared_secret(fake_vault, "someone-else", "config")


PLAN = {
    "mounts": [
        {"path": "cubbyhole/", "type": "cubbyhole"},
        {"path": "pki/", "type": "pki", "default_lease_ttl": "1h", "max_lease_ttl": "87600h"},
    ],
    "roles": [{"name": "example-dot-com", "allowed_domains": "example.com", "allow_subdomains": True}],
    "ca_access": {"host_port": "vault.example.com:8200"},
}


def test_apply_plan_on_empty_server(fake_vault):
    """Test a fresh server gets every mount and role."""
    result = apply_plan(fake_vault, parse_provisioning_plan(PLAN))

    assert result.mounted == ["cubbyhole/", "pki/"]
    assert result.tuned == []
    assert result.roles_written == ["example-dot-com"]
    assert result.ca_access_configured is True
    assert result.changed is True
    assert fake_vault.mounts["pki/"]["config"] == {"default_lease_ttl": "1h", "max_lease_ttl": "87600h"}
    assert fake_vault.store["pki/config/urls"]["issuing_certificates"] == (
        "https://vault.example.com:8200/v1/pki/ca"
    )


def test_apply_plan_twice_is_idempotent(fake_vault):
    """Test a second run over an unchanged server reports no changes."""
    plan = parse_provisioning_plan(PLAN)
    apply_plan(fake_vault, plan)
    writes_after_first_run = len(fake_vault.writes)

    result = apply_plan(fake_vault, plan)

    assert result.mounted == []
    assert result.tuned == []
    assert result.roles_written == []
    assert result.ca_access_configured is False
    assert result.changed is False
    assert fake_vault.tunes == {}
    assert len(fake_vault.writes) == writes_after_first_run


def test_apply_plan_accepts_ttls_reported_in_seconds(fake_vault):
    """Test TTLs the server reports as seconds match the plan's durations."""
    fake_vault.mounts["cubbyhole/"] = {"type": "cubbyhole"}
    fake_vault.mounts["pki/"] = {"type": "pki"}
    fake_vault.tunes["pki/"] = {"default_lease_ttl": 3600, "max_lease_ttl": 315360000}
    plan = parse_provisioning_plan({"mounts": PLAN["mounts"]})

    result = apply_plan(fake_vault, plan)

    assert result.changed is False


def test_apply_plan_retunes_drifted_mount(fake_vault):
    """Test an existing mount with different TTLs is tuned."""
    fake_vault.mounts["cubbyhole/"] = {"type": "cubbyhole"}
    fake_vault.mounts["pki/"] = {"type": "pki"}
    fake_vault.tunes["pki/"] = {"default_lease_ttl": 7200, "max_lease_ttl": 315360000}
    plan = parse_provisioning_plan({"mounts": PLAN["mounts"]})

    result = apply_plan(fake_vault, plan)

    assert result.tuned == ["pki/"]
    assert result.changed is True
    assert fake_vault.tunes["pki/"] == {"default_lease_ttl": "1h", "max_lease_ttl": "87600h"}


def test_apply_plan_rewrites_changed_ca_access(fake_vault):
    """Test CA URLs are rewritten when the plan points at another host."""
    plan = parse_provisioning_plan(PLAN)
    apply_plan(fake_vault, plan)

    moved = dict(PLAN, ca_access={"host_port": "vault2.example.com:8200"})
    result = apply_plan(fake_vault, parse_provisioning_plan(moved))

    assert result.ca_access_configured is True
    assert result.changed is True
    assert fake_vault.store["pki/config/urls"]["crl_distribution_points"] == (
        "https://vault2.example.com:8200/v1/pki/crl"
    )


def test_apply_empty_plan(fake_vault):
    """Test an empty plan changes nothing."""
    result = apply_plan(fake_vault, parse_provisioning_plan({}))

    assert result.changed is False
    assert fake_vault.writes == []
