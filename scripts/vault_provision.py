#!/usr/bin/env python3
"""CLI tool for provisioning a Vault server.

Usage:
    python scripts/vault_provision.py mounts
    python scripts/vault_provision.py apply PLAN.yaml
    python scripts/vault_provision.py share KEY VALUE [--mount MOUNT]
    python scripts/vault_provision.py fetch TOKEN KEY [--mount MOUNT]
    python scripts/vault_provision.py probe-ca ROLE COMMON_NAME [--mount MOUNT]

Environment Variables:
    VAULT_TOKEN: Parent token; child tokens are issued from it
    VAULT_SCHEME, VAULT_HOST, VAULT_PORT: Vault server location
    VAULT_CACERT: CA cert used to verify the Vault server
    VAULT_CLIENT_CERT, VAULT_CLIENT_KEY: Client cert/key for mutual TLS
    VAULT_NAMESPACE: Vault Enterprise namespace
"""

import argparse
import logging
import sys

from hvac.exceptions import VaultError

from vaultprov import (
    PKIManager,
    VaultProvError,
    apply_plan,
    fetch_shared_secret,
    get_vault_api,
    load_provisioning_plan,
    share_secret,
)
from vaultprov.logging_utils import set_operation_id
from vaultprov.mounts import MountManager


def cmd_mounts(api, args):
    """List mounted backends."""
    mounts = MountManager(api).list_mounts()
    for path in sorted(mounts):
        info = mounts[path] or {}
        print(f"{path:<24} {info.get('type', ''):<12} {info.get('description', '')}")


def cmd_apply(api, args):
    """Apply a provisioning plan."""
    plan = load_provisioning_plan(args.plan)
    result = apply_plan(api, plan)

    if not result.changed:
        print("✅ Vault already matches the plan.")
        return

    for path in result.mounted:
        print(f"✅ Mounted {path}")
    for path in result.tuned:
        print(f"✅ Tuned {path}")
    for role in result.roles_written:
        print(f"✅ Wrote role {role}")
    if result.ca_access_configured:
        print("✅ Configured CA access URLs")


def cmd_share(api, args):
    """Store a secret behind a new single-use token and print the token."""
    token = share_secret(api, args.key, args.value, mount=args.mount)
    print(token)


def cmd_fetch(api, args):
    """Read a secret stored by the share command."""
    print(fetch_shared_secret(api, args.token, args.key, mount=args.mount))


def cmd_probe_ca(api, args):
    """Check whether a PKI backend has a root CA."""
    pki = PKIManager(api, mount=args.mount)
    if pki.probe_root_certificate_exists(args.role, args.common_name):
        print(f"✅ Root CA is configured on {args.mount}")
    else:
        print(f"❌ No root CA configured on {args.mount}")
        sys.exit(2)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Provision Vault backends and credentials",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--host", help="Vault host (overrides VAULT_HOST)")
    parser.add_argument("--port", help="Vault port (overrides VAULT_PORT)")
    parser.add_argument("--scheme", choices=["http", "https"], help="URL scheme (overrides VAULT_SCHEME)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    subparsers.add_parser("mounts", help="List mounted backends")

    apply_parser = subparsers.add_parser("apply", help="Apply a provisioning plan")
    apply_parser.add_argument("plan", help="Path to the plan YAML file")

    share_parser = subparsers.add_parser("share", help="Share a secret through a child token")
    share_parser.add_argument("key", help="Secret key")
    share_parser.add_argument("value", help="Secret value")
    share_parser.add_argument("--mount", default="cubbyhole", help="Scoped secret mount")

    fetch_parser = subparsers.add_parser("fetch", help="Fetch a shared secret")
    fetch_parser.add_argument("token", help="Child token printed by the share command")
    fetch_parser.add_argument("key", help="Secret key")
    fetch_parser.add_argument("--mount", default="cubbyhole", help="Scoped secret mount")

    probe_parser = subparsers.add_parser("probe-ca", help="Check for a root CA (issues a certificate)")
    probe_parser.add_argument("role", help="PKI role to issue from")
    probe_parser.add_argument("common_name", help="Common name for the probe certificate")
    probe_parser.add_argument("--mount", default="pki", help="PKI mount")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    set_operation_id()

    commands = {
        "mounts": cmd_mounts,
        "apply": cmd_apply,
        "share": cmd_share,
        "fetch": cmd_fetch,
        "probe-ca": cmd_probe_ca,
    }

    try:
        api = get_vault_api(host=args.host, port=args.port, scheme=args.scheme)
        commands[args.command](api, args)
    except (VaultProvError, VaultError) as e:
        print(f"❌ Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
