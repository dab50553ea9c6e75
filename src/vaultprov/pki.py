"""PKI backend roles, certificates and CA configuration."""

import logging
from typing import Any

from hvac.exceptions import VaultError

from .api.interface import MountReaderWriter, PKIChecker, PKIRevoker
from .exceptions import ReadError, WriteError
from .logging_utils import log_debug, log_info, log_warning

logger = logging.getLogger(__name__)

DEFAULT_PKI_MOUNT = "pki"

# Vault reports this when issuing from a PKI backend that has no root CA yet
CA_MISSING_SUFFIX = "backend must be configured with a CA certificate/key"


def format_bool(value: Any) -> str:
    """Serialize a role flag as the string Vault accepts: "true" or "false".

    Role data read back from Vault may hold a JSON boolean or a string,
    so both sides of a comparison go through this function.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value).strip().lower()


def format_domains(value: Any) -> str:
    """Serialize allowed domains as a comma-separated string.

    Newer Vault versions return allowed_domains as a list.
    """
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


def _error_text(exc: Exception) -> str:
    """Return the server message of an error without hvac's request suffix.

    str() of an hvac VaultError appends ", on <method> <url>", which would hide
    the message ending.
    """
    errors = getattr(exc, "errors", None)
    if errors:
        return ", ".join(str(e) for e in errors)
    if exc.args and exc.args[0] is not None:
        return str(exc.args[0])
    return str(exc)


class PKIManager:
    """Manages roles and certificates on a PKI backend.

    Role and certificate operations use the parent-token client. The root CA
    probe builds its own client from the connection configuration.
    """

    def __init__(self, api: MountReaderWriter | PKIChecker | PKIRevoker, mount: str = DEFAULT_PKI_MOUNT):
        self.api = api
        self.mount = mount.strip("/")

    def _role_path(self, name: str) -> str:
        return f"{self.mount}/roles/{name}"

    def _issue_path(self, role: str) -> str:
        return f"{self.mount}/issue/{role}"

    def _write(self, client: Any, path: str, data: dict[str, Any]) -> dict[str, Any] | None:
        try:
            return self.api.write(client, path, data)
        except VaultError as e:
            logger.error("Write to %s failed: %s", path, e)
            raise WriteError(f"Failed to write {path}: {e}") from e

    def create_role(self, name: str, allowed_domains: str, allow_subdomains: bool) -> dict[str, Any] | None:
        """Create or overwrite a role.

        allow_subdomains is sent as the string "true" or "false".
        """
        response = self._write(
            self.api.client(),
            self._role_path(name),
            {
                "allowed_domains": allowed_domains,
                "allow_subdomains": format_bool(allow_subdomains),
            },
        )
        log_info(logger, "Created PKI role", role=name, allowed_domains=allowed_domains)
        return response

    def has_role(self, name: str, allowed_domains: str, allow_subdomains: bool) -> bool:
        """Return True if the role exists with exactly these settings.

        A missing role, empty role data, a missing field or a differing value
        all return False. Only a failed read raises.

        Raises:
            ReadError: If the server rejects the read
        """
        path = self._role_path(name)
        try:
            secret = self.api.read(self.api.client(), path)
        except VaultError as e:
            logger.error("Read of %s failed: %s", path, e)
            raise ReadError(f"Failed to read {path}: {e}") from e

        if not secret:
            return False
        data = secret.get("data")
        if not data:
            return False

        if "allowed_domains" not in data:
            return False
        if format_domains(data["allowed_domains"]) != allowed_domains:
            log_debug(logger, "Role allowed_domains differs", role=name, current=data["allowed_domains"])
            return False

        if "allow_subdomains" not in data:
            return False
        if format_bool(data["allow_subdomains"]) != format_bool(allow_subdomains):
            log_debug(logger, "Role allow_subdomains differs", role=name, current=data["allow_subdomains"])
            return False

        return True

    def ensure_role(self, name: str, allowed_domains: str, allow_subdomains: bool) -> bool:
        """Create the role unless it already exists with these settings.

        Returns:
            True if the role was written, False if it already matched
        """
        if self.has_role(name, allowed_domains, allow_subdomains):
            logger.debug("PKI role %s already up to date", name)
            return False
        self.create_role(name, allowed_domains, allow_subdomains)
        return True

    def issue_certificate(self, role: str, common_name: str) -> dict[str, Any] | None:
        """Issue a certificate for common_name and return the server response as is."""
        response = self._write(
            self.api.client(), self._issue_path(role), {"common_name": common_name}
        )
        log_info(logger, "Issued certificate", role=role, common_name=common_name)
        return response

    def revoke_certificate(self, lease_id: str) -> None:
        """Revoke an issued certificate by its lease id. Errors propagate unchanged."""
        self.api.revoke(self.api.client(), lease_id)
        log_info(logger, "Revoked certificate", lease_id=lease_id)

    def probe_root_certificate_exists(self, role: str, common_name: str) -> bool:
        """Return True if the backend has a root CA configured.

        There is no direct query for this, so the probe issues a certificate.
        A failure whose message ends with CA_MISSING_SUFFIX means no root CA;
        any other failure is raised unchanged. On success a certificate has
        really been issued.
        """
        client = self.api.new_client(self.api.get_config())
        try:
            self.api.write(client, self._issue_path(role), {"common_name": common_name})
        except VaultError as e:
            if _error_text(e).endswith(CA_MISSING_SUFFIX):
                log_warning(logger, "PKI backend has no root CA", mount=self.mount, role=role)
                return False
            raise
        return True

    @staticmethod
    def _ca_urls(scheme: str, host_port: str, mount_path: str) -> dict[str, str]:
        base_url = f"{scheme}://{host_port}/v1/{mount_path}"
        return {
            "issuing_certificates": f"{base_url}/ca",
            "crl_distribution_points": f"{base_url}/crl",
        }

    def configure_ca_access(self, scheme: str, host_port: str, mount_path: str) -> dict[str, Any] | None:
        """Set the issuing certificate and CRL distribution URLs of a PKI mount."""
        mount_path = mount_path.strip("/")
        return self._write(
            self.api.client(),
            f"{mount_path}/config/urls",
            self._ca_urls(scheme, host_port, mount_path),
        )

    def has_ca_access(self, scheme: str, host_port: str, mount_path: str) -> bool:
        """Return True if the mount already publishes exactly these CA URLs.

        Vault returns each URL setting as a list; a single URL is expected.

        Raises:
            ReadError: If the server rejects the read
        """
        mount_path = mount_path.strip("/")
        path = f"{mount_path}/config/urls"
        try:
            secret = self.api.read(self.api.client(), path)
        except VaultError as e:
            logger.error("Read of %s failed: %s", path, e)
            raise ReadError(f"Failed to read {path}: {e}") from e

        data = (secret or {}).get("data") or {}
        for key, url in self._ca_urls(scheme, host_port, mount_path).items():
            if key not in data or format_domains(data[key]) != url:
                return False
        return True

    def ensure_ca_access(self, scheme: str, host_port: str, mount_path: str) -> bool:
        """Write the CA URLs unless the mount already has them.

        Returns:
            True if the URLs were written, False if they already matched
        """
        if self.has_ca_access(scheme, host_port, mount_path):
            logger.debug("CA access URLs on %s already up to date", mount_path)
            return False
        self.configure_ca_access(scheme, host_port, mount_path)
        return True

    def generate_csr(self, mount_path: str, config: dict[str, Any]) -> dict[str, Any] | None:
        """Generate an intermediate CSR on a PKI mount and return the response."""
        return self._write(
            self.api.client(),
            f"{mount_path.strip('/')}/intermediate/generate/internal",
            config,
        )

    def import_signed_certificate(self, mount_path: str, cert_contents: str) -> dict[str, Any] | None:
        """Import a signed intermediate certificate into a PKI mount."""
        return self._write(
            self.api.client(),
            f"{mount_path.strip('/')}/intermediate/set-signed",
            {"certificate": cert_contents},
        )
