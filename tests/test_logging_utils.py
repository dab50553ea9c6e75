"""Tests for logging utilities."""

import logging

from vaultprov.logging_utils import (
    clear_operation_id,
    get_operation_id,
    log_info,
    mask_scoped_path,
    mask_token,
    redact_secrets,
    set_operation_id,
)


class TestRedactSecrets:
    """Tests for redact_secrets."""

    def test_service_token(self):
        text = "token hvs.CAESIJ2k3n4b5v6c7x8z9 issued"
        assert redact_secrets(text) == "token hvs.***REDACTED*** issued"

    def test_batch_token(self):
        assert "hvb.***REDACTED***" in redact_secrets("hvb.AAAAAQKx9Lq1")

    def test_legacy_service_token(self):
        assert redact_secrets("s.abcdefghijklmnopqrstuvwx") == "s.***REDACTED***"

    def test_vault_token_header(self):
        redacted = redact_secrets("X-Vault-Token: root-token")
        assert "root-token" not in redacted
        assert "***REDACTED***" in redacted

    def test_authorization_header(self):
        redacted = redact_secrets("Authorization: Bearer")
        assert redacted == "Authorization: ***REDACTED***"

    def test_plain_text_unchanged(self):
        assert redact_secrets("mounted pki/ at sys/mounts") == "mounted pki/ at sys/mounts"

    def test_none_and_non_string(self):
        assert redact_secrets(None) == ""
        assert redact_secrets(42) == "42"


def test_mask_token():
    assert mask_token("hvs.abcdefgh1234") == "****1234"
    assert mask_token("abc") == "****"
    assert mask_token("") == "<empty>"
    assert mask_token(None) == "<empty>"


def test_operation_id_lifecycle():
    """Test the operation id can be set, read and cleared."""
    operation_id = set_operation_id()
    assert get_operation_id() == operation_id

    assert set_operation_id("op-123") == "op-123"
    assert get_operation_id() == "op-123"

    clear_operation_id()
    assert get_operation_id() is None


def test_log_info_structured_and_redacted(caplog):
    """Test structured fields are appended and secrets redacted."""
    logger = logging.getLogger("vaultprov.test")
    set_operation_id("op-1")
    try:
        with caplog.at_level(logging.INFO, logger="vaultprov.test"):
            log_info(logger, "Shared secret", key="config", token="hvs.secretvalue123")
    finally:
        clear_operation_id()

    message = caplog.records[0].getMessage()
    assert message.startswith("Shared secret | operation_id=op-1")
    assert "key=config" in message
    assert "hvs.secretvalue123" not in message


def test_mask_scoped_path():
    assert mask_scoped_path("cubbyhole/hvs.abcd1234") == "cubbyhole/****1234"
    assert mask_scoped_path("team/cubbyhole/tok1") == "team/cubbyhole/****"
    assert mask_scoped_path("hvs.abcd1234") == "****1234"
    assert mask_scoped_path("") == "<empty>"


def test_log_fields_carrying_credentials_are_masked(caplog):
    """Test token and scoped path fields never log the full credential."""
    logger = logging.getLogger("vaultprov.test")
    with caplog.at_level(logging.INFO, logger="vaultprov.test"):
        log_info(
            logger,
            "Wrote scoped secret",
            token="plainchildtoken42",
            scoped_path="cubbyhole/plainchildtoken42",
            path="pki/roles/web",
        )

    message = caplog.records[0].getMessage()
    assert "plainchildtoken42" not in message
    assert "token=****en42" in message
    assert "scoped_path=cubbyhole/****en42" in message
    assert "path=pki/roles/web" in message
