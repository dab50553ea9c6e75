"""Tests for child token issuance."""

import pytest
from hvac.exceptions import Forbidden

from vaultprov.exceptions import EmptyClientTokenError, TokenAuthMissingError, TokenError
from vaultprov.tokens import CHILD_TOKEN_NUM_USES, TokenIssuer


def test_issue_child_token(fake_vault):
    """Test a child token is returned and limited to two uses."""
    token = TokenIssuer(fake_vault).issue_child_token()

    assert token == "tok1"
    parent, opts = fake_vault.token_requests[0]
    assert parent == "root-token"
    assert opts["num_uses"] == CHILD_TOKEN_NUM_USES == 2


def test_issue_child_token_extra_options(fake_vault):
    """Test extra creation options are forwarded."""
    TokenIssuer(fake_vault).issue_child_token(ttl="10m", display_name="provisioner")

    _, opts = fake_vault.token_requests[0]
    assert opts == {"num_uses": 2, "ttl": "10m", "display_name": "provisioner"}


def test_num_uses_cannot_be_overridden(fake_vault):
    """Test that the use count is fixed."""
    with pytest.raises(ValueError, match="num_uses"):
        TokenIssuer(fake_vault).issue_child_token(num_uses=5)
    assert fake_vault.token_requests == []


def test_missing_auth_block(fake_vault):
    """Test a response without an auth block is an error."""
    fake_vault.token_response = {"data": None}

    with pytest.raises(TokenAuthMissingError):
        TokenIssuer(fake_vault).issue_child_token()


def test_empty_client_token(fake_vault):
    """Test a response with an empty client token is an error."""
    fake_vault.token_response = {"auth": {"client_token": ""}}

    with pytest.raises(EmptyClientTokenError):
        TokenIssuer(fake_vault).issue_child_token()


def test_both_malformed_responses_are_token_errors(fake_vault):
    """Test both malformed responses share the TokenError base class."""
    issuer = TokenIssuer(fake_vault)
    for response in ({}, {"auth": {}}):
        fake_vault.token_response = response
        with pytest.raises(TokenError):
            issuer.issue_child_token()


def test_server_error_propagates(fake_vault):
    """Test server errors are raised unchanged."""
    fake_vault.errors["create_token"] = Forbidden("permission denied")

    with pytest.raises(Forbidden):
        TokenIssuer(fake_vault).issue_child_token()
