"""Factory for creating Vault API instances bound to a token."""

import logging

from ..config import VaultConnectionConfig, load_config_from_env
from ..exceptions import ClientCreationError
from ..logging_utils import log_info
from .hvac_api import HvacVaultAPI

logger = logging.getLogger(__name__)


def init_api(
    config: VaultConnectionConfig,
    token: str | None = None,
    check_auth: bool = False,
) -> HvacVaultAPI:
    """Create an HvacVaultAPI whose client is bound to a token.

    Args:
        config: Connection configuration
        token: Token for the client (default: config.parent_token)
        check_auth: Verify the token against the server before returning

    Returns:
        HvacVaultAPI holding the client and the configuration

    Raises:
        ClientCreationError: If the client cannot be created or, with
            check_auth, the token is rejected
    """
    if token is not None:
        config = config.with_token(token)

    api = HvacVaultAPI()
    client = api.new_client(config)
    api.set_token(client, config.parent_token)
    api.set_client(client)
    api.set_config(config)

    if check_auth and not client.is_authenticated():
        raise ClientCreationError(f"Token was rejected by Vault at {config.address}")

    log_info(
        logger,
        "Initialized Vault API",
        address=config.address,
        namespace=config.namespace or "default",
        token=config.parent_token,
    )
    return api


def get_vault_api(**overrides) -> HvacVaultAPI:
    """Create an HvacVaultAPI from VAULT_* environment variables.

    Args:
        **overrides: Connection settings that take precedence over the environment

    Returns:
        HvacVaultAPI bound to VAULT_TOKEN (or the parent_token override)
    """
    return init_api(load_config_from_env(**overrides))
