"""Child token issuance."""

import logging
from typing import Any

from .api.interface import Tokener
from .exceptions import EmptyClientTokenError, TokenAuthMissingError

logger = logging.getLogger(__name__)

# One use authenticates, the other performs a single write or read
CHILD_TOKEN_NUM_USES = 2


class TokenIssuer:
    """Issues short-lived child tokens of the API's parent token."""

    def __init__(self, api: Tokener):
        self.api = api

    def issue_child_token(self, **opts: Any) -> str:
        """Create a child token limited to CHILD_TOKEN_NUM_USES uses.

        Args:
            **opts: Extra creation options such as ttl, policies or
                display_name. num_uses is fixed and cannot be overridden.

        Returns:
            The new client token

        Raises:
            TokenAuthMissingError: If the response has no auth block
            EmptyClientTokenError: If the response carries an empty token
            ValueError: If num_uses is passed
        """
        if "num_uses" in opts:
            raise ValueError("num_uses is fixed for child tokens")

        response = self.api.create_token(
            self.api.token_auth(), num_uses=CHILD_TOKEN_NUM_USES, **opts
        )

        auth = (response or {}).get("auth")
        if auth is None:
            logger.error("Token creation response had no auth block")
            raise TokenAuthMissingError("Token creation response had no auth block")

        client_token = auth.get("client_token")
        if not client_token:
            logger.error("Token creation response had an empty client token")
            raise EmptyClientTokenError("Token creation response had an empty client token")

        logger.debug("Issued child token with %d uses", CHILD_TOKEN_NUM_USES)
        return client_token
