"""
Azure credential management with fallback authentication strategies.

This module provides Azure authentication using ChainedTokenCredential so the
tool works with a service principal from the environment, an existing
`az login` session, or a managed identity.
"""

import logging

from azure.identity import (
    AzureCliCredential,
    ChainedTokenCredential,
    EnvironmentCredential,
    ManagedIdentityCredential,
)
from azure.core.exceptions import ClientAuthenticationError
from azure.core.credentials import TokenCredential

MANAGEMENT_SCOPE = "https://management.azure.com/.default"

logger = logging.getLogger(__name__)


class CredentialManager:
    """Manages Azure authentication credentials with fallback strategies."""

    def __init__(self):
        self._credential = None

    def get_credential(self) -> TokenCredential:
        """
        Get Azure credential with fallback strategy.

        Returns:
            TokenCredential: Azure credential for authentication
        """
        if self._credential is None:
            self._credential = ChainedTokenCredential(
                # Service principal via environment variables
                EnvironmentCredential(),
                # Session created with `az login`
                AzureCliCredential(),
                # For Azure-hosted scenarios
                ManagedIdentityCredential(),
            )
        return self._credential

    def validate_credential(self, credential: TokenCredential) -> bool:
        """
        Validate credential by attempting to get a management token.

        Args:
            credential: The credential to validate

        Returns:
            bool: True if credential is valid, False otherwise
        """
        try:
            token = credential.get_token(MANAGEMENT_SCOPE)
        except ClientAuthenticationError as e:
            logger.debug(f"Credential validation failed: {e}")
            return False
        logger.debug(f"Credential validated. Token expires at: {token.expires_on}")
        return True
