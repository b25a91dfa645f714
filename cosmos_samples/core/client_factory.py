"""
Cosmos DB client construction.

Builds sync and async ``CosmosClient`` instances from ``AccountConfig``,
authenticating with the account key or with an Azure AD credential.
"""

import logging
from typing import Any, Dict, Optional

from azure.cosmos import CosmosClient
from azure.cosmos.aio import CosmosClient as AsyncCosmosClient
from azure.identity import DefaultAzureCredential
from azure.identity.aio import DefaultAzureCredential as AsyncDefaultAzureCredential

from ..common.exceptions import ConfigurationError
from .config_manager import AccountConfig, AuthMode

logger = logging.getLogger(__name__)


def _client_options(account: AccountConfig) -> Dict[str, Any]:
    options: Dict[str, Any] = {
        "consistency_level": _value(account.consistency_level),
        "preferred_locations": list(account.preferred_regions),
    }
    if not account.connection_verify:
        options["connection_verify"] = False
    return options


def _value(setting: Any) -> Any:
    return getattr(setting, "value", setting)


def resolve_credential(account: AccountConfig, credential: Optional[Any] = None) -> Any:
    """
    Pick the credential a client is built with.

    An explicit credential wins. Otherwise key auth needs ``account.key``
    and AAD auth has no default here, since sync and async samples need
    different credential types.

    Raises:
        ConfigurationError: If no usable credential is available
    """
    if credential is not None:
        return credential

    if _value(account.auth) == AuthMode.AAD.value:
        raise ConfigurationError(
            "AAD authentication requires a token credential",
            setting="account.auth",
        )

    if not account.key:
        raise ConfigurationError(
            "Account key is not set; use ACCOUNT_KEY or --key",
            setting="account.key",
        )
    return account.key


def build_client(account: AccountConfig, credential: Optional[Any] = None) -> CosmosClient:
    """
    Create a sync client.

    Args:
        account: Account settings
        credential: Token credential, owned and closed by the caller;
            defaults to the account key

    Returns:
        CosmosClient instance
    """
    logger.info(f"Using Azure Cosmos DB endpoint: {account.endpoint}")
    return CosmosClient(
        account.endpoint,
        credential=resolve_credential(account, credential),
        **_client_options(account),
    )


def build_async_client(account: AccountConfig, credential: Optional[Any] = None) -> AsyncCosmosClient:
    """
    Create an async client.

    The caller owns ``credential`` and closes it after the client.
    """
    logger.info(f"Using Azure Cosmos DB endpoint: {account.endpoint}")
    return AsyncCosmosClient(
        account.endpoint,
        credential=resolve_credential(account, credential),
        **_client_options(account),
    )


def build_credential() -> DefaultAzureCredential:
    """Passwordless credential for the sync client."""
    logger.info("Using DefaultAzureCredential for passwordless access")
    return DefaultAzureCredential()


def build_async_credential() -> AsyncDefaultAzureCredential:
    """Passwordless credential for the async client."""
    logger.info("Using DefaultAzureCredential for passwordless access")
    return AsyncDefaultAzureCredential()
