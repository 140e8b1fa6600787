"""
Resource naming for new deployments.

Names are derived from a second-resolution timestamp so that repeated deploys
produce distinct resource groups, storage accounts and containers.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

RESOURCE_GROUP_PREFIX = "GROUP2TECH-"
STORAGE_ACCOUNT_PREFIX = "g2store"
CONTAINER_PREFIX = "g2files"
DEFAULT_LOCATION = "uksouth"
TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


@dataclass(frozen=True)
class ResourceIdentity:
    """
    Names of the Azure resources that make up one deployment.

    Attributes:
        resource_group: Resource group holding the storage account
        storage_account: Storage account name (lowercase alphanumeric, 3-24 chars)
        container: Blob container name
        location: Azure region the resources are created in
    """
    resource_group: str
    storage_account: str
    container: str
    location: str = DEFAULT_LOCATION


def generate(now: Optional[datetime] = None, location: str = DEFAULT_LOCATION) -> ResourceIdentity:
    """Build a fresh identity from the current wall-clock time."""
    timestamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    return ResourceIdentity(
        resource_group=f"{RESOURCE_GROUP_PREFIX}{timestamp}",
        storage_account=f"{STORAGE_ACCOUNT_PREFIX}{timestamp}",
        container=f"{CONTAINER_PREFIX}{timestamp}",
        location=location,
    )


def public_blob_url(storage_account: str, container: str, blob_name: str) -> str:
    return f"https://{storage_account}.blob.core.windows.net/{container}/{blob_name}"
