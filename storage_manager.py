"""
Azure Storage gateway with proper error handling and resource cleanup.

This module defines the interface the operations depend on for every remote
call, and its Azure implementation built on the management SDKs (resource
groups, storage accounts, account keys) and the blob data-plane SDK.
"""

import logging
import mimetypes
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, List, Optional

from azure.core.credentials import TokenCredential
from azure.core.exceptions import AzureError
from azure.mgmt.resource import ResourceManagementClient
from azure.mgmt.storage import StorageManagementClient
from azure.mgmt.storage.models import Sku, StorageAccountCreateParameters
from azure.storage.blob import BlobServiceClient, ContentSettings, PublicAccess

from credentials import CredentialManager
from errors import GatewayError, PreconditionError

DEFAULT_SKU = "Standard_LRS"
DEFAULT_PUBLIC_ACCESS = "blob"

logger = logging.getLogger(__name__)


class StorageGateway(ABC):
    """Remote operations against Azure used by the storage commands."""

    @abstractmethod
    def verify_access(self) -> None:
        """Raise PreconditionError unless Azure is reachable and authenticated."""

    @abstractmethod
    def create_resource_group(self, name: str, location: str) -> None: ...

    @abstractmethod
    def create_storage_account(self, name: str, group: str, location: str, sku: str = DEFAULT_SKU) -> None: ...

    @abstractmethod
    def create_container(self, name: str, account: str, key: str, public_access: str = DEFAULT_PUBLIC_ACCESS) -> None: ...

    @abstractmethod
    def list_account_keys(self, account: str, group: str) -> str:
        """Return the first access key of the storage account."""

    @abstractmethod
    def upload_blob(self, container: str, account: str, key: str, local_path: Path, blob_name: str) -> None: ...

    @abstractmethod
    def download_blob(self, container: str, account: str, key: str, blob_name: str, local_path: Path) -> None: ...

    @abstractmethod
    def list_blobs(self, container: str, account: str, key: str) -> List[Dict[str, Any]]:
        """Return one ``{name, size, lastModified}`` row per blob."""

    @abstractmethod
    def show_blob(self, container: str, account: str, key: str, blob_name: str) -> Dict[str, Any]:
        """Return ``{name, size, lastModified, contentType}`` for one blob."""

    @abstractmethod
    def delete_blob(self, container: str, account: str, key: str, blob_name: str) -> None: ...

    @abstractmethod
    def delete_resource_group_async(self, name: str) -> None:
        """Start deleting the resource group without waiting for completion."""


@contextmanager
def _remote(action: str):
    """Translate Azure SDK failures into a GatewayError naming the action."""
    try:
        yield
    except AzureError as e:
        logger.debug(f"Azure call failed while trying to {action}: {e}")
        raise GatewayError(action, _first_line(e)) from e


def _first_line(error: Exception) -> str:
    text = str(error).strip()
    return text.splitlines()[0] if text else type(error).__name__


class AzureStorageGateway(StorageGateway):
    """StorageGateway backed by the Azure SDK for Python."""

    def __init__(self, credential_manager: CredentialManager, subscription_id: Optional[str]):
        """Initialize the gateway; management clients are created on first use."""
        self.credential_manager = credential_manager
        self.subscription_id = subscription_id
        self._resource_client: Optional[ResourceManagementClient] = None
        self._storage_client: Optional[StorageManagementClient] = None

    @property
    def credential(self) -> TokenCredential:
        return self.credential_manager.get_credential()

    @property
    def resource_client(self) -> ResourceManagementClient:
        if self._resource_client is None:
            self._resource_client = ResourceManagementClient(self.credential, self._require_subscription())
        return self._resource_client

    @property
    def storage_client(self) -> StorageManagementClient:
        if self._storage_client is None:
            self._storage_client = StorageManagementClient(self.credential, self._require_subscription())
        return self._storage_client

    def _require_subscription(self) -> str:
        if not self.subscription_id:
            raise PreconditionError(
                "No Azure subscription configured. Please set AZURE_SUBSCRIPTION_ID."
            )
        return self.subscription_id

    @contextmanager
    def get_blob_service(self, account: str, key: str):
        """
        Context manager for a key-authenticated BlobServiceClient with automatic cleanup.

        Yields:
            BlobServiceClient: Client for the storage account
        """
        client = BlobServiceClient(
            account_url=f"https://{account}.blob.core.windows.net",
            credential={"account_name": account, "account_key": key},
        )
        try:
            yield client
        finally:
            client.close()

    def verify_access(self) -> None:
        self._require_subscription()
        if not self.credential_manager.validate_credential(self.credential):
            raise PreconditionError(
                "You are not logged in to Azure. Please log in using 'az login' "
                "or set service principal environment variables."
            )

    def create_resource_group(self, name: str, location: str) -> None:
        with _remote("create resource group"):
            self.resource_client.resource_groups.create_or_update(name, {"location": location})

    def create_storage_account(self, name: str, group: str, location: str, sku: str = DEFAULT_SKU) -> None:
        parameters = StorageAccountCreateParameters(
            sku=Sku(name=sku),
            kind="StorageV2",
            location=location,
            allow_blob_public_access=True,
        )
        with _remote("create storage account"):
            poller = self.storage_client.storage_accounts.begin_create(group, name, parameters)
            poller.result()

    def create_container(self, name: str, account: str, key: str, public_access: str = DEFAULT_PUBLIC_ACCESS) -> None:
        access = PublicAccess.BLOB if public_access == "blob" else PublicAccess.CONTAINER
        with _remote("create blob container"), self.get_blob_service(account, key) as service:
            service.create_container(name, public_access=access)

    def list_account_keys(self, account: str, group: str) -> str:
        with _remote("retrieve storage account key"):
            result = self.storage_client.storage_accounts.list_keys(group, account)
        keys = result.keys or []
        return keys[0].value if keys else ""

    def upload_blob(self, container: str, account: str, key: str, local_path: Path, blob_name: str) -> None:
        content_type, _ = mimetypes.guess_type(str(local_path))
        settings = ContentSettings(content_type=content_type) if content_type else None
        with _remote("upload file"), self.get_blob_service(account, key) as service:
            blob_client = service.get_blob_client(container=container, blob=blob_name)
            with open(local_path, "rb") as data:
                blob_client.upload_blob(data, overwrite=True, content_settings=settings)

    def download_blob(self, container: str, account: str, key: str, blob_name: str, local_path: Path) -> None:
        with _remote("download file"), self.get_blob_service(account, key) as service:
            blob_client = service.get_blob_client(container=container, blob=blob_name)
            stream = blob_client.download_blob()
            with open(local_path, "wb") as target:
                stream.readinto(target)

    def list_blobs(self, container: str, account: str, key: str) -> List[Dict[str, Any]]:
        with _remote("list files"), self.get_blob_service(account, key) as service:
            container_client = service.get_container_client(container)
            return [
                {"name": blob.name, "size": blob.size, "lastModified": blob.last_modified}
                for blob in container_client.list_blobs()
            ]

    def show_blob(self, container: str, account: str, key: str, blob_name: str) -> Dict[str, Any]:
        with _remote("fetch file info"), self.get_blob_service(account, key) as service:
            properties = service.get_blob_client(container=container, blob=blob_name).get_blob_properties()
        return {
            "name": properties.name,
            "size": properties.size,
            "lastModified": properties.last_modified,
            "contentType": properties.content_settings.content_type if properties.content_settings else None,
        }

    def delete_blob(self, container: str, account: str, key: str, blob_name: str) -> None:
        with _remote("delete file"), self.get_blob_service(account, key) as service:
            service.get_blob_client(container=container, blob=blob_name).delete_blob()

    def delete_resource_group_async(self, name: str) -> None:
        with _remote("delete resource group"):
            # No client-side polling; deletion continues server-side.
            self.resource_client.resource_groups.begin_delete(name, polling=False)
