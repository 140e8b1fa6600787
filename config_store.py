"""
Persistence of the single deployment record.

The record lives in one flat ``KEY=value`` text file. ``deploy`` overwrites it,
``cleanup`` removes it, and every other command reads it.
"""

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from errors import CredentialFetchError, GatewayError, NotDeployedError
from identity import DEFAULT_LOCATION, ResourceIdentity
from stg_logger import OperationLogger
from storage_manager import StorageGateway

IDENTITY_KEYS = ("RESOURCE_GROUP", "STORAGE_ACCOUNT", "CONTAINER_NAME")


@dataclass(frozen=True)
class Credential:
    """Storage account access key. Never empty."""
    access_key: str

    def __post_init__(self):
        if not self.access_key:
            raise CredentialFetchError("Failed to retrieve storage account key.")


@dataclass(frozen=True)
class ConfigurationRecord:
    identity: ResourceIdentity
    credential: Optional[Credential] = None


def fetch_credential(gateway: StorageGateway, identity: ResourceIdentity) -> Credential:
    """Ask Azure for the current account key of a deployment."""
    try:
        key = gateway.list_account_keys(identity.storage_account, identity.resource_group)
    except GatewayError as e:
        raise CredentialFetchError(str(e)) from e
    return Credential(key)


class ConfigurationStore:
    """Owns the configuration file; nothing else reads or writes it."""

    def __init__(self, path: Path, gateway_factory, logger: OperationLogger):
        """
        Initialize the store.

        Args:
            path: Location of the configuration file
            gateway_factory: Zero-argument callable returning the StorageGateway,
                             only invoked when a cached key has to be re-fetched
            logger: Operations logger
        """
        self.path = Path(path)
        self._gateway_factory = gateway_factory
        self.logger = logger

    def exists(self) -> bool:
        return self.path.is_file()

    def save(self, identity: ResourceIdentity, credential: Credential) -> None:
        """Replace the record atomically with the given identity and key."""
        content = "".join(
            f"{key}={value}\n"
            for key, value in (
                ("RESOURCE_GROUP", identity.resource_group),
                ("STORAGE_ACCOUNT", identity.storage_account),
                ("CONTAINER_NAME", identity.container),
                ("LOCATION", identity.location),
                ("ACCOUNT_KEY", credential.access_key),
            )
        )
        directory = self.path.parent
        directory.mkdir(parents=True, exist_ok=True)
        # mkstemp creates the file with owner-only permissions.
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                tmp.write(content)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        self.logger.log(f"Configurations saved to {self.path}")

    def load(self, refresh_credential: bool = True) -> ConfigurationRecord:
        """
        Read the record, re-fetching the account key if none is cached.

        Args:
            refresh_credential: Whether an empty cached key is fetched from Azure

        Returns:
            ConfigurationRecord: The persisted deployment

        Raises:
            NotDeployedError: If no record exists
            CredentialFetchError: If the key re-fetch fails
        """
        if not self.exists():
            raise NotDeployedError(
                "Configuration file not found. Please deploy first using: azurestorage deploy"
            )
        values = self._read()
        missing = [key for key in IDENTITY_KEYS if not values.get(key)]
        if missing:
            raise NotDeployedError(
                f"Configuration file {self.path} is incomplete (missing {', '.join(missing)}). "
                "Please deploy again."
            )

        identity = ResourceIdentity(
            resource_group=values["RESOURCE_GROUP"],
            storage_account=values["STORAGE_ACCOUNT"],
            container=values["CONTAINER_NAME"],
            location=values.get("LOCATION") or DEFAULT_LOCATION,
        )
        self.logger.log(f"Configurations loaded from {self.path}")

        key = values.get("ACCOUNT_KEY", "")
        if key:
            return ConfigurationRecord(identity, Credential(key))
        if not refresh_credential:
            return ConfigurationRecord(identity)

        credential = fetch_credential(self._gateway_factory(), identity)
        self.logger.log("Fetched storage account key dynamically.")
        return ConfigurationRecord(identity, credential)

    def delete(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass

    def _read(self) -> Dict[str, str]:
        values: Dict[str, str] = {}
        with open(self.path, encoding="utf-8") as handle:
            for raw in handle:
                line = raw.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                values[key.strip()] = value.strip()
        return values
