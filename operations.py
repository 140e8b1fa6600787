"""
Storage commands: deployment, blob operations and cleanup.

Each public method of StorageOperations implements one CLI command. Errors are
raised as StorageToolError subclasses and left for the dispatcher to report.
"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import identity as identity_generator
from config import ToolSettings
from config_store import ConfigurationRecord, ConfigurationStore, Credential, fetch_credential
from display import DisplayManager
from errors import LogFileNotFoundError, MissingArgumentError, NotDeployedError, SourceFileNotFoundError
from stg_logger import OperationLogger
from storage_manager import StorageGateway


class StorageOperations:
    """Executes storage commands against a single persisted deployment."""

    def __init__(
        self,
        settings: ToolSettings,
        store: ConfigurationStore,
        gateway_factory: Callable[[], StorageGateway],
        logger: OperationLogger,
        display: DisplayManager,
        prompt: Callable[[str], str] = input,
    ):
        self.settings = settings
        self.store = store
        self._gateway_factory = gateway_factory
        self.logger = logger
        self.display = display
        self.prompt = prompt

    @property
    def gateway(self) -> StorageGateway:
        return self._gateway_factory()

    def _fresh_credential(self, record: ConfigurationRecord) -> Credential:
        return fetch_credential(self.gateway, record.identity)

    def deploy(self) -> ConfigurationRecord:
        self.logger.log("Starting Azure Storage deployment...")
        self.gateway.verify_access()
        self.logger.log("User is logged in to Azure.")

        identity = identity_generator.generate(location=self.settings.location)

        self.logger.log(f"Creating Resource Group: {identity.resource_group}")
        self.gateway.create_resource_group(identity.resource_group, identity.location)

        self.logger.log(f"Creating Storage Account: {identity.storage_account}")
        self.gateway.create_storage_account(
            identity.storage_account, identity.resource_group, identity.location
        )

        self.logger.log(f"Creating Blob Container: {identity.container}")
        credential = fetch_credential(self.gateway, identity)
        self.gateway.create_container(
            identity.container, identity.storage_account, credential.access_key
        )

        self.store.save(identity, credential)
        self.logger.log("Deployment completed successfully.")
        return ConfigurationRecord(identity, credential)

    def upload(self, file_path: str, blob_name: Optional[str] = None) -> str:
        """
        Upload a local file, overwriting any blob of the same name.

        Args:
            file_path: Local file to upload
            blob_name: Target blob name, defaults to the file's base name

        Returns:
            str: Public URL of the uploaded blob
        """
        source = Path(file_path)
        if not source.is_file():
            raise SourceFileNotFoundError(f"File {file_path} does not exist.")
        blob_name = blob_name or source.name

        record = self.store.load()
        credential = self._fresh_credential(record)
        identity = record.identity

        self.logger.log(f"Uploading file {file_path} -> {blob_name} to container {identity.container}")
        self.gateway.upload_blob(
            identity.container, identity.storage_account, credential.access_key, source, blob_name
        )

        public_url = identity_generator.public_blob_url(identity.storage_account, identity.container, blob_name)
        self.logger.log(f"File uploaded Successfully to: {public_url}")
        self.display.print_plain(f"Public URL: {public_url}")
        return public_url

    def download(self, blob_name: str, local_path: Optional[str] = None) -> Path:
        if not blob_name:
            raise MissingArgumentError("No blob name provided. Usage: azurestorage download <blob-name> [local-filename]")
        target = Path(local_path) if local_path else Path(".") / blob_name

        record = self.store.load()
        credential = self._fresh_credential(record)
        identity = record.identity

        self.logger.log(f"Downloading blob {blob_name} from container {identity.container} to {target}")
        target.parent.mkdir(parents=True, exist_ok=True)
        self.gateway.download_blob(
            identity.container, identity.storage_account, credential.access_key, blob_name, target
        )
        self.logger.log(f"File downloaded successfully to: {target}")
        return target

    def list(self) -> List[Dict[str, Any]]:
        record = self.store.load()
        credential = self._fresh_credential(record)
        identity = record.identity
        output_format = self.settings.output_format

        header = f"Listing files in container: {identity.container}"
        self.logger.log(header)
        self.logger.log(f"Using output format: {output_format}")

        rows = self.gateway.list_blobs(identity.container, identity.storage_account, credential.access_key)
        self.display.print_header(header)
        self.display.print_rows(rows, output_format)
        return rows

    def info(self, blob_name: str) -> Dict[str, Any]:
        if not blob_name:
            raise MissingArgumentError("No blob name provided. Usage: azurestorage info <blob>")

        record = self.store.load()
        credential = self._fresh_credential(record)
        identity = record.identity

        self.logger.log(f"Fetching info for file: {blob_name} in container {identity.container}")
        details = self.gateway.show_blob(
            identity.container, identity.storage_account, credential.access_key, blob_name
        )
        self.display.print_record(details)
        return details

    def delete(self, blob_name: str) -> None:
        if not blob_name:
            raise MissingArgumentError("No blob name provided. Usage: azurestorage delete <blob>")

        record = self.store.load()
        credential = self._fresh_credential(record)
        identity = record.identity

        self.logger.log(f"Deleting file: {blob_name} from container {identity.container}")
        self.gateway.delete_blob(identity.container, identity.storage_account, credential.access_key, blob_name)
        self.logger.log(f"File {blob_name} deleted successfully.")

    def cleanup(self) -> bool:
        """
        Delete the whole deployment after interactive confirmation.

        Remote deletion is only started; the local record is removed without
        waiting for Azure to finish.

        Returns:
            bool: True if cleanup was started, False if the operator declined
        """
        if not self.store.exists():
            raise NotDeployedError("Configuration file not found. Nothing to clean up.")
        record = self.store.load(refresh_credential=False)
        identity = record.identity
        self.gateway.verify_access()

        self.logger.log("Cleanup process started.")
        self.display.print_warning(
            f"WARNING: This will delete the Resource Group: {identity.resource_group} and all associated resources."
        )
        self.display.print_plain(f"- Resource Group: {identity.resource_group}")
        self.display.print_plain(f"- Storage Account: {identity.storage_account}")
        self.display.print_plain(f"- Container Name: {identity.container}")
        self.display.print_plain()

        try:
            confirmation = self.prompt("Are you sure you want to proceed? (yes/no): ")
        except EOFError:
            # closed stdin reads as an empty reply
            confirmation = ""
        if confirmation != "yes":
            self.logger.log("Cleanup aborted by user.")
            return False

        self.gateway.delete_resource_group_async(identity.resource_group)
        self.store.delete()
        self.logger.log(
            "Cleanup initiated. Resource group deletion has been started and may take some time to complete."
        )
        return True

    def logs(self) -> str:
        log_file = self.logger.log_file
        if not log_file.is_file():
            raise LogFileNotFoundError("Log file not found.")
        content = log_file.read_text(encoding="utf-8")
        self.display.print_info(f"Displaying log file: {log_file}")
        self.display.print_plain(content.rstrip("\n"))
        return content
