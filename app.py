"""
Main Azure Storage Manager application and command dispatcher.

This module wires settings, logging, the configuration store and the Azure
gateway together, and maps each command line to exactly one storage operation.
"""

import os
import sys
from pathlib import Path
from typing import Callable, Dict, List, NamedTuple, Optional

from config import DEFAULT_LOG_FILE, ConfigurationManager, ToolSettings
from config_store import ConfigurationStore
from credentials import CredentialManager
from display import DisplayManager
from errors import StorageToolError
from operations import StorageOperations
from stg_logger import OperationLogger
from storage_manager import AzureStorageGateway, StorageGateway

PROG = "azurestorage"


class Command(NamedTuple):
    min_args: int
    max_args: int
    usage: str


COMMANDS: Dict[str, Command] = {
    "deploy": Command(0, 0, "deploy"),
    "upload": Command(1, 2, "upload <filename> [blob-name]"),
    "download": Command(1, 2, "download <blob-name> [local-filename]"),
    "list": Command(0, 0, "list"),
    "info": Command(1, 1, "info <blob-name>"),
    "delete": Command(1, 1, "delete <blob-name>"),
    "logs": Command(0, 0, "logs"),
    "cleanup": Command(0, 0, "cleanup"),
}
HELP_COMMANDS = ("help", "--help", "-h")

USAGE = f"""Azure Cloud File Storage Manager
Usage: {PROG} <command> [args...]
Commands:
  deploy                 Deploy Azure storage resources
  upload <file> [name]   Upload a file to Azure storage
  download <blob> [path] Download a file from Azure storage
  list                   List files in the Azure storage container
  info <blob>            Show information about a blob/file in Azure storage
  delete <blob>          Delete a blob from Azure storage
  logs                   Show operation logs
  cleanup                Clean up all deployed Azure resources
  help                   Show this help message

Environment Variables:
  AZURE_OUTPUT_FORMAT    Output format for 'list' (table, json, tsv, yaml)
  AZURE_SUBSCRIPTION_ID  Subscription used to deploy and manage resources

Example:
  {PROG} deploy
  {PROG} upload myfile.txt
  {PROG} download myfile.txt ./downloaded_myfile.txt
  {PROG} list
  {PROG} info myfile.txt
  {PROG} delete myfile.txt
  {PROG} logs
  {PROG} cleanup"""


class AzureStorageApplication:
    """Main application class that dispatches commands to storage operations."""

    def __init__(
        self,
        settings: ToolSettings,
        gateway_factory: Optional[Callable[[], StorageGateway]] = None,
        prompt: Callable[[str], str] = input,
    ):
        """Initialize the application with all necessary components."""
        self.settings = settings
        self.display = DisplayManager()
        self.logger = OperationLogger(settings.log_file, settings.azure_log_level.value)
        self._gateway_factory = gateway_factory or self._azure_gateway
        self._gateway: Optional[StorageGateway] = None
        self.store = ConfigurationStore(settings.config_file, self.get_gateway, self.logger)
        self.operations = StorageOperations(
            settings, self.store, self.get_gateway, self.logger, self.display, prompt
        )

    def _azure_gateway(self) -> StorageGateway:
        return AzureStorageGateway(CredentialManager(), self.settings.subscription_id)

    def get_gateway(self) -> StorageGateway:
        """Build the gateway on first use so local-only commands never reach Azure."""
        if self._gateway is None:
            self._gateway = self._gateway_factory()
        return self._gateway

    def usage(self) -> None:
        self.display.print_plain(USAGE)

    def run(self, argv: List[str]) -> int:
        """
        Execute one command.

        Args:
            argv: Command name followed by its positional arguments

        Returns:
            int: Process exit status
        """
        name = argv[0] if argv else ""
        args = argv[1:]

        if name in HELP_COMMANDS:
            self.usage()
            return 0

        command = COMMANDS.get(name)
        if command is None:
            self.logger.error(f"Unknown command: {name or 'none provided'}")
            self.usage()
            return 1

        if len(args) < command.min_args:
            self.logger.error(f"Usage: {PROG} {command.usage}")
            return 1

        try:
            self._dispatch(name, args[: command.max_args])
        except StorageToolError as e:
            self.logger.error(str(e))
            return 1
        except KeyboardInterrupt:
            self.logger.error("Operation cancelled by user")
            return 1
        return 0

    def _dispatch(self, name: str, args: List[str]) -> None:
        ops = self.operations
        if name == "deploy":
            ops.deploy()
        elif name == "upload":
            ops.upload(*args)
        elif name == "download":
            ops.download(*args)
        elif name == "list":
            ops.list()
        elif name == "info":
            ops.info(args[0])
        elif name == "delete":
            ops.delete(args[0])
        elif name == "logs":
            ops.logs()
        elif name == "cleanup":
            ops.cleanup()

    def close(self) -> None:
        self.logger.close()


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the application."""
    argv = sys.argv[1:] if argv is None else argv
    try:
        settings = ConfigurationManager().get_settings()
    except StorageToolError as e:
        # Settings are invalid, so only the log path from the environment is trusted.
        logger = OperationLogger(Path(os.getenv("AZURE_STORAGE_LOG_FILE", DEFAULT_LOG_FILE)))
        logger.error(str(e))
        logger.close()
        sys.exit(1)

    app = AzureStorageApplication(settings)
    try:
        code = app.run(argv)
    except Exception as e:
        app.logger.error(f"Fatal error: {e}")
        code = 1
    finally:
        app.close()
    sys.exit(code)


if __name__ == "__main__":
    main()
