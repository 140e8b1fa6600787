"""
Error taxonomy for Azure Storage Manager operations.

Every error raised here is terminal for the current invocation: the command
dispatcher logs it once and exits with a non-zero status.
"""

from typing import Optional


class StorageToolError(Exception):
    """Base class for all errors surfaced to the operator."""


class PreconditionError(StorageToolError):
    """Azure is unreachable or the operator is not authenticated."""


class NotDeployedError(StorageToolError):
    """No configuration record exists yet."""


class MissingArgumentError(StorageToolError):
    """A required positional argument is absent or empty."""


class SourceFileNotFoundError(StorageToolError, FileNotFoundError):
    """The local file to upload does not exist."""


class CredentialFetchError(StorageToolError):
    """The storage account key could not be obtained or was empty."""


class InvalidSettingError(StorageToolError):
    """An environment setting holds an unsupported value."""


class LogFileNotFoundError(StorageToolError):
    """The operations log has not been written yet."""


class GatewayError(StorageToolError):
    """A remote Azure call failed.

    Attributes:
        action: Human-readable name of the attempted action, e.g. ``"create storage account"``
    """

    def __init__(self, action: str, detail: Optional[str] = None):
        self.action = action
        self.detail = detail
        message = f"Failed to {action}."
        if detail:
            message = f"{message} {detail}"
        super().__init__(message)
