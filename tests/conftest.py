import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app import AzureStorageApplication  # noqa: E402
from config import ToolSettings  # noqa: E402
from errors import GatewayError  # noqa: E402
from storage_manager import StorageGateway  # noqa: E402

ACCOUNT_KEY = "c2VjcmV0LWtleQ=="


class FakeGateway(StorageGateway):
    """In-memory Azure stand-in that records every call."""

    def __init__(self, key: str = ACCOUNT_KEY):
        self.key = key
        self.calls: List[str] = []
        self.blobs: Dict[str, bytes] = {}
        self.fail_on: Dict[str, str] = {}
        self.deleted_groups: List[str] = []

    def _call(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            raise GatewayError(self.fail_on[name])

    def verify_access(self) -> None:
        self._call("verify_access")

    def create_resource_group(self, name, location):
        self._call("create_resource_group")

    def create_storage_account(self, name, group, location, sku="Standard_LRS"):
        self._call("create_storage_account")

    def create_container(self, name, account, key, public_access="blob"):
        self._call("create_container")

    def list_account_keys(self, account, group):
        self._call("list_account_keys")
        return self.key

    def upload_blob(self, container, account, key, local_path, blob_name):
        self._call("upload_blob")
        self.blobs[blob_name] = Path(local_path).read_bytes()

    def download_blob(self, container, account, key, blob_name, local_path):
        self._call("download_blob")
        Path(local_path).write_bytes(self.blobs[blob_name])

    def list_blobs(self, container, account, key) -> List[Dict[str, Any]]:
        self._call("list_blobs")
        return [
            {"name": name, "size": len(data), "lastModified": "2026-10-17T10:00:00+00:00"}
            for name, data in self.blobs.items()
        ]

    def show_blob(self, container, account, key, blob_name) -> Dict[str, Any]:
        self._call("show_blob")
        return {
            "name": blob_name,
            "size": len(self.blobs[blob_name]),
            "lastModified": "2026-10-17T10:00:00+00:00",
            "contentType": "application/pdf",
        }

    def delete_blob(self, container, account, key, blob_name):
        self._call("delete_blob")
        self.blobs.pop(blob_name, None)

    def delete_resource_group_async(self, name):
        # Returns immediately; the group is still "deleting" remotely.
        self._call("delete_resource_group_async")
        self.deleted_groups.append(name)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def settings(tmp_path):
    return ToolSettings(
        config_file=tmp_path / "azure_storage.config",
        log_file=tmp_path / "storage_operations.log",
        subscription_id="00000000-0000-0000-0000-000000000000",
    )


@pytest.fixture
def answers():
    """Replies fed to the cleanup confirmation prompt."""
    return []


@pytest.fixture
def app(settings, gateway, answers, capsys):
    # capsys first, so the console log handler binds to the captured stdout
    application = AzureStorageApplication(
        settings, gateway_factory=lambda: gateway, prompt=lambda _: answers.pop(0)
    )
    yield application
    application.close()


@pytest.fixture
def deployed(app, gateway):
    app.operations.deploy()
    gateway.calls.clear()
    return app
