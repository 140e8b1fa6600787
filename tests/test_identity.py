import re
from datetime import datetime

import identity

STORAGE_ACCOUNT_NAME = re.compile(r"^[a-z0-9]{3,24}$")
CONTAINER_NAME = re.compile(r"^[a-z0-9](?:[a-z0-9-]{1,61}[a-z0-9])$")


def test_generate_uses_timestamp_suffix():
    generated = identity.generate(datetime(2026, 10, 17, 9, 5, 3))
    assert generated.resource_group == "GROUP2TECH-20261017090503"
    assert generated.storage_account == "g2store20261017090503"
    assert generated.container == "g2files20261017090503"
    assert generated.location == "uksouth"


def test_generated_names_satisfy_azure_naming_rules():
    generated = identity.generate(datetime(2099, 12, 31, 23, 59, 59))
    assert STORAGE_ACCOUNT_NAME.match(generated.storage_account)
    assert CONTAINER_NAME.match(generated.container)


def test_generate_differs_across_seconds():
    first = identity.generate(datetime(2026, 1, 1, 0, 0, 0))
    second = identity.generate(datetime(2026, 1, 1, 0, 0, 1))
    assert first.storage_account != second.storage_account
    assert first.resource_group != second.resource_group


def test_generate_honours_location():
    assert identity.generate(location="westeurope").location == "westeurope"


def test_public_blob_url():
    url = identity.public_blob_url("g2store1", "g2files1", "report.pdf")
    assert url == "https://g2store1.blob.core.windows.net/g2files1/report.pdf"
