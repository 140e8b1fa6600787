import json
from datetime import datetime, timezone

import yaml

from display import render_rows

ROWS = [
    {"name": "a.txt", "size": 3, "lastModified": datetime(2026, 10, 17, 10, 0, tzinfo=timezone.utc)},
    {"name": "longer-name.csv", "size": 12345, "lastModified": None},
]


def test_render_table_aligns_columns():
    lines = render_rows(ROWS, "table").splitlines()
    assert lines[0].split() == ["Name", "Size", "LastModified"]
    assert set(lines[1].replace(" ", "")) == {"-"}
    assert lines[2].startswith("a.txt" + " " * 12 + "3")
    assert lines[3].startswith("longer-name.csv  12345")


def test_render_json():
    parsed = json.loads(render_rows(ROWS, "json"))
    assert parsed[0] == {"Name": "a.txt", "Size": 3, "LastModified": "2026-10-17 10:00:00+00:00"}
    assert parsed[1]["LastModified"] is None


def test_render_yaml():
    parsed = yaml.safe_load(render_rows(ROWS, "yaml"))
    assert parsed[1] == {"Name": "longer-name.csv", "Size": 12345, "LastModified": None}


def test_render_tsv():
    assert render_rows(ROWS, "tsv").splitlines() == [
        "a.txt\t3\t2026-10-17 10:00:00+00:00",
        "longer-name.csv\t12345\t",
    ]


def test_render_empty_listing():
    assert render_rows([], "table") == ""
    assert render_rows([], "json") == "[]"
