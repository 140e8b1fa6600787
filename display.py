"""
Display management for console output formatting and colors.

This module provides a centralized way to handle console output with consistent
formatting, colors, and icons for different message types, and renders blob
listings in the output formats the list command supports.
"""

import json
from typing import Any, Dict, List, Sequence

import yaml
from colorama import Fore, Style, init as colorama_init

# Column headings for the fields returned by list and info.
COLUMN_TITLES = {
    "name": "Name",
    "size": "Size",
    "lastModified": "LastModified",
    "contentType": "ContentType",
}


class DisplayManager:
    """Handles console output formatting and colors."""

    def __init__(self):
        """Initialize colorama for cross-platform color support."""
        colorama_init(autoreset=True)

    @staticmethod
    def print_error(content: str) -> None:
        """Print content in red color for errors."""
        print(f"{Fore.RED}❌ {content}{Style.RESET_ALL}")

    @staticmethod
    def print_success(content: str) -> None:
        """Print content in green color for success messages."""
        print(f"{Fore.GREEN}✅ {content}{Style.RESET_ALL}")

    @staticmethod
    def print_info(content: str) -> None:
        """Print content in blue color for informational messages."""
        print(f"{Fore.BLUE}{content}{Style.RESET_ALL}")

    @staticmethod
    def print_warning(content: str) -> None:
        """Print content in yellow color for warnings."""
        print(f"{Fore.YELLOW}⚠️  {content}{Style.RESET_ALL}")

    @staticmethod
    def print_plain(content: str = "") -> None:
        print(content)

    def print_header(self, header: str) -> None:
        """Print a heading underlined with '=' to its own width."""
        self.print_plain(header)
        self.print_plain("=" * len(header))

    def print_rows(self, rows: List[Dict[str, Any]], output_format: str) -> None:
        self.print_plain(render_rows(rows, output_format))

    def print_record(self, record: Dict[str, Any]) -> None:
        self.print_plain(json.dumps(_titled(record), indent=2, default=str))


def _titled(row: Dict[str, Any]) -> Dict[str, Any]:
    return {COLUMN_TITLES.get(key, key): _plain(value) for key, value in row.items()}


def _plain(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    # datetimes and SDK enums
    return str(value)


def render_rows(rows: Sequence[Dict[str, Any]], output_format: str) -> str:
    """
    Render list results the way the Azure CLI does for each output format.

    Args:
        rows: Records sharing the same keys
        output_format: One of table, json, tsv, yaml

    Returns:
        str: Rendered text, without a trailing newline
    """
    titled = [_titled(row) for row in rows]
    if output_format == "json":
        return json.dumps(titled, indent=2)
    if output_format == "yaml":
        return yaml.safe_dump(titled, sort_keys=False).rstrip("\n")
    if output_format == "tsv":
        return "\n".join(
            "\t".join("" if value is None else str(value) for value in row.values())
            for row in titled
        )
    return _render_table(titled)


def _render_table(rows: List[Dict[str, Any]]) -> str:
    if not rows:
        return ""
    headers = list(rows[0].keys())
    cells = [["" if row.get(h) is None else str(row.get(h)) for h in headers] for row in rows]
    widths = [
        max(len(header), *(len(line[idx]) for line in cells))
        for idx, header in enumerate(headers)
    ]
    lines = [
        "  ".join(header.ljust(width) for header, width in zip(headers, widths)).rstrip(),
        "  ".join("-" * width for width in widths),
    ]
    for line in cells:
        lines.append("  ".join(cell.ljust(width) for cell, width in zip(line, widths)).rstrip())
    return "\n".join(lines)
