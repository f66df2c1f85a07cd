"""Output formatters for CLI commands."""

from __future__ import annotations

import json
from typing import Any


class TableFormatter:
    """Format rows as a plain text table."""

    def __init__(self, headers: list[str]) -> None:
        self.headers = headers

    def format(self, rows: list[dict[str, Any]]) -> str:
        if not rows:
            return "(no units)"

        widths = {
            h: max(len(h), *(len(str(row.get(h, ""))) for row in rows)) for h in self.headers
        }
        fmt = "  ".join(f"{{:<{widths[h]}}}" for h in self.headers)

        lines = [fmt.format(*self.headers)]
        lines.append(fmt.format(*["-" * widths[h] for h in self.headers]))
        for row in rows:
            lines.append(fmt.format(*[str(row.get(h, "")) for h in self.headers]))
        return "\n".join(line.rstrip() for line in lines)


class StatusFormatter:
    """Symbols for action outcomes and unit states."""

    STATUS_SYMBOLS = {
        "changed": "[+]",
        "active": "[+]",
        "enabled": "[+]",
        "ok": "[=]",
        "skipped": "[=]",
        "inactive": "[-]",
        "disabled": "[-]",
        "failed": "[!]",
        "unknown": "[?]",
    }

    @classmethod
    def format_status(cls, status: str) -> str:
        symbol = cls.STATUS_SYMBOLS.get(status.lower(), "[?]")
        return f"{symbol} {status}"


def print_table(headers: list[str], rows: list[dict[str, Any]]) -> None:
    print(TableFormatter(headers).format(rows))


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def print_status(name: str, status: str, extra: str = "") -> None:
    """Print a status line."""
    formatted = StatusFormatter.format_status(status)
    if extra:
        print(f"{formatted} {name}: {extra}")
    else:
        print(f"{formatted} {name}")


def print_error(message: str) -> None:
    print(f"[!] {message}")


def print_info(message: str) -> None:
    print(f"[*] {message}")
