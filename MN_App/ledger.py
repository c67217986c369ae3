"""
Token-distribution ledger reader.

Ledger files are CSV exports whose leading rows may hold free-form metadata.
Account rows start at the first "ID Label" header row; columns are

    0 id label, 1 allocation, 2 (unused), 3 address, 4 cliff months, 5 vesting months
"""

from __future__ import annotations

import csv
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional

from MN_Tool_Box.errors import LedgerError

logger = logging.getLogger(__name__)

HEADER_LABEL = "ID Label"
MIN_COLUMNS = 6
EMPTY_MONTHS = {"", "-"}
_MONTHS_RE = re.compile(r"^[+-]?[0-9]+$")


@dataclass(frozen=True)
class LedgerRecord:
    label: str
    allocation: str
    address: str
    cliff: int
    vesting: int
    path: Optional[str] = None
    row: Optional[int] = None


def collect_files(path: str | Path) -> List[Path]:
    """A single ledger file, or every file below a directory in sorted order."""
    root = Path(path)
    if not root.exists():
        raise LedgerError("accounts path does not exist", path=str(root))
    if root.is_file():
        return [root]

    files: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for name in sorted(filenames):
            files.append(Path(dirpath) / name)
    return files


def sanitize_token_alloc(text: str) -> str:
    return text.replace(",", "").strip()


def parse_months(text: str, column: str, path: Optional[str] = None, row: Optional[int] = None) -> int:
    value = text.strip()
    if value in EMPTY_MONTHS:
        return 0
    if not _MONTHS_RE.match(value):
        raise LedgerError(f"failed to parse {column} ({text})", path=path, row=row)
    return int(value)


def _is_header(cells: List[str]) -> bool:
    return bool(cells) and cells[0].strip().lower() == HEADER_LABEL.lower()


def iter_records(rows: List[List[str]], path: Optional[str] = None) -> Iterator[LedgerRecord]:
    start = next((i for i, cells in enumerate(rows) if _is_header(cells)), 0)

    for index in range(start, len(rows)):
        cells = rows[index]
        row_number = index + 1
        if not cells or not cells[0].strip() or _is_header(cells):
            continue
        if len(cells) < MIN_COLUMNS:
            raise LedgerError(
                f"expected at least {MIN_COLUMNS} columns, got {len(cells)}", path=path, row=row_number
            )

        yield LedgerRecord(
            label=cells[0].strip(),
            allocation=sanitize_token_alloc(cells[1]),
            address=cells[3].strip(),
            cliff=parse_months(cells[4], "vesting cliff", path, row_number),
            vesting=parse_months(cells[5], "vesting", path, row_number),
            path=path,
            row=row_number,
        )


def read_ledger(path: str | Path) -> List[LedgerRecord]:
    ledger_path = Path(path)
    try:
        with open(ledger_path, "r", encoding="utf-8-sig", newline="") as f:
            rows = list(csv.reader(f))
    except (OSError, csv.Error, UnicodeDecodeError) as e:
        raise LedgerError(f"failed to parse account file CSV: {e}", path=str(ledger_path)) from e
    return list(iter_records(rows, str(ledger_path)))


def read_ledgers(path: str | Path) -> Iterator[LedgerRecord]:
    for ledger_file in collect_files(path):
        logger.info("Generate accounts from: %s", ledger_file)
        yield from read_ledger(ledger_file)
