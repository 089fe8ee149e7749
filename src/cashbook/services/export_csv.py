"""CSV export of the visible ledger rows."""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Iterable

from ..config import BaseConfig
from ..domain.records import TransactionRecord
from .formatting import format_display_date, format_plain_amount, single_line, statement_filename

CSV_HEADERS = ["Date", "Description", "Kind", "Amount"]
CSV_DELIMITER = ";"


def _write_rows(fh, transactions: Iterable[TransactionRecord], config: BaseConfig) -> int:
    # Every field is quoted; embedded quotes are doubled by the csv module.
    writer = csv.writer(
        fh, delimiter=CSV_DELIMITER, quoting=csv.QUOTE_ALL, doublequote=True, lineterminator="\n"
    )
    writer.writerow(CSV_HEADERS)
    count = 0
    for tx in transactions:
        writer.writerow(
            [
                format_display_date(tx.date, config),
                single_line(tx.description),
                tx.kind.value,
                format_plain_amount(tx.amount),
            ]
        )
        count += 1
    return count


def render_transactions_csv(
    *, transactions: Iterable[TransactionRecord], config: BaseConfig
) -> str:
    """Return the CSV document as text (header plus one line per record)."""

    buffer = io.StringIO()
    _write_rows(buffer, transactions, config)
    return buffer.getvalue()


def export_transactions_csv(
    *,
    transactions: Iterable[TransactionRecord],
    output_dir: Path,
    year: int,
    month: int,
    config: BaseConfig,
) -> Path:
    """Write ``statement_<year>_<MM>.csv`` into ``output_dir`` and return its path."""

    output_path = Path(output_dir) / statement_filename(year, month, "csv")
    output_path.parent.mkdir(parents=True, exist_ok=True)

    # Use newline='' for csv on Windows
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        _write_rows(fh, transactions, config)

    return output_path
