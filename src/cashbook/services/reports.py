"""Statement exports: paginated PDF table plus the exporter facade."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages
from matplotlib.figure import Figure

from ..config import BaseConfig
from ..domain.records import TransactionKind, TransactionRecord
from ..logging_config import get_logger
from . import export_csv
from .formatting import format_currency, format_display_date, single_line, statement_filename
from .ledger_service import FilterState

logger = get_logger(__name__)

PDF_HEADERS = ["Date", "Description", "Kind", "Amount"]
_COLUMN_WIDTHS = [0.16, 0.52, 0.12, 0.20]
_DESCRIPTION_LIMIT = 60
_KIND_COLORS = {TransactionKind.INFLOW: "#15803D", TransactionKind.OUTFLOW: "#B91C1C"}
_A4_PORTRAIT = (8.27, 11.69)


def _pdf_row(tx: TransactionRecord, config: BaseConfig) -> list[str]:
    description = single_line(tx.description)
    if len(description) > _DESCRIPTION_LIMIT:
        description = description[: _DESCRIPTION_LIMIT - 1] + "…"
    return [
        format_display_date(tx.date, config),
        description,
        tx.kind.value.capitalize(),
        format_currency(tx.amount, config),
    ]


def paginate(rows: Sequence[TransactionRecord], per_page: int) -> list[Sequence[TransactionRecord]]:
    """Split rows into pages; an empty statement still yields one page."""

    per_page = max(1, per_page)
    if not rows:
        return [[]]
    return [rows[start : start + per_page] for start in range(0, len(rows), per_page)]


def build_statement_page(
    *,
    transactions: Sequence[TransactionRecord],
    filters: FilterState,
    config: BaseConfig,
    page_number: int,
    page_count: int,
) -> Figure:
    """Render one page: title line, colored header band and the data rows."""

    fig, ax = plt.subplots(figsize=_A4_PORTRAIT)
    ax.axis("off")

    fig.text(0.06, 0.955, config.REPORT_TITLE, fontsize=16, fontweight="bold", color="#1F2937")
    subtitle = f"{filters.month:02d}/{filters.year}"
    if filters.search_text:
        subtitle += f'  ·  search: "{filters.search_text}"'
    fig.text(0.06, 0.935, subtitle, fontsize=9, color="#6B7280")
    fig.text(0.94, 0.935, f"Page {page_number} of {page_count}", fontsize=9, color="#6B7280", ha="right")

    cell_text = [_pdf_row(tx, config) for tx in transactions] or [["", "No entries", "", ""]]
    table = ax.table(
        cellText=cell_text,
        colLabels=PDF_HEADERS,
        colWidths=_COLUMN_WIDTHS,
        cellLoc="left",
        loc="upper center",
    )
    table.auto_set_font_size(False)
    table.set_fontsize(8)
    table.scale(1, 1.35)

    for col in range(len(PDF_HEADERS)):
        header = table[(0, col)]
        header.set_facecolor(config.REPORT_HEADER_COLOR)
        header.set_text_props(color="white", fontweight="bold")
        header.set_edgecolor(config.REPORT_HEADER_COLOR)

    for row_index, tx in enumerate(transactions, start=1):
        amount_cell = table[(row_index, 3)]
        amount_cell.set_text_props(
            color=_KIND_COLORS[tx.kind], fontweight="bold", horizontalalignment="right"
        )
        if row_index % 2 == 0:
            for col in range(len(PDF_HEADERS)):
                table[(row_index, col)].set_facecolor("#F3F4F6")

    return fig


def export_transactions_pdf(
    *,
    transactions: Iterable[TransactionRecord],
    filters: FilterState,
    output_dir: Path,
    config: BaseConfig,
) -> Path:
    """Write ``statement_<year>_<MM>.pdf`` with one page per overflow of rows."""

    rows = list(transactions)
    output_path = Path(output_dir) / statement_filename(filters.year, filters.month, "pdf")
    output_path.parent.mkdir(parents=True, exist_ok=True)

    pages = paginate(rows, config.REPORT_ROWS_PER_PAGE)
    metadata = {"Title": f"{config.REPORT_TITLE} {filters.month:02d}/{filters.year}", "Creator": config.APP_NAME}
    with PdfPages(output_path, metadata=metadata) as pdf:
        for number, chunk in enumerate(pages, start=1):
            fig = build_statement_page(
                transactions=chunk,
                filters=filters,
                config=config,
                page_number=number,
                page_count=len(pages),
            )
            pdf.savefig(fig)
            plt.close(fig)
    return output_path


class ReportExporter:
    """Writes statements for whatever rows it is handed at call time."""

    def __init__(self, config: BaseConfig):
        self.config = config

    def _target_dir(self, output_dir: Path | None) -> Path:
        return Path(output_dir) if output_dir is not None else self.config.EXPORT_DIR

    def export_csv(
        self,
        transactions: Iterable[TransactionRecord],
        filters: FilterState,
        output_dir: Path | None = None,
    ) -> Path:
        path = export_csv.export_transactions_csv(
            transactions=transactions,
            output_dir=self._target_dir(output_dir),
            year=filters.year,
            month=filters.month,
            config=self.config,
        )
        logger.info("CSV statement written", extra={"path": str(path)})
        return path

    def export_pdf(
        self,
        transactions: Iterable[TransactionRecord],
        filters: FilterState,
        output_dir: Path | None = None,
    ) -> Path:
        path = export_transactions_pdf(
            transactions=transactions,
            filters=filters,
            output_dir=self._target_dir(output_dir),
            config=self.config,
        )
        logger.info("PDF statement written", extra={"path": str(path)})
        return path
