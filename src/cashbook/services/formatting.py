"""Display formatting for dates and money in exported reports."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from ..config import BaseConfig


def format_display_date(value: date, config: BaseConfig) -> str:
    return value.strftime(config.DATE_DISPLAY_FORMAT)


def format_plain_amount(amount: Decimal) -> str:
    """Machine-readable decimal with two places, e.g. ``1234.50``."""

    return f"{amount:.2f}"


def format_currency(amount: Decimal, config: BaseConfig) -> str:
    """Locale-style money string, e.g. ``R$ 1.234,50`` with the default config."""

    grouped = f"{abs(amount):,.2f}"
    # Swap separators through a placeholder so "," and "." can trade places.
    localized = (
        grouped.replace(",", "\0")
        .replace(".", config.DECIMAL_SEPARATOR)
        .replace("\0", config.THOUSANDS_SEPARATOR)
    )
    sign = "-" if amount < 0 else ""
    return f"{sign}{config.CURRENCY_SYMBOL} {localized}"


def single_line(text: str | None) -> str:
    """Collapse embedded line breaks to single spaces.

    Uses the same boundaries as ``str.splitlines`` (vertical tab, form feed,
    U+0085 and U+2028 included), so each exported row stays on one line.
    """

    return " ".join(part for part in (text or "").splitlines() if part)


def statement_filename(year: int, month: int, extension: str) -> str:
    return f"statement_{year}_{month:02d}.{extension}"
