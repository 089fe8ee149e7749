"""Tests for ledger value types and normalization helpers."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from cashbook.domain.records import (
    NewTransaction,
    TransactionKind,
    TransactionPatch,
    as_calendar_date,
    normalize_amount,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("40", Decimal("40.00")),
        ("12.345", Decimal("12.35")),
        (Decimal("7.1"), Decimal("7.10")),
        (3, Decimal("3.00")),
        ("-15.5", Decimal("15.50")),
        ("abc", Decimal("0.00")),
        ("", Decimal("0.00")),
        (None, Decimal("0.00")),
        ("NaN", Decimal("0.00")),
        ("Infinity", Decimal("0.00")),
        ("12,50", Decimal("0.00")),
        ("1e30", Decimal("0.00")),
        ("123456789012345678901234567890", Decimal("0.00")),
        (Decimal("-1E+40"), Decimal("0.00")),
    ],
)
def test_normalize_amount(raw, expected):
    assert normalize_amount(raw) == expected


def test_as_calendar_date_accepts_datetime_and_iso_text():
    assert as_calendar_date(datetime(2025, 1, 5, 23, 59)) == date(2025, 1, 5)
    assert as_calendar_date("2025-01-05T10:00:00") == date(2025, 1, 5)
    assert as_calendar_date(date(2024, 2, 29)) == date(2024, 2, 29)
    with pytest.raises(ValueError):
        as_calendar_date("05/01/2025")


def test_kind_parse_and_sign():
    assert TransactionKind.parse("INFLOW") is TransactionKind.INFLOW
    assert TransactionKind.parse(TransactionKind.OUTFLOW) is TransactionKind.OUTFLOW
    assert TransactionKind.INFLOW.sign == 1
    assert TransactionKind.OUTFLOW.sign == -1
    with pytest.raises(ValueError):
        TransactionKind.parse("transfer")


def test_signed_amount_follows_kind(record_factory):
    assert record_factory(1, kind="inflow", amount=100).signed_amount == Decimal("100.00")
    assert record_factory(2, kind="outflow", amount=40).signed_amount == Decimal("-40.00")


def test_patch_merge_only_touches_present_fields(record_factory):
    original = record_factory(5, "2025-03-01", "outflow", 20, "Bus")
    merged = original.merged(TransactionPatch(description="Train"))

    assert merged.description == "Train"
    assert merged.amount == original.amount
    assert merged.date == original.date
    assert merged.id == 5
    assert original.description == "Bus"


def test_new_transaction_build_normalizes_inputs():
    entry = NewTransaction.build(
        description="Coffee", amount="not a number", kind="OUTFLOW", occurred_on="2025-06-02"
    )
    assert entry.amount == Decimal("0.00")
    assert entry.kind is TransactionKind.OUTFLOW
    assert entry.date == date(2025, 6, 2)
