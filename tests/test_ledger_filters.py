"""Tests for view derivation and balance aggregation."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from cashbook.services import ledger_service
from cashbook.services.ledger_service import FilterState
from cashbook.services.ledger_store import LedgerStore


@pytest.fixture
def store(example_records, record_factory) -> LedgerStore:
    extra = [
        record_factory(4, "2024-01-20", "inflow", 999, "Salary last year"),
        record_factory(5, "2025-01-10", "outflow", "12.50", "Coffee with SALARY talk"),
    ]
    return LedgerStore([*example_records.values(), *extra])


def test_filtered_view_matches_month_and_year(example_records):
    store = LedgerStore(example_records.values())
    view = ledger_service.filtered_view(store.records, FilterState(month=1, year=2025))
    assert [r.id for r in view] == [2, 1]


def test_search_is_case_insensitive_substring(store):
    view = ledger_service.filtered_view(
        store.records, FilterState(month=1, year=2025, search_text="salary")
    )
    assert [r.id for r in view] == [5, 2]


@pytest.mark.parametrize("search", ["", "salary", "zzz", "  "])
def test_period_membership_is_independent_of_search(store, search):
    filters = FilterState(month=1, year=2025, search_text=search)
    month_ids = [r.id for r in ledger_service.month_view(store.records, 1, 2025)]
    view_ids = [r.id for r in ledger_service.filtered_view(store.records, filters)]

    assert month_ids == [5, 2, 1]
    assert set(view_ids) <= set(month_ids)
    assert view_ids == [i for i in month_ids if i in view_ids], "canonical order preserved"


def test_scoped_and_global_sums(example_records):
    records = LedgerStore(example_records.values()).records

    assert ledger_service.scoped_sum(records, 1, 2025) == Decimal("60.00")
    assert ledger_service.global_sum(records) == Decimal("110.00")
    assert ledger_service.scoped_sum(records, 3, 2025) == Decimal("0.00")


def test_scoped_sum_ignores_search_text(store):
    assert ledger_service.scoped_sum(store.records, 1, 2025) == Decimal("47.50")


def test_compute_summary(example_records):
    summary = ledger_service.compute_summary(example_records.values())
    assert summary == {
        "income": Decimal("150.00"),
        "expenses": Decimal("40.00"),
        "net": Decimal("110.00"),
    }


def test_filter_state_defaults_and_validation():
    current = FilterState.current(today=date(2025, 7, 14))
    assert (current.month, current.year, current.search_text) == (7, 2025, "")
    assert current.with_search(None).search_text == ""
    assert current.with_period(12, 2024).month == 12

    with pytest.raises(ValueError):
        FilterState(month=13, year=2025)
    with pytest.raises(ValueError):
        FilterState(month=0, year=2025)
