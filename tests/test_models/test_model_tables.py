"""Tests for lookups, assumptions and input models."""

from dataclasses import FrozenInstanceError, replace
from datetime import date, datetime

import pytest

from property_cashflow.models import (
    CashflowAssumptions,
    CashflowInput,
    DEFAULT_ASSUMPTIONS,
    JURISDICTION_RATES,
    Jurisdiction,
    LoanType,
    LoanTypeDefaults,
    ServicingMode,
    UNKNOWN_REGION_RATES,
    get_jurisdiction_rates,
    normalize_label,
    parse_report_date,
)


class TestJurisdictionLookup:
    """Tests for jurisdiction resolution."""

    @pytest.mark.parametrize("code", ["NSW", "nsw", " Nsw ", Jurisdiction.NSW])
    def test_parse_known(self, code):
        assert Jurisdiction.parse(code) == Jurisdiction.NSW

    @pytest.mark.parametrize("code", ["", None, "XYZ", "New South Wales"])
    def test_parse_unknown(self, code):
        assert Jurisdiction.parse(code) is None

    def test_every_jurisdiction_has_rates(self):
        assert set(JURISDICTION_RATES) == set(Jurisdiction)
        for jurisdiction, rates in JURISDICTION_RATES.items():
            assert rates.code == jurisdiction.value
            assert not rates.is_fallback

    def test_unknown_code_gets_fallback(self):
        rates = get_jurisdiction_rates("XYZ")

        assert rates is UNKNOWN_REGION_RATES
        assert rates.is_fallback
        assert rates.management_fee_pct == JURISDICTION_RATES[Jurisdiction.NSW].management_fee_pct

    def test_last_bracket_is_open_ended(self):
        for rates in JURISDICTION_RATES.values():
            assert rates.duty_brackets[-1].upper_bound == float("inf")

    def test_brackets_are_ascending(self):
        for rates in JURISDICTION_RATES.values():
            bounds = [b.upper_bound for b in rates.duty_brackets]
            assert bounds == sorted(bounds)

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            JURISDICTION_RATES[Jurisdiction.NSW] = UNKNOWN_REGION_RATES
        with pytest.raises(FrozenInstanceError):
            JURISDICTION_RATES[Jurisdiction.NSW].landlord_insurance = 0


class TestAssumptions:
    """Tests for the default assumptions."""

    @pytest.mark.parametrize("value, expected", [
        ("smsf", LoanType.SMSF),
        ("SMSF", LoanType.SMSF),
        ("self-managed super fund", LoanType.SMSF),
        ("standard", LoanType.STANDARD),
        ("", LoanType.STANDARD),
        (None, LoanType.STANDARD),
        (LoanType.SMSF, LoanType.SMSF),
    ])
    def test_loan_type_parse(self, value, expected):
        assert LoanType.parse(value) == expected

    def test_loan_type_defaults(self):
        standard = DEFAULT_ASSUMPTIONS.for_loan_type(LoanType.STANDARD)
        smsf = DEFAULT_ASSUMPTIONS.for_loan_type(LoanType.SMSF)

        assert standard.servicing == ServicingMode.INTEREST_ONLY
        assert standard.tax_bracket == 0.37
        assert smsf.servicing == ServicingMode.PRINCIPAL_AND_INTEREST
        assert smsf.tax_bracket == 0.0

    def test_expense_labels(self):
        assert ServicingMode.INTEREST_ONLY.expense_label == "Total Expenses (Interest Only)"
        assert (
            ServicingMode.PRINCIPAL_AND_INTEREST.expense_label
            == "Total Expenses (Principal & Interest)"
        )

    def test_invalid_loan_defaults_rejected(self):
        with pytest.raises(ValueError):
            LoanTypeDefaults(0.06, 0.06, 0, 0.37, ServicingMode.INTEREST_ONLY)
        with pytest.raises(ValueError):
            LoanTypeDefaults(6.0, 0.06, 30, 0.37, ServicingMode.INTEREST_ONLY)

    def test_invalid_assumptions_rejected(self):
        with pytest.raises(ValueError):
            CashflowAssumptions(default_deposit_pct=20)
        with pytest.raises(ValueError):
            CashflowAssumptions(weeks_per_year=0)
        with pytest.raises(ValueError):
            CashflowAssumptions(loan_types={})

    def test_assumptions_are_frozen(self):
        with pytest.raises(FrozenInstanceError):
            DEFAULT_ASSUMPTIONS.legal_fees = 0

    def test_replace_for_what_if(self):
        cheaper = replace(DEFAULT_ASSUMPTIONS, buyers_agency_fee=0.0)
        assert cheaper.buyers_agency_fee == 0.0
        assert DEFAULT_ASSUMPTIONS.buyers_agency_fee == 15_000


class TestCashflowInput:
    """Tests for building inputs from form data."""

    def test_defaults_are_blank(self):
        inputs = CashflowInput()
        assert inputs.purchase_price is None
        assert inputs.as_of is None

    def test_from_mapping_camel_case(self):
        inputs = CashflowInput.from_mapping({
            "purchasePrice": "$600,000",
            "buyersAgencyFee": "0",
            "interestOnlyRate": "6.1",
        })

        assert inputs.purchase_price == "$600,000"
        assert inputs.buyers_agency_fee == "0"
        assert inputs.interest_only_rate == "6.1"

    def test_from_mapping_aliases(self):
        inputs = CashflowInput.from_mapping({"price": 500_000, "ioRate": 6, "legals": 1_800})

        assert inputs.purchase_price == 500_000
        assert inputs.interest_only_rate == 6
        assert inputs.legal_fees == 1_800

    def test_snake_case_wins_over_alias(self):
        inputs = CashflowInput.from_mapping({"purchase_price": 1, "price": 2})
        assert inputs.purchase_price == 1

    def test_bare_deposit_key_is_ignored(self):
        """"deposit" is a dollar amount on forms, not the deposit percentage."""
        inputs = CashflowInput.from_mapping({"deposit": "$120,000"})
        assert inputs.deposit_pct is None

    def test_deposit_percent_key(self):
        assert CashflowInput.from_mapping({"depositPercent": "10%"}).deposit_pct == "10%"

    @pytest.mark.parametrize("value, expected", [
        (None, None),
        ("", None),
        ("   ", None),
        (" Outgoings ", "Outgoings"),
        (2026, "2026"),
    ])
    def test_normalize_label(self, value, expected):
        assert normalize_label(value) == expected

    def test_blank_expense_label_is_none(self):
        assert CashflowInput.from_mapping({"expenseLabel": "  "}).expense_label is None
        assert CashflowInput.from_mapping({"expenseLabel": " Outgoings "}).expense_label == "Outgoings"

    def test_report_date_parsed(self):
        inputs = CashflowInput.from_mapping({"reportDate": "16/10/2026"})
        assert inputs.as_of == date(2026, 10, 16)


class TestParseReportDate:

    @pytest.mark.parametrize("value, expected", [
        ("16/10/2026", date(2026, 10, 16)),
        ("2026-01-31", date(2026, 1, 31)),
        ("1 March 2026", date(2026, 3, 1)),
        (date(2026, 5, 4), date(2026, 5, 4)),
        (datetime(2026, 5, 4, 12, 0), date(2026, 5, 4)),
    ])
    def test_valid_dates(self, value, expected):
        assert parse_report_date(value) == expected

    @pytest.mark.parametrize("value", [None, "", "   ", "not a date"])
    def test_invalid_dates(self, value):
        assert parse_report_date(value) is None
