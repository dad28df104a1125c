"""Tests for balance based direction resolution."""

from decimal import Decimal

import pytest

from bank_ocr_parser.parsers.models import TransactionType
from bank_ocr_parser.parsers.reconciliation import (
    DEFAULT_TOLERANCE,
    UNKNOWN_DIRECTION,
    reconcile_directions,
    reconcile_step,
)

D = Decimal


def rows(*pairs):
    return [(D(amount), D(balance)) for amount, balance in pairs]


class TestReconcileStep:
    """Test cases for reconcile_step."""

    def test_debit(self):
        """Test that a balance drop equal to the amount is a debit."""
        direction = reconcile_step(D("1000.00"), D("100.00"), D("900.00"))
        assert direction.type is TransactionType.DEBIT
        assert direction.reconciled is True

    def test_credit(self):
        """Test that a balance rise equal to the amount is a credit."""
        direction = reconcile_step(D("900.00"), D("150.00"), D("1050.00"))
        assert direction.type is TransactionType.CREDIT
        assert direction.reconciled is True

    def test_tolerance_accepts_one_paisa(self):
        """Test that a difference of exactly 0.01 still matches."""
        direction = reconcile_step(D("1000.00"), D("100.00"), D("900.01"))
        assert direction.type is TransactionType.DEBIT
        assert direction.reconciled is True

    def test_tolerance_rejects_two_paise(self):
        """Test that a difference of 0.02 falls back to the balance change."""
        direction = reconcile_step(D("1000.00"), D("100.00"), D("900.02"))
        assert direction.type is TransactionType.DEBIT
        assert direction.reconciled is False

    def test_fallback_credit(self):
        """Test that an unmatched balance rise falls back to credit."""
        direction = reconcile_step(D("1000.00"), D("100.00"), D("1500.00"))
        assert direction.type is TransactionType.CREDIT
        assert direction.reconciled is False

    def test_custom_tolerance(self):
        """Test that a wider tolerance accepts larger noise."""
        direction = reconcile_step(D("1000.00"), D("100.00"), D("905.00"), D("5.00"))
        assert direction.type is TransactionType.DEBIT
        assert direction.reconciled is True

    def test_exact_decimal_arithmetic(self):
        """Test that amounts are compared without float rounding error."""
        direction = reconcile_step(D("0.30"), D("0.10"), D("0.20"), D("0"))
        assert direction.type is TransactionType.DEBIT
        assert direction.reconciled is True

    def test_negative_amount_is_treated_as_magnitude(self):
        """Test that a signed amount is reconciled by its magnitude."""
        direction = reconcile_step(D("1000.00"), D("-100.00"), D("900.00"))
        assert direction.type is TransactionType.DEBIT


class TestReconcileDirections:
    """Test cases for reconcile_directions."""

    def test_three_record_sequence(self):
        """Test balances 1000, 900, 1050 with amounts 100 and 150."""
        directions = reconcile_directions(rows(
            ("100.00", "1000.00"),
            ("100.00", "900.00"),
            ("150.00", "1050.00"),
        ))
        assert [d.type for d in directions] == [
            TransactionType.DEBIT,
            TransactionType.DEBIT,
            TransactionType.CREDIT,
        ]

    def test_first_record_takes_direction_of_next_step(self):
        """Test that record 0 inherits the direction of the 0 to 1 step."""
        directions = reconcile_directions(rows(("100.00", "500.00"), ("100.00", "400.00")))
        assert directions[0].type is TransactionType.DEBIT
        assert directions[1].type is TransactionType.DEBIT

    def test_first_record_credit_lookahead(self):
        """Test lookahead when the second record is a credit."""
        directions = reconcile_directions(rows(("50.00", "500.00"), ("200.00", "700.00")))
        assert directions[0].type is TransactionType.CREDIT

    def test_single_record_is_unknown(self):
        """Test that a lone record cannot be resolved."""
        assert reconcile_directions(rows(("100.00", "500.00"))) == [UNKNOWN_DIRECTION]

    def test_empty(self):
        """Test that no rows yield no directions."""
        assert reconcile_directions([]) == []

    def test_one_direction_per_row(self):
        """Test that output length always matches input length."""
        data = rows(*[("10.00", str(1000 - 10 * i)) for i in range(7)])
        assert len(reconcile_directions(data)) == 7

    def test_default_tolerance(self):
        """Test the default tolerance value."""
        assert DEFAULT_TOLERANCE == D("0.01")

    @pytest.mark.parametrize("balance, reconciled", [
        ("900.01", True),
        ("899.99", True),
        ("900.02", False),
        ("899.98", False),
    ])
    def test_tolerance_boundary_in_sequence(self, balance, reconciled):
        """Test the tolerance boundary when resolving a sequence."""
        directions = reconcile_directions(rows(("1.00", "1000.00"), ("100.00", balance)))
        assert directions[1].type is TransactionType.DEBIT
        assert directions[1].reconciled is reconciled
