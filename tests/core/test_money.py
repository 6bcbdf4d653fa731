from src.shared.utils.money import cents_or_zero, payment_rate


class TestCentsOrZero:
    """Tests for cents_or_zero function."""

    def test_none_is_zero(self):
        assert cents_or_zero(None) == 0

    def test_amount_kept(self):
        assert cents_or_zero(1500) == 1500
        assert cents_or_zero(0) == 0


class TestPaymentRate:
    """Tests for payment_rate function."""

    def test_partial_payment(self):
        assert payment_rate(900, 1500) == 0.6

    def test_nothing_invoiced_is_exactly_zero(self):
        """No invoiced amount never divides by zero."""
        assert payment_rate(0, 0) == 0.0
        assert payment_rate(500, 0) == 0.0

    def test_overpaid_exceeds_one(self):
        assert payment_rate(1200, 1000) == 1.2
