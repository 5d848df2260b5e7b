import pytest
from decimal import Decimal

from billing_ledger.domain.money import ZERO, line_amount, money_sum, to_money


class TestMoney:
    def test_none_is_zero(self):
        assert to_money(None) == ZERO

    def test_quantizes_to_cents_half_up(self):
        assert to_money("10.005") == Decimal("10.01")
        assert to_money(Decimal("10.004")) == Decimal("10.00")

    def test_accepts_int_and_str(self):
        assert to_money(5) == Decimal("5.00")
        assert to_money("7.5") == Decimal("7.50")

    def test_rejects_floats(self):
        with pytest.raises(TypeError):
            to_money(0.1)

    def test_line_amount_multiplies_and_rounds(self):
        assert line_amount(Decimal("1.5"), Decimal("33.33")) == Decimal("50.00")

    def test_money_sum(self):
        assert money_sum([Decimal("0.10"), Decimal("0.20"), "0.30"]) == Decimal("0.60")

    def test_money_sum_of_nothing(self):
        assert money_sum([]) == ZERO
