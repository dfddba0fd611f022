from decimal import Decimal

from app.core.money import to_minor_units


def test_whole_amount():
    assert to_minor_units(500) == 50000


def test_float_amount_uses_decimal_representation():
    assert to_minor_units(10.1) == 1010
    assert to_minor_units(19.99) == 1999


def test_half_rounds_up():
    assert to_minor_units(Decimal("10.005")) == 1001
    assert to_minor_units("0.125") == 13
