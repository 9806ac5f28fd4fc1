"""
Test Quantity
=============
"""

import dataclasses
import math
import pickle
from fractions import Fraction

import numpy as np
import pytest

from dimensional.errors import IncompatibleUnitsError, UnitSpecError, UnitsError, UnknownUnitError
from dimensional.quantity import Q, Quantity
from dimensional.units import CompoundUnit


one = Quantity(1)
three = Quantity(3)
four = Quantity(4)
seven = Quantity(7)
twelve = Quantity(12)

one_meter = Quantity(1, 'meter')
three_meters = Quantity(3, 'meters')
four_meters = Quantity(4, 'meters')
seven_meters = Quantity(7, 'meters')
twelve_meters = Quantity(12, 'meters')
three_inches = Quantity(3, 'inches')


# =============================================================================
# CONSTRUCTION
# =============================================================================

def test_construction():
    assert Quantity(1) == 1
    assert Quantity(1, 'meter') == one_meter
    assert Quantity(1, CompoundUnit('meter')) == one_meter
    assert Q(1, 'm') == one_meter
    assert Quantity(1).units is None
    assert Quantity(1).dimensionless


def test_construction_errors():
    with pytest.raises(TypeError):
        Quantity()
    with pytest.raises(TypeError):
        Quantity('abc')
    with pytest.raises(TypeError):
        Quantity(one_meter)
    with pytest.raises(UnitSpecError):
        Quantity(1, {})
    with pytest.raises(UnknownUnitError):
        Quantity(1, 'foo')


def test_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        one_meter.value = 2
    with pytest.raises(dataclasses.FrozenInstanceError):
        one_meter.units = None


def test_pickle():
    restored = pickle.loads(pickle.dumps(Quantity(9.81, {'meter': 1, 'second': -2})))
    assert restored == Quantity(9.81, {'meter': 1, 'second': -2})


# =============================================================================
# EQUALITY
# =============================================================================

def test_equality():
    assert three == three
    assert three == 3
    assert 3 == three
    assert Quantity(3.5) == 3.5
    assert three_meters == Quantity(3, 'm')
    assert three_meters != three_inches
    assert three_meters != three
    assert three_meters != 3
    assert three_meters != 'three meters'


def test_zero_with_units_equals_zero():
    """Zero guards like `if q == 0` work whatever the units."""
    assert Quantity(0, 'meters') == 0
    assert 0 == Quantity(0, 'meters')
    assert Quantity(0.0, 'inches') == 0
    assert Quantity(0, 'meter') != Quantity(0, 'inch')


def test_hash_matches_equality():
    assert hash(Quantity(0, 'meters')) == hash(0)
    assert hash(three) == hash(3)
    assert len({Quantity(3, 'm'), Quantity(3, 'meters')}) == 1


# =============================================================================
# ARITHMETIC
# =============================================================================

def test_arithmetic_without_units():
    assert three + four == seven
    assert four - three == one
    assert three - four == -one
    assert three * four == twelve
    assert twelve / four == three


def test_arithmetic_with_like_units():
    assert three_meters + four_meters == seven_meters
    assert four_meters - three_meters == one_meter
    assert Quantity(0, 'meters') - four_meters == -four_meters
    assert three_meters * four_meters == Quantity(12, ['meters', 'meters'])


def test_division_cancels_units():
    """Matching units cancel to a bare numeral."""
    result = twelve_meters / three_meters
    assert result == 4
    assert not isinstance(result, Quantity)


def test_zero_dividend_is_bare_zero():
    assert Quantity(0, 'meters') / three_meters == 0
    assert Quantity(0, 'meters') / three_inches == 0
    assert not isinstance(Quantity(0, 'meters') / three_inches, Quantity)


def test_mixed_units_multiply():
    assert three_meters * three_inches == Quantity(9, ['meters', 'inches'])
    assert twelve_meters / Quantity(3, 'seconds') == Quantity(4.0, {'meters': 1, 'seconds': -1})


def test_exponentiation():
    assert three_meters ** 2 == Quantity(9, {'meters': 2})
    assert Quantity(Fraction(3), 'meters') ** 2 == Quantity(Fraction(9), {'meters': 2})
    assert three_meters ** -1 == Quantity(1 / 3, {'meters': -1})
    assert three ** 2 == 9


def test_power_zero_is_bare_one():
    result = three_meters ** 0
    assert result == 1
    assert not isinstance(result, Quantity)


def test_fractional_power():
    assert Quantity(9, {'meter': 2}) ** 0.5 == Quantity(3, 'meter')
    assert Quantity(8, {'meter': 3}) ** Fraction(1, 3) == Quantity(2, 'meter')
    with pytest.raises(UnitsError):
        three_meters ** 0.5


def test_dimensionless_exponent():
    assert 2 ** three == 8
    assert three_meters ** Quantity(2) == Quantity(9, {'meter': 2})
    with pytest.raises(UnitsError):
        2 ** three_meters
    with pytest.raises(UnitsError):
        three_meters ** three_meters


def test_roots():
    assert (three_meters * three_meters).sqrt() == three_meters
    assert Quantity(27, {'meter': 3}).root(3) == three_meters
    assert Quantity(2, {'meter': 2}).sqrt().value == pytest.approx(math.sqrt(2))
    with pytest.raises(UnitsError):
        three_meters.sqrt()


def test_numerals_coerced_into_quantities():
    assert 4 + three_meters == seven_meters
    assert 4 - three_meters == one_meter
    assert 0 - four_meters == -four_meters
    assert 4 * three_meters == twelve_meters


def test_numeral_divided_by_quantity():
    """A bare numeral over a unitful quantity gives the inverse unit."""
    assert 0 / one_meter == 0
    assert 0 / three_meters == 0
    assert 12 / three_meters == Quantity(4.0, {'meters': -1})
    assert Fraction(2) / one_meter == Quantity(Fraction(2), {'meters': -1})


def test_quantity_with_numeral():
    assert three_meters * 4 == twelve_meters
    assert three_meters * four == twelve_meters
    assert twelve_meters / 3 == four_meters
    assert twelve_meters / three == four_meters
    assert one_meter / 2 == Quantity(0.5, 'meter')


def test_floor_division():
    assert Quantity(7, 'meters') // 2 == three_meters
    assert Quantity(7, 'meters') // three_meters == 2
    assert 7 // Quantity(2, 'seconds') == Quantity(3, {'seconds': -1})


def test_add_bare_numeral_to_unitful():
    """The bare side is taken to be in the unitful side's units."""
    assert three_meters + four == seven_meters
    assert four + three_meters == seven_meters
    assert three_meters - three == Quantity(0, 'meters')
    assert three - three_meters == Quantity(0, 'meters')


def test_add_mismatched_units_raises():
    with pytest.raises(IncompatibleUnitsError):
        three_meters + three_inches
    with pytest.raises(IncompatibleUnitsError):
        three_meters - Quantity(4, 'inches')
    with pytest.raises(IncompatibleUnitsError):
        three_meters + Quantity(3, 'mm')


def test_unsupported_operands():
    with pytest.raises(TypeError):
        three_meters + 'three'
    with pytest.raises(TypeError):
        three_meters * object()


def test_unary():
    assert -three_meters == Quantity(-3, 'meters')
    assert +three_meters == three_meters
    assert abs(Quantity(-3, 'meters')) == three_meters
    assert round(Quantity(2.6, 'meters')) == three_meters
    assert bool(Quantity(0, 'meters')) is False
    assert bool(three_meters) is True


# =============================================================================
# BROADCAST
# =============================================================================

def test_broadcast_lists_and_tuples():
    assert three_meters * [1, 2] == [three_meters, Quantity(6, 'meters')]
    assert three_meters + (1, 2) == (four_meters, Quantity(5, 'meters'))
    assert [5, 6] - three_meters == [Quantity(2, 'meters'), three_meters]
    assert [3, 6] * three_meters == [Quantity(9, 'meters'), Quantity(18, 'meters')]


def test_broadcast_numpy():
    """numpy arrays hand the operation to Quantity instead of looping themselves."""
    values = np.array([1, 2])

    left = three_meters * values
    right = values * three_meters

    for result in (left, right):
        assert isinstance(result, np.ndarray)
        assert result.shape == (2,)
        assert result[0] == three_meters
        assert result[1] == Quantity(6, 'meters')


def test_broadcast_rejects_bad_elements():
    with pytest.raises(TypeError):
        three_meters * [1, 'two']


# =============================================================================
# COMPARISON
# =============================================================================

def test_compare_like_units():
    assert three_meters.compare(four_meters) == -1
    assert three_meters.compare(three_meters) == 0
    assert four_meters.compare(three_meters) == 1


def test_compare_bare_numerals():
    assert three_meters.compare(4) == -1
    assert three_meters.compare(3) == 0
    assert four_meters.compare(3) == 1
    assert three.compare(four) == -1


def test_compare_mismatched_units_is_unordered():
    assert three_meters.compare(three_inches) is None


def test_compare_sequences():
    assert three_meters.compare([2, 3, 4]) == [1, 0, -1]
    assert list(three_meters.compare(np.array([2, 3, 4]))) == [1, 0, -1]


def test_compare_unsupported():
    with pytest.raises(TypeError):
        three_meters.compare('three')


def test_rich_comparison():
    assert three_meters < four_meters
    assert four_meters > three_meters
    assert three_meters <= 3
    assert three_meters >= Quantity(3, 'm')
    assert 3 < four_meters
    assert 4 > three_meters
    assert (three_meters < [2, 4]) == [False, True]
    assert list(three_meters < np.array([2, 4])) == [False, True]


def test_rich_comparison_unordered_raises():
    with pytest.raises(TypeError):
        three_meters < three_inches
    with pytest.raises(TypeError):
        three_meters >= Quantity(1, 'second')


def test_sorting():
    values = [four_meters, three_meters, Quantity(0, 'meters')]
    assert sorted(values) == [Quantity(0, 'meters'), three_meters, four_meters]


# =============================================================================
# CONVERSION
# =============================================================================

def test_convert_to_same_unit():
    assert one_meter.convert_to('meters') is one_meter
    assert one_meter.convert_to('m') is one_meter


def test_convert_to_prefixed():
    assert one_meter.convert_to('millimeters') == Quantity(1000, 'mm')
    assert Quantity(100, 'cm').convert_to('mm') == Quantity(1000, 'mm')
    assert Quantity(2500, 'g').convert_to('kg') == Quantity(2.5, 'kg')


def test_convert_to_inches():
    assert one_meter.convert_to('inches') == Quantity(39.3701, 'inches')
    assert Quantity(10, 'meters').convert_to('inch') == Quantity(393.701, 'inch')
    assert Quantity(100, 'cm').convert_to('inches') == Quantity(39.3701, 'inches')


def test_convert_from_inches():
    converted = Quantity(100, 'inches').convert_to('centimeters')
    assert converted.units == CompoundUnit('cm')
    assert converted.value == pytest.approx(254, rel=1e-5)
    assert converted.value != 254  # one scale per unit, no exact in->cm constant


def test_convert_angles():
    assert Quantity(90, 'degrees').convert_to('radians').value == pytest.approx(math.pi / 2)
    assert Quantity(0.5, 'rev').convert_to('deg').value == pytest.approx(180)


def test_convert_time():
    assert Quantity(90, 'minutes').convert_to('hours') == Quantity(1.5, 'hour')
    assert Quantity(2, 'hours').to('s') == 7200


def test_round_trip_conversion():
    original = Quantity(2.5, 'meters')
    for token in ('inch', 'foot', 'yard', 'mile', 'mm', 'km'):
        back = original.convert_to(token).convert_to('meter')
        assert back.units == original.units
        assert back.value == pytest.approx(2.5)


def test_convert_errors():
    with pytest.raises(UnknownUnitError):
        Quantity(100, 'cm').convert_to('foo')
    with pytest.raises(IncompatibleUnitsError):
        Quantity(100, 'cm').convert_to('hertz')
    with pytest.raises(IncompatibleUnitsError):
        Quantity(3).convert_to('meter')
    with pytest.raises(IncompatibleUnitsError):
        Quantity(9, {'meter': 2}).convert_to('inch')


def test_is_unit():
    assert Quantity(90, 'degrees').is_unit('degrees')
    assert one_meter.is_unit('meters')
    assert Quantity(1, 'inch').is_unit('inch')
    assert Quantity(1, 'mm').is_unit('meter')
    assert one_meter.is_unit('second') is False
    assert one.is_unit('meter') is False

    with pytest.raises(UnknownUnitError):
        one_meter.is_unit('foo')
    with pytest.raises(UnknownUnitError):
        one.is_unit('foo')


# =============================================================================
# FORMATTING
# =============================================================================

def test_str():
    assert str(one_meter) == '1 meter'
    assert str(three_meters) == '3 meter'
    assert str(one) == '1'
    assert str(Quantity(9, {'meter': 2})) == '9 meter^2'
    assert str(Quantity(9.81, {'meter': 1, 'second': -2})) == '9.81 meter/second^2'


def test_repr():
    assert repr(one_meter) == "Quantity(1, 'meter')"
    assert repr(one) == 'Quantity(1)'
    assert repr(Quantity(9, {'meter': 2})) == "Quantity(9, {'meter': 2})"


def test_format_plain():
    assert one_meter.format_plain() == '1'
    assert Quantity(2.5, 'inches').format_plain() == '2.5'


def test_format_abbreviated():
    assert Quantity(100, 'centimeters').format_abbreviated() == '100 cm'
    assert Quantity(9.81, {'meter': 1, 'second': -2}).format_abbreviated() == '9.81 m/s^2'
    assert three.format_abbreviated() == '3'


def test_format_spec():
    assert f"{Quantity(1.5, 'm'):.2f}" == '1.50 meter'
    assert f"{Quantity(1.5):.1f}" == '1.5'


def test_parse():
    assert Quantity.parse('4 in') == Quantity(4, 'inch')


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
