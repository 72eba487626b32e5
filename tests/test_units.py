import pytest

from parktrack.util.units import meters_to_feet, mps_to_kph, mps_to_mph, round_half_up


@pytest.mark.parametrize(
    "x, ndigits, expected",
    [(2.5, 0, 3), (3.5, 0, 4), (-2.5, 0, -2), (2.49, 0, 2),
     (0.125, 2, 0.13), (1.0625, 3, 1.063), (100.1234, 2, 100.12), (0.0, 2, 0.0)],
)
def test_round_half_up(x, ndigits, expected):
    assert round_half_up(x, ndigits) == expected


def test_round_half_up_whole_numbers_are_ints():
    assert isinstance(round_half_up(2.5), int)


def test_conversions():
    assert mps_to_kph(10) == pytest.approx(36.0)
    assert mps_to_mph(10) == pytest.approx(22.37)
    assert meters_to_feet(100) == pytest.approx(328.084)
