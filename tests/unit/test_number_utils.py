"""Unit tests for numeric helpers"""

import pytest

from credo_analytics.utils.number_utils import round_half_up


@pytest.mark.parametrize(
    "value,digits,expected",
    [
        (2.5, 0, 3),
        (3.5, 0, 4),
        (100.5, 0, 101),
        (2.4999, 0, 2),
        (0.25, 1, 0.3),
        (2.675, 2, 2.68),
        (1000.3, 0, 1000),
        (7, 0, 7),
    ],
)
def test_round_half_up(value, digits, expected):
    assert round_half_up(value, digits) == expected


def test_integer_result_for_zero_digits():
    assert isinstance(round_half_up(2.5), int)
    assert isinstance(round_half_up(2.5, 1), float)
