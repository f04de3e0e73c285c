from functools import cmp_to_key

import pytest

from flowline.divider import rate
from flowline.priority import DividerBadError, compare, divide

MAX_UINT = 2**64 - 1


def _wrong(quantity, priorities, distribution):
    for priority in priorities:
        distribution[priority] = quantity


def test_compare():
    assert compare(1, 2) == 1
    assert compare(2, 1) == -1
    assert compare(3, 3) == 0

    priorities = [2, 1, 3, 5, 4, 3]
    assert sorted(priorities, key=cmp_to_key(compare)) == [5, 4, 3, 3, 2, 1]


def test_divide_correct():
    assert divide(rate, 6, [3, 2, 1], {}) == {3: 3, 2: 2, 1: 1}
    assert divide(rate, 0, [3, 2, 1], {}) == {3: 0, 2: 0, 1: 0}


def test_divide_divider_error():
    with pytest.raises(OverflowError):
        divide(rate, 6, [MAX_UINT, 2, 1], {})


@pytest.mark.parametrize("quantity", [MAX_UINT, 6])
def test_divide_bad_divider(quantity):
    with pytest.raises(DividerBadError):
        divide(_wrong, quantity, [3, 2, 1], {})