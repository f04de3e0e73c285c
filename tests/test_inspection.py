import pytest

from flowline import divider
from flowline.divider import MAX_UINT
from flowline.inspection import (
    DividerFailedError,
    MonotonicBrokenError,
    Opts,
    QuantityCalculationFailedError,
    QuantityNotFoundError,
    QuantityNotNonFatalError,
    QuantityNotPreservedError,
    QuantityNotSuitableError,
    ReferenceBasisCalculationFailedError,
    ReferenceDistributionUnfilledError,
    default_set,
    find_min_non_fatal_quantity,
    find_min_suitable_quantity,
    is_monotonic,
    is_non_fatal_quantity,
    is_quantity_preserved,
    is_suitable_quantity,
)


class _Failure(Exception):
    pass


def divider_failed(quantity, priorities, distribution):
    if quantity != 0:
        raise _Failure("divider failed")


def assert_positive(result):
    assert result.conclusion is None
    assert result.err is None
    assert result.quantity == 0
    assert result.priorities == []
    assert result.ok


def assert_negative(result, conclusion, with_err):
    assert isinstance(result.conclusion, conclusion)
    assert (result.err is not None) is with_err
    assert result.quantity != 0
    assert result.priorities
    assert not result.ok


def test_default_set_not_empty():
    assert len(default_set()) >= 1


def test_default_set_fair():
    expected = [{p: 100 for p in range(1, 11)}]

    for exp, opts in zip(expected, default_set()):
        assert divider.fair(opts.quantity, opts.priorities, {}) == exp


def test_default_set_rate():
    expected = [
        {1: 19, 2: 37, 3: 55, 4: 73, 5: 91, 6: 109, 7: 127, 8: 145, 9: 163, 10: 181}
    ]

    for exp, opts in zip(expected, default_set()):
        assert divider.rate(opts.quantity, opts.priorities, {}) == exp


@pytest.mark.parametrize("div", [divider.fair, divider.rate])
def test_is_quantity_preserved(div):
    assert_positive(is_quantity_preserved(div, default_set()))


def test_is_quantity_preserved_negative_conclusion():
    def overflowing(quantity, priorities, distribution):
        if quantity == 0:
            return
        if len(priorities) == 1:
            distribution[priorities[0]] = quantity
            return
        for priority in priorities:
            distribution[priority] = MAX_UINT

    def wrong(quantity, priorities, distribution):
        for priority in priorities:
            distribution[priority] = quantity

    result = is_quantity_preserved(divider_failed, default_set())
    assert_negative(result, DividerFailedError, True)
    assert isinstance(result.err, _Failure)

    result = is_quantity_preserved(overflowing, default_set())
    assert_negative(result, QuantityCalculationFailedError, True)

    result = is_quantity_preserved(wrong, default_set())
    assert_negative(result, QuantityNotPreservedError, False)


@pytest.mark.parametrize("div", [divider.fair, divider.rate])
def test_is_monotonic(div):
    assert_positive(is_monotonic(div, default_set()))


def test_is_monotonic_negative_conclusion():
    def unmonotonic(quantity, priorities, distribution):
        total = sum(priorities)
        base = quantity / total
        remainder = quantity

        for priority in priorities:
            part = int(base * priority)
            remainder -= part
            distribution[priority] = distribution.get(priority, 0) + part

        distribution[priorities[0]] = distribution.get(priorities[0], 0) + remainder

    assert_negative(is_monotonic(divider_failed, default_set()), DividerFailedError, True)
    assert_positive(is_quantity_preserved(unmonotonic, default_set()))
    assert_negative(is_monotonic(unmonotonic, default_set()), MonotonicBrokenError, False)


@pytest.mark.parametrize("div, expected", [(divider.fair, [10]), (divider.rate, [10])])
def test_find_min_non_fatal_quantity(div, expected):
    for exp, opts in zip(expected, default_set()):
        quantity, result = find_min_non_fatal_quantity(div, opts)
        assert_positive(result)
        assert quantity == exp


def test_find_min_non_fatal_quantity_negative_conclusion():
    for opts in default_set():
        quantity, result = find_min_non_fatal_quantity(divider_failed, opts)
        assert_negative(result, QuantityNotFoundError, False)
        assert quantity == 0

    fatal = Opts(quantity=1, priorities=[3, 2, 1])
    quantity, result = find_min_non_fatal_quantity(divider.fair, fatal)
    assert_negative(result, QuantityNotFoundError, False)
    assert result.quantity == 1
    assert result.priorities == [3, 2, 1]
    assert quantity == 0


@pytest.mark.parametrize("div", [divider.fair, divider.rate])
def test_is_non_fatal_quantity(div):
    for opts in default_set():
        assert_positive(is_non_fatal_quantity(div, opts))


def test_is_non_fatal_quantity_negative_conclusion():
    for opts in default_set():
        assert_negative(is_non_fatal_quantity(divider_failed, opts), DividerFailedError, True)

    fatal = Opts(quantity=1, priorities=[3, 2, 1])
    result = is_non_fatal_quantity(divider.fair, fatal)
    assert_negative(result, QuantityNotNonFatalError, False)


@pytest.mark.parametrize("div, expected", [(divider.fair, [120]), (divider.rate, [644])])
def test_find_min_suitable_quantity(div, expected):
    for exp, opts in zip(expected, default_set()):
        quantity, result = find_min_suitable_quantity(div, opts, 5)
        assert_positive(result)
        assert quantity == exp


def test_find_min_suitable_quantity_negative_conclusion():
    for opts in default_set():
        quantity, result = find_min_suitable_quantity(divider_failed, opts, 5)
        assert_negative(result, QuantityNotFoundError, False)
        assert quantity == 0

    for opts in default_set():
        quantity, result = find_min_suitable_quantity(divider.fair, opts, 0.4)
        assert_negative(result, QuantityNotFoundError, False)
        assert quantity == 0


@pytest.mark.parametrize("div", [divider.fair, divider.rate])
def test_is_suitable_quantity(div):
    for opts in default_set():
        assert_positive(is_suitable_quantity(div, opts, 5))


def test_is_suitable_quantity_negative_conclusion():
    def unfilling(quantity, priorities, distribution):
        return None

    calls = []

    def double(quantity, priorities, distribution):
        calls.append(quantity)
        if len(calls) == 1:
            return divider.fair(quantity, priorities, distribution)
        return divider_failed(quantity, priorities, distribution)

    for opts in default_set():
        assert_negative(is_suitable_quantity(divider_failed, opts, 5), DividerFailedError, True)

    for opts in default_set():
        result = is_suitable_quantity(unfilling, opts, 5)
        assert_negative(result, ReferenceDistributionUnfilledError, False)

    for opts in default_set():
        result = is_suitable_quantity(double, opts, 5)
        assert_negative(result, DividerFailedError, True)
        assert result.quantity == opts.quantity

    for opts in default_set():
        result = is_suitable_quantity(divider.fair, opts, 0.4)
        assert_negative(result, QuantityNotSuitableError, False)


@pytest.mark.parametrize(
    "opts",
    [
        Opts(quantity=1, priorities=[MAX_UINT, 1]),
        Opts(quantity=1, priorities=[MAX_UINT - 1, 1]),
        Opts(quantity=2, priorities=[MAX_UINT // 1000 // 2, 1]),
    ],
)
def test_is_suitable_quantity_reference_overflow(opts):
    result = is_suitable_quantity(divider.fair, opts, 5)
    assert_negative(result, ReferenceBasisCalculationFailedError, True)
    assert isinstance(result.err, OverflowError)
    assert result.priorities == opts.priorities