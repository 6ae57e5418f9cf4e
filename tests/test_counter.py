"""Tests for the Counter."""

from magictimer.core.counter import Counter


class TestCounter:
    """add/subtract/reset operate on the total in place."""

    def test_initial_total_is_default(self) -> None:
        assert Counter().total == 0.0
        assert Counter(default_value=5.0).total == 5.0

    def test_add_and_subtract_use_effective_value(self) -> None:
        counter = Counter(effective_value=2.5)
        counter.add()
        counter.add()
        assert counter.total == 5.0
        counter.subtract()
        assert counter.total == 2.5

    def test_subtract_never_goes_negative(self) -> None:
        counter = Counter(effective_value=3.0)
        counter.total = 2.0
        counter.subtract()
        assert counter.total == 0.0

    def test_reset_total_counted(self) -> None:
        counter = Counter(default_value=4.0)
        counter.add()
        counter.reset_total_counted()
        assert counter.total == 0.0

    def test_reset_to_default_value(self) -> None:
        counter = Counter(default_value=4.0)
        counter.add()
        counter.reset_to_default_value()
        assert counter.total == 4.0

    def test_direct_assignment(self) -> None:
        counter = Counter()
        counter.total = 42.5
        assert counter.total == 42.5


class TestCounterClamping:
    """Every assigned value is clamped to be non-negative."""

    def test_negative_total_is_clamped(self) -> None:
        counter = Counter()
        counter.total = -10.0
        assert counter.total == 0.0

    def test_negative_effective_value_is_clamped(self) -> None:
        counter = Counter()
        counter.effective_value = -1.0
        assert counter.effective_value == 0.0

    def test_negative_default_value_is_clamped(self) -> None:
        counter = Counter(default_value=-3.0)
        assert counter.default_value == 0.0
        assert counter.total == 0.0

    def test_changing_default_shifts_total_by_difference(self) -> None:
        counter = Counter(default_value=2.0)
        counter.add()
        counter.default_value = 5.0
        assert counter.total == 6.0
        assert counter.default_value == 5.0
