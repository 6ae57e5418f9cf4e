"""Counter — the accumulated value a timer publishes."""


class Counter:
    """Holds the counted total, the per-tick step and the default baseline.

    Every value is clamped to be non-negative on assignment.
    """

    def __init__(self, default_value: float = 0.0, effective_value: float = 1.0) -> None:
        self._default_value: float = max(0.0, default_value)
        self._effective_value: float = max(0.0, effective_value)
        self._total: float = self._default_value

    @property
    def total(self) -> float:
        """The counted value, in seconds."""
        return self._total

    @total.setter
    def total(self, value: float) -> None:
        self._total = max(0.0, value)

    @property
    def effective_value(self) -> float:
        """The amount added or subtracted per tick."""
        return self._effective_value

    @effective_value.setter
    def effective_value(self, value: float) -> None:
        self._effective_value = max(0.0, value)

    @property
    def default_value(self) -> float:
        """The baseline the total resets to."""
        return self._default_value

    @default_value.setter
    def default_value(self, value: float) -> None:
        # The running total follows the baseline.
        value = max(0.0, value)
        self.total = self._total + (value - self._default_value)
        self._default_value = value

    def add(self) -> None:
        """Add the effective value to the total."""
        self.total = self._total + self._effective_value

    def subtract(self) -> None:
        """Subtract the effective value from the total."""
        self.total = self._total - self._effective_value

    def reset_total_counted(self) -> None:
        """Reset the total to zero."""
        self._total = 0.0

    def reset_to_default_value(self) -> None:
        """Reset the total to the default value."""
        self._total = self._default_value
