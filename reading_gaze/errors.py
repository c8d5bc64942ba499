"""Error types raised at the configuration boundary."""
from __future__ import annotations


class InvalidConfigurationError(ValueError):
    """A configuration value would produce meaningless geometry or timing.

    Degenerate *data* (no samples, no fixations, empty text) is never an
    error; only invalid settings supplied by the caller are.
    """

    def __init__(self, field: str, value, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field}={value!r}: {reason}")
