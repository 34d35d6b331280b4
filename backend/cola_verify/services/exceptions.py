"""Errors raised when a caller breaks the verification engine's contract.

Data-quality problems (unparseable values, unknown extracted fields) never
raise; they degrade to text comparison or not_found verdicts instead.
"""


class VerificationError(ValueError):
    """Base class for caller contract violations."""


class UnknownBeverageTypeError(VerificationError):
    """Beverage type is not one of the registered categories."""

    def __init__(self, beverage_type):
        self.beverage_type = beverage_type
        super().__init__(f"Unknown beverage type: {beverage_type!r}")


class UnknownFieldOverrideError(VerificationError):
    """A specialist override names a field that was not checked."""

    def __init__(self, field_name):
        self.field_name = field_name
        super().__init__(f"No verdict to override for field {field_name!r}")


class BatchTooLargeError(VerificationError):
    """A batch holds more submissions than the configured maximum."""

    def __init__(self, size, max_size):
        self.size = size
        self.max_size = max_size
        super().__init__(f"Batch of {size} exceeds the maximum of {max_size} labels")
