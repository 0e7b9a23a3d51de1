"""Domain errors"""

from typing import Any


class InvalidArgument(ValueError):
    """Raised when a backoff or geo parameter is out of range.

    Attributes:
        param_name: Name of the offending parameter
        value: Value that was passed
        constraint: Human-readable constraint, e.g. ">= 0ms"
    """

    def __init__(self, param_name: str, value: Any, constraint: str):
        self.param_name = param_name
        self.value = value
        self.constraint = constraint
        super().__init__(f"{param_name} should be {constraint} (got {value!r})")
