"""Errors raised by the split and settlement engine."""
from decimal import Decimal
from typing import Optional


class SplitEngineError(Exception):
    code = "SPLIT_ENGINE_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(SplitEngineError):
    """Structurally invalid call: empty participant list, bad amount, malformed record."""

    code = "INVALID_INPUT"


class SplitValidationError(SplitEngineError):
    """
    Input is well formed but breaks a policy rule (amounts or percentages don't add up).
    `discrepancy` is what the caller must add to fix it, when there is one.
    """

    code = "VALIDATION_FAILED"

    def __init__(self, message: str, discrepancy: Optional[Decimal] = None):
        super().__init__(message)
        self.discrepancy = discrepancy
