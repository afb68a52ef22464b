"""validator — Input Validator public API."""

from knitcalc.validator.validate import validate

__all__ = ["validate"]
