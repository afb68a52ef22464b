"""yarn — Yarn Estimator public API."""

from knitcalc.yarn.estimator import estimate

__all__ = ["estimate"]
