"""Unit & measurement normalizer: everything to centimetres before arithmetic."""

from .normalize import (
    NormalizationResult,
    NormalizedEase,
    NormalizedInputs,
    NormalizedNeckline,
    NormalizedSleeves,
    gauge_per_cm,
    normalize,
)

__all__ = [
    "NormalizationResult",
    "NormalizedEase",
    "NormalizedInputs",
    "NormalizedNeckline",
    "NormalizedSleeves",
    "gauge_per_cm",
    "normalize",
]
