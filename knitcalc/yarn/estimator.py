"""
Yarn estimator: metres (and grams, when the weight is known) of yarn for the
total knitted surface.

    raw_length_m = surface_area_m2 * factor_m_per_m2
    length_m     = raw_length_m * (1 + buffer)

The factor comes from the yarn weight table, falling back to the default
factor when the category is unset or unknown. The safety buffer is never
allowed to reduce the estimate.
"""

from __future__ import annotations

from knitcalc.reference import ReferenceData, get_reference_data
from knitcalc.schemas.result import YarnEstimate


def estimate(
    surface_area_m2: float,
    weight_category: str | None = None,
    reference: ReferenceData | None = None,
) -> YarnEstimate:
    """
    Estimate yarn for *surface_area_m2* square metres of fabric.

    Args:
        surface_area_m2: Total area of all calculated components.
        weight_category: Yarn weight id such as "worsted"; None or an
            unknown id uses the default consumption factor and leaves
            mass_g unset.
        reference: Reference tables. Defaults to the module singleton.

    Raises:
        ValueError: If surface_area_m2 is negative.
    """
    if surface_area_m2 < 0:
        raise ValueError(f"surface_area_m2 must be >= 0, got {surface_area_m2}")
    reference = reference or get_reference_data()

    entry = reference.yarn_weight(weight_category) if weight_category else None
    factor = entry.factor_m_per_m2 if entry is not None else reference.default_yarn_factor
    buffer = reference.yarn_buffer

    raw_length = surface_area_m2 * factor
    length = max(raw_length * (1 + buffer), raw_length)
    mass = length / entry.meters_per_100g * 100 if entry is not None else None

    return YarnEstimate(
        length_m=length,
        raw_length_m=raw_length,
        surface_area_m2=surface_area_m2,
        factor_m_per_m2=factor,
        buffer=buffer,
        mass_g=mass,
        weight_category=entry.id if entry is not None else None,
    )
