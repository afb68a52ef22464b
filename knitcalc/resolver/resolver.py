"""
Dependency resolver: decides which derived quantities must be recalculated,
and in which order.

Inputs are the current snapshot and, optionally, the sections that changed
since a previous snapshot (see changed_sections()). Output is a
ResolutionPlan listing:

  order   — components to run, in dependency order (stale components plus
            the upstream components they read, which a stateless engine has
            to recompute)
  stale   — components invalidated by the change
  armhole_requires_recalculation
          — set when the sleeve type changed, or when the caller carried the
            flag over from a previous pass

Which components apply to a garment is decided by an exhaustive match over
GarmentType; which sections invalidate which components, and the dependency
graph itself, come from reference data.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from knitcalc.errors import ConfigurationError
from knitcalc.reference import ReferenceData, get_reference_data
from knitcalc.schemas.section import Section, value_of
from knitcalc.schemas.snapshot import (
    SECTION_NAMES,
    ConstructionMethod,
    GarmentType,
    PatternDefinitionSnapshot,
    SleeveSpec,
    SleeveType,
)

from .graph import topological_order, upstream_closure

logger = logging.getLogger(__name__)

SLEEVE_TYPE_SECTION = "sleeves.sleeveType"

RAGLAN_METHODS: tuple[ConstructionMethod, ...] = (
    ConstructionMethod.RAGLAN,
    ConstructionMethod.RAGLAN_TOP_DOWN,
)


@dataclass(frozen=True)
class ResolutionPlan:
    """Which components to run this pass and which of them are stale."""

    order: tuple[str, ...]
    stale: tuple[str, ...]
    applicable: tuple[str, ...]
    armhole_requires_recalculation: bool = False


def applicable_components(
    garment_type: GarmentType,
    construction_method: ConstructionMethod | None = None,
    sleeve_type: SleeveType | None = None,
    has_neckline: bool = True,
) -> tuple[str, ...]:
    """Components calculated for a garment, before any dependency ordering."""
    match garment_type:
        case GarmentType.SWEATER | GarmentType.CARDIGAN:
            names = ["body", "armhole"]
            if sleeve_type != SleeveType.SLEEVELESS:
                names.append("sleeve")
                if construction_method in RAGLAN_METHODS:
                    names.append("yoke")
            if has_neckline:
                names.append("neckline")
            return tuple(names)
        case GarmentType.VEST:
            return ("body", "armhole", "neckline") if has_neckline else ("body", "armhole")
        case GarmentType.HAT | GarmentType.BEANIE:
            return ("crown",)
        case GarmentType.SCARF:
            return ("scarf",)
        case GarmentType.SHAWL:
            return ("shawl",)
        case _:
            raise ConfigurationError(f"No component set defined for garment type {garment_type!r}")


def changed_sections(
    previous: PatternDefinitionSnapshot,
    current: PatternDefinitionSnapshot,
) -> tuple[str, ...]:
    """
    Names of the snapshot sections that differ between two snapshots.

    A change of sleeve type is additionally reported as "sleeves.sleeveType",
    which is what marks the armhole for recalculation.
    """
    changed: list[str] = []
    for name in SECTION_NAMES:
        before = getattr(previous, name)
        after = getattr(current, name)
        if before == after:
            continue
        changed.append(name)
        if name == "sleeves" and _sleeve_type(before) != _sleeve_type(after):
            changed.append(SLEEVE_TYPE_SECTION)
    return tuple(changed)


class DependencyResolver:
    """
    Plans recalculation over the component dependency graph.

    The graph is sorted once per resolve() call, so a cycle in reference data
    is reported on the first calculation rather than producing a partial plan.
    """

    def __init__(self, reference: ReferenceData | None = None) -> None:
        self._reference = reference or get_reference_data()

    def resolve(
        self,
        snapshot: PatternDefinitionSnapshot,
        changed: Iterable[str] | None = None,
    ) -> ResolutionPlan:
        """
        Build the run plan for *snapshot*.

        Parameters
        ----------
        snapshot:
            The current pattern definition. Its garment type must be set.
        changed:
            Sections that changed since the previous calculation. None means
            there is no previous calculation and everything is stale.

        Returns
        -------
        ResolutionPlan

        Raises
        ------
        ConfigurationError
            If the dependency graph contains a cycle, or the garment type is
            unset.
        """
        components = self._reference.components
        full_order = topological_order(components)

        applicable = set(self._applicable(snapshot))
        changed_set = set(changed) if changed is not None else None

        flag = snapshot.armhole_requires_recalculation or (
            changed_set is not None and SLEEVE_TYPE_SECTION in changed_set
        )
        flag = flag and "armhole" in applicable
        if changed_set is not None and SLEEVE_TYPE_SECTION in changed_set:
            logger.info("Sleeve type changed; armhole marked for recalculation")

        if changed_set is None:
            stale = set(applicable)
        else:
            seeds: set[str] = set()
            for section in changed_set:
                seeds.update(self._reference.invalidations.get(section, ()))
            if flag:
                seeds.add("armhole")
            stale = self._downstream(seeds & applicable, full_order, applicable)

        needed = upstream_closure(stale, components) & applicable
        order = tuple(name for name in full_order if name in needed)
        plan = ResolutionPlan(
            order=order,
            stale=tuple(name for name in full_order if name in stale),
            applicable=tuple(name for name in full_order if name in applicable),
            armhole_requires_recalculation=flag,
        )
        logger.debug(f"Resolved plan: order={plan.order} stale={plan.stale}")
        return plan

    # ── Helpers ────────────────────────────────────────────────────────────────

    def _applicable(self, snapshot: PatternDefinitionSnapshot) -> tuple[str, ...]:
        garment_type = value_of(snapshot.garment_type)
        if garment_type is None:
            raise ConfigurationError("Cannot resolve dependencies without a garment type")
        method = value_of(snapshot.construction_method)
        if method is None:
            method = self._reference.garment(garment_type).default_construction_method
        return applicable_components(
            garment_type,
            construction_method=method,
            sleeve_type=_sleeve_type(snapshot.sleeves),
            has_neckline=value_of(snapshot.neckline) is not None,
        )

    def _downstream(self, seeds: set[str], order: list[str], applicable: set[str]) -> set[str]:
        """Seeds plus every applicable component that depends on a stale one."""
        stale = set(seeds)
        for name in order:
            if name in stale or name not in applicable:
                continue
            if any(dep in stale for dep in self._reference.components[name].depends_on):
                stale.add(name)
        return stale


def _sleeve_type(section: Section[SleeveSpec]) -> SleeveType | None:
    sleeves = value_of(section)
    return sleeves.sleeve_type if sleeves is not None else None
