"""
PatternCalculationEngine — turns a pattern definition snapshot into
CalculatedPatternDetails.

Pipeline stages:

  1. validate()               → blocking errors stop here; only the report
                                is returned
  2. normalize()              → NormalizedInputs in centimetres
  3. DependencyResolver       → which components run, in dependency order
  4. component calculators    → one ComponentOutcome per component; a
                                component whose upstream failed is skipped
                                with an error, never zero-filled
  5. interdependency checks   → warnings where components disagree
  6. yarn estimate            → total surface area × consumption factor

The engine holds no state between calls. Passing the previous snapshot to
calculate() limits the run to the components its changes invalidated (plus
the upstream components they read); without it every applicable component
is calculated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType

from knitcalc.calculators import ComponentCalculator, default_calculators
from knitcalc.errors import ConfigurationError
from knitcalc.normalizer import normalize
from knitcalc.reference import ReferenceData, get_reference_data
from knitcalc.resolver import DependencyResolver, DerivedStateTracker, changed_sections
from knitcalc.schemas.result import (
    CalculatedPatternDetails,
    ComponentResult,
    DerivedState,
    ValidationReport,
)
from knitcalc.schemas.snapshot import PatternDefinitionSnapshot
from knitcalc.validator import validate
from knitcalc.yarn import estimate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalculationOptions:
    """Switches for a single calculate() call.

    Attributes:
        include_detailed_shaping: Keep each component's ShapingSchedule.
            When False only the counts are returned.
        include_yarn_estimation: Estimate yarn from the total surface area.
            Every applicable component is calculated so the total is complete.
        validate_interdependencies: Cross-check components against each
            other and report disagreements as warnings.
        debug_mode: Copy the engine's debug log lines into the result trace.
    """

    include_detailed_shaping: bool = True
    include_yarn_estimation: bool = False
    validate_interdependencies: bool = True
    debug_mode: bool = False


class _Trace:
    """Debug lines sent to the module logger and, in debug mode, kept for the result."""

    def __init__(self, keep: bool) -> None:
        self._keep = keep
        self.lines: list[str] = []

    def __call__(self, message: str) -> None:
        logger.debug(message)
        if self._keep:
            self.lines.append(message)


class PatternCalculationEngine:
    """
    Deterministic calculation pipeline over injected reference data.

    Only ConfigurationError is raised, for broken reference tables or a
    component with no registered calculator. Every problem with the snapshot
    itself is returned in the result.
    """

    def __init__(
        self,
        reference: ReferenceData | None = None,
        calculators: dict[str, ComponentCalculator] | None = None,
    ) -> None:
        self.reference = reference or get_reference_data()
        self._resolver = DependencyResolver(self.reference)
        self._calculators = (
            calculators if calculators is not None else default_calculators(self.reference)
        )

    def validate(self, snapshot: PatternDefinitionSnapshot) -> ValidationReport:
        """Run the Input Validator against this engine's reference data."""
        return validate(snapshot, self.reference)

    def calculate(
        self,
        snapshot: PatternDefinitionSnapshot,
        options: CalculationOptions = CalculationOptions(),
        previous: PatternDefinitionSnapshot | None = None,
    ) -> CalculatedPatternDetails:
        """Calculate every component the snapshot (or its changes) calls for.

        Parameters
        ----------
        snapshot:
            The current pattern definition.
        options:
            Output switches; see CalculationOptions.
        previous:
            The snapshot of the last calculation, if any. Only components
            invalidated by the differences are recalculated and reported.

        Returns
        -------
        CalculatedPatternDetails
            With empty components when validation fails.

        Raises
        ------
        ConfigurationError
            If the reference tables are inconsistent.
        """
        trace = _Trace(options.debug_mode)

        # Stage 1: Input Validator
        report = self.validate(snapshot)
        if not report.is_valid:
            trace(f"Validation failed with {len(report.errors)} error(s)")
            return CalculatedPatternDetails(
                warnings=report.warnings,
                errors=report.errors,
                armhole_requires_recalculation=snapshot.armhole_requires_recalculation,
                trace=tuple(trace.lines),
            )

        # Stage 2: Normalizer
        normalized = normalize(snapshot, self.reference)
        inputs = normalized.inputs
        if inputs is None:
            return CalculatedPatternDetails(
                warnings=report.warnings,
                errors=normalized.errors or ("snapshot could not be normalized",),
                armhole_requires_recalculation=snapshot.armhole_requires_recalculation,
                trace=tuple(trace.lines),
            )

        # Stage 3: Dependency Resolver
        changed = changed_sections(previous, snapshot) if previous is not None else None
        if changed is not None:
            trace(f"Changed sections: {', '.join(changed) or 'none'}")
        plan = self._resolver.resolve(snapshot, changed)
        order = plan.applicable if options.include_yarn_estimation else plan.order
        trace(f"Run order: {', '.join(order) or 'none'}; stale: {', '.join(plan.stale) or 'none'}")
        tracker = DerivedStateTracker(plan.applicable, plan.stale)

        # Stage 4: Component calculators, in dependency order
        results: dict[str, ComponentResult] = {}
        errors: list[str] = []
        warnings: list[str] = list(report.warnings)
        for name in order:
            calculator = self._calculators.get(name)
            if calculator is None:
                raise ConfigurationError(f"No calculator registered for component {name!r}")
            stale = tracker.is_stale(name)
            if stale:
                tracker.begin(name)

            failed = [
                dep
                for dep in self.reference.components[name].depends_on
                if dep in plan.applicable and dep not in results
            ]
            if failed:
                errors.append(
                    f"{name}: skipped because {', '.join(failed)} could not be calculated"
                )
                if stale:
                    tracker.fail(name)
                trace(f"{name}: skipped (upstream {', '.join(failed)} unavailable)")
                continue

            outcome = calculator.calculate(inputs, MappingProxyType(dict(results)))
            if outcome.result is None:
                errors.append(outcome.error or f"{name}: calculation failed")
                if stale:
                    tracker.fail(name)
                trace(f"{name}: failed: {outcome.error}")
                continue
            results[name] = outcome.result
            warnings.extend(outcome.result.warnings)
            if stale:
                tracker.complete(name)
            trace(
                f"{name}: {outcome.result.stitch_count} sts, {outcome.result.row_count} rows "
                f"({outcome.result.cast_on_count} -> {outcome.result.final_stitch_count})"
            )

        # Stage 5: Interdependency checks
        if options.validate_interdependencies:
            warnings.extend(_interdependency_warnings(results))

        # Stage 6: Yarn estimate
        yarn_estimate = None
        if options.include_yarn_estimation and results:
            area = sum(r.surface_area_m2 for r in results.values())
            yarn_estimate = estimate(area, inputs.yarn_weight, self.reference)
            trace(f"Yarn: {area:.3f} m2 -> {yarn_estimate.length_m:.0f} m")

        if not options.include_detailed_shaping:
            results = {name: r.without_shaping() for name, r in results.items()}

        states = tracker.states()
        flag = (
            plan.armhole_requires_recalculation
            and states.get("armhole") != DerivedState.FRESH
        )
        logger.info(
            f"Calculated {len(results)} component(s) for "
            f"{inputs.garment_type.value} with {len(errors)} error(s)"
        )
        return CalculatedPatternDetails(
            components=results,
            yarn_estimate=yarn_estimate,
            warnings=tuple(warnings),
            errors=tuple(errors),
            recalculated=tuple(results),
            derived_state=states,
            armhole_requires_recalculation=flag,
            trace=tuple(trace.lines),
        )


# ── Interdependency checks ─────────────────────────────────────────────────────


def _interdependency_warnings(results: dict[str, ComponentResult]) -> list[str]:
    """Disagreements between components that each calculated successfully."""
    warnings: list[str] = []
    armhole = results.get("armhole")
    neckline = results.get("neckline")
    sleeve = results.get("sleeve")
    yoke = results.get("yoke")

    if armhole is not None and neckline is not None:
        shoulders = armhole.final_stitch_count - neckline.stitch_count
        if shoulders < 2:
            warnings.append(
                f"neckline: neck width ({neckline.stitch_count} sts) leaves no shoulder "
                f"stitches above the armhole ({armhole.final_stitch_count} sts)"
            )

    if armhole is not None and sleeve is not None:
        cap_rows = int(sleeve.details.get("cap_rows", 0))
        if cap_rows and cap_rows != armhole.row_count:
            warnings.append(
                f"sleeve: cap depth ({cap_rows} rows) does not match the armhole "
                f"({armhole.row_count} rows)"
            )

    if armhole is not None and yoke is not None:
        if yoke.row_count + 2 != armhole.row_count:
            warnings.append(
                f"yoke: raglan depth ({yoke.row_count} rows) does not match the armhole "
                f"({armhole.row_count} rows)"
            )

    if armhole is not None and sleeve is not None and yoke is not None:
        cap_top = int(sleeve.details.get("cap_top_stitches", 0))
        at_neck = 2 * armhole.final_stitch_count + 2 * cap_top
        neck = int(yoke.details["neck_stitches"])
        if at_neck != neck:
            warnings.append(
                f"yoke: raglan line mismatch; body and sleeves leave {at_neck} sts "
                f"at the neck but the yoke expects {neck} sts"
            )
    return warnings
