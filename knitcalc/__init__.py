"""
knitcalc: deterministic pattern calculation engine for knitted garments.

Turns a snapshot of a pattern definition (garment type, gauge, measurements,
ease, construction choices) into stitch counts, row counts, shaping schedules
and a yarn estimate. See knitcalc.engine for the entry point.
"""
