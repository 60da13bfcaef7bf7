"""Terminal rendering of build comparisons.

Modules
-------
renderer
    ``ComparisonRenderer`` turns ``BuildDelta``, ``ComparisonTable`` and
    artifact histories into Rich renderables.  It never computes sizes.
"""
