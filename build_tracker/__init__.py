"""build-tracker: build artifact size tracking and comparison.

  - ``Build`` — immutable snapshot of one revision's artifacts and sizes
  - ``BuildDelta`` — per-artifact and total size changes between two builds
  - ``Comparator`` — ordered builds, cached pairwise comparisons, history
  - ``BuildIngestor`` — payload validation and parent comparison on insert
  - ``build-tracker`` CLI with Rich terminal output
"""

__version__ = "0.1.0"
__description__ = "Build artifact size tracking and build-to-build comparison"

from build_tracker.core.build import Build
from build_tracker.core.build_delta import BuildDelta
from build_tracker.core.comparator import Comparator
from build_tracker.ingest.ingestor import BuildIngestor

__all__ = ["Build", "BuildDelta", "Comparator", "BuildIngestor", "__version__"]
