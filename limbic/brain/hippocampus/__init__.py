"""Hippocampus module - Memory of Change.

The hippocampus is crucial for:
- Encoding episodes in sequence
- Consolidating short-term to long-term memory
- Marking which moments were pivotal

In Limbic, this module handles:
- Delta significance scoring with temporal context
- Grouping deltas into patterns
- Detecting turning points
"""

from .sequences import DeltaPatternDetector, TurningPointDetector
from .significance import DeltaSignificanceEngine, SignificanceWeights

__all__ = [
    "DeltaPatternDetector",
    "DeltaSignificanceEngine",
    "SignificanceWeights",
    "TurningPointDetector",
]
