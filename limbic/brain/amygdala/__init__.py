"""Amygdala Module - Emotional Processing.

The amygdala is responsible for processing emotions and assigning
emotional significance to experiences. In Limbic, this module handles:

- Mood Scoring: Multi-factor mood scores for conversations
- Trajectories: How mood moves message by message
- Delta Detection: Classifying changes between sequential analyses
"""

from limbic.brain.amygdala.delta import DeltaDetector, DeltaDetectorConfig
from limbic.brain.amygdala.lexicon import EmotionalLexicon
from limbic.brain.amygdala.mood import MoodFactorWeights, MoodScoringAnalyzer
from limbic.brain.amygdala.trajectory import TrajectoryBuilder

__all__ = [
    "DeltaDetector",
    "DeltaDetectorConfig",
    "EmotionalLexicon",
    "MoodFactorWeights",
    "MoodScoringAnalyzer",
    "TrajectoryBuilder",
]
