"""Neocortex module - Pattern Recognition & Abstraction.

The neocortex is responsible for:
- Higher-order cognitive functions
- Pattern recognition and generalization
- Abstract reasoning

In Limbic, this module handles:
- Behavioral feature extraction from memories
- Weighted similarity between memories
- Clustering memories into psychologically coherent groups
"""

from .clustering import ClusteringConfig, ClusteringEngine
from .communication import CommunicationStyleExtractor
from .emotional import EmotionalToneExtractor
from .psychological import PsychologicalIndicatorExtractor
from .relationship import RelationshipContextExtractor
from .similarity import FeatureSimilarityCalculator, FeatureWeights

__all__ = [
    "ClusteringConfig",
    "ClusteringEngine",
    "CommunicationStyleExtractor",
    "EmotionalToneExtractor",
    "FeatureSimilarityCalculator",
    "FeatureWeights",
    "PsychologicalIndicatorExtractor",
    "RelationshipContextExtractor",
]
