"""Domain models for Limbic.

This package provides all domain models, organized by concern:
- enums: factor, delta, turning point and feature enumerations
- conversation: Conversation, ConversationMessage, Participant
- mood: MoodFactor, MoodAnalysisResult, EmotionalTrajectory, ValidationResult
- delta: MoodDelta, DeltaPattern, TurningPoint and their inputs
- memory: ExtractedMemory and its emotional/relationship context
- features: the five clustering feature bundles
- cluster: MemoryCluster, ClusterMembership, ClusterAssignment
- results: service result models
"""

from .cluster import (
    ClusterAssignment,
    ClusterMembership,
    ClusterMetadata,
    ClusterQualityMetrics,
    MemoryCluster,
)
from .conversation import Conversation, ConversationMessage, Participant
from .delta import (
    DeltaPattern,
    DeltaPatternInput,
    DeltaTemporalContext,
    MoodDelta,
    MoodTransition,
    StoredMoodDelta,
    TurningPoint,
    TurningPointContext,
    TurningPointInput,
)
from .enums import (
    CommunicationPatternType,
    CopingCommunicationStyle,
    CopingMechanismType,
    DeltaDirection,
    DeltaPatternType,
    DeltaType,
    FactorType,
    GrowthIndicatorType,
    LinguisticPatternType,
    ParticipantRoleType,
    RelationshipType,
    ResilienceIndicatorType,
    Season,
    StressMarkerType,
    SupportDirection,
    SupportLevel,
    SupportRole,
    SupportSeekingStyle,
    TemporalPosition,
    TimeOfDay,
    TrajectoryDirection,
    TransitionType,
    TurningPointType,
)
from .features import (
    ClusteringFeatures,
    CommunicationPattern,
    CommunicationStyleFeatures,
    CopingMechanism,
    EmotionalToneFeatures,
    GrowthIndicator,
    LinguisticPattern,
    ParticipantRole,
    PsychologicalIndicatorFeatures,
    RelationshipContextFeatures,
    ResilienceIndicator,
    SimilarityBreakdown,
    StressMarker,
    SupportDynamics,
    TemporalContextFeatures,
)
from .memory import (
    EmotionalAnalysis,
    EmotionalContext,
    EmotionalIndicators,
    EmotionalPattern,
    ExtractedMemory,
    HealthIndicators,
    RelationshipDynamics,
)
from .mood import (
    EmotionalTrajectory,
    MoodAnalysisResult,
    MoodFactor,
    StoredMoodScore,
    TrajectoryPoint,
    TrajectoryTurningPoint,
    ValidationResult,
)
from .results import (
    DeltaTrackingResult,
    FeatureExtractionResult,
    MemoryComparisonResult,
)

__all__ = [
    # Enums
    "FactorType",
    "TrajectoryDirection",
    "DeltaDirection",
    "DeltaType",
    "TemporalPosition",
    "DeltaPatternType",
    "TurningPointType",
    "TransitionType",
    "LinguisticPatternType",
    "SupportSeekingStyle",
    "CopingCommunicationStyle",
    "RelationshipType",
    "SupportLevel",
    "SupportDirection",
    "CommunicationPatternType",
    "ParticipantRoleType",
    "SupportRole",
    "CopingMechanismType",
    "ResilienceIndicatorType",
    "StressMarkerType",
    "GrowthIndicatorType",
    "TimeOfDay",
    "Season",
    # Conversation models
    "Conversation",
    "ConversationMessage",
    "Participant",
    # Mood models
    "MoodFactor",
    "MoodAnalysisResult",
    "StoredMoodScore",
    "TrajectoryPoint",
    "TrajectoryTurningPoint",
    "EmotionalTrajectory",
    "ValidationResult",
    # Delta models
    "MoodDelta",
    "DeltaTemporalContext",
    "StoredMoodDelta",
    "DeltaPatternInput",
    "DeltaPattern",
    "TurningPointInput",
    "TurningPointContext",
    "TurningPoint",
    "MoodTransition",
    # Memory models
    "EmotionalIndicators",
    "EmotionalContext",
    "HealthIndicators",
    "RelationshipDynamics",
    "EmotionalPattern",
    "EmotionalAnalysis",
    "ExtractedMemory",
    # Feature models
    "EmotionalToneFeatures",
    "LinguisticPattern",
    "CommunicationStyleFeatures",
    "SupportDynamics",
    "CommunicationPattern",
    "ParticipantRole",
    "RelationshipContextFeatures",
    "CopingMechanism",
    "ResilienceIndicator",
    "StressMarker",
    "GrowthIndicator",
    "PsychologicalIndicatorFeatures",
    "TemporalContextFeatures",
    "ClusteringFeatures",
    "SimilarityBreakdown",
    # Cluster models
    "ClusterQualityMetrics",
    "ClusterMetadata",
    "MemoryCluster",
    "ClusterMembership",
    "ClusterAssignment",
    # Result models
    "DeltaTrackingResult",
    "FeatureExtractionResult",
    "MemoryComparisonResult",
]
