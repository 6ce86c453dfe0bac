"""Enumeration types for Limbic domain models."""

from enum import Enum


class FactorType(str, Enum):
    """Contributing factor of a mood score."""

    SENTIMENT_ANALYSIS = "sentiment_analysis"
    PSYCHOLOGICAL_INDICATORS = "psychological_indicators"
    RELATIONSHIP_CONTEXT = "relationship_context"
    CONVERSATIONAL_FLOW = "conversational_flow"
    HISTORICAL_BASELINE = "historical_baseline"


class TrajectoryDirection(str, Enum):
    """Overall direction of an emotional trajectory."""

    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"
    VOLATILE = "volatile"


class DeltaDirection(str, Enum):
    """Sign of a mood change."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class DeltaType(str, Enum):
    """Classification of a mood change.

    MOOD_REPAIR: Recovery from a low or declining state
    CELEBRATION: Rise within an already positive state
    DECLINE: Significant drop
    PLATEAU: Small or unremarkable change
    """

    MOOD_REPAIR = "mood_repair"
    CELEBRATION = "celebration"
    DECLINE = "decline"
    PLATEAU = "plateau"


class TemporalPosition(str, Enum):
    """Where a delta sits within its conversation."""

    EARLY = "early"
    MIDDLE = "middle"
    CONCLUSION = "conclusion"


class DeltaPatternType(str, Enum):
    """Shape of a run of related deltas."""

    RECOVERY_SEQUENCE = "recovery_sequence"
    DECLINE_SEQUENCE = "decline_sequence"
    PLATEAU_BREAK = "plateau_break"
    OSCILLATION = "oscillation"


class TurningPointType(str, Enum):
    """Kind of pivotal emotional event."""

    BREAKTHROUGH = "breakthrough"
    SETBACK = "setback"
    REALIZATION = "realization"
    SUPPORT_RECEIVED = "support_received"


class TransitionType(str, Enum):
    """Speed and shape of a mood transition between trajectory points."""

    SUDDEN = "sudden"
    GRADUAL = "gradual"
    RECOVERY = "recovery"
    DECLINE = "decline"


# =============================================================================
# Feature enums
# =============================================================================


class LinguisticPatternType(str, Enum):
    EMOTIONAL_EXPRESSION = "emotional_expression"
    GRATITUDE_EXPRESSION = "gratitude_expression"
    VULNERABILITY_SHARING = "vulnerability_sharing"
    SUPPORT_LANGUAGE = "support_language"
    STRESS_LANGUAGE = "stress_language"


class SupportSeekingStyle(str, Enum):
    DIRECT_VERBAL = "direct_verbal"
    INDIRECT_HINT = "indirect_hint"
    EMOTIONAL_EXPRESSION = "emotional_expression"
    PROBLEM_SHARING = "problem_sharing"
    MINIMAL_SEEKING = "minimal_seeking"


class CopingCommunicationStyle(str, Enum):
    SUPPORT_SEEKING = "support_seeking"
    PROBLEM_SOLVING = "problem_solving"
    EMOTIONAL_VENTING = "emotional_venting"
    AVOIDANCE = "avoidance"
    MINIMIZATION = "minimization"


class RelationshipType(str, Enum):
    ROMANTIC = "romantic"
    FAMILY = "family"
    CLOSE_FRIEND = "close_friend"
    FRIEND = "friend"
    COLLEAGUE = "colleague"
    ACQUAINTANCE = "acquaintance"
    PROFESSIONAL = "professional"
    THERAPEUTIC = "therapeutic"


class SupportLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class SupportDirection(str, Enum):
    UNIDIRECTIONAL = "unidirectional"
    BIDIRECTIONAL = "bidirectional"
    BALANCED = "balanced"


class CommunicationPatternType(str, Enum):
    SUPPORTIVE_LISTENING = "supportive_listening"
    REASSURANCE = "reassurance"
    ADVICE_GIVING = "advice_giving"
    VALIDATION = "validation"
    PROBLEM_SOLVING = "problem_solving"


class ParticipantRoleType(str, Enum):
    VULNERABLE_SHARER = "vulnerable_sharer"
    SUPPORTER = "supporter"
    LISTENER = "listener"
    ADVISOR = "advisor"
    OBSERVER = "observer"


class SupportRole(str, Enum):
    PROVIDER = "provider"
    RECIPIENT = "recipient"
    MUTUAL = "mutual"
    NEUTRAL = "neutral"


class CopingMechanismType(str, Enum):
    SUPPORT_SEEKING = "support_seeking"
    PROBLEM_SOLVING = "problem_solving"
    EMOTION_REGULATION = "emotion_regulation"
    MEANING_MAKING = "meaning_making"
    AVOIDANCE = "avoidance"


class ResilienceIndicatorType(str, Enum):
    SOCIAL_SUPPORT_UTILIZATION = "social_support_utilization"
    ADAPTIVE_THINKING = "adaptive_thinking"
    EMOTIONAL_RECOVERY = "emotional_recovery"
    GROWTH_MINDSET = "growth_mindset"


class StressMarkerType(str, Enum):
    PERFORMANCE_ANXIETY = "performance_anxiety"
    RELATIONSHIP_STRESS = "relationship_stress"
    WORK_PRESSURE = "work_pressure"
    HEALTH_CONCERNS = "health_concerns"
    LIFE_TRANSITIONS = "life_transitions"


class GrowthIndicatorType(str, Enum):
    EMOTIONAL_AWARENESS = "emotional_awareness"
    RELATIONSHIP_SKILLS = "relationship_skills"
    COPING_IMPROVEMENT = "coping_improvement"
    RESILIENCE_BUILDING = "resilience_building"


class TimeOfDay(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"


class Season(str, Enum):
    SPRING = "spring"
    SUMMER = "summer"
    FALL = "fall"
    WINTER = "winter"
