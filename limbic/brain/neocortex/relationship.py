"""Relationship context features - who is involved and how it feels."""

from __future__ import annotations

import logging

from ...domain.models import (
    CommunicationPattern,
    CommunicationPatternType,
    ExtractedMemory,
    ParticipantRole,
    ParticipantRoleType,
    RelationshipContextFeatures,
    RelationshipType,
    SupportDirection,
    SupportDynamics,
    SupportLevel,
    SupportRole,
)
from .rules import MemorySignals, Rule, count_matches, first_match

logger = logging.getLogger(__name__)

RELATIONSHIP_TYPE_RULES: tuple[Rule[RelationshipType], ...] = (
    Rule(lambda s: s.has("mom", "dad", "family"), RelationshipType.FAMILY),
    Rule(lambda s: s.has("boyfriend", "girlfriend", "partner"), RelationshipType.ROMANTIC),
    Rule(lambda s: s.has("colleague", "work", "office"), RelationshipType.COLLEAGUE),
    Rule(lambda s: s.has("therapist", "counselor", "therapy"), RelationshipType.THERAPEUTIC),
    Rule(
        lambda s: s.communication_pattern == "supportive"
        and s.memory.relationship_dynamics.connection_strength > 0.6,
        RelationshipType.CLOSE_FRIEND,
    ),
)

SUPPORT_DIRECTION_RULES: tuple[Rule[SupportDirection], ...] = (
    Rule(lambda s: s.has("we both", "each other"), SupportDirection.BIDIRECTIONAL),
    Rule(lambda s: s.has("mutual", "together"), SupportDirection.BALANCED),
)

RECEIVING_SUPPORT_PHRASES = (
    "helped me",
    "gave me",
    "supported me",
    "comforted me",
    "reassured me",
    "listened to me",
    "talking with",
)
VULNERABILITY_PHRASES = (
    "i was stressed",
    "i was feeling",
    "i felt",
    "anxious",
    "worried",
    "scared",
    "struggling",
)
SUPPORTER_PHRASES = (
    "i helped",
    "i listened",
    "reassured",
    "i supported",
    "i comforted",
    "i was there for",
)
NEUTRAL_ROLE_WORDS = (
    "discussed",
    "agreed",
    "meeting",
    "timeline",
    "project",
    "next steps",
    "productive",
)

# Receiving or vulnerable language outranks supporter language
AUTHOR_ROLE_RULES: tuple[Rule[tuple[ParticipantRoleType, SupportRole]], ...] = (
    Rule(
        lambda s: s.has(*RECEIVING_SUPPORT_PHRASES) or s.has(*VULNERABILITY_PHRASES),
        (ParticipantRoleType.VULNERABLE_SHARER, SupportRole.RECIPIENT),
    ),
    Rule(
        lambda s: s.has(*SUPPORTER_PHRASES),
        (ParticipantRoleType.SUPPORTER, SupportRole.PROVIDER),
    ),
    Rule(
        lambda s: s.has(*NEUTRAL_ROLE_WORDS),
        (ParticipantRoleType.OBSERVER, SupportRole.NEUTRAL),
    ),
)

PARTICIPANT_ROLES: dict[str, tuple[ParticipantRoleType, SupportRole]] = {
    "friend": (ParticipantRoleType.SUPPORTER, SupportRole.PROVIDER),
    "family": (ParticipantRoleType.SUPPORTER, SupportRole.PROVIDER),
    "partner": (ParticipantRoleType.SUPPORTER, SupportRole.PROVIDER),
    "professional": (ParticipantRoleType.ADVISOR, SupportRole.PROVIDER),
}

EMOTIONAL_SAFETY = {
    "positive": 0.8,
    "neutral": 0.6,
    "strained": 0.4,
    "negative": 0.2,
    "mixed": 0.5,
}

RECIPROCITY = {
    SupportDirection.BIDIRECTIONAL: 0.8,
    SupportDirection.BALANCED: 0.9,
    SupportDirection.UNIDIRECTIONAL: 0.3,
}


class RelationshipContextExtractor:
    """Extracts the relationship dimension of a memory."""

    INTIMACY_INDICATORS = ("always", "exactly", "knows me", "comfortable", "trust", "close")
    SAFETY_WORDS = ("comfortable", "trust", "safe", "open", "understand")
    EFFECTIVE_SUPPORT_WORDS = ("helped", "better", "calm")

    DEFAULT_CONNECTION = 0.5
    DEFAULT_QUALITY = 5.0

    def extract(self, memory: ExtractedMemory) -> RelationshipContextFeatures:
        signals = MemorySignals.from_memory(memory)
        return RelationshipContextFeatures(
            relationship_type=first_match(
                RELATIONSHIP_TYPE_RULES, signals, RelationshipType.FRIEND
            ),
            intimacy_level=self.intimacy_level(signals),
            support_dynamics=self.support_dynamics(signals),
            communication_patterns=self.communication_patterns(signals),
            emotional_safety=self.emotional_safety(signals),
            participant_roles=self.participant_roles(signals),
        )

    def intimacy_level(self, signals: MemorySignals) -> float:
        dynamics = signals.memory.relationship_dynamics
        intimacy = dynamics.connection_strength or self.DEFAULT_CONNECTION

        if signals.communication_pattern in ("intimate", "supportive"):
            intimacy += 0.1
        intimacy += count_matches(signals.content, self.INTIMACY_INDICATORS) * 0.05

        if signals.is_minimal:
            intimacy = min(intimacy * 0.4, 0.35)

        return min(1.0, intimacy)

    def support_dynamics(self, signals: MemorySignals) -> SupportDynamics:
        dynamics = signals.memory.relationship_dynamics
        quality = dynamics.quality or self.DEFAULT_QUALITY

        if quality > 7:
            level = SupportLevel.HIGH
        elif quality > 4:
            level = SupportLevel.MEDIUM
        else:
            level = SupportLevel.LOW

        direction = first_match(
            SUPPORT_DIRECTION_RULES, signals, SupportDirection.UNIDIRECTIONAL
        )
        effective = dynamics.interaction_quality == "positive" and signals.has(
            *self.EFFECTIVE_SUPPORT_WORDS
        )

        return SupportDynamics(
            level=level,
            direction=direction,
            effectiveness=0.85 if effective else 0.5,
            reciprocity=RECIPROCITY[direction],
        )

    def communication_patterns(self, signals: MemorySignals) -> list[CommunicationPattern]:
        known = {p.value for p in CommunicationPatternType}
        effectiveness = 0.8 if signals.has(*self.EFFECTIVE_SUPPORT_WORDS) else 0.5

        patterns = [
            CommunicationPattern(
                type=CommunicationPatternType(name),
                frequency=0.7,
                effectiveness=effectiveness,
            )
            for name in signals.memory.relationship_dynamics.patterns
            if name in known
        ]
        if not patterns and signals.has("listen"):
            patterns.append(
                CommunicationPattern(
                    type=CommunicationPatternType.SUPPORTIVE_LISTENING,
                    frequency=0.6,
                    effectiveness=0.7,
                )
            )
        return patterns

    def emotional_safety(self, signals: MemorySignals) -> float:
        dynamics = signals.memory.relationship_dynamics
        safety = EMOTIONAL_SAFETY.get(dynamics.interaction_quality, 0.5)

        if "emotional validation" in dynamics.health_indicators.positive:
            safety += 0.1
        safety += count_matches(signals.content, self.SAFETY_WORDS) * 0.05

        return min(1.0, safety)

    def participant_roles(self, signals: MemorySignals) -> list[ParticipantRole]:
        memory = signals.memory
        role, support = first_match(
            AUTHOR_ROLE_RULES,
            signals,
            (ParticipantRoleType.VULNERABLE_SHARER, SupportRole.RECIPIENT),
        )
        roles = [
            ParticipantRole(participant_id=memory.author.id, role=role, support_level=support)
        ]

        for participant in memory.participants:
            if participant.id == memory.author.id:
                continue
            role, support = PARTICIPANT_ROLES.get(
                participant.role.lower(),
                (ParticipantRoleType.LISTENER, SupportRole.NEUTRAL),
            )
            roles.append(
                ParticipantRole(
                    participant_id=participant.id, role=role, support_level=support
                )
            )

        logger.debug(f"Assigned {len(roles)} participant roles for {memory.id}")
        return roles
