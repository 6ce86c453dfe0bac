"""Emotional Lexicon.

Keyword and phrase tables shared by the mood analyzer. This is a
lightweight, rule-based approach: every score is a weighted count of
substring or token matches, so identical text always scores the same.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_TOKEN_RE = re.compile(r"[a-z']+")


@dataclass(frozen=True)
class EmotionalWord:
    """A lexicon entry."""

    valence: float  # -1.0 (negative) to 1.0 (positive)
    intensity: float  # 0.0 to 1.0


def tokenize(text: str) -> list[str]:
    """Lower-case word tokens with punctuation stripped."""
    return _TOKEN_RE.findall(text.lower())


class EmotionalLexicon:
    """Keyword tables and matching helpers for mood scoring."""

    EMOTIONAL_KEYWORDS: dict[str, EmotionalWord] = {
        # High intensity positive
        "ecstatic": EmotionalWord(0.95, 0.9),
        "overjoyed": EmotionalWord(0.9, 0.9),
        "thrilled": EmotionalWord(0.85, 0.85),
        "elated": EmotionalWord(0.9, 0.85),
        # Positive
        "happy": EmotionalWord(0.8, 0.8),
        "joy": EmotionalWord(0.9, 0.9),
        "joyful": EmotionalWord(0.85, 0.8),
        "excited": EmotionalWord(0.7, 0.9),
        "delighted": EmotionalWord(0.8, 0.75),
        "love": EmotionalWord(0.9, 0.8),
        "grateful": EmotionalWord(0.8, 0.7),
        "thankful": EmotionalWord(0.75, 0.75),
        "appreciate": EmotionalWord(0.75, 0.7),
        "proud": EmotionalWord(0.7, 0.7),
        "accomplished": EmotionalWord(0.7, 0.65),
        "confident": EmotionalWord(0.7, 0.6),
        "supported": EmotionalWord(0.7, 0.6),
        "content": EmotionalWord(0.6, 0.5),
        "peaceful": EmotionalWord(0.6, 0.4),
        "calm": EmotionalWord(0.6, 0.4),
        "hope": EmotionalWord(0.7, 0.6),
        "hopeful": EmotionalWord(0.7, 0.6),
        "optimistic": EmotionalWord(0.75, 0.65),
        "relief": EmotionalWord(0.6, 0.7),
        "relieved": EmotionalWord(0.65, 0.7),
        "better": EmotionalWord(0.4, 0.4),
        # Negative
        "sad": EmotionalWord(-0.7, 0.7),
        "angry": EmotionalWord(-0.8, 0.9),
        "furious": EmotionalWord(-0.9, 0.95),
        "frustrated": EmotionalWord(-0.7, 0.8),
        "annoyed": EmotionalWord(-0.5, 0.6),
        "anxious": EmotionalWord(-0.6, 0.8),
        "anxiety": EmotionalWord(-0.6, 0.8),
        "worried": EmotionalWord(-0.6, 0.7),
        "nervous": EmotionalWord(-0.6, 0.75),
        "scared": EmotionalWord(-0.7, 0.8),
        "afraid": EmotionalWord(-0.75, 0.8),
        "disappointed": EmotionalWord(-0.7, 0.6),
        "stressed": EmotionalWord(-0.7, 0.8),
        "overwhelmed": EmotionalWord(-0.5, 0.9),
        "exhausted": EmotionalWord(-0.65, 0.7),
        "lonely": EmotionalWord(-0.8, 0.7),
        "isolated": EmotionalWord(-0.7, 0.65),
        "hurt": EmotionalWord(-0.7, 0.75),
        "devastated": EmotionalWord(-0.95, 0.9),
        "heartbroken": EmotionalWord(-0.9, 0.9),
        "fear": EmotionalWord(-0.8, 0.9),
        "hate": EmotionalWord(-0.9, 0.9),
        # Ambivalent
        "confused": EmotionalWord(-0.3, 0.6),
        "nostalgic": EmotionalWord(0.2, 0.6),
        "bittersweet": EmotionalWord(0.1, 0.7),
    }

    # Coping, growth and distress phrases (weight -1.0 to 1.0)
    PSYCHOLOGICAL_PHRASES: dict[str, float] = {
        # Coping and growth
        "i realize": 0.6,
        "i realized": 0.6,
        "i understand": 0.5,
        "i learned": 0.6,
        "working through": 0.5,
        "figure it out": 0.4,
        "take it one step": 0.5,
        "feel better": 0.7,
        "feeling better": 0.7,
        "i can handle": 0.6,
        "i'm processing": 0.4,
        "accepted": 0.4,
        "grateful": 0.5,
        # Distress
        "can't cope": -0.9,
        "can't handle": -0.8,
        "falling apart": -0.9,
        "hopeless": -0.9,
        "give up": -0.8,
        "no point": -0.8,
        "so tired of": -0.6,
        "overwhelmed": -0.6,
        "struggling": -0.6,
        "panic": -0.7,
        "worthless": -0.9,
    }

    # Support and conflict phrases (weight -1.0 to 1.0)
    RELATIONSHIP_PHRASES: dict[str, float] = {
        # Support
        "help": 0.7,
        "support": 0.8,
        "there for you": 0.9,
        "here for you": 0.9,
        "been there for me": 0.9,
        "understand": 0.7,
        "listen": 0.6,
        "proud of you": 0.8,
        "believing in me": 0.8,
        "thank you": 0.7,
        # Conflict
        "argument": -0.7,
        "fight": -0.8,
        "disagree": -0.5,
        "upset with": -0.6,
        "can't believe": -0.5,
        "overreacting": -0.7,
        "dismiss": -0.6,
        "annoyed": -0.5,
        "leave me alone": -0.8,
    }

    # Descriptors that mark emotional processing or healing
    HEALING_DESCRIPTORS: frozenset[str] = frozenset(
        {"processing", "understood", "accepted", "comforted", "healing"}
    )

    def emotional_words(self, text: str) -> list[str]:
        """Return lexicon words found in text, in order of appearance."""
        return [t for t in tokenize(text) if t in self.EMOTIONAL_KEYWORDS]

    def message_mood(self, text: str) -> float | None:
        """Mood (0-10) of one message, or None if it has no emotional words.

        Intensity-weighted mean valence, mapped from [-1, 1] to [0, 10].
        """
        total_valence = 0.0
        total_intensity = 0.0
        for word in self.emotional_words(text):
            entry = self.EMOTIONAL_KEYWORDS[word]
            total_valence += entry.valence * entry.intensity
            total_intensity += entry.intensity

        if total_intensity == 0:
            return None

        average_valence = total_valence / total_intensity
        return max(0.0, min(10.0, (average_valence + 1) * 5))

    def raw_sentiment(self, text: str) -> float:
        """Mean valence (-1 to 1) of the emotional words in text, 0.0 if none."""
        words = self.emotional_words(text)
        if not words:
            return 0.0
        return sum(self.EMOTIONAL_KEYWORDS[w].valence for w in words) / len(words)

    @staticmethod
    def match_phrases(text: str, table: dict[str, float]) -> list[tuple[str, float]]:
        """Return (phrase, weight) for every phrase of table found in text."""
        lowered = text.lower()
        return [(phrase, weight) for phrase, weight in table.items() if phrase in lowered]
