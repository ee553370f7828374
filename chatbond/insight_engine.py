"""
chatbond Insight Engine
Turns the sentiment summary's numbers into short, readable observations

Style: Warm, smart friend analyzing - not clinical or therapeutic
Output is deterministic: the same summary always yields the same insights
"""

from typing import List, Sequence

from .models import RelationshipDynamics

MAX_INSIGHTS = 8

# Phrase banks, keyed by conversation context
CONTEXT_PHRASES = {
    "work": {
        "positive": "Your professional relationship shows strong positive collaboration.",
        "achievement": "There's shared enthusiasm around achievements and goals.",
        "support": "Strong mutual support is evident in your professional communication.",
        "pressure": "High message frequency with anxiety may indicate work stress or deadline pressure.",
    },
    "project": {
        "planning": "Your conversations are highly focused on planning and coordination.",
        "ambitious": "Mixed excitement and anxiety suggest an ambitious project with real challenges.",
        "balanced": "Contributions to the project are well balanced from both sides.",
    },
    "love": {
        "bond": "Strong affectionate bond with predominantly positive communication.",
        "reciprocity": "High emotional reciprocity - you mirror each other's feelings.",
        "trust": "A deep trust foundation is evident in your conversations.",
        "hurt": "Some conversations show signs of hurt or betrayal that may need healing.",
        "active": "Healthy, active relationship with minimal conflict.",
    },
    "friendship": {
        "joy": "Your friendship is filled with joy and shared excitement.",
        "support": "Strong supportive friendship with mutual care.",
        "quality": "Quality over quantity - meaningful exchanges despite lower frequency.",
    },
    "family": {
        "care": "Family bond showing appreciation and care.",
        "tension": "Some family tension is present - open communication may help.",
    },
    "technical": {
        "shipping": "Enthusiastic technical collaboration with shared accomplishments.",
        "firefighting": "High-intensity technical work - possibly debugging or resolving a critical issue.",
        "peer_support": "Strong collaborative culture with peer support.",
        "curiosity": "Healthy technical curiosity and knowledge sharing.",
    },
}

PATTERN_PHRASES = {
    "supportive": "Predominantly supportive communication style - very encouraging.",
    "passiveAggressive": "Some passive-aggressive patterns detected - direct communication may help.",
    "defensive": "Defensive communication is present - openness may improve connection.",
    "assertive": "Healthy assertive communication - clear and direct expression of needs.",
}


def generate_insights(
    positive_percent: float,
    negative_percent: float,
    top_emotions: Sequence[str],
    avg_messages_per_day: float,
    context: str,
    dynamics: RelationshipDynamics,
    dominant_pattern: str,
) -> List[str]:
    """
    Generate context-aware insight strings (at most 8).

    Context-specific observations come first, followed by general tone,
    frequency, emotion, pattern, balance and conflict observations.
    """
    insights = _context_insights(positive_percent, top_emotions, avg_messages_per_day,
                                 context, dynamics, dominant_pattern)
    insights += _general_insights(positive_percent, negative_percent, top_emotions,
                                  avg_messages_per_day, context, dynamics, dominant_pattern)
    return insights[:MAX_INSIGHTS]


def _context_insights(
    positive: float,
    emotions: Sequence[str],
    per_day: float,
    context: str,
    dynamics: RelationshipDynamics,
    pattern: str,
) -> List[str]:
    out = []

    if context in ("business", "professional"):
        phrases = CONTEXT_PHRASES["work"]
        if positive > 60:
            out.append(phrases["positive"])
        if "pride" in emotions or "excitement" in emotions:
            out.append(phrases["achievement"])
        if dynamics.support_level > 60:
            out.append(phrases["support"])
        if "anxiety" in emotions and per_day > 20:
            out.append(phrases["pressure"])

    elif context == "project":
        phrases = CONTEXT_PHRASES["project"]
        if pattern == "planning":
            out.append(phrases["planning"])
        if "excitement" in emotions and "anxiety" in emotions:
            out.append(phrases["ambitious"])
        if 40 <= dynamics.communication_balance <= 60:
            out.append(phrases["balanced"])

    elif context == "love":
        phrases = CONTEXT_PHRASES["love"]
        if "affection" in emotions and positive > 70:
            out.append(phrases["bond"])
        if dynamics.emotional_reciprocity > 70:
            out.append(phrases["reciprocity"])
        if dynamics.trust_level > 75:
            out.append(phrases["trust"])
        if "betrayal" in emotions or "shame" in emotions:
            out.append(phrases["hurt"])
        if dynamics.conflict_level < 10 and per_day > 20:
            out.append(phrases["active"])

    elif context == "friendship":
        phrases = CONTEXT_PHRASES["friendship"]
        if "joy" in emotions and "excitement" in emotions:
            out.append(phrases["joy"])
        if dynamics.support_level > 65:
            out.append(phrases["support"])
        if per_day < 3 and positive > 70:
            out.append(phrases["quality"])

    elif context == "family":
        phrases = CONTEXT_PHRASES["family"]
        if "gratitude" in emotions or "affection" in emotions:
            out.append(phrases["care"])
        if dynamics.conflict_level > 25:
            out.append(phrases["tension"])

    elif context == "technical":
        phrases = CONTEXT_PHRASES["technical"]
        if "excitement" in emotions and "pride" in emotions:
            out.append(phrases["shipping"])
        if "anxiety" in emotions and per_day > 30:
            out.append(phrases["firefighting"])
        if dynamics.support_level > 60:
            out.append(phrases["peer_support"])
        if pattern == "questioning" and positive > 60:
            out.append(phrases["curiosity"])

    return out


def _general_insights(
    positive: float,
    negative: float,
    emotions: Sequence[str],
    per_day: float,
    context: str,
    dynamics: RelationshipDynamics,
    pattern: str,
) -> List[str]:
    out = []

    # Tone
    if positive > 70:
        out.append("Overwhelmingly positive communication tone throughout.")
    elif negative > 30:
        out.append("Notable negative sentiment - may benefit from addressing underlying issues.")

    # Frequency
    if per_day > 50:
        out.append("Very active daily communication - strong engagement.")
    elif per_day < 5:
        out.append("Lower message frequency - periodic check-ins or focused conversations.")

    # Emotions
    if "affection" in emotions and context != "love":
        out.append("Affection and care extend beyond typical relationship boundaries.")
    if "gratitude" in emotions:
        out.append("Appreciation is regularly expressed - a healthy communication pattern.")
    if "trust" in emotions:
        out.append("Trust and reliability are foundational to your conversations.")
    if "anxiety" in emotions or "apology" in emotions:
        out.append("Recurring worry or apology patterns - consider addressing root causes.")

    if pattern in PATTERN_PHRASES:
        out.append(PATTERN_PHRASES[pattern])

    # Balance
    skew = abs(50 - dynamics.communication_balance)
    if skew > 30:
        out.append("Significant imbalance in message contribution - one person carries the conversation.")
    elif skew < 10:
        out.append("Excellent balance - both participants contribute equally.")

    if dynamics.trust_level > 70 and dynamics.support_level > 70:
        out.append("Strong foundation of trust and mutual support.")

    if dynamics.conflict_level < 10:
        out.append("Very low conflict - harmonious communication.")
    elif dynamics.conflict_level > 30:
        out.append("Elevated conflict levels - conflict resolution strategies may help.")

    return out
