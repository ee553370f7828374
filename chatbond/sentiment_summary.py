"""
Sentiment summary for chatbond
Corpus-level sentiment percentages, relationship dynamics, emotion synchrony,
conflict resolution, affection and the sentiment timeline
"""

import logging
from collections import Counter
from typing import Dict, List, Optional, Sequence

from . import lexicon
from .analytics import get_total_days, period_key
from .insight_engine import generate_insights
from .models import (
    ConflictResolution,
    CorpusSignals,
    Message,
    RelationshipDynamics,
    ResolutionPattern,
    SenderStats,
    SentimentPoint,
    SentimentSummary,
)
from .text_features import find_keywords, normalize_text
from .utils import clamp, round_half_up, safe_divide

logger = logging.getLogger(__name__)

CONFLICT_EMOTIONS = ("anger", "anxiety")
RESOLUTION_EMOTIONS = ("apology", "gratitude")
RESOLUTION_LOOKAHEAD = 5
TOP_EMOTIONS = 5


def _share(count: int, total: int) -> int:
    return round_half_up(safe_divide(count, total) * 100)


def _primary(msg: Message) -> str:
    return msg.sentiment.primary_emotion if msg.sentiment else "neutral"


def _style(msg: Message) -> str:
    return msg.communication_style.dominant if msg.communication_style else "neutral"


def analyze_relationship_dynamics(messages: Sequence[Message], participants: Sequence[str]) -> RelationshipDynamics:
    """
    Balance, reciprocity, support, conflict and trust between the first two participants.

    All values are 0-100 shares of the conversation.
    """
    if not messages or len(participants) < 2:
        return RelationshipDynamics()

    person1, person2 = participants[0], participants[1]
    p1 = [m for m in messages if m.sender == person1]
    p2 = [m for m in messages if m.sender == person2]
    total = len(messages)

    p1_emotions = Counter(_primary(m) for m in p1)
    p2_emotions = Counter(_primary(m) for m in p2)
    seen = set(p1_emotions) | set(p2_emotions)
    diff = sum(abs(safe_divide(p1_emotions[e], len(p1)) - safe_divide(p2_emotions[e], len(p2))) for e in seen)
    reciprocity = round_half_up(max(0.0, 100 - safe_divide(diff, len(seen)) * 100))

    support = sum(1 for m in messages if _style(m) == "supportive")
    conflict = sum(
        1 for m in messages
        if "anger" in m.emotions or "betrayal" in m.emotions
        or _style(m) in ("defensive", "passiveAggressive")
    )
    trust = sum(1 for m in messages if any(e in m.emotions for e in ("trust", "affection", "gratitude")))

    return RelationshipDynamics(
        communication_balance=_share(len(p1), total),
        emotional_reciprocity=reciprocity,
        support_level=_share(support, total),
        conflict_level=_share(conflict, total),
        trust_level=_share(trust, total),
        message_distribution={person1: len(p1), person2: len(p2)},
    )


def calculate_emotion_synchrony(messages: Sequence[Message], participants: Sequence[str]) -> int:
    """
    How closely the first two participants' emotion distributions match (0-100).

    Each participant gets a percentage per synchrony category; a message
    without emotions counts as neutral.
    """
    if not messages or len(participants) < 2:
        return 50

    distributions = []
    for sender in participants[:2]:
        own = [m for m in messages if m.sender == sender]
        counts = {e: 0 for e in lexicon.SYNCHRONY_EMOTIONS}
        for msg in own:
            if not msg.emotions:
                counts["neutral"] += 1
                continue
            for emotion in msg.emotions:
                if emotion in counts:
                    counts[emotion] += 1
        total = len(own) or 1
        distributions.append({e: c / total * 100 for e, c in counts.items()})

    first, second = distributions
    avg_diff = sum(abs(first[e] - second[e]) for e in lexicon.SYNCHRONY_EMOTIONS) / len(lexicon.SYNCHRONY_EMOTIONS)
    return int(clamp(round_half_up(100 - avg_diff), 0, 100))


def detect_conflict_resolution(messages: Sequence[Message]) -> ConflictResolution:
    """
    Find anger/anxiety messages answered by an apology or thanks within the next 5 messages.

    The ratio is 0.5 when there is no conflict at all; the score boosts the
    ratio by 1.5 and caps it at 1.
    """
    if not messages:
        return ConflictResolution()

    conflicts = 0
    patterns: List[ResolutionPattern] = []

    for i in range(len(messages) - 1):
        msg = messages[i]
        if not any(e in msg.emotions for e in CONFLICT_EMOTIONS):
            continue
        conflicts += 1
        for j in range(i + 1, min(i + 1 + RESOLUTION_LOOKAHEAD, len(messages))):
            later = messages[j]
            if any(e in later.emotions for e in RESOLUTION_EMOTIONS):
                minutes = abs((later.timestamp - msg.timestamp).total_seconds()) / 60
                patterns.append(ResolutionPattern(conflict_index=i, resolution_index=j,
                                                  minutes=round_half_up(minutes)))
                break

    ratio = safe_divide(len(patterns), conflicts) if conflicts else 0.5
    return ConflictResolution(
        score=min(1.0, ratio * 1.5),
        ratio=ratio,
        conflicts=conflicts,
        resolutions=len(patterns),
        patterns=patterns,
    )


def get_affection_level(messages: Sequence[Message]) -> int:
    """Affection density (0-100): emotion hits count 1, keyword and emoji hits 0.5 each."""
    if not messages:
        return 0

    points = 0.0
    for msg in messages:
        if "affection" in msg.emotions:
            points += 1
        low = normalize_text(msg.text)
        if find_keywords(low, lexicon.AFFECTION_KEYWORDS, normalized=True):
            points += 0.5
        if any(e in msg.text for e in lexicon.AFFECTION_EMOJIS):
            points += 0.5

    return round_half_up(min(100.0, points / len(messages) * 100 * 2))


def get_emotion_breakdown(messages: Sequence[Message]) -> Dict[str, float]:
    """Summed emotion scores across the corpus, one entry per category."""
    breakdown = {e: 0.0 for e in lexicon.EMOTIONS}
    for msg in messages:
        if not msg.sentiment:
            continue
        for emotion, score in msg.sentiment.scores.items():
            if emotion in breakdown:
                breakdown[emotion] += score
    return breakdown


def get_sentiment_timeline(messages: Sequence[Message], period: str = "week") -> List[SentimentPoint]:
    """Per-period sentiment ratios (percent) and net sentiment score."""
    if period not in ("day", "week"):
        raise ValueError(f"period must be 'day' or 'week', got {period!r}")

    grouped: Dict = {}
    for msg in messages:
        key = period_key(msg.timestamp.date(), period)
        bucket = grouped.setdefault(key, Counter())
        bucket[msg.sentiment.label if msg.sentiment else "neutral"] += 1
        bucket["total"] += 1

    points = []
    for key in sorted(grouped):
        data = grouped[key]
        total = data["total"]
        points.append(SentimentPoint(
            period=key.isoformat(),
            positive_ratio=data["positive"] / total * 100,
            negative_ratio=data["negative"] / total * 100,
            neutral_ratio=data["neutral"] / total * 100,
            sentiment_score=(data["positive"] - data["negative"]) / total * 100,
            message_count=total,
        ))
    return points


def health_band(score: float) -> str:
    if score >= 70:
        return "excellent"
    if score >= 55:
        return "healthy"
    if score >= 40:
        return "moderate"
    return "needs attention"


def generate_summary(
    messages: Sequence[Message],
    stats: Dict[str, SenderStats],
    corpus: CorpusSignals,
    participants: Optional[Sequence[str]] = None,
    period: str = "week",
) -> SentimentSummary:
    """
    Build the corpus-level sentiment summary from classified messages.

    Args:
        messages: Classified messages, sorted by timestamp
        stats: Per-sender statistics (participant order comes from here)
        corpus: Context and toxicity signals
        participants: Override the participant order
        period: Sentiment timeline grouping, "day" or "week"

    Returns:
        SentimentSummary with pre-alignment labels
    """
    people = list(participants) if participants is not None else list(stats.keys())
    total = len(messages)
    logger.info(f"Generating sentiment summary for {total} messages, {len(people)} participants")

    labels = Counter(m.sentiment.label if m.sentiment else "neutral" for m in messages)
    positive = _share(labels["positive"], total)
    negative = _share(labels["negative"], total)
    if positive + negative > 100:
        negative = 100 - positive
    neutral = max(0, 100 - positive - negative)

    if positive > negative:
        overall = "positive"
    elif negative > positive:
        overall = "negative"
    else:
        overall = "neutral"

    primaries = Counter(_primary(m) for m in messages)
    primaries.pop("neutral", None)
    top_emotions = [e for e, _ in primaries.most_common(TOP_EMOTIONS)]

    pattern_counts = Counter(_style(m) for m in messages)
    dominant_pattern = pattern_counts.most_common(1)[0][0] if pattern_counts else "neutral"

    dynamics = analyze_relationship_dynamics(messages, people)
    health_score = (
        dynamics.trust_level * 0.3
        + dynamics.support_level * 0.2
        + dynamics.emotional_reciprocity * 0.2
        + (100 - dynamics.conflict_level) * 0.2
        + positive * 0.1
    )

    total_days = get_total_days(messages)
    per_day = round(safe_divide(total, total_days), 1)

    insights = generate_insights(
        positive_percent=positive,
        negative_percent=negative,
        top_emotions=top_emotions,
        avg_messages_per_day=per_day,
        context=corpus.context.primary,
        dynamics=dynamics,
        dominant_pattern=dominant_pattern,
    )

    summary = SentimentSummary(
        positive_percent=positive,
        negative_percent=negative,
        neutral_percent=neutral,
        overall_sentiment=overall,
        communication_health=health_band(health_score),
        health_score=round_half_up(health_score),
        top_emotions=top_emotions,
        emotion_breakdown=get_emotion_breakdown(messages),
        toxicity=corpus.toxicity,
        affection_level=get_affection_level(messages),
        emotion_synchrony=calculate_emotion_synchrony(messages, people),
        conflict_resolution=detect_conflict_resolution(messages),
        context=corpus.context,
        dynamics=dynamics,
        dominant_pattern=dominant_pattern,
        pattern_breakdown=dict(pattern_counts),
        timeline=get_sentiment_timeline(messages, period),
        insights=insights,
        total_days=total_days,
        avg_messages_per_day=per_day,
    )
    logger.info(f"Summary: {overall} ({positive}% positive), health {summary.communication_health}")
    return summary
