"""
Gamification engine for chatbond
Relationship level, compatibility score, health scores, milestones, streaks
and the "wrapped" recap
"""

import math
import logging
from collections import Counter
from datetime import datetime, time, timedelta
from typing import Dict, List, Optional, Sequence

from . import config
from .analytics import (
    calculate_communication_balance,
    calculate_frequency_score,
    calculate_response_score,
    get_total_days,
    summarize_activity,
)
from .badges import BadgeContext, evaluate_badges
from .models import (
    AnalyticsBundle,
    CompatibilityScore,
    GamificationBundle,
    HealthScores,
    Message,
    Milestone,
    RelationshipLevel,
    SenderStats,
    SentimentSummary,
    StreakData,
    StreakRun,
    WrappedSummary,
)
from .text_features import extract_emojis
from .utils import clamp, round_half_up, round_to_half, safe_divide

logger = logging.getLogger(__name__)

# (upper bound, title, description)
LEVEL_LADDER = [
    (1.5, "Just Getting Started", "Casual Acquaintances"),
    (2.5, "Breaking the Ice", "Getting to Know Each Other"),
    (3.5, "Building Connection", "Regular Friends"),
    (4.5, "Growing Closer", "Good Friends"),
    (5.5, "Active Partners", "Close Friends"),
    (6.5, "Strong Connection", "Best Friends"),
    (7.5, "Deep Bond", "Soulmates"),
    (8.5, "Inseparable", "Twin Flames"),
    (9.5, "Cosmic Connection", "Infinite Bond"),
    (10.0, "Soul Sync", "Eternal Connection"),
]

COMPATIBILITY_TIERS = [
    (90, "Soulmates"),
    (80, "Excellent Match"),
    (70, "Highly Compatible"),
    (60, "Great Connection"),
    (50, "Good Match"),
    (40, "Moderate Connection"),
]
COMPATIBILITY_FLOOR_TIER = "Building Chemistry"

MESSAGE_MILESTONES = [100, 500, 1000, 5000, 10000]
DAY_MILESTONES = [7, 30, 100, 365]
STREAK_MILESTONES = [7, 14, 30, 60, 100]

TREND_DELTA = 5


# ============================================================================
# RELATIONSHIP LEVEL
# ============================================================================

def level_info(level: float) -> Dict[str, str]:
    """Title and description for a 1-10 level."""
    for upper, title, description in LEVEL_LADDER:
        if level <= upper:
            return {"title": title, "description": description}
    _, title, description = LEVEL_LADDER[-1]
    return {"title": title, "description": description}


def calculate_relationship_level(
    messages: Sequence[Message],
    summary: SentimentSummary,
    analytics: AnalyticsBundle,
    stats: Dict[str, SenderStats],
) -> RelationshipLevel:
    """
    Weighted 1-10 relationship level, in half steps.

    Sub-scores (each 0-10):
        frequency: messages-per-day curve
        positivity: positive percent / 10
        engagement: mean of communication balance and reply speed
        conflict: conflict-resolution score * 10
    """
    if not messages:
        return RelationshipLevel(
            level=1.0,
            title="Just Getting Started",
            description="Strangers",
            components={"frequency": 0.0, "positivity": 0.0, "engagement": 0.0, "conflict_resolution": 0.0},
            next_level_progress=0,
        )

    frequency = calculate_frequency_score(messages)
    positivity = summary.positive_percent / 10
    engagement = (calculate_communication_balance(stats) + calculate_response_score(analytics.response_times)) / 2
    conflict = summary.conflict_resolution.score * 10

    weights = config.LEVEL_WEIGHTS
    raw = (
        frequency * weights["frequency"]
        + positivity * weights["positivity"]
        + engagement * weights["engagement"]
        + conflict * weights["conflict"]
    )
    level = clamp(round_to_half(raw), 1.0, 10.0)
    info = level_info(level)

    logger.debug(f"Level components: freq={frequency} pos={positivity} eng={engagement} conflict={conflict} -> {raw:.2f}")

    return RelationshipLevel(
        level=level,
        title=info["title"],
        description=info["description"],
        components={
            "frequency": round(frequency, 1),
            "positivity": round(positivity, 1),
            "engagement": round(engagement, 1),
            "conflict_resolution": round(conflict, 1),
        },
        next_level_progress=round_half_up((level - math.floor(level)) * 100),
    )


# ============================================================================
# COMPATIBILITY
# ============================================================================

def compatibility_tier(score: float) -> str:
    for threshold, tier in COMPATIBILITY_TIERS:
        if score >= threshold:
            return tier
    return COMPATIBILITY_FLOOR_TIER


def calculate_sentiment_balance(messages: Sequence[Message], participants: Sequence[str]) -> float:
    """Up to 30 points; loses 0.3 per point of positive-percent gap between the first two participants."""
    if len(participants) < 2:
        return 25.0

    shares = []
    for sender in participants[:2]:
        own = [m for m in messages if m.sender == sender]
        positive = sum(1 for m in own if m.sentiment and m.sentiment.label == "positive")
        shares.append(safe_divide(positive, len(own)) * 100)

    return max(0.0, 30 - 0.3 * abs(shares[0] - shares[1]))


def calculate_compatibility_score(
    messages: Sequence[Message],
    summary: SentimentSummary,
    stats: Dict[str, SenderStats],
) -> CompatibilityScore:
    """
    0-100 compatibility from five capped components.

    sentimentBalance (30), emotionSynchrony (25), communicationBalance (20),
    affection (15) and conflictHandling (10).
    """
    if not messages or not stats:
        neutral = {k: 50.0 for k in ("sentimentBalance", "emotionSynchrony", "communicationBalance",
                                     "affection", "conflictHandling")}
        return CompatibilityScore(score=50, tier="Moderate Connection", components={}, breakdown=neutral)

    participants = list(stats.keys())
    components = {
        "sentimentBalance": calculate_sentiment_balance(messages, participants),
        "emotionSynchrony": summary.emotion_synchrony * 0.25,
        "communicationBalance": calculate_communication_balance(stats) * 2,
        "affection": summary.affection_level * 0.15,
        "conflictHandling": summary.conflict_resolution.score * 10,
    }
    score = int(clamp(round_half_up(sum(components.values())), 0, 100))

    breakdown = {
        "sentimentBalance": round(components["sentimentBalance"] * 10 / 3, 1),
        "emotionSynchrony": round_half_up(components["emotionSynchrony"] * 4),
        "communicationBalance": round_half_up(components["communicationBalance"] * 5),
        "affection": round_half_up(components["affection"] * 100 / 15),
        "conflictHandling": round_half_up(components["conflictHandling"] * 10),
    }

    return CompatibilityScore(
        score=score,
        tier=compatibility_tier(score),
        components={k: round(v, 2) for k, v in components.items()},
        breakdown=breakdown,
    )


# ============================================================================
# HEALTH
# ============================================================================

def _trend(overall: int, previous_overall: Optional[float]) -> str:
    if previous_overall is not None:
        delta = overall - previous_overall
        if delta >= TREND_DELTA:
            return "improving"
        if delta <= -TREND_DELTA:
            return "needs_attention"
        return "stable"
    if overall >= 70:
        return "improving"
    if overall >= 50:
        return "stable"
    return "needs_attention"


def _recommendations(communication: float, emotional: float, engagement: float) -> List[str]:
    recs = []

    if communication < 60:
        recs.append("Try to maintain more consistent communication")
    elif communication >= 80:
        recs.append("Keep up the consistent communication!")

    if emotional < 60:
        recs.append("Consider expressing more gratitude and positivity")
    elif emotional >= 80:
        recs.append("Your emotional connection is thriving!")

    if engagement < 60:
        recs.append("Engage more regularly to strengthen your bond")
    elif engagement >= 80:
        recs.append("Excellent engagement levels!")

    return recs


def calculate_health_scores(
    summary: SentimentSummary,
    analytics: AnalyticsBundle,
    stats: Dict[str, SenderStats],
    previous_overall: Optional[float] = None,
) -> HealthScores:
    """
    Communication, emotional and engagement health (0-100 each) plus their mean.

    The trend comes from absolute bands unless a previous overall score is
    supplied, in which case it follows the change since then.
    """
    longest = analytics.streaks[0].days if analytics.streaks else 0

    if analytics.streaks:
        consistency = min(safe_divide(longest, summary.total_days) * 100, 100)
        communication = (
            consistency * 0.4
            + calculate_communication_balance(stats) * 10 * 0.3
            + calculate_response_score(analytics.response_times) * 10 * 0.3
        )
    else:
        communication = 50.0

    variety = 100 if len(summary.top_emotions) >= 3 else 70
    emotional = summary.positive_percent * 0.5 + variety * 0.25 + 80 * 0.25

    frequency = min(summary.avg_messages_per_day / 50 * 100, 100)
    engagement = frequency * 0.5 + (100 if longest >= 7 else 50) * 0.5

    overall = round_half_up((communication + emotional + engagement) / 3)

    return HealthScores(
        communication=round_half_up(communication),
        emotional=round_half_up(emotional),
        engagement=round_half_up(engagement),
        overall=overall,
        trend=_trend(overall, previous_overall),
        recommendations=_recommendations(communication, emotional, engagement),
    )


# ============================================================================
# MILESTONES & STREAKS
# ============================================================================

def calculate_milestones(messages: Sequence[Message], analytics: AnalyticsBundle) -> List[Milestone]:
    """Every met message-count, conversation-length and streak threshold."""
    milestones: List[Milestone] = []
    if not messages:
        return milestones

    for count in MESSAGE_MILESTONES:
        if len(messages) >= count:
            milestones.append(Milestone(type="messages", value=count, label=f"{count} Messages",
                                        achieved_date=messages[count - 1].timestamp))

    start = messages[0].timestamp
    total_days = get_total_days(messages)
    for days in DAY_MILESTONES:
        if total_days >= days:
            milestones.append(Milestone(type="days", value=days, label=f"{days} Days",
                                        achieved_date=start + timedelta(days=days)))

    if analytics.streaks:
        longest = analytics.streaks[0]
        for days in STREAK_MILESTONES:
            if longest.days >= days:
                reached = datetime.combine(longest.start + timedelta(days=days - 1), time.min)
                milestones.append(Milestone(type="streak", value=days, label=f"{days}-Day Streak",
                                            achieved_date=reached))

    return milestones


def get_streak_data(messages: Sequence[Message], now: Optional[datetime] = None) -> StreakData:
    """
    Current and longest daily streaks.

    The current streak is the run ending on the last active day; it only
    counts while that day started within STREAK_ACTIVE_HOURS of `now`.
    """
    days = sorted({m.timestamp.date() for m in messages})
    if not days:
        return StreakData()

    now = now or datetime.now()
    longest = StreakRun(days=1, start=days[0], end=days[0])
    run_start, run_len = days[0], 1

    for prev, curr in zip(days, days[1:]):
        if (curr - prev).days == 1:
            run_len += 1
        else:
            run_start, run_len = curr, 1
        if run_len > longest.days:
            longest = StreakRun(days=run_len, start=run_start, end=curr)

    hours_since = (now - datetime.combine(days[-1], time.min)).total_seconds() / 3600
    active = hours_since <= config.STREAK_ACTIVE_HOURS

    return StreakData(
        current=run_len if active else 0,
        current_active=active,
        longest=longest,
        total_active_days=len(days),
    )


# ============================================================================
# WRAPPED
# ============================================================================

def generate_wrapped_data(
    messages: Sequence[Message],
    stats: Dict[str, SenderStats],
    analytics: AnalyticsBundle,
    summary: SentimentSummary,
    level: Optional[RelationshipLevel] = None,
    compatibility: Optional[CompatibilityScore] = None,
    streak_data: Optional[StreakData] = None,
) -> WrappedSummary:
    """Year-in-review style recap of the conversation."""
    if not messages:
        return WrappedSummary()

    activity = summarize_activity(messages)
    emojis = Counter(e for m in messages for e in extract_emojis(m.text))
    top_sender = max(stats.items(), key=lambda kv: kv[1].message_count)[0] if stats else None

    if streak_data is not None:
        longest = streak_data.longest.days
    else:
        longest = analytics.streaks[0].days if analytics.streaks else 0

    return WrappedSummary(
        total_messages=len(messages),
        total_days=summary.total_days,
        top_sender=top_sender,
        busiest_day=activity["busiest_day"],
        busiest_day_count=activity["busiest_day_count"],
        peak_hour=activity["peak_hour"],
        top_words=[w for w, _ in analytics.word_frequency.overall[:5]],
        top_emojis=[[e, c] for e, c in emojis.most_common(5)],
        longest_streak=longest,
        top_emotion=summary.top_emotions[0] if summary.top_emotions else None,
        relationship_title=level.title if level else None,
        compatibility_tier=compatibility.tier if compatibility else None,
    )


def build_gamification(
    messages: Sequence[Message],
    stats: Dict[str, SenderStats],
    analytics: AnalyticsBundle,
    summary: SentimentSummary,
    now: Optional[datetime] = None,
    previous_overall: Optional[float] = None,
) -> GamificationBundle:
    """Compute every gamification output for one analyzed conversation."""
    level = calculate_relationship_level(messages, summary, analytics, stats)
    compatibility = calculate_compatibility_score(messages, summary, stats)
    streak_data = get_streak_data(messages, now)
    badges = evaluate_badges(BadgeContext(
        messages=list(messages),
        stats=stats,
        analytics=analytics,
        summary=summary,
        streak_data=streak_data,
    ))

    logger.info(f"Level {level.level} ({level.title}), compatibility {compatibility.score} "
                f"({compatibility.tier}), {len(badges)} badges")

    return GamificationBundle(
        relationship_level=level,
        compatibility=compatibility,
        badges=badges,
        milestones=calculate_milestones(messages, analytics),
        health=calculate_health_scores(summary, analytics, stats, previous_overall),
        streak_data=streak_data,
        wrapped=generate_wrapped_data(messages, stats, analytics, summary, level, compatibility, streak_data),
    )
