"""
Alignment layer for chatbond
Reconciles the sentiment summary's labels with the gamification scores so the
two never disagree in front of a user
"""

import logging
from dataclasses import replace

from . import config
from .models import AlignmentDetails, GamificationBundle, SentimentSummary
from .utils import round_half_up

logger = logging.getLogger(__name__)


def blended_health(compatibility_score: float, relationship_level: float) -> float:
    """Weighted blend of compatibility (0-100) and the 1-10 level scaled to 0-100."""
    return (config.ALIGN_COMPATIBILITY_WEIGHT * compatibility_score
            + config.ALIGN_LEVEL_WEIGHT * (relationship_level / 10 * 100))


def communication_health_label(blended: float) -> str:
    if blended < 30:
        return "critical"
    if blended < 45:
        return "needs attention"
    if blended < 65:
        return "moderate"
    if blended < 80:
        return "healthy"
    return "excellent"


def overall_sentiment_label(compatibility_score: float, positive_percent: float) -> str:
    if compatibility_score >= 85 and positive_percent >= 50:
        return "excellent"
    if compatibility_score >= 70 and positive_percent >= 45:
        return "positive"
    if compatibility_score >= 55 or positive_percent >= 40:
        return "moderate"
    if compatibility_score >= 40 or positive_percent >= 30:
        return "concerning"
    return "critical"


def align(summary: SentimentSummary, gamification: GamificationBundle) -> SentimentSummary:
    """
    Return a copy of the summary with labels remapped from the blended health value.

    The original labels are kept under `pre_alignment` and the blend inputs
    under `alignment`.
    """
    compatibility = gamification.compatibility.score
    level = gamification.relationship_level.level
    blended = blended_health(compatibility, level)

    aligned = replace(
        summary,
        communication_health=communication_health_label(blended),
        overall_sentiment=overall_sentiment_label(compatibility, summary.positive_percent),
        health_score=round_half_up(blended),
        pre_alignment={
            "communication_health": summary.communication_health,
            "overall_sentiment": summary.overall_sentiment,
            "health_score": summary.health_score,
        },
        alignment=AlignmentDetails(
            blended_health=round(blended, 2),
            compatibility_score=compatibility,
            relationship_level=level,
        ),
    )

    logger.info(f"Aligned health: {summary.communication_health} -> {aligned.communication_health} "
                f"(blended {blended:.1f})")
    return aligned
