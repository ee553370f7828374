"""
Tests for aligning summary labels with gamification scores
"""

import pytest

from chatbond.alignment import align, blended_health, communication_health_label, overall_sentiment_label
from chatbond.analytics import build_analytics, get_stats_per_sender
from chatbond.classifier import classify_corpus, classify_messages
from chatbond.gamification import build_gamification
from chatbond.sentiment_summary import generate_summary


@pytest.fixture
def scored(scenario_messages, scenario_now):
    messages = classify_messages(scenario_messages)
    stats = get_stats_per_sender(messages)
    analytics = build_analytics(messages)
    summary = generate_summary(messages, stats, classify_corpus(messages))
    return summary, build_gamification(messages, stats, analytics, summary, now=scenario_now)


def test_blended_health():
    """60% compatibility, 40% level scaled to 0-100."""
    assert blended_health(59, 7.5) == pytest.approx(65.4)
    assert blended_health(100, 10) == pytest.approx(100.0)


@pytest.mark.parametrize("blended,label", [
    (29.9, "critical"), (30, "needs attention"), (45, "moderate"), (64.9, "moderate"),
    (65, "healthy"), (80, "excellent"),
])
def test_communication_health_label(blended, label):
    assert communication_health_label(blended) == label


@pytest.mark.parametrize("compat,positive,label", [
    (90, 60, "excellent"),
    (90, 40, "moderate"),
    (72, 50, "positive"),
    (59, 70, "moderate"),
    (30, 45, "moderate"),
    (45, 10, "concerning"),
    (20, 10, "critical"),
])
def test_overall_sentiment_label(compat, positive, label):
    assert overall_sentiment_label(compat, positive) == label


def test_align_scenario(scored):
    summary, gamification = scored
    aligned = align(summary, gamification)

    assert aligned.communication_health == "healthy"
    assert aligned.overall_sentiment == "moderate"
    assert aligned.health_score == 65
    assert aligned.alignment.blended_health == 65.4
    assert aligned.alignment.compatibility_score == 59
    assert aligned.alignment.relationship_level == 7.5


def test_align_keeps_original_labels(scored):
    """The input summary is untouched and its labels are preserved."""
    summary, gamification = scored
    aligned = align(summary, gamification)

    assert summary.alignment is None
    assert aligned.pre_alignment == {
        "communication_health": summary.communication_health,
        "overall_sentiment": summary.overall_sentiment,
        "health_score": summary.health_score,
    }
    assert aligned.positive_percent == summary.positive_percent


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
