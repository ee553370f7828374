"""
Tests for the corpus sentiment summary
"""

import pytest
from datetime import datetime, timedelta

from chatbond.analytics import get_stats_per_sender
from chatbond.classifier import classify_corpus, classify_messages
from chatbond.models import Message
from chatbond.sentiment_summary import (
    analyze_relationship_dynamics,
    calculate_emotion_synchrony,
    detect_conflict_resolution,
    generate_summary,
    get_affection_level,
    get_sentiment_timeline,
    health_band,
)

NEUTRAL = "see you at the station"


# ============================================================================
# FIXTURES
# ============================================================================

def _chat(*pairs, start=datetime(2024, 1, 1, 9, 0), step_minutes=5):
    """Classified messages from (sender, text) pairs."""
    messages = [
        Message(sender=s, text=t, timestamp=start + timedelta(minutes=i * step_minutes))
        for i, (s, t) in enumerate(pairs)
    ]
    return classify_messages(messages)


@pytest.fixture
def mixed_chat():
    return _chat(
        ("Alice", "haha this is great"),
        ("Bob", "I'm so angry right now"),
        ("Alice", NEUTRAL),
    )


# ============================================================================
# CONFLICT RESOLUTION
# ============================================================================

def test_conflict_resolved():
    """Anger answered by an apology within the lookahead is a resolution."""
    messages = _chat(("Bob", "I'm so angry"), ("Alice", "sorry, my bad"))
    result = detect_conflict_resolution(messages)

    assert result.conflicts == 1
    assert result.resolutions == 1
    assert result.ratio == 1.0
    assert result.score == 1.0
    assert result.patterns[0].resolution_index == 1
    assert result.patterns[0].minutes == 5


def test_no_conflict_is_neutral():
    result = detect_conflict_resolution(_chat(("Alice", NEUTRAL), ("Bob", NEUTRAL)))

    assert result.conflicts == 0
    assert result.ratio == 0.5
    assert result.score == 0.75


def test_resolution_outside_lookahead():
    """An apology six messages later is too late."""
    pairs = [("Bob", "I'm so angry")] + [("Alice", NEUTRAL)] * 5 + [("Alice", "sorry, my bad")]
    result = detect_conflict_resolution(_chat(*pairs))

    assert result.conflicts == 1
    assert result.resolutions == 0
    assert result.score == 0.0


def test_conflict_resolution_empty():
    assert detect_conflict_resolution([]).ratio == 0.5


# ============================================================================
# SYNCHRONY, AFFECTION, DYNAMICS
# ============================================================================

def test_emotion_synchrony_identical():
    messages = _chat(("Alice", "haha great"), ("Bob", "haha great"))
    assert calculate_emotion_synchrony(messages, ["Alice", "Bob"]) == 100


def test_emotion_synchrony_divergent():
    """All-joy vs all-neutral differs on two of nine categories."""
    messages = _chat(("Alice", "haha great"), ("Bob", NEUTRAL))
    # 100 - (100 + 100) / 9 = 77.8
    assert calculate_emotion_synchrony(messages, ["Alice", "Bob"]) == 78


def test_emotion_synchrony_single_participant():
    assert calculate_emotion_synchrony(_chat(("Alice", "haha")), ["Alice"]) == 50


def test_affection_level():
    messages = _chat(("Alice", "I miss the beach"), *[("Bob", NEUTRAL)] * 4)
    # one keyword hit (0.5) over 5 messages, doubled
    assert get_affection_level(messages) == 20
    assert get_affection_level([]) == 0
    assert get_affection_level(_chat(("Alice", "love you ❤️"))) == 100


def test_dynamics(mixed_chat):
    dynamics = analyze_relationship_dynamics(mixed_chat, ["Alice", "Bob"])

    assert dynamics.communication_balance == 67
    assert dynamics.message_distribution == {"Alice": 2, "Bob": 1}
    assert dynamics.conflict_level == 33


def test_dynamics_defaults_for_one_participant():
    dynamics = analyze_relationship_dynamics(_chat(("Alice", "hi")), ["Alice"])
    assert dynamics.communication_balance == 50
    assert dynamics.conflict_level == 0


# ============================================================================
# TIMELINE & SUMMARY
# ============================================================================

def test_sentiment_timeline(mixed_chat):
    points = get_sentiment_timeline(mixed_chat, "day")

    assert len(points) == 1
    assert points[0].message_count == 3
    assert points[0].sentiment_score == pytest.approx(0.0)
    assert points[0].positive_ratio == pytest.approx(100 / 3)


def test_sentiment_timeline_bad_period():
    with pytest.raises(ValueError):
        get_sentiment_timeline([], "month")


@pytest.mark.parametrize("score,band", [
    (70, "excellent"), (69.9, "healthy"), (55, "healthy"), (40, "moderate"), (39, "needs attention"),
])
def test_health_band(score, band):
    assert health_band(score) == band


def test_generate_summary(mixed_chat):
    summary = generate_summary(mixed_chat, get_stats_per_sender(mixed_chat), classify_corpus(mixed_chat))

    assert summary.positive_percent == 33
    assert summary.negative_percent == 33
    assert summary.neutral_percent == 34
    assert summary.overall_sentiment == "neutral"
    assert "neutral" not in summary.top_emotions
    assert set(summary.top_emotions) == {"joy", "anger"}
    assert summary.total_days == 1
    assert summary.insights
    assert summary.alignment is None
    assert summary.pre_alignment is None


def test_generate_summary_participant_override(mixed_chat):
    stats = get_stats_per_sender(mixed_chat)
    summary = generate_summary(mixed_chat, stats, classify_corpus(mixed_chat), participants=["Bob", "Alice"])

    assert summary.dynamics.communication_balance == 33


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
