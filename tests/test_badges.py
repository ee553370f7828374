"""
Tests for the badge registry
"""

import pytest
from datetime import datetime, timedelta

from chatbond.analytics import build_analytics, get_stats_per_sender
from chatbond.badges import BADGE_RULES, BadgeContext, BadgeRule, evaluate_badges, get_rule
from chatbond.classifier import classify_corpus, classify_messages
from chatbond.models import Message
from chatbond.sentiment_summary import generate_summary


# ============================================================================
# FIXTURES
# ============================================================================

def _context(messages):
    messages = classify_messages(messages)
    stats = get_stats_per_sender(messages)
    return BadgeContext(
        messages=messages,
        stats=stats,
        analytics=build_analytics(messages),
        summary=generate_summary(messages, stats, classify_corpus(messages)),
    )


@pytest.fixture
def scenario_context(scenario_messages):
    return _context(scenario_messages)


@pytest.fixture
def night_owls():
    """Sixty short late-night exchanges."""
    base = datetime(2024, 1, 1, 23, 0)
    return [
        Message("Alice" if i % 2 else "Bob", "still up?", base + timedelta(minutes=i))
        for i in range(60)
    ]


# ============================================================================
# REGISTRY
# ============================================================================

def test_registry_shape():
    """25 rules with unique ids and known categories."""
    assert len(BADGE_RULES) == 25
    assert len({r.id for r in BADGE_RULES}) == 25
    assert {r.category for r in BADGE_RULES} == {"positive", "funny", "spicy", "milestone", "engagement"}


def test_get_rule():
    rule = get_rule("first_100")
    assert rule.name == "Century"
    assert rule.category == "milestone"
    assert get_rule("does_not_exist") is None


# ============================================================================
# EVALUATION
# ============================================================================

def test_scenario_badges(scenario_context):
    badges = evaluate_badges(scenario_context)
    assert [b.id for b in badges] == ["glass_half_full", "first_100", "balanced_duo", "week_streak"]


def test_night_owl_and_instant_reply(night_owls):
    ids = [b.id for b in evaluate_badges(_context(night_owls))]

    assert "night_owl" in ids
    assert "instant_reply" in ids
    assert "first_100" not in ids


def test_failing_predicate_is_isolated(scenario_context):
    """A rule that raises counts as locked and the rest still run."""
    def boom(ctx):
        raise RuntimeError("broken rule")

    rules = [
        BadgeRule("broken", "Broken", "Always raises", "💥", "common", "milestone", boom),
        get_rule("first_100"),
    ]
    badges = evaluate_badges(scenario_context, rules)

    assert [b.id for b in badges] == ["first_100"]


def test_evaluation_is_stateless(scenario_context):
    """Evaluating twice yields the same badges."""
    assert evaluate_badges(scenario_context) == evaluate_badges(scenario_context)


def test_badge_serializes(scenario_context):
    badge = evaluate_badges(scenario_context)[0]
    assert badge.to_dict()["icon"] == "🥛"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
