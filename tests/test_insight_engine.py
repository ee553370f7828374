"""
Tests for insight generation
"""

import pytest

from chatbond.insight_engine import CONTEXT_PHRASES, MAX_INSIGHTS, PATTERN_PHRASES, generate_insights
from chatbond.models import RelationshipDynamics


@pytest.fixture
def warm_dynamics():
    return RelationshipDynamics(
        communication_balance=50,
        emotional_reciprocity=85,
        support_level=75,
        conflict_level=5,
        trust_level=80,
    )


@pytest.fixture
def tense_dynamics():
    return RelationshipDynamics(
        communication_balance=90,
        emotional_reciprocity=30,
        support_level=5,
        conflict_level=40,
        trust_level=10,
    )


def _insights(dynamics, **overrides):
    args = dict(
        positive_percent=80,
        negative_percent=5,
        top_emotions=["affection", "joy"],
        avg_messages_per_day=25,
        context="love",
        dynamics=dynamics,
        dominant_pattern="supportive",
    )
    args.update(overrides)
    return generate_insights(**args)


def test_love_context_insights(warm_dynamics):
    """Context-specific observations lead the list."""
    insights = _insights(warm_dynamics)

    assert insights[0] == CONTEXT_PHRASES["love"]["bond"]
    assert CONTEXT_PHRASES["love"]["reciprocity"] in insights
    assert CONTEXT_PHRASES["love"]["trust"] in insights


def test_insights_are_capped(warm_dynamics):
    assert len(_insights(warm_dynamics)) <= MAX_INSIGHTS


def test_insights_deterministic(warm_dynamics):
    assert _insights(warm_dynamics) == _insights(warm_dynamics)


def test_tense_conversation(tense_dynamics):
    insights = _insights(
        tense_dynamics,
        positive_percent=20,
        negative_percent=45,
        top_emotions=["anger", "anxiety"],
        avg_messages_per_day=2,
        context="family",
        dominant_pattern="defensive",
    )

    assert CONTEXT_PHRASES["family"]["tension"] in insights
    assert PATTERN_PHRASES["defensive"] in insights
    assert any("negative sentiment" in i for i in insights)
    assert any("imbalance" in i for i in insights)
    assert any("Elevated conflict" in i for i in insights)


def test_work_context(warm_dynamics):
    insights = _insights(warm_dynamics, context="business", top_emotions=["pride"])

    assert CONTEXT_PHRASES["work"]["positive"] in insights
    assert CONTEXT_PHRASES["work"]["achievement"] in insights


def test_unknown_context_falls_back_to_general(warm_dynamics):
    insights = _insights(warm_dynamics, context="personal", top_emotions=[], dominant_pattern="neutral")

    assert insights[0] == "Overwhelmingly positive communication tone throughout."
    assert "Excellent balance - both participants contribute equally." in insights


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
