"""
End-to-end tests for the analysis pipeline
"""

import json
import pytest

from chatbond import config
from chatbond.enrichment import EnrichmentClient
from chatbond.exceptions import ParseError
from chatbond.pipeline import _make_enrichment_client, analyze_content, run_full_analysis


@pytest.fixture
def bundle(scenario_text, scenario_now):
    return analyze_content(scenario_text, "plain", use_enrichment=False, now=scenario_now, use_worker=False)


def test_metadata(bundle):
    meta = bundle.metadata

    assert meta.participants == ["Alice", "Bob"]
    assert meta.total_messages == 120
    assert meta.date_format == "DMY"
    assert meta.date_format_confident is True
    assert bundle.stats["Alice"].message_count == 65
    assert bundle.stats["Bob"].message_count == 55


def test_scores(bundle):
    """Known scores for the ten-day scenario."""
    assert bundle.sentiment.positive_percent == 70
    assert bundle.gamification.compatibility.score == 59
    assert bundle.gamification.compatibility.tier == "Good Match"
    assert bundle.gamification.relationship_level.level == 7.5
    assert bundle.gamification.streak_data.current == 10
    assert bundle.analytics.streaks[0].days == 10
    assert "first_100" in [b.id for b in bundle.gamification.badges]


def test_summary_is_aligned(bundle):
    sentiment = bundle.sentiment

    assert sentiment.communication_health == "healthy"
    assert sentiment.health_score == 65
    assert sentiment.alignment.compatibility_score == 59
    assert set(sentiment.pre_alignment) == {"communication_health", "overall_sentiment", "health_score"}
    assert sentiment.narrative is None


def test_bundle_is_json_serializable(bundle):
    report = json.loads(json.dumps(bundle.to_dict(), ensure_ascii=False))

    assert report["gamification"]["compatibility"]["tier"] == "Good Match"
    assert report["messages"][0]["sender"] == "Alice"
    assert report["analytics"]["streaks"][0]["start"] == "2024-03-15"


def test_health_trend_with_history(scenario_text, scenario_now):
    bundle = analyze_content(scenario_text, use_enrichment=False, now=scenario_now,
                             use_worker=False, previous_overall=60)
    assert bundle.gamification.health.trend == "improving"


def test_mock_enrichment(scenario_text, scenario_now):
    """A sample of 30 is enriched and a narrative is attached."""
    client = EnrichmentClient(mock_mode=True, delay=0)
    bundle = analyze_content(scenario_text, now=scenario_now, use_worker=False, enrichment_client=client)

    sources = [m.sentiment.source for m in bundle.messages]
    assert sources.count("enrichment") == 30
    assert bundle.sentiment.narrative["key_strengths"] == ["Regular contact"]
    assert "Alice" in bundle.sentiment.narrative["overall_dynamic"]
    # mock labels agree with the keyword labels
    assert bundle.gamification.compatibility.score == 59


def test_enrichment_without_key_is_skipped(monkeypatch):
    monkeypatch.setattr(config, "ENRICHMENT_API_KEY", "")
    assert _make_enrichment_client(True) is None
    assert _make_enrichment_client(False) is None


def test_worker_path_matches(scenario_text, scenario_now, bundle):
    worker_bundle = analyze_content(scenario_text, use_enrichment=False, now=scenario_now, use_worker=True)

    assert worker_bundle.gamification.compatibility.score == bundle.gamification.compatibility.score
    assert worker_bundle.sentiment.positive_percent == bundle.sentiment.positive_percent


def test_run_full_analysis_from_file(tmp_path, scenario_text, scenario_now):
    path = tmp_path / "chat.txt"
    path.write_text(scenario_text, encoding="utf-8")

    bundle = run_full_analysis(path, use_enrichment=False, now=scenario_now, use_worker=False)

    assert bundle.metadata.source_format == "plain"
    assert bundle.gamification.relationship_level.title == "Deep Bond"


def test_unparseable_content():
    with pytest.raises(ParseError):
        analyze_content("nothing to see here", use_enrichment=False, use_worker=False)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
