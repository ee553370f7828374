"""
Tests for keyword/emoji classification and text features
"""

import pytest
from datetime import datetime, timedelta

from chatbond.classifier import (
    analyze_communication_style,
    analyze_sentiment,
    classify,
    classify_messages,
    detect_context,
    detect_toxicity,
    toxicity_level,
)
from chatbond.models import Message
from chatbond.text_features import extract_emojis, find_keywords, tokenize_words


def _msg(text, sender="Alice", minutes=0):
    return Message(sender=sender, text=text, timestamp=datetime(2024, 1, 1, 9, 0) + timedelta(minutes=minutes))


# ============================================================================
# TEXT FEATURES
# ============================================================================

def test_keywords_respect_word_boundaries():
    """'sad' does not hit 'sadly'; emoji keywords match anywhere."""
    assert find_keywords("I sadly missed it", ["sad"]) == []
    assert find_keywords("so sad today", ["sad"]) == ["sad"]
    assert find_keywords("ok😢ok", ["😢"]) == ["😢"]


def test_keywords_normalize_apostrophes():
    """Curly apostrophes match straight-quote keywords."""
    assert find_keywords("I can’t wait!", ["can't wait"]) == ["can't wait"]


def test_extract_emojis():
    assert extract_emojis("hi ❤️ there 😂😂") == ["❤️", "😂", "😂"]
    assert extract_emojis("") == []


def test_tokenize_words_drops_short_and_stopwords():
    assert tokenize_words("The pizza was AMAZING, ok?") == ["pizza", "amazing"]


# ============================================================================
# SENTIMENT
# ============================================================================

def test_positive_message():
    """Affection and gratitude both register on one message."""
    result = analyze_sentiment("I love you so much, thank you for everything 🥰")

    assert result.label == "positive"
    assert result.primary_emotion == "affection"
    assert result.secondary_emotions == ["gratitude"]
    assert result.emotional_complexity == 2
    assert result.is_complex_emotion is False
    assert 0 < result.confidence <= 1


def test_neutral_message():
    """No keyword hits means neutral with zero confidence."""
    result = analyze_sentiment("see you at the station")

    assert result.label == "neutral"
    assert result.primary_emotion == "neutral"
    assert result.confidence == 0.0
    assert result.emotional_complexity == 0


def test_emotions_scored_independently():
    """Mixed signals keep both emotions; a tie between clusters is neutral."""
    result = analyze_sentiment("haha great but I'm so sad 😢")

    assert result.scores["joy"] == 2
    assert result.scores["sadness"] == 2
    assert result.primary_emotion == "joy"
    assert result.label == "neutral"
    assert result.emotional_complexity == 2


def test_complex_emotion():
    """Three or more active categories mark a complex emotion."""
    result = analyze_sentiment("haha great, thank you, love you")

    assert result.emotional_complexity >= 3
    assert result.is_complex_emotion is True


def test_negative_message():
    result = analyze_sentiment("I'm so stressed and worried about tomorrow 😰")

    assert result.label == "negative"
    assert result.primary_emotion == "anxiety"


def test_confidence_saturates():
    result = analyze_sentiment("happy great wonderful awesome fantastic perfect haha yay")
    assert result.confidence == 1.0


# ============================================================================
# COMMUNICATION STYLE
# ============================================================================

def test_communication_style():
    """Dominant pattern and flags."""
    style = analyze_communication_style("Can we talk about this? I think we should")

    assert style.dominant == "assertive"
    assert style.is_question is True
    assert style.is_assertion is True
    assert style.word_count == 9


def test_communication_style_neutral():
    style = analyze_communication_style("station at nine")
    assert style.dominant == "neutral"


def test_classify_returns_copy():
    """classify annotates a copy and leaves the input untouched."""
    original = _msg("I love you so much, thank you for everything 🥰")
    classified = classify(original)

    assert original.sentiment is None
    assert classified.sentiment.label == "positive"
    assert classified.emotions == ["affection", "gratitude"]
    assert classified.communication_style is not None


def test_classify_neutral_has_no_emotions():
    assert classify(_msg("see you at the station")).emotions == []


def test_classify_messages_preserves_order():
    messages = [_msg("haha great", minutes=i) for i in range(3)]
    classified = classify_messages(messages)

    assert [m.timestamp for m in classified] == [m.timestamp for m in messages]
    assert all(m.sentiment.label == "positive" for m in classified)


# ============================================================================
# CONTEXT & TOXICITY
# ============================================================================

def test_detect_context():
    """Keyword hits across messages pick the primary context."""
    messages = [
        _msg("meeting with the client about the budget"),
        _msg("send me the invoice after the meeting", sender="Bob"),
    ]
    context = detect_context(messages)

    assert context.primary == "business"
    assert context.percentages["business"] == 100.0


def test_detect_context_defaults_to_personal():
    context = detect_context([_msg("see you at the station")])
    assert context.primary == "personal"


@pytest.mark.parametrize("percent,level", [
    (0.0, "healthy"),
    (1.9, "healthy"),
    (2.0, "moderate"),
    (5.0, "moderate"),
    (7.5, "needs attention"),
    (10.0, "moderate"),
    (10.5, "concerning"),
])
def test_toxicity_level_bands(percent, level):
    """Bands, including the 5% and 10% edges."""
    assert toxicity_level(percent) == level


def test_detect_toxicity_ten_percent_is_moderate():
    """Exactly 10% toxic messages lands in the moderate band."""
    messages = [_msg("you're so stupid, shut up")] + [_msg("see you later", minutes=i) for i in range(1, 10)]
    report = detect_toxicity(messages)

    assert report.percent == 10.0
    assert report.level == "moderate"
    assert report.toxic_message_count == 1
    assert report.breakdown["insults"] == 1
    assert report.breakdown["aggression"] == 1
    assert report.patterns[0].message_index == 0
    assert set(report.patterns[0].categories) == {"insults", "aggression"}


def test_detect_toxicity_needs_attention():
    """3 of 40 messages (7.5%) needs attention."""
    messages = [_msg("this is your fault", minutes=i) for i in range(3)]
    messages += [_msg("see you later", minutes=i) for i in range(3, 40)]
    report = detect_toxicity(messages)

    assert report.percent == 7.5
    assert report.level == "needs attention"


def test_detect_toxicity_empty():
    report = detect_toxicity([])
    assert report.level == "healthy"
    assert report.toxic_message_count == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
