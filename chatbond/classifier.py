"""
Sentiment & emotion classifier for chatbond
Deterministic keyword/emoji rules for per-message sentiment, emotions and
communication style, plus corpus-level context and toxicity signals
"""

import logging
from dataclasses import replace
from typing import Dict, List, Sequence

from . import lexicon
from .models import (
    CommunicationStyle,
    ContextResult,
    CorpusSignals,
    Message,
    SentimentResult,
    ToxicityReport,
    ToxicPattern,
)
from .text_features import compute_text_flags, normalize_text, score_categories, find_keywords

logger = logging.getLogger(__name__)

COMPLEX_EMOTION_THRESHOLD = 3
CONFIDENCE_SATURATION = 5.0
MAX_TOXIC_PATTERNS = 10


def _rank(scores: Dict[str, float], order: Sequence[str]) -> List[str]:
    """Categories by descending score; sort stability keeps declaration order on ties."""
    return sorted(order, key=lambda c: -scores[c])


def analyze_sentiment(text: str) -> SentimentResult:
    """
    Score a message against the 12 emotion categories.

    Categories are scored independently, so one message can carry several
    emotions at once. The label compares the positive and negative clusters
    and falls back to neutral on a tie.
    """
    scores = {k: float(v) for k, v in score_categories(text or "", lexicon.EMOTION_KEYWORDS).items()}
    total = sum(scores.values())

    if total == 0:
        return SentimentResult(scores=scores)

    ranked = _rank(scores, lexicon.EMOTIONS)
    primary = ranked[0]
    secondary = [e for e in ranked[1:3] if scores[e] > 0]

    positive = sum(scores[e] for e in lexicon.POSITIVE_EMOTIONS)
    negative = sum(scores[e] for e in lexicon.NEGATIVE_EMOTIONS)
    if positive > negative:
        label = "positive"
    elif negative > positive:
        label = "negative"
    else:
        label = "neutral"

    complexity = sum(1 for v in scores.values() if v > 0)

    return SentimentResult(
        label=label,
        scores=scores,
        primary_emotion=primary,
        secondary_emotions=secondary,
        confidence=min(total / CONFIDENCE_SATURATION, 1.0),
        emotional_complexity=complexity,
        is_complex_emotion=complexity >= COMPLEX_EMOTION_THRESHOLD,
        positive_score=positive,
        negative_score=negative,
    )


def analyze_communication_style(text: str) -> CommunicationStyle:
    """Detect the dominant communication pattern of a message."""
    scores = score_categories(text or "", lexicon.COMMUNICATION_PATTERNS)
    flags = compute_text_flags(text or "")

    dominant = "neutral"
    ranked = _rank(scores, lexicon.PATTERNS)
    if scores[ranked[0]] > 0:
        dominant = ranked[0]

    return CommunicationStyle(
        dominant=dominant,
        scores=scores,
        is_question=flags["question_flag"],
        is_assertion=scores["assertive"] > 0,
        word_count=flags["word_count"],
    )


def classify(message: Message) -> Message:
    """Return an annotated copy of a message with sentiment, emotions and style."""
    sentiment = analyze_sentiment(message.text)
    emotions = [e for e in [sentiment.primary_emotion, *sentiment.secondary_emotions] if e != "neutral"]
    return replace(
        message,
        sentiment=sentiment,
        emotions=emotions,
        communication_style=analyze_communication_style(message.text),
    )


def classify_messages(messages: Sequence[Message]) -> List[Message]:
    """Classify every message. Inputs are left untouched."""
    logger.info(f"Classifying {len(messages)} messages")
    classified = [classify(m) for m in messages]
    labelled = sum(1 for m in classified if m.sentiment.label != "neutral")
    logger.debug(f"{labelled}/{len(classified)} messages carry a non-neutral label")
    return classified


def detect_context(messages: Sequence[Message]) -> ContextResult:
    """Find the conversation's primary context from keyword hits across all messages."""
    totals = {c: 0 for c in lexicon.CONTEXTS}
    for msg in messages:
        for context, hits in score_categories(msg.text, lexicon.CONTEXT_KEYWORDS).items():
            totals[context] += hits

    grand_total = sum(totals.values())
    if grand_total == 0:
        return ContextResult(primary="personal", scores=totals,
                             percentages={c: 0.0 for c in lexicon.CONTEXTS})

    primary = _rank(totals, lexicon.CONTEXTS)[0]
    percentages = {c: round(v / grand_total * 100, 1) for c, v in totals.items()}
    return ContextResult(primary=primary, scores=totals, percentages=percentages)


def toxicity_level(percent: float) -> str:
    """
    Band a toxic-message percentage.

    Above 10% is concerning; strictly between 5% and 10% needs attention;
    2% up to and including the 10% edge is moderate; below 2% is healthy.
    """
    if percent > 10:
        return "concerning"
    if 5 < percent < 10:
        return "needs attention"
    if percent >= 2:
        return "moderate"
    return "healthy"


def detect_toxicity(messages: Sequence[Message]) -> ToxicityReport:
    """Flag messages hitting any toxicity category and summarize the corpus."""
    breakdown = {c: 0 for c in lexicon.TOXICITY_CATEGORIES}
    if not messages:
        return ToxicityReport(breakdown=breakdown)

    toxic_count = 0
    patterns: List[ToxicPattern] = []

    for idx, msg in enumerate(messages):
        low = normalize_text(msg.text)
        found = []
        for category, keywords in lexicon.TOXICITY_KEYWORDS.items():
            hits = find_keywords(low, keywords, normalized=True)
            if hits:
                breakdown[category] += len(hits)
                found.append(category)
        if found:
            toxic_count += 1
            if len(patterns) < MAX_TOXIC_PATTERNS:
                patterns.append(ToxicPattern(message_index=idx, sender=msg.sender,
                                             categories=found, timestamp=msg.timestamp))

    percent = toxic_count / len(messages) * 100
    return ToxicityReport(
        score=round(percent),
        percent=round(percent, 2),
        level=toxicity_level(percent),
        toxic_message_count=toxic_count,
        breakdown=breakdown,
        patterns=patterns,
    )


def classify_corpus(messages: Sequence[Message]) -> CorpusSignals:
    """Corpus-level context and toxicity."""
    context = detect_context(messages)
    toxicity = detect_toxicity(messages)
    logger.info(f"Context: {context.primary}, toxicity: {toxicity.level} ({toxicity.percent}%)")
    return CorpusSignals(context=context, toxicity=toxicity)


if __name__ == "__main__":
    from datetime import datetime

    samples = [
        "I love you so much, thank you for everything 🥰",
        "I'm so stressed and worried about tomorrow 😰",
        "whatever, shut up",
        "Meeting moved to 3pm",
    ]
    for text in samples:
        msg = classify(Message(sender="Demo", text=text, timestamp=datetime.now()))
        print(f"{text[:40]:40} -> {msg.sentiment.label:8} {msg.emotions} style={msg.communication_style.dominant}")
