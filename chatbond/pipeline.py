"""
Shared analysis pipeline for chatbond
Used by both the CLI and the Flask API so every entry point produces the same
bundle for the same export
"""

import logging
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from . import config
from .alignment import align
from .analytics import build_analytics, get_stats_per_sender
from .classifier import classify_corpus, classify_messages
from .enrichment import EnrichmentClient
from .gamification import build_gamification
from .models import AnalysisBundle, ParseResult
from .parser import ChatParser
from .sentiment_summary import generate_summary
from .worker import classify_in_worker

logger = logging.getLogger(__name__)


def _make_enrichment_client(use_enrichment: Optional[bool]) -> Optional[EnrichmentClient]:
    enabled = config.USE_ENRICHMENT if use_enrichment is None else use_enrichment
    if not enabled:
        return None
    try:
        return EnrichmentClient()
    except ValueError as e:
        logger.warning(f"Enrichment requested but unavailable: {e}")
        return None


def analyze_parsed(
    parsed: ParseResult,
    use_enrichment: Optional[bool] = None,
    now: Optional[datetime] = None,
    use_worker: Optional[bool] = None,
    previous_overall: Optional[float] = None,
    enrichment_client: Optional[EnrichmentClient] = None,
) -> AnalysisBundle:
    """
    Run every stage after parsing.

    Args:
        parsed: Parser output
        use_enrichment: Enrich sampled messages and add a narrative (default from config)
        now: Reference instant for the current-streak check (default: now)
        use_worker: Classify in a worker process (default from config)
        previous_overall: Prior overall health score, switches the health trend to delta mode
        enrichment_client: Preconfigured client, e.g. mock mode or a shared session

    Returns:
        AnalysisBundle with aligned sentiment summary
    """
    messages = parsed.messages
    metadata = parsed.metadata

    # Step 1: Classify
    worker = config.USE_WORKER if use_worker is None else use_worker
    if worker:
        messages = classify_in_worker(messages)
    else:
        messages = classify_messages(messages)

    # Step 2: Optional enrichment
    client = enrichment_client or _make_enrichment_client(use_enrichment)
    if client is not None:
        client.session.reset()
        messages = client.enrich_messages(messages)

    # Step 3: Corpus signals and behavioral analytics
    corpus = classify_corpus(messages)
    stats = get_stats_per_sender(messages)
    analytics = build_analytics(messages)

    # Step 4: Sentiment summary
    summary = generate_summary(messages, stats, corpus, participants=metadata.participants)
    if client is not None:
        narrative = client.enrich_conversation(messages, stats)
        if narrative:
            summary = replace(summary, narrative=narrative)

    # Step 5: Gamification
    gamification = build_gamification(messages, stats, analytics, summary, now=now,
                                      previous_overall=previous_overall)

    # Step 6: Align the two scoring views
    summary = align(summary, gamification)

    logger.info("Analysis complete:")
    logger.info(f"  Relationship Level: {gamification.relationship_level.level} "
                f"({gamification.relationship_level.title})")
    logger.info(f"  Compatibility: {gamification.compatibility.score}/100 ({gamification.compatibility.tier})")
    logger.info(f"  Communication Health: {summary.communication_health} ({summary.health_score}/100)")
    logger.info(f"  Badges: {len(gamification.badges)}")

    return AnalysisBundle(
        messages=messages,
        metadata=metadata,
        stats=stats,
        analytics=analytics,
        sentiment=summary,
        gamification=gamification,
    )


def analyze_content(
    raw_content: Union[str, bytes],
    format_hint: Optional[str] = "plain",
    use_enrichment: Optional[bool] = None,
    now: Optional[datetime] = None,
    **kwargs,
) -> AnalysisBundle:
    """Parse raw export content and analyze it. Raises ParseError on unusable input."""
    parsed = ChatParser(now=now).parse(raw_content, format_hint)
    return analyze_parsed(parsed, use_enrichment=use_enrichment, now=now, **kwargs)


def run_full_analysis(
    source: Union[str, Path],
    format_hint: Optional[str] = None,
    use_enrichment: Optional[bool] = None,
    now: Optional[datetime] = None,
    **kwargs,
) -> AnalysisBundle:
    """
    Run the complete pipeline on an export file.

    The format is inferred from the file name unless `format_hint` is given.
    """
    logger.info(f"Parsing chat file: {source}")
    parsed = ChatParser(now=now).parse_file(str(source), format_hint)
    return analyze_parsed(parsed, use_enrichment=use_enrichment, now=now, **kwargs)


if __name__ == "__main__":
    import sys

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    path = sys.argv[1] if len(sys.argv) > 1 else "sample_data/sample_chat.txt"
    bundle = run_full_analysis(path)
    print(f"\nLevel: {bundle.gamification.relationship_level.level}")
    print(f"Compatibility: {bundle.gamification.compatibility.tier}")
