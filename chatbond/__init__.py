"""
chatbond - Chat Transcript Analytics & Relationship Scoring

Turns exported chat transcripts (plain-text messenger exports, JSON scrapes,
PDF-extracted mail threads) into a behavioral and emotional profile of the
conversation, then derives gamified scores: relationship level,
compatibility, health, badges and milestones.

Classification is deterministic keyword/emoji rules; an optional generative
API can enrich a sample of messages.
"""

__version__ = "1.0.0"
__author__ = "chatbond Team"

from . import config
from . import parser
from . import classifier
from . import analytics
from . import sentiment_summary
from . import gamification
from . import badges
from . import alignment
from . import enrichment
from . import pipeline
from .exceptions import ChatbondError, ParseError, ClassificationTimeout
from .pipeline import run_full_analysis, analyze_content

__all__ = [
    "config",
    "parser",
    "classifier",
    "analytics",
    "sentiment_summary",
    "gamification",
    "badges",
    "alignment",
    "enrichment",
    "pipeline",
    "ChatbondError",
    "ParseError",
    "ClassificationTimeout",
    "run_full_analysis",
    "analyze_content",
]
