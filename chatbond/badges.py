"""
Badge registry for chatbond
Each badge is a rule with display metadata and a predicate over one analyzed
conversation. Predicates are independent and stateless between runs.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from . import lexicon
from .models import (
    AnalyticsBundle,
    Badge,
    Message,
    SenderStats,
    SentimentSummary,
    StreakData,
)
from .text_features import count_emojis, find_keywords

logger = logging.getLogger(__name__)


@dataclass
class BadgeContext:
    """Everything a badge predicate may look at."""

    messages: List[Message]
    stats: Dict[str, SenderStats]
    analytics: AnalyticsBundle
    summary: SentimentSummary
    streak_data: StreakData = field(default_factory=StreakData)


@dataclass(frozen=True)
class BadgeRule:
    id: str
    name: str
    description: str
    icon: str
    rarity: str
    category: str
    predicate: Callable[[BadgeContext], bool]

    def to_badge(self) -> Badge:
        return Badge(id=self.id, name=self.name, description=self.description,
                     icon=self.icon, rarity=self.rarity, category=self.category)


# ============================================================================
# PREDICATE HELPERS
# ============================================================================

def _messages_with(ctx: BadgeContext, keywords: Sequence[str]) -> int:
    """Number of messages containing at least one of the keywords."""
    return sum(1 for m in ctx.messages if find_keywords(m.text, keywords))


def _messages_with_emotion(ctx: BadgeContext, emotion: str) -> int:
    return sum(1 for m in ctx.messages if emotion in m.emotions)


def _messages_in_hours(ctx: BadgeContext, hours: Sequence[int]) -> int:
    return sum(1 for m in ctx.messages if m.timestamp.hour in hours)


def _longest_streak(ctx: BadgeContext) -> int:
    streaks = ctx.analytics.streaks
    return streaks[0].days if streaks else 0


def _is_passionate(msg: Message) -> bool:
    return msg.text.count("!") >= 2 or bool(find_keywords(msg.text, lexicon.PASSION_WORDS))


def _is_curt(msg: Message) -> bool:
    words = msg.text.strip().split()
    return len(words) == 1 and words[0].lower() in lexicon.CURT_REPLIES


def _instant_reply(ctx: BadgeContext) -> bool:
    samples = [r.avg_minutes for r in ctx.analytics.response_times.values() if r.count > 0]
    if not samples:
        return False
    return sum(samples) / len(samples) <= 5


def _balanced_duo(ctx: BadgeContext) -> bool:
    if len(ctx.stats) != 2:
        return False
    counts = [s.message_count for s in ctx.stats.values()]
    return min(counts) / sum(counts) >= 0.45


# ============================================================================
# REGISTRY
# ============================================================================

BADGE_RULES: List[BadgeRule] = [
    # Positive
    BadgeRule("sunshine", "Sunshine", "80% or more positive messages", "☀️", "rare", "positive",
              lambda ctx: ctx.summary.positive_percent >= 80),
    BadgeRule("cheerleader", "Cheerleader", "High encouragement and support", "📣", "uncommon", "positive",
              lambda ctx: _messages_with(ctx, lexicon.SUPPORT_PHRASES) >= 20),
    BadgeRule("glass_half_full", "Glass Half Full", "Consistently optimistic outlook", "🥛", "uncommon", "positive",
              lambda ctx: _messages_with(ctx, lexicon.OPTIMISM_WORDS) >= 50),
    BadgeRule("gratitude_guru", "Gratitude Guru", "Expresses thanks frequently", "🙏", "rare", "positive",
              lambda ctx: _messages_with_emotion(ctx, "gratitude") >= 30),

    # Funny
    BadgeRule("lol_legend", "LOL Legend", "Uses LOL, LMAO, ROFL frequently", "😂", "common", "funny",
              lambda ctx: _messages_with(ctx, lexicon.LAUGHTER_WORDS) >= 100),
    BadgeRule("meme_master", "Meme Master", "References memes and internet culture", "🐸", "uncommon", "funny",
              lambda ctx: _messages_with(ctx, lexicon.MEME_WORDS) >= 25),
    BadgeRule("emoji_enthusiast", "Emoji Enthusiast", "Uses 500+ emojis", "😎", "uncommon", "funny",
              lambda ctx: sum(count_emojis(m.text) for m in ctx.messages) >= 500),
    BadgeRule("comedy_gold", "Comedy Gold", "High joy emotion detection", "🎪", "rare", "funny",
              lambda ctx: _messages_with_emotion(ctx, "joy") >= 200),

    # Spicy
    BadgeRule("debate_champion", "Debate Champion", "Engages in healthy debates", "🎯", "uncommon", "spicy",
              lambda ctx: _messages_with(ctx, lexicon.DEBATE_WORDS) >= 50),
    BadgeRule("truth_teller", "Truth Teller", "Keeps it real and honest", "💯", "rare", "spicy",
              lambda ctx: _messages_with(ctx, lexicon.HONESTY_PHRASES) >= 30),
    BadgeRule("passion_project", "Passion Project", "Expresses strong emotions", "🔥", "uncommon", "spicy",
              lambda ctx: sum(1 for m in ctx.messages if _is_passionate(m)) >= 100),
    BadgeRule("lowkey_toxic", "Lowkey Toxic", "Occasional sassy moments", "😏", "epic", "spicy",
              lambda ctx: sum(1 for m in ctx.messages if _is_curt(m)) >= 20),

    # Milestone
    BadgeRule("first_100", "Century", "Sent 100 messages", "💬", "common", "milestone",
              lambda ctx: len(ctx.messages) >= 100),
    BadgeRule("first_1000", "Chatterbox", "Sent 1,000 messages", "🗨️", "uncommon", "milestone",
              lambda ctx: len(ctx.messages) >= 1000),
    BadgeRule("first_10000", "Message Marathon", "Sent 10,000 messages", "🏆", "legendary", "milestone",
              lambda ctx: len(ctx.messages) >= 10000),
    BadgeRule("night_owl", "Night Owl", "Frequently chats late at night", "🦉", "uncommon", "milestone",
              lambda ctx: _messages_in_hours(ctx, (23, 0, 1, 2, 3, 4)) >= 50),
    BadgeRule("early_bird", "Early Bird", "Frequently chats early in the morning", "🐦", "uncommon", "milestone",
              lambda ctx: _messages_in_hours(ctx, (5, 6, 7)) >= 50),

    # Engagement
    BadgeRule("instant_reply", "Instant Reply", "Average response time under 5 minutes", "⚡", "rare", "engagement",
              _instant_reply),
    BadgeRule("conversation_starter", "Conversation Starter", "Initiates conversations frequently", "🎬",
              "uncommon", "engagement",
              lambda ctx: len(ctx.analytics.streaks) >= 10),
    BadgeRule("balanced_duo", "Balanced Duo", "Both participants contribute equally", "⚖️", "rare", "engagement",
              _balanced_duo),
    BadgeRule("week_streak", "7-Day Streak", "Chatted for 7 consecutive days", "📅", "uncommon", "engagement",
              lambda ctx: _longest_streak(ctx) >= 7),
    BadgeRule("month_streak", "30-Day Streak", "Chatted for 30 consecutive days", "💪", "rare", "engagement",
              lambda ctx: _longest_streak(ctx) >= 30),
    BadgeRule("hundred_day_streak", "100-Day Streak", "Chatted for 100 consecutive days", "👑", "legendary",
              "engagement",
              lambda ctx: _longest_streak(ctx) >= 100),
    BadgeRule("deep_talker", "Deep Talker", "Sends long, thoughtful messages", "📝", "uncommon", "engagement",
              lambda ctx: sum(1 for m in ctx.messages if len(m.text) >= 200) >= 50),
    BadgeRule("voice_note_addict", "Voice Note Addict", "Mentions voice notes frequently", "🎤", "uncommon",
              "engagement",
              lambda ctx: _messages_with(ctx, lexicon.VOICE_NOTE_MARKERS) >= 20),
]


def get_rule(badge_id: str) -> Optional[BadgeRule]:
    return next((r for r in BADGE_RULES if r.id == badge_id), None)


def evaluate_badges(context: BadgeContext, rules: Optional[Sequence[BadgeRule]] = None) -> List[Badge]:
    """
    Evaluate every rule and return the unlocked badges in registry order.

    A predicate that raises is logged and counts as locked; the remaining
    rules are still evaluated.
    """
    rules = BADGE_RULES if rules is None else rules
    unlocked = []

    for rule in rules:
        try:
            if rule.predicate(context):
                unlocked.append(rule.to_badge())
        except Exception:
            logger.exception(f"Badge rule {rule.id} failed; treating as locked")

    logger.debug(f"Unlocked {len(unlocked)}/{len(rules)} badges")
    return unlocked
