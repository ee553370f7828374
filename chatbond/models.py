"""
Typed records for every pipeline stage.

Each stage returns dataclasses defined here; defaults are filled in once when
a stage builds its output, so consumers never need to guess at missing keys.
`to_dict()` renders a record (recursively) into JSON-safe primitives.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional


def serialize(value: Any) -> Any:
    """Convert dataclasses, datetimes and containers into JSON-safe values."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: serialize(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize(v) for v in value]
    return value


class Record:
    """Mixin giving dataclasses a `to_dict()`."""

    def to_dict(self) -> Dict[str, Any]:
        return serialize(self)


# ============================================================================
# PARSER
# ============================================================================

@dataclass
class SentimentResult(Record):
    label: str = "neutral"
    scores: Dict[str, float] = field(default_factory=dict)
    primary_emotion: str = "neutral"
    secondary_emotions: List[str] = field(default_factory=list)
    confidence: float = 0.0
    emotional_complexity: int = 0
    is_complex_emotion: bool = False
    positive_score: float = 0.0
    negative_score: float = 0.0
    source: str = "lexicon"


@dataclass
class CommunicationStyle(Record):
    dominant: str = "neutral"
    scores: Dict[str, int] = field(default_factory=dict)
    is_question: bool = False
    is_assertion: bool = False
    word_count: int = 0


@dataclass
class Message(Record):
    """A canonical chat message. Classification fields stay None until classified."""

    sender: str
    text: str
    timestamp: datetime
    synthetic_timestamp: bool = False
    sentiment: Optional[SentimentResult] = None
    emotions: List[str] = field(default_factory=list)
    communication_style: Optional[CommunicationStyle] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        """Rebuild a message from `to_dict()` output."""
        ts = data["timestamp"]
        if isinstance(ts, str):
            ts = datetime.fromisoformat(ts)
        sentiment = data.get("sentiment")
        style = data.get("communication_style")
        return cls(
            sender=data["sender"],
            text=data["text"],
            timestamp=ts,
            synthetic_timestamp=data.get("synthetic_timestamp", False),
            sentiment=SentimentResult(**sentiment) if sentiment else None,
            emotions=list(data.get("emotions") or []),
            communication_style=CommunicationStyle(**style) if style else None,
        )


@dataclass
class ChatMetadata(Record):
    participants: List[str]
    total_messages: int
    start_date: Optional[datetime]
    end_date: Optional[datetime]
    date_format: str
    date_format_confident: bool = True
    source_format: str = "plain"
    exported_at: Optional[datetime] = None
    original_message_count: Optional[int] = None
    has_real_timestamps: bool = True


@dataclass
class ParseResult(Record):
    messages: List[Message]
    metadata: ChatMetadata


# ============================================================================
# CLASSIFIER
# ============================================================================

@dataclass
class ContextResult(Record):
    primary: str = "personal"
    scores: Dict[str, int] = field(default_factory=dict)
    percentages: Dict[str, float] = field(default_factory=dict)


@dataclass
class ToxicPattern(Record):
    message_index: int
    sender: str
    categories: List[str]
    timestamp: Optional[datetime] = None


@dataclass
class ToxicityReport(Record):
    score: int = 0
    percent: float = 0.0
    level: str = "healthy"
    toxic_message_count: int = 0
    breakdown: Dict[str, int] = field(default_factory=dict)
    patterns: List[ToxicPattern] = field(default_factory=list)


@dataclass
class CorpusSignals(Record):
    context: ContextResult
    toxicity: ToxicityReport


# ============================================================================
# BEHAVIORAL ANALYTICS
# ============================================================================

@dataclass
class SenderStats(Record):
    message_count: int = 0
    total_characters: int = 0
    word_count: int = 0
    avg_message_length: int = 0
    avg_words_per_message: float = 0.0


@dataclass
class Streak(Record):
    start: date
    end: date
    days: int


@dataclass
class Silence(Record):
    start_date: date
    end_date: date
    days: int


@dataclass
class PeakHour(Record):
    hour: int
    count: int
    label: str


@dataclass
class ResponseStats(Record):
    avg_minutes: int = 0
    median_minutes: int = 0
    count: int = 0


@dataclass
class TimelinePoint(Record):
    period: str
    message_count: int
    total_length: int
    active_senders: int
    score: int


@dataclass
class WordFrequency(Record):
    overall: List[List[Any]] = field(default_factory=list)
    by_sender: Dict[str, List[List[Any]]] = field(default_factory=dict)


@dataclass
class AnalyticsBundle(Record):
    word_frequency: WordFrequency
    streaks: List[Streak]
    silences: List[Silence]
    peak_hours: List[PeakHour]
    engagement_timeline: List[TimelinePoint]
    response_times: Dict[str, ResponseStats]


# ============================================================================
# SENTIMENT SUMMARY
# ============================================================================

@dataclass
class RelationshipDynamics(Record):
    communication_balance: int = 50
    emotional_reciprocity: int = 50
    support_level: int = 50
    conflict_level: int = 0
    trust_level: int = 50
    message_distribution: Dict[str, int] = field(default_factory=dict)


@dataclass
class ResolutionPattern(Record):
    conflict_index: int
    resolution_index: int
    minutes: int


@dataclass
class ConflictResolution(Record):
    score: float = 0.5
    ratio: float = 0.5
    conflicts: int = 0
    resolutions: int = 0
    patterns: List[ResolutionPattern] = field(default_factory=list)


@dataclass
class SentimentPoint(Record):
    period: str
    positive_ratio: float
    negative_ratio: float
    neutral_ratio: float
    sentiment_score: float
    message_count: int


@dataclass
class AlignmentDetails(Record):
    blended_health: float
    compatibility_score: int
    relationship_level: float


@dataclass
class SentimentSummary(Record):
    positive_percent: int
    negative_percent: int
    neutral_percent: int
    overall_sentiment: str
    communication_health: str
    health_score: int
    top_emotions: List[str]
    emotion_breakdown: Dict[str, float]
    toxicity: ToxicityReport
    affection_level: int
    emotion_synchrony: int
    conflict_resolution: ConflictResolution
    context: ContextResult
    dynamics: RelationshipDynamics
    dominant_pattern: str
    pattern_breakdown: Dict[str, int]
    timeline: List[SentimentPoint]
    insights: List[str]
    total_days: int
    avg_messages_per_day: float
    narrative: Optional[Dict[str, Any]] = None
    pre_alignment: Optional[Dict[str, Any]] = None
    alignment: Optional[AlignmentDetails] = None


# ============================================================================
# GAMIFICATION
# ============================================================================

@dataclass
class RelationshipLevel(Record):
    level: float
    title: str
    description: str
    components: Dict[str, float] = field(default_factory=dict)
    next_level_progress: int = 0


@dataclass
class CompatibilityScore(Record):
    score: int
    tier: str
    components: Dict[str, float] = field(default_factory=dict)
    breakdown: Dict[str, float] = field(default_factory=dict)


@dataclass
class Badge(Record):
    id: str
    name: str
    description: str
    icon: str
    rarity: str
    category: str


@dataclass
class Milestone(Record):
    type: str
    value: int
    label: str
    achieved_date: Optional[datetime] = None


@dataclass
class HealthScores(Record):
    communication: int
    emotional: int
    engagement: int
    overall: int
    trend: str
    recommendations: List[str] = field(default_factory=list)


@dataclass
class StreakRun(Record):
    days: int = 0
    start: Optional[date] = None
    end: Optional[date] = None


@dataclass
class StreakData(Record):
    current: int = 0
    current_active: bool = False
    longest: StreakRun = field(default_factory=StreakRun)
    total_active_days: int = 0


@dataclass
class WrappedSummary(Record):
    total_messages: int = 0
    total_days: int = 0
    top_sender: Optional[str] = None
    busiest_day: Optional[str] = None
    busiest_day_count: int = 0
    peak_hour: Optional[str] = None
    top_words: List[str] = field(default_factory=list)
    top_emojis: List[List[Any]] = field(default_factory=list)
    longest_streak: int = 0
    top_emotion: Optional[str] = None
    relationship_title: Optional[str] = None
    compatibility_tier: Optional[str] = None


@dataclass
class GamificationBundle(Record):
    relationship_level: RelationshipLevel
    compatibility: CompatibilityScore
    badges: List[Badge]
    milestones: List[Milestone]
    health: HealthScores
    streak_data: StreakData
    wrapped: WrappedSummary


# ============================================================================
# PIPELINE OUTPUT
# ============================================================================

@dataclass
class AnalysisBundle(Record):
    messages: List[Message]
    metadata: ChatMetadata
    stats: Dict[str, SenderStats]
    analytics: AnalyticsBundle
    sentiment: SentimentSummary
    gamification: GamificationBundle
    generated_at: datetime = field(default_factory=datetime.now)
