"""
Behavioral analytics for chatbond
Derives streaks, silences, peak hours, response times, engagement timeline,
word frequency and per-sender statistics from canonical messages
"""

import math
import logging
from collections import Counter
from datetime import date, timedelta
from typing import Dict, Any, List, Optional, Sequence, Tuple
import pandas as pd
import numpy as np

from . import config
from .models import (
    AnalyticsBundle,
    Message,
    PeakHour,
    ResponseStats,
    SenderStats,
    Silence,
    Streak,
    TimelinePoint,
    WordFrequency,
)
from .text_features import tokenize_words
from .utils import round_half_up, safe_divide

logger = logging.getLogger(__name__)

# Response quality bands: (upper bound in minutes, score)
RESPONSE_SCORE_BANDS = [(5, 10), (15, 9), (30, 8), (60, 7), (120, 6), (240, 5), (480, 4)]
RESPONSE_SCORE_FLOOR = 3
RESPONSE_SCORE_NO_DATA = 5

BALANCE_FULL_CREDIT_SHARE = 0.45


def messages_to_frame(messages: Sequence[Message]) -> pd.DataFrame:
    """Build a timestamp-sorted DataFrame with the columns analytics needs."""
    if not messages:
        return pd.DataFrame(columns=["sender", "text", "timestamp", "day", "hour", "length", "words"])

    df = pd.DataFrame({
        "sender": [m.sender for m in messages],
        "text": [m.text for m in messages],
        "timestamp": pd.to_datetime([m.timestamp for m in messages]),
    })
    df = df.sort_values("timestamp", kind="stable").reset_index(drop=True)
    df["day"] = df["timestamp"].dt.date
    df["hour"] = df["timestamp"].dt.hour
    df["length"] = df["text"].str.len()
    df["words"] = df["text"].str.split().str.len().fillna(0).astype(int)
    return df


def get_total_days(messages: Sequence[Message]) -> int:
    """Days spanned by the conversation, rounded up, at least 1."""
    if not messages:
        return 1
    timestamps = [m.timestamp for m in messages]
    span = (max(timestamps) - min(timestamps)).total_seconds() / 86400
    return max(1, math.ceil(span))


def get_stats_per_sender(messages: Sequence[Message]) -> Dict[str, SenderStats]:
    """Message, character and word totals per sender, in first-appearance order."""
    df = messages_to_frame(messages)
    if df.empty:
        return {}

    grouped = df.groupby("sender", sort=False).agg(
        message_count=("text", "size"),
        total_characters=("length", "sum"),
        word_count=("words", "sum"),
    )

    stats = {}
    for sender, row in grouped.iterrows():
        count = int(row["message_count"])
        stats[sender] = SenderStats(
            message_count=count,
            total_characters=int(row["total_characters"]),
            word_count=int(row["word_count"]),
            avg_message_length=round_half_up(safe_divide(row["total_characters"], count)),
            avg_words_per_message=round(safe_divide(row["word_count"], count), 1),
        )
    return stats


def find_streaks_and_silences(
    messages: Sequence[Message],
    silence_threshold: Optional[int] = None,
) -> Tuple[List[Streak], List[Silence]]:
    """
    Single linear scan over the sorted distinct active days.

    Consecutive days (gap of 1) extend the current streak; every maximal run,
    including isolated single days, is reported as a streak. A gap of at
    least `silence_threshold` days (and never less than 2) is a silence
    bounded by the two active days around it. Both lists are returned
    longest-first, earlier spans first on ties.
    """
    threshold = silence_threshold if silence_threshold is not None else config.SILENCE_THRESHOLD_DAYS
    threshold = max(2, threshold)

    days = sorted({m.timestamp.date() for m in messages})
    if not days:
        return [], []

    streaks: List[Streak] = []
    silences: List[Silence] = []
    run_start = days[0]

    for prev, curr in zip(days, days[1:]):
        gap = (curr - prev).days
        if gap == 1:
            continue
        streaks.append(Streak(start=run_start, end=prev, days=(prev - run_start).days + 1))
        if gap >= threshold:
            silences.append(Silence(start_date=prev, end_date=curr, days=gap))
        run_start = curr

    streaks.append(Streak(start=run_start, end=days[-1], days=(days[-1] - run_start).days + 1))

    streaks.sort(key=lambda s: (-s.days, s.start))
    silences.sort(key=lambda s: (-s.days, s.start_date))
    return streaks, silences


def get_peak_hours(messages: Sequence[Message]) -> List[PeakHour]:
    """24-bucket histogram of messages by hour of day."""
    df = messages_to_frame(messages)
    counts = df["hour"].value_counts() if not df.empty else pd.Series(dtype=int)
    return [PeakHour(hour=h, count=int(counts.get(h, 0)), label=f"{h}:00") for h in range(24)]


def get_response_times(
    messages: Sequence[Message],
    window_minutes: Optional[int] = None,
) -> Dict[str, ResponseStats]:
    """
    Per-responder reply latency.

    Only adjacent pairs with different senders count. A gap longer than the
    window (one day by default) is a new conversation rather than a reply;
    a gap of exactly the window still counts. The median is the upper middle
    sample of the sorted latencies.
    """
    window = window_minutes if window_minutes is not None else config.RESPONSE_WINDOW_MINUTES
    df = messages_to_frame(messages)
    if len(df) < 2:
        return {}

    prev_sender = df["sender"].shift()
    minutes = df["timestamp"].diff().dt.total_seconds() / 60
    mask = prev_sender.notna() & (df["sender"] != prev_sender) & (minutes <= window)

    samples = pd.DataFrame({"sender": df["sender"], "minutes": minutes})[mask]

    result = {}
    for sender, group in samples.groupby("sender", sort=False):
        values = np.sort(group["minutes"].to_numpy())
        result[sender] = ResponseStats(
            avg_minutes=round_half_up(float(values.mean())),
            median_minutes=round_half_up(float(values[len(values) // 2])),
            count=len(values),
        )
    return result


def period_key(day: date, period: str) -> date:
    if period == "week":
        # Weeks start on Sunday
        return day - timedelta(days=(day.weekday() + 1) % 7)
    return day


def get_engagement_timeline(messages: Sequence[Message], period: str = "day") -> List[TimelinePoint]:
    """Engagement per day or week: message volume, text volume and active senders."""
    if period not in ("day", "week"):
        raise ValueError(f"period must be 'day' or 'week', got {period!r}")

    df = messages_to_frame(messages)
    if df.empty:
        return []

    df["period"] = df["day"].map(lambda d: period_key(d, period))
    grouped = df.groupby("period").agg(
        message_count=("text", "size"),
        total_length=("length", "sum"),
        active_senders=("sender", "nunique"),
    )

    points = []
    for key, row in grouped.sort_index().iterrows():
        count, length, senders = int(row["message_count"]), int(row["total_length"]), int(row["active_senders"])
        score = round_half_up(0.4 * count + 0.3 * (length / 10) + 0.3 * (senders * 10))
        points.append(TimelinePoint(period=key.isoformat(), message_count=count,
                                    total_length=length, active_senders=senders, score=score))
    return points


def get_word_frequency(messages: Sequence[Message], top_n: int = 20, per_sender_top_n: int = 10) -> WordFrequency:
    """Most frequent non-stopwords overall and per sender."""
    overall: Counter = Counter()
    by_sender: Dict[str, Counter] = {}

    for msg in messages:
        words = tokenize_words(msg.text)
        overall.update(words)
        by_sender.setdefault(msg.sender, Counter()).update(words)

    return WordFrequency(
        overall=[[w, c] for w, c in overall.most_common(top_n)],
        by_sender={s: [[w, c] for w, c in counter.most_common(per_sender_top_n)]
                   for s, counter in by_sender.items()},
    )


# ============================================================================
# SCORES (0-10)
# ============================================================================

def calculate_frequency_score(messages: Sequence[Message]) -> float:
    """
    Messages-per-day curve on a 0-10 scale.

    Linear up to 5 at 5/day, 5-8 across 5-10/day, 8-9 across 10-20/day,
    and 10 above 20/day.
    """
    if not messages:
        return 0.0
    avg = len(messages) / get_total_days(messages)

    if avg <= 5:
        score = avg
    elif avg <= 10:
        score = 5 + (avg - 5) / 5 * 3
    elif avg <= 20:
        score = 8 + (avg - 10) / 10
    else:
        score = 10.0
    return round(score, 2)


def calculate_communication_balance(stats: Dict[str, SenderStats]) -> float:
    """0-10; full credit once the quieter participant holds at least 45% of messages."""
    if len(stats) < 2:
        return 5.0
    counts = [s.message_count for s in stats.values()]
    total = sum(counts)
    share = safe_divide(min(counts), total)
    if share >= BALANCE_FULL_CREDIT_SHARE:
        return 10.0
    return round(share / BALANCE_FULL_CREDIT_SHARE * 10, 2)


def calculate_response_score(response_times: Dict[str, ResponseStats]) -> float:
    """Band the average reply latency (mean of per-sender averages) onto 3-10."""
    samples = [r.avg_minutes for r in response_times.values() if r.count > 0]
    if not samples:
        return float(RESPONSE_SCORE_NO_DATA)
    avg = sum(samples) / len(samples)
    for limit, score in RESPONSE_SCORE_BANDS:
        if avg < limit:
            return float(score)
    return float(RESPONSE_SCORE_FLOOR)


def build_analytics(messages: Sequence[Message], period: Optional[str] = None) -> AnalyticsBundle:
    """Run every behavioral analysis over the message list."""
    logger.info(f"Computing behavioral analytics for {len(messages)} messages")
    streaks, silences = find_streaks_and_silences(messages)
    bundle = AnalyticsBundle(
        word_frequency=get_word_frequency(messages),
        streaks=streaks,
        silences=silences,
        peak_hours=get_peak_hours(messages),
        engagement_timeline=get_engagement_timeline(messages, period or config.TIMELINE_PERIOD),
        response_times=get_response_times(messages),
    )
    longest = streaks[0].days if streaks else 0
    logger.info(f"Found {len(streaks)} streaks (longest {longest}d) and {len(silences)} silences")
    return bundle


def summarize_activity(messages: Sequence[Message]) -> Dict[str, Any]:
    """Small activity digest used in logs and the wrapped recap."""
    df = messages_to_frame(messages)
    if df.empty:
        return {"busiest_day": None, "busiest_day_count": 0, "peak_hour": None}
    per_day = df.groupby("day").size()
    busiest = per_day.idxmax()
    hours = df["hour"].value_counts()
    return {
        "busiest_day": busiest.isoformat(),
        "busiest_day_count": int(per_day.max()),
        "peak_hour": f"{int(hours.idxmax())}:00",
    }
