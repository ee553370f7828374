"""
Text feature extraction for chatbond
Keyword matching, emoji parsing, tokenization and simple text flags
"""

import re
import logging
from functools import lru_cache
from typing import Dict, Any, List, Mapping, Sequence
import emoji

from . import lexicon

logger = logging.getLogger(__name__)

_APOSTROPHES = str.maketrans({"\u2019": "'", "\u2018": "'", "`": "'"})
_WORDLIKE = re.compile(r"^[\w' \-&:]+$")


def normalize_text(text: str) -> str:
    """Lowercase and unify apostrophes so keyword tables match typed variants."""
    if not text:
        return ""
    return text.translate(_APOSTROPHES).lower()


@lru_cache(maxsize=4096)
def _keyword_pattern(keyword: str) -> "re.Pattern[str]":
    """
    Compile a matcher for one keyword.

    Word-like keywords only match on word boundaries ("sad" does not hit
    "sadly" or "crusade"); emoji and punctuation keywords match anywhere.
    """
    kw = keyword.lower()
    if _WORDLIKE.match(kw):
        return re.compile(rf"(?<!\w){re.escape(kw)}(?!\w)")
    return re.compile(re.escape(kw))


def find_keywords(text: str, keywords: Sequence[str], normalized: bool = False) -> List[str]:
    """Return the keywords present in text (each keyword at most once)."""
    low = text if normalized else normalize_text(text)
    if not low:
        return []
    return [kw for kw in keywords if _keyword_pattern(kw).search(low)]


def score_categories(text: str, table: Mapping[str, Sequence[str]]) -> Dict[str, int]:
    """Count keyword hits per category, preserving the table's category order."""
    low = normalize_text(text)
    return {category: len(find_keywords(low, keywords, normalized=True))
            for category, keywords in table.items()}


def extract_emojis(text: str) -> List[str]:
    """Extract all emojis from text."""
    if not text:
        return []
    return [item["emoji"] for item in emoji.emoji_list(text)]


def count_emojis(text: str) -> int:
    return len(extract_emojis(text))


def tokenize_words(text: str) -> List[str]:
    """
    Split text into frequency-countable words.

    Punctuation becomes whitespace; words of 2 characters or fewer and
    stopwords are dropped.
    """
    if not text:
        return []
    cleaned = re.sub(r"[^\w\s]", " ", text.lower())
    return [w for w in cleaned.split() if len(w) > 2 and w not in lexicon.STOPWORDS and not w.isdigit()]


def compute_text_flags(text: str) -> Dict[str, Any]:
    """
    Compute various text flags.

    Returns dict with:
        - question_flag: Has question mark
        - exclaim_count: Number of exclamation marks
        - all_caps_flag: Is majority uppercase
        - msg_length: Character count
        - word_count: Word count
    """
    if not text:
        return {
            "question_flag": False,
            "exclaim_count": 0,
            "all_caps_flag": False,
            "msg_length": 0,
            "word_count": 0,
        }

    words = text.split()
    alpha_chars = [c for c in text if c.isalpha()]

    return {
        "question_flag": "?" in text,
        "exclaim_count": text.count("!"),
        "all_caps_flag": len(alpha_chars) > 0 and sum(1 for c in alpha_chars if c.isupper()) / len(alpha_chars) > 0.7,
        "msg_length": len(text),
        "word_count": len(words),
    }


if __name__ == "__main__":
    test_texts = [
        "I love you so much ❤️😘",
        "Ugh I'm so stressed about the deadline 😰",
        "WTF is going on here?! 😡",
        "Hahaha that's so funny 😂😂😂",
    ]

    for text in test_texts:
        print(f"\nText: {text}")
        print(f"  emotions: {score_categories(text, lexicon.EMOTION_KEYWORDS)}")
        print(f"  emojis: {extract_emojis(text)}")
        print(f"  flags: {compute_text_flags(text)}")
