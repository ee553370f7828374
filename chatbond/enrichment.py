"""
Generative-model enrichment client for chatbond
Optional second opinion on sampled message sentiment plus a conversation
narrative. Every failure degrades to the deterministic keyword output.
"""

import re
import json
import time
import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence
import requests

from . import config, lexicon
from .analytics import get_total_days
from .classifier import analyze_sentiment
from .exceptions import EnrichmentError
from .models import Message, SenderStats
from .privacy import Pseudonymizer, pseudonymize_messages

logger = logging.getLogger(__name__)

SENTIMENT_LABELS = ("positive", "negative", "neutral")
_FENCE_RE = re.compile(r"```(?:json)?\s*")

MESSAGE_PROMPT = """Analyze the sentiment and emotion in this message. Respond with ONLY valid JSON (no markdown, no code blocks, no extra text):

Message: "{text}"

Return this exact JSON structure:
{{
  "sentiment": "positive|negative|neutral",
  "primaryEmotion": "{emotions}",
  "secondaryEmotions": ["emotion1", "emotion2"],
  "confidence": 0.85
}}"""

CONVERSATION_PROMPT = """Analyze this conversation between {participants}.

Sample messages ({sample} of {total}):
{lines}

Stats: {total} messages over {days} days ({per_day}/day avg)

Return ONLY valid JSON:
{{
  "overallDynamic": "Brief description of relationship dynamic",
  "keyStrengths": ["strength1", "strength2", "strength3"],
  "areasForGrowth": ["area1", "area2"],
  "emotionalPatterns": "Description of emotional patterns",
  "relationshipStage": "Description of relationship stage/maturity",
  "insights": ["Deep insight 1", "Deep insight 2"]
}}"""


def categorize_failure(status_code: Optional[int] = None, message: str = "") -> str:
    """
    Sort a failed call into quota, not_found or other.

    Quota and not_found failures are worth retrying on a different model.
    """
    text = (message or "").lower()
    if status_code == 429 or "quota" in text or "rate limit" in text or "429" in text:
        return "quota"
    if status_code == 404 or "not found" in text or "404" in text:
        return "not_found"
    return "other"


def evenly_spaced_indices(n: int, sample_size: int) -> List[int]:
    """Indices of an even sample: every (n // sample_size)-th item, capped at sample_size."""
    if n <= 0 or sample_size <= 0:
        return []
    if n <= sample_size:
        return list(range(n))
    step = n // sample_size
    return list(range(0, n, step))[:sample_size]


class EnrichmentSession:
    """
    Fallback pointer into the configured model list.

    One session spans one analysis; call reset() before starting an
    independent one.
    """

    def __init__(self, models: Optional[Sequence[str]] = None):
        self.models = list(models) if models is not None else list(config.ENRICHMENT_MODELS)
        self.index = 0

    @property
    def current_model(self) -> Optional[str]:
        """Model in use, or None once every model has been exhausted."""
        if self.index < len(self.models):
            return self.models[self.index]
        return None

    @property
    def exhausted(self) -> bool:
        return self.current_model is None

    def advance(self) -> Optional[str]:
        """Move to the next model and return it (None when none are left)."""
        self.index += 1
        nxt = self.current_model
        if nxt:
            logger.warning(f"Switching enrichment model to {nxt} (index {self.index})")
        else:
            logger.warning("All enrichment models exhausted, falling back to keyword analysis")
        return nxt

    def reset(self):
        self.index = 0
        logger.debug(f"Enrichment session reset to {self.current_model}")


class EnrichmentClient:
    """
    Client for a generative-text REST API with model fallback.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        session: Optional[EnrichmentSession] = None,
        delay: Optional[float] = None,
        sample_size: Optional[int] = None,
        mock_mode: bool = False,
        pseudonymize: Optional[bool] = None,
    ):
        """
        Initialize enrichment client.

        Args:
            api_key: API key (default from config)
            session: Model fallback session (a fresh one by default)
            delay: Sleep between sequential calls in seconds (default from config)
            sample_size: Messages to enrich per conversation (default from config)
            mock_mode: Answer locally without network calls (default False)
            pseudonymize: Mask PII before sending (default from config)
        """
        self.api_key = api_key or config.ENRICHMENT_API_KEY
        if not self.api_key and not mock_mode:
            raise ValueError("ENRICHMENT_API_KEY not set - add to .env file or pass as argument")

        self.session = session or EnrichmentSession()
        self.delay = config.ENRICHMENT_DELAY if delay is None else delay
        self.sample_size = sample_size or config.ENRICHMENT_SAMPLE_SIZE
        self.pseudonymize = config.ENRICH_PSEUDONYMIZE if pseudonymize is None else pseudonymize
        self.timeout = config.ENRICHMENT_TIMEOUT
        self.max_retries = config.ENRICHMENT_MAX_RETRIES
        self.api_base = config.ENRICHMENT_API_BASE.rstrip("/")
        self.mock_mode = mock_mode

        logger.info(f"EnrichmentClient initialized (model={self.session.current_model}, "
                    f"sample_size={self.sample_size}, mock={mock_mode})")

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _post(self, model: str, prompt: str) -> str:
        """
        One generateContent call with retries for transient errors.

        Raises:
            EnrichmentError: categorized failure
        """
        url = f"{self.api_base}/{model}:generateContent"
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        last_error = None

        for attempt in range(self.max_retries):
            try:
                response = requests.post(url, params={"key": self.api_key}, json=payload, timeout=self.timeout)
            except requests.Timeout:
                logger.warning(f"Timeout on attempt {attempt+1}/{self.max_retries}")
                last_error = "Timeout"
                continue
            except requests.RequestException as e:
                raise EnrichmentError(f"Request failed: {e}", categorize_failure(None, str(e))) from e

            if response.status_code == 200:
                try:
                    body = response.json()
                except ValueError as e:
                    raise EnrichmentError(f"Invalid JSON from {model}: {response.text[:200]}", "other") from e
                return self._extract_text(body)

            if response.status_code in (404, 429):
                raise EnrichmentError(
                    f"{model} returned {response.status_code}: {response.text[:200]}",
                    categorize_failure(response.status_code, response.text),
                )

            if response.status_code >= 500:
                wait_time = 2 ** attempt
                logger.warning(f"Server error {response.status_code}, retrying in {wait_time}s "
                               f"(attempt {attempt+1}/{self.max_retries})")
                time.sleep(wait_time)
                last_error = f"Server error: {response.status_code}"
                continue

            raise EnrichmentError(f"API error {response.status_code}: {response.text[:200]}",
                                  categorize_failure(response.status_code, response.text))

        raise EnrichmentError(f"All retries failed for {model}: {last_error}", "other")

    @staticmethod
    def _extract_text(body: Dict[str, Any]) -> str:
        try:
            return body["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise EnrichmentError(f"Unexpected response format: {str(body)[:200]}", "other") from e

    def _generate(self, prompt: str) -> str:
        """Send a prompt, moving down the model list on quota and not-found failures."""
        while not self.session.exhausted:
            model = self.session.current_model
            try:
                return self._post(model, prompt)
            except EnrichmentError as e:
                if e.category in ("quota", "not_found"):
                    logger.warning(f"{model} unavailable ({e.category}): {e}")
                    self.session.advance()
                    continue
                raise
        raise EnrichmentError("No enrichment model available", "quota")

    @staticmethod
    def _parse_json(text: str) -> Dict[str, Any]:
        cleaned = _FENCE_RE.sub("", text).strip()
        try:
            data = json.loads(cleaned)
        except ValueError as e:
            raise EnrichmentError(f"Response is not JSON: {cleaned[:200]}", "other") from e
        if not isinstance(data, dict):
            raise EnrichmentError("Response JSON is not an object", "other")
        return data

    # ------------------------------------------------------------------
    # Message-level
    # ------------------------------------------------------------------

    def enrich_message(self, text: str) -> Optional[Dict[str, Any]]:
        """
        Ask the model for one message's sentiment.

        Returns:
            Dict with sentiment, primary_emotion, secondary_emotions and
            confidence, or None when enrichment failed
        """
        if self.mock_mode:
            return self._mock_message(text)

        prompt = MESSAGE_PROMPT.format(text=text.replace('"', "'"), emotions="|".join(lexicon.EMOTIONS))
        try:
            return self._normalize_message(self._parse_json(self._generate(prompt)))
        except EnrichmentError as e:
            logger.warning(f"Message enrichment failed ({e.category}): {e}")
            return None

    @staticmethod
    def _normalize_message(data: Dict[str, Any]) -> Dict[str, Any]:
        sentiment = str(data.get("sentiment", "")).lower()
        if sentiment not in SENTIMENT_LABELS:
            raise EnrichmentError(f"Unknown sentiment label: {sentiment!r}", "other")

        primary = data.get("primaryEmotion", data.get("primary_emotion", "neutral"))
        secondary = data.get("secondaryEmotions", data.get("secondary_emotions", [])) or []
        try:
            confidence = float(data.get("confidence", 0.5))
        except (TypeError, ValueError):
            confidence = 0.5

        return {
            "sentiment": sentiment,
            "primary_emotion": primary if primary in lexicon.EMOTIONS else "neutral",
            "secondary_emotions": [e for e in secondary if e in lexicon.EMOTIONS],
            "confidence": max(0.0, min(1.0, confidence)),
        }

    @staticmethod
    def _mock_message(text: str) -> Dict[str, Any]:
        result = analyze_sentiment(text)
        return {
            "sentiment": result.label,
            "primary_emotion": result.primary_emotion,
            "secondary_emotions": list(result.secondary_emotions),
            "confidence": 0.9 if result.label != "neutral" else 0.5,
        }

    def enrich_messages(self, messages: Sequence[Message]) -> List[Message]:
        """
        Override the label and confidence of an evenly spaced sample.

        Calls are sequential with `delay` seconds between them. Messages that
        were not sampled, or whose call failed, keep their keyword sentiment.
        """
        result = list(messages)
        indices = evenly_spaced_indices(len(result), self.sample_size)
        if not indices:
            return result

        pseudo = Pseudonymizer() if self.pseudonymize else None
        if pseudo:
            for msg in result:
                pseudo.pseudonymize_sender(msg.sender)

        logger.info(f"Enriching {len(indices)} of {len(result)} messages (model={self.session.current_model})")
        enriched = 0

        for n, idx in enumerate(indices):
            if not self.mock_mode and self.session.exhausted:
                logger.warning("Enrichment models exhausted, keeping keyword sentiment for the rest")
                break

            msg = result[idx]
            text = pseudo.pseudonymize_text(msg.text) if pseudo else msg.text
            override = self.enrich_message(text)

            if override and msg.sentiment is not None:
                result[idx] = replace(msg, sentiment=replace(
                    msg.sentiment,
                    label=override["sentiment"],
                    confidence=override["confidence"],
                    source="enrichment",
                ))
                enriched += 1

            if (n + 1) % 10 == 0:
                logger.info(f"Progress: {n + 1}/{len(indices)} (enriched: {enriched})")

            if self.delay and n < len(indices) - 1:
                time.sleep(self.delay)

        logger.info(f"Enrichment complete: {enriched} enriched, {len(indices) - enriched} kept keyword sentiment")
        return result

    # ------------------------------------------------------------------
    # Conversation-level
    # ------------------------------------------------------------------

    def enrich_conversation(
        self,
        messages: Sequence[Message],
        stats: Dict[str, SenderStats],
    ) -> Optional[Dict[str, Any]]:
        """
        One call describing the whole conversation.

        Returns:
            Narrative dict (overall_dynamic, key_strengths, areas_for_growth,
            emotional_patterns, relationship_stage, insights) or None
        """
        if not messages:
            return None

        pseudo = None
        sample_source: Sequence[Message] = messages
        if self.pseudonymize:
            sample_source, pseudo = pseudonymize_messages(messages)

        participants = [pseudo.pseudonymize_sender(s) if pseudo else s for s in stats] or ["Person 1", "Person 2"]
        indices = evenly_spaced_indices(len(sample_source), config.ENRICHMENT_CONVERSATION_SAMPLE)
        lines = "\n".join(f"{sample_source[i].sender}: {sample_source[i].text[:100]}" for i in indices)
        days = get_total_days(messages)

        if self.mock_mode:
            narrative = self._mock_conversation(participants, len(messages), days)
        else:
            prompt = CONVERSATION_PROMPT.format(
                participants=" and ".join(participants),
                sample=len(indices),
                total=len(messages),
                lines=lines,
                days=days,
                per_day=round(len(messages) / days, 1),
            )
            try:
                narrative = self._normalize_conversation(self._parse_json(self._generate(prompt)))
            except EnrichmentError as e:
                logger.warning(f"Conversation enrichment failed ({e.category}): {e}")
                return None

        if pseudo:
            narrative = _restore(narrative, pseudo)
        return narrative

    @staticmethod
    def _normalize_conversation(data: Dict[str, Any]) -> Dict[str, Any]:
        def as_list(value):
            return [str(v) for v in value] if isinstance(value, list) else []

        return {
            "overall_dynamic": str(data.get("overallDynamic", "")),
            "key_strengths": as_list(data.get("keyStrengths")),
            "areas_for_growth": as_list(data.get("areasForGrowth")),
            "emotional_patterns": str(data.get("emotionalPatterns", "")),
            "relationship_stage": str(data.get("relationshipStage", "")),
            "insights": as_list(data.get("insights")),
        }

    @staticmethod
    def _mock_conversation(participants: Sequence[str], total: int, days: int) -> Dict[str, Any]:
        return {
            "overall_dynamic": f"{' and '.join(participants)} exchanged {total} messages over {days} days.",
            "key_strengths": ["Regular contact"],
            "areas_for_growth": [],
            "emotional_patterns": "",
            "relationship_stage": "",
            "insights": [],
        }


def _restore(value: Any, pseudo: Pseudonymizer) -> Any:
    """Swap aliases back to real names throughout a narrative."""
    if isinstance(value, str):
        return pseudo.restore_text(value)
    if isinstance(value, list):
        return [_restore(v, pseudo) for v in value]
    if isinstance(value, dict):
        return {k: _restore(v, pseudo) for k, v in value.items()}
    return value


if __name__ == "__main__":
    from datetime import datetime

    client = EnrichmentClient(mock_mode=True, delay=0)
    texts = ["I love you!", "You are terrible!", "Hello world"]
    for text in texts:
        print(f"  {text[:30]}: {client.enrich_message(text)}")

    msgs = [Message(sender="Alice" if i % 2 else "Bob", text=t, timestamp=datetime.now())
            for i, t in enumerate(texts)]
    print(client.enrich_conversation(msgs, {"Alice": SenderStats(), "Bob": SenderStats()}))
