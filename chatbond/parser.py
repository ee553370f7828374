"""
Multi-format chat parser for chatbond
Handles plain-text messenger exports (dash and bracket styles), JSON scrapes
and PDF-extracted mail threads, producing canonical messages plus metadata
"""

import re
import json
import math
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple
import pandas as pd

from . import config
from .exceptions import ParseError
from .models import ChatMetadata, Message, ParseResult

logger = logging.getLogger(__name__)

# Unicode quirks
NBSP = "\u00A0"
NNBSP = "\u202F"
ZWSP = "\u200B"
LRM = "\u200E"
RLM = "\u200F"
BOM = "\ufeff"
DASHES = "-\u2013\u2014"

_DATE = r"\d{1,2}/\d{1,2}/\d{2,4}"
_TIME = r"\d{1,2}:\d{2}(?::\d{2})?"
_AMPM = r"[AaPp]\.?[Mm]\.?"

# "25/12/23, 14:30 - Alice: Hello"
DASH_LINE_RE = re.compile(
    rf"""^
    (?P<date>{_DATE})
    ,?\s+
    (?P<time>{_TIME})
    (?:\s*(?P<ampm>{_AMPM}))?
    \s*[{DASHES}]\s*
    (?P<sender>[^:]+?):
    \s?(?P<message>.*)
    $""",
    re.VERBOSE,
)

# "[25/12/23, 14:30:05] Alice: Hello"
BRACKET_LINE_RE = re.compile(
    rf"""^\[
    (?P<date>{_DATE})
    ,?\s+
    (?P<time>{_TIME})
    (?:\s*(?P<ampm>{_AMPM}))?
    \]\s*
    (?P<sender>[^:]+?):
    \s?(?P<message>.*)
    $""",
    re.VERBOSE,
)

# Header-shaped lines without a sender ("25/12/23, 14:30 - Bob left")
SENDERLESS_LINE_RE = re.compile(
    rf"^\[?(?P<date>{_DATE}),?\s+(?P<time>{_TIME})(?:\s*(?P<ampm>{_AMPM}))?\]?\s*[{DASHES}]?\s*(?P<message>[^:]*)$"
)

DATE_TOKEN_RE = re.compile(r"^\[?(\d{1,2})/(\d{1,2})/\d{2,4}")

# Non-conversational events, matched against a finalized message's text
SYSTEM_PATTERNS = [re.compile(p, re.IGNORECASE) for p in (
    r"messages and calls are end-to-end encrypted",
    r"<media omitted>",
    r"^this message was deleted\.?$",
    r"^you deleted this message\.?$",
    r"^missed (?:voice|video|group voice|group video) call",
    r"^(?:image|video|audio|document|sticker|gif|contact card) omitted$",
    r"^location: ",
    r"live location shared",
    r"joined using this group'?s invite link",
    r"joined via invite link",
    r"\badded you\b",
    r"^\S+(?: \S+){0,3} removed \S+",
    r"^\S+(?: \S+){0,3} left$",
    r"changed the subject",
    r"changed (?:this|the) group'?s? (?:icon|description)",
    r"security code (?:with .+ )?changed",
    r"your security code with",
    r"created group",
    r"changed their phone number",
)]

# Mail-thread (PDF-extracted) grammar
MONTHS = ("January|February|March|April|May|June|July|August|"
          "September|October|November|December")
MAIL_HEADER_RE = re.compile(
    rf"^(?P<name>.+?)\s+<(?P<email>[^>]+@[^>]+)>\s+"
    rf"(?P<date>\d{{1,2}}\s+(?:{MONTHS})\s+\d{{4}})\s+at\s+(?P<time>\d{{1,2}}:\d{{2}})"
)
MAIL_SKIP_PATTERNS = [re.compile(p, re.IGNORECASE) for p in (
    r"^(?:to|from|date|subject|cc|bcc):",
    r"^fwd:",
    r"^-{3,}",
    r"forwarded message",
    r"^\d{1,2}/\d{1,2}/\d{2,4},?\s+\d{1,2}:\d{2}",
    r"^gmail\s*-",
    r"^--$",
    r"^\d+\s+messages?$",
    r"mail\.google\.com",
    r"^\d+/\d+$",
    r"^\d+K$",
)]
MAIL_STOP_PATTERNS = [re.compile(p, re.IGNORECASE) for p in (
    r"^on .+ wrote:$",
    r"^>",
    r"personal profile:",
)]

READ_RECEIPT_RE = re.compile(r"^message read by\s+(?P<name>.+)$", re.IGNORECASE)

FORMAT_ALIASES = {
    "plain": "plain", "txt": "plain", "text": "plain", "whatsapp": "plain",
    "plain-export": "plain",
    "json": "json",
    "pdf": "pdf", "pdf-extracted-text": "pdf", "gmail": "pdf", "mail": "pdf",
}


def _strip_weird_unicode(s: str) -> str:
    """Normalize export quirks: remove invisible chars, unify spaces."""
    if not s:
        return s
    s = s.replace(BOM, "")
    s = s.replace(LRM, "").replace(RLM, "")
    s = s.replace(ZWSP, " ")
    s = s.replace(NBSP, " ").replace(NNBSP, " ")
    s = re.sub(r"[ \t]+", " ", s)
    return s.strip()


def _looks_like_system(text: str) -> bool:
    """Check if a finalized message text is a system event."""
    return any(p.search(text) for p in SYSTEM_PATTERNS)


def normalize_format_hint(format_hint: Optional[str]) -> str:
    """Map user-facing format names onto plain | json | pdf."""
    key = (format_hint or "plain").strip().lower()
    if key not in FORMAT_ALIASES:
        raise ParseError(f"Unsupported format hint: {format_hint!r}")
    return FORMAT_ALIASES[key]


def detect_date_format(lines: Sequence[str], scan_lines: int = 50) -> Tuple[str, bool]:
    """
    Decide whether D/D/YY tokens are day-first or month-first.

    Scans the first `scan_lines` lines; a field greater than 12 must be the
    day. Returns (format, confident) where format is "DMY" or "MDY" and
    confident is False when no disambiguating token was seen.
    """
    for raw in lines[:scan_lines]:
        m = DATE_TOKEN_RE.match(_strip_weird_unicode(raw))
        if not m:
            continue
        first, second = int(m.group(1)), int(m.group(2))
        if first > 12:
            return "DMY", True
        if second > 12:
            return "MDY", True
    return config.DEFAULT_DATE_FORMAT, False


def _to_local_naive(ts: Any) -> Optional[datetime]:
    """Coerce JSON timestamp values (ISO strings, epoch s/ms) into naive datetimes."""
    if ts is None or ts == "":
        return None
    try:
        if isinstance(ts, (int, float)) and not isinstance(ts, bool):
            parsed = pd.to_datetime(ts, unit="ms" if ts > 1e11 else "s", utc=True)
        else:
            parsed = pd.to_datetime(str(ts))
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(parsed):
        return None
    result = parsed.to_pydatetime()
    if result.tzinfo is not None:
        result = result.astimezone().replace(tzinfo=None)
    return result


class ChatParser:
    """Parse chat exports into canonical messages and metadata."""

    def __init__(self, now: Optional[datetime] = None, scan_lines: Optional[int] = None):
        """
        Args:
            now: Reference instant for fallback/synthetic timestamps (default: parse time)
            scan_lines: Lines inspected for date-order evidence (default from config)
        """
        self._now = now
        self.scan_lines = scan_lines or config.DATE_SCAN_LINES

    @property
    def now(self) -> datetime:
        return self._now or datetime.now()

    def parse(self, raw_content: str, format_hint: Optional[str] = "plain") -> ParseResult:
        """Parse raw export content. Raises ParseError when no messages are found."""
        fmt = normalize_format_hint(format_hint)
        if isinstance(raw_content, bytes):
            raw_content = raw_content.decode("utf-8", errors="replace")
        raw_content = raw_content.replace(BOM, "")

        if fmt == "json":
            result = self.parse_json(raw_content)
        elif fmt == "pdf":
            result = self.parse_mail_text(raw_content)
        else:
            result = self.parse_text(raw_content)

        meta = result.metadata
        logger.info(
            f"Parsed {meta.total_messages} messages from {len(meta.participants)} senders "
            f"(format={meta.source_format}, dates={meta.date_format})"
        )
        return result

    def parse_file(self, file_path: str, format_hint: Optional[str] = None) -> ParseResult:
        """Parse an export file from disk, inferring the format from its name if needed."""
        path = Path(file_path)
        if format_hint is None:
            name = path.name.lower()
            if name.endswith(".json"):
                format_hint = "json"
            elif name.endswith(".pdf.txt") or "gmail" in name:
                format_hint = "pdf"
            else:
                format_hint = "plain"

        encodings = ["utf-8", "utf-8-sig", "cp1252", "latin1"]
        last_err: Optional[Exception] = None

        for enc in encodings:
            try:
                with open(path, "r", encoding=enc) as f:
                    text = f.read()
            except UnicodeDecodeError as e:
                last_err = e
                continue
            except OSError as e:
                raise ParseError(f"Failed to read file {file_path}: {e}") from e
            return self.parse(text, format_hint)

        raise ParseError(f"Failed to decode file {file_path}: {last_err}")

    # ------------------------------------------------------------------
    # Plain-text exports
    # ------------------------------------------------------------------

    def parse_text(self, text: str) -> ParseResult:
        """Parse a dash- or bracket-delimited plain-text export."""
        lines = text.splitlines()
        date_format, confident = detect_date_format(lines, self.scan_lines)
        if not confident:
            logger.info(f"No day/month evidence in first {self.scan_lines} lines; assuming {date_format}")

        messages: List[Message] = []
        current: Optional[Dict[str, Any]] = None

        for i, raw in enumerate(lines, start=1):
            line = _strip_weird_unicode(raw)
            if not line:
                continue

            m = DASH_LINE_RE.match(line) or BRACKET_LINE_RE.match(line)
            system = None if m else SENDERLESS_LINE_RE.match(line)

            if m or system:
                if current:
                    self._finalize(current, messages)
                match = m or system
                current = {
                    "timestamp": self._build_timestamp(
                        match.group("date"), match.group("time"), match.group("ampm"), date_format, i
                    ),
                    "sender": m.group("sender").strip() if m else None,
                    "text": match.group("message").strip(),
                    "line_number": i,
                }
            elif current is not None:
                # Multiline continuation
                current["text"] += "\n" + line
            else:
                logger.debug(f"Orphaned line {i}: {line[:80]}")

        if current:
            self._finalize(current, messages)

        if not messages:
            raise ParseError("No valid messages found - check export format")

        return self._result(messages, date_format, confident=confident, source_format="plain")

    def _build_timestamp(self, date_str: str, time_str: str, ampm: Optional[str],
                         date_format: str, line_number: int) -> datetime:
        try:
            return self._parse_timestamp(date_str, time_str, ampm, date_format)
        except ValueError as e:
            logger.warning(f"Line {line_number}: {e}; falling back to current time")
            return self.now

    def _parse_timestamp(self, date_str: str, time_str: str, ampm: Optional[str],
                         date_format: str) -> datetime:
        """Build a datetime from export fields using the detected field order."""
        a, b, year = (int(p) for p in date_str.split("/"))
        day, month = (a, b) if date_format == "DMY" else (b, a)
        if year < 100:
            year += 2000

        parts = [int(p) for p in time_str.split(":")]
        hour, minute = parts[0], parts[1]
        second = parts[2] if len(parts) > 2 else 0

        if ampm:
            marker = ampm.replace(".", "").upper()
            if hour > 12:
                raise ValueError(f"Unrecognized timestamp: '{date_str}, {time_str} {ampm}'")
            if marker == "PM" and hour < 12:
                hour += 12
            elif marker == "AM" and hour == 12:
                hour = 0

        try:
            return datetime(year, month, day, hour, minute, second)
        except ValueError:
            raise ValueError(f"Unrecognized timestamp: '{date_str}, {time_str}{' ' + ampm if ampm else ''}'")

    def _finalize(self, msg: Dict[str, Any], messages: List[Message]) -> None:
        """Turn an accumulated record into a Message unless it is a system event."""
        text = msg["text"].strip()
        if msg["sender"] is None or not text or _looks_like_system(text):
            logger.debug(f"Dropped system/empty message at line {msg['line_number']}")
            return
        messages.append(Message(sender=msg["sender"], text=text, timestamp=msg["timestamp"]))

    # ------------------------------------------------------------------
    # JSON scrapes
    # ------------------------------------------------------------------

    def parse_json(self, content: str) -> ParseResult:
        """
        Parse a JSON scrape: {"messages": [{sender, text, timestamp}], "exportedAt": ...}.

        "Message read by X" pseudo-senders reveal the exporting participant's
        name; when they do, anonymous "Unknown" records are attributed to X.
        """
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid JSON export: {e}") from e

        if isinstance(data, list):
            records, exported_raw = data, None
        elif isinstance(data, dict):
            records = data.get("messages") or []
            exported_raw = data.get("exportedAt") or data.get("exported_at")
        else:
            raise ParseError("JSON export must be an object or a list of messages")

        exported_at = _to_local_naive(exported_raw)
        detected_name: Optional[str] = None
        raw: List[Tuple[str, str, Optional[datetime]]] = []

        for rec in records:
            if not isinstance(rec, dict):
                continue
            sender = str(rec.get("sender") or rec.get("author") or "Unknown").strip()
            receipt = READ_RECEIPT_RE.match(sender)
            if receipt:
                detected_name = receipt.group("name").strip()
                continue
            text = str(rec.get("text") or rec.get("message") or "").strip()
            if not text:
                continue
            raw.append((sender, text, _to_local_naive(rec.get("timestamp"))))

        if detected_name:
            real_senders = {s for s, _, _ in raw if s != "Unknown"}
            has_unknown = any(s == "Unknown" for s, _, _ in raw)
            if has_unknown and len(real_senders) <= 1 and detected_name not in real_senders:
                logger.info(f"Attributing 'Unknown' messages to detected participant {detected_name}")
                raw = [(detected_name if s == "Unknown" else s, t, ts) for s, t, ts in raw]

        if not raw:
            raise ParseError("No valid messages found in JSON export")

        base = exported_at or self.now
        n = len(raw)
        has_real = any(ts is not None for _, _, ts in raw)
        messages = []
        for i, (sender, text, ts) in enumerate(raw):
            synthetic = ts is None
            if synthetic and not has_real:
                days_back = 30 - math.floor(i / n * 30)
                ts = base - timedelta(days=days_back) + timedelta(minutes=5 * i)
            elif synthetic:
                ts = base - timedelta(minutes=n - i)
            messages.append(Message(sender=sender, text=text, timestamp=ts, synthetic_timestamp=synthetic))

        if not has_real:
            logger.warning(f"JSON export has no timestamps; synthesized {n} sequential timestamps")

        return self._result(
            messages, "JSON", confident=True, source_format="json",
            exported_at=exported_at, original_message_count=len(records),
            has_real_timestamps=has_real,
        )

    # ------------------------------------------------------------------
    # PDF-extracted mail threads
    # ------------------------------------------------------------------

    def parse_mail_text(self, text: str) -> ParseResult:
        """Parse text extracted from a printed mail thread."""
        messages: List[Message] = []
        current: Optional[Dict[str, Any]] = None

        def flush():
            if current and current["parts"]:
                messages.append(Message(
                    sender=current["sender"],
                    text=" ".join(current["parts"]).strip(),
                    timestamp=current["timestamp"],
                ))

        for i, raw in enumerate(text.splitlines(), start=1):
            line = _strip_weird_unicode(raw)
            if not line:
                continue

            header = MAIL_HEADER_RE.match(line)
            if header:
                flush()
                try:
                    ts = datetime.strptime(f"{header.group('date')} {header.group('time')}", "%d %B %Y %H:%M")
                except ValueError as e:
                    logger.warning(f"Line {i}: {e}; falling back to current time")
                    ts = self.now
                current = {"sender": header.group("name").strip(), "timestamp": ts,
                           "parts": [], "closed": False}
                continue

            if current is None or current["closed"]:
                continue
            if any(p.search(line) for p in MAIL_STOP_PATTERNS):
                current["closed"] = True
                continue
            if any(p.search(line) for p in MAIL_SKIP_PATTERNS):
                continue
            current["parts"].append(line)

        flush()

        if not messages:
            raise ParseError("No messages found in mail export - check that the PDF text was extracted")

        return self._result(messages, "Gmail PDF", confident=True, source_format="pdf")

    # ------------------------------------------------------------------

    def _result(self, messages: List[Message], date_format: str, confident: bool,
                source_format: str, **extra) -> ParseResult:
        messages = sorted(messages, key=lambda m: m.timestamp)
        participants: List[str] = []
        for msg in messages:
            if msg.sender not in participants:
                participants.append(msg.sender)

        metadata = ChatMetadata(
            participants=participants,
            total_messages=len(messages),
            start_date=messages[0].timestamp,
            end_date=messages[-1].timestamp,
            date_format=date_format,
            date_format_confident=confident,
            source_format=source_format,
            **extra,
        )
        return ParseResult(messages=messages, metadata=metadata)


def parse(raw_content: str, format_hint: Optional[str] = "plain", now: Optional[datetime] = None) -> ParseResult:
    """Parse raw export content with a fresh ChatParser."""
    return ChatParser(now=now).parse(raw_content, format_hint)


def validate_format(file_path: str, min_hits: int = 3) -> tuple[bool, str]:
    """
    Validate plain-text export format.
    Returns (is_valid, reason).
    """
    try:
        with open(file_path, "r", encoding="utf-8", errors="replace") as f:
            text = f.read()
    except OSError as e:
        return False, f"Could not read file: {e}"

    hits = 0
    for raw in text.splitlines():
        line = _strip_weird_unicode(raw)
        if not line:
            continue
        if DASH_LINE_RE.match(line) or BRACKET_LINE_RE.match(line):
            hits += 1
            if hits >= min_hits:
                return True, "Format appears valid"

    return False, "Not enough lines match expected chat export format"


if __name__ == "__main__":
    sample = """25/12/23, 09:15 - Alice: Good morning! ☀️
25/12/23, 09:18 - Bob: Morning! How are you? ❤️
25/12/23, 09:20 - Alice: Great! You?"""
    result = ChatParser().parse(sample)
    for msg in result.messages:
        print(f"{msg.timestamp:%Y-%m-%d %H:%M} {msg.sender}: {msg.text}")
    print(result.metadata.to_dict())
