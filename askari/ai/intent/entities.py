"""
Entity extraction for the pattern classifier, plus date helpers shared
with the dispatch layer.

Extraction is independent of intent classification and runs on the
original (case-preserved) message:

- siteName:  text after "for" / "about" / "of" / "at" / "on" running to
             the end of the message ("... for the main gate" → "the main gate")
- guardName: text after the word "guard" ("tell me about guard John")
- timeframe: "yesterday", "today" or "this week"
- date:      YYYY-MM-DD for yesterday / today, from the local calendar
"""

import re
from datetime import date, timedelta
from typing import Optional

from askari.ai.intent.schemas import Entities


SITE_PATTERN = re.compile(r"\b(?:for|about|of|at|on)\s+([A-Za-z0-9\s\-\(\)]+)$", re.IGNORECASE)
GUARD_PATTERN = re.compile(
    r"\bguard\s+(?:(?:info|information|details)\s+)?(?:(?:for|about|of|on)\s+)?([A-Za-z\s]+)",
    re.IGNORECASE,
)

# "site Atom" → "Atom"
SITE_PREFIX = re.compile(r"^site\s+", re.IGNORECASE)
# "Atom from yesterday" → "Atom"
TRAILING_TIMEFRAME = re.compile(
    r"\s+(?:(?:from|for|on)\s+)?(?:today|yesterday|this\s+week|this\s+month)$",
    re.IGNORECASE,
)

YESTERDAY = re.compile(r"yesterday", re.IGNORECASE)
TODAY = re.compile(r"today", re.IGNORECASE)
THIS_WEEK = re.compile(r"this week", re.IGNORECASE)

ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _strip_timeframe(raw: str) -> str:
    return TRAILING_TIMEFRAME.sub("", raw.strip()).strip()


def _clean_site_name(raw: str) -> Optional[str]:
    name = SITE_PREFIX.sub("", _strip_timeframe(raw)).strip()
    return name or None


def extract_entities(message: str, today: Optional[date] = None) -> Entities:
    """
    Pull site, guard and time references out of a message.

    Args:
        message: The original inbound text
        today: Override for the local date (tests)
    """
    today = today or date.today()
    text = message.strip().rstrip("?.!").strip()
    entities = Entities()

    site_match = SITE_PATTERN.search(text)
    if site_match:
        entities.site_name = _clean_site_name(site_match.group(1))

    guard_match = GUARD_PATTERN.search(text)
    if guard_match:
        entities.guard_name = _strip_timeframe(guard_match.group(1)) or None

    if YESTERDAY.search(text):
        entities.timeframe = "yesterday"
        entities.date = (today - timedelta(days=1)).isoformat()
    elif TODAY.search(text):
        entities.timeframe = "today"
        entities.date = today.isoformat()
    elif THIS_WEEK.search(text):
        entities.timeframe = "this_week"

    return entities


def resolve_date(value: Optional[str], today: Optional[date] = None) -> Optional[str]:
    """
    Normalize a date entity to YYYY-MM-DD.

    Accepts ISO dates as-is and resolves "today" / "yesterday". Anything
    else (including "this week") yields None, meaning no date filter.
    """
    if not value:
        return None

    today = today or date.today()
    text = value.strip().lower()

    if ISO_DATE.match(text):
        try:
            return date.fromisoformat(text).isoformat()
        except ValueError:
            return None
    if text == "today":
        return today.isoformat()
    if text == "yesterday":
        return (today - timedelta(days=1)).isoformat()
    return None
