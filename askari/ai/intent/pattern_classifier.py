"""
Pattern Intent Classifier - regex tables, no network calls.

Each intent owns a list of case-insensitive regular expressions. Tables
are checked in INTENT_PATTERNS order and, within a table, in list order;
the first pattern that matches the lower-cased, trimmed message wins.
No match yields the "unknown" intent.

Ordering matters: "guards for <site>" must be tried before the single
guard lookup, and the broad "stats" pattern sits after site performance.
"""

import logging
import re
from datetime import date
from typing import List, Optional, Pattern, Tuple

from askari.ai.intent.base import IntentClassifier
from askari.ai.intent.entities import extract_entities
from askari.ai.intent.schemas import ClassifiedIntent, IntentType


logger = logging.getLogger("askari.ai.intent.pattern")


def _compile(*patterns: str) -> List[Pattern[str]]:
    return [re.compile(p, re.IGNORECASE) for p in patterns]


INTENT_PATTERNS: List[Tuple[IntentType, List[Pattern[str]]]] = [
    (IntentType.PATROL_REPORT, _compile(
        r"show.*patrol report.*for (.*)",
        r"get patrol report.*for (.*)",
        r"patrol.*report.*(.*)",
        r"patrol.*status.*(.*)",
        r"check patrol.*(.*)",
        r"latest patrol.*(.*)",
        r"patrols.*for (.*)",
    )),
    (IntentType.SITE_INFO, _compile(
        r"site.*info.*for (.*)",
        r"tell me about site (.*)",
        r"site.*details.*(.*)",
        r"info.*site (.*)",
        r"about site (.*)",
        r"site (.*) info",
    )),
    (IntentType.GUARDS_FOR_SITE, _compile(
        r"guards.*(?:for|at|on|of) (.*)",
        r"all.*guard.*(?:for|at|on|of) (.*)",
    )),
    (IntentType.GUARD_INFO, _compile(
        r"guard.*info.*for (.*)",
        r"tell me about guard (.*)",
        r"guard.*details.*(.*)",
        r"info.*guard (.*)",
        r"about guard (.*)",
        r"guard (.*) info",
    )),
    (IntentType.SITE_PERFORMANCE, _compile(
        r"performance.*for (.*)",
        r"site.*performance.*(.*)",
        r"how.*doing.*(.*)",
        r"performance.*report.*(.*)",
        r"site.*stats.*(.*)",
    )),
    (IntentType.SYSTEM_STATS, _compile(
        r"system.*stats",
        r"overall.*stats",
        r"system.*status",
        r"dashboard",
        r"overview",
        r"stats",
    )),
    (IntentType.LIST_SITES, _compile(
        r"list.*sites",
        r"show.*all.*sites",
        r"what.*sites",
        r"sites.*list",
        r"all.*sites",
    )),
    (IntentType.HELP, _compile(
        r"help",
        r"what.*can.*do",
        r"commands",
        r"how.*use",
    )),
]


class PatternIntentClassifier(IntentClassifier):
    """
    Regex-table classifier.

    Usage:
        classifier = PatternIntentClassifier()
        result = await classifier.classify("patrols for Main Gate today")
        result.intent_type   # IntentType.PATROL_REPORT
        result.entities      # site_name="Main Gate", timeframe="today", ...
    """

    strategy = "pattern"

    def __init__(self, patterns: Optional[List[Tuple[IntentType, List[Pattern[str]]]]] = None):
        self.patterns = patterns or INTENT_PATTERNS

    def recognize_intent(self, text: str) -> IntentType:
        normalized = text.lower().strip()
        for intent_type, patterns in self.patterns:
            for pattern in patterns:
                if pattern.search(normalized):
                    return intent_type
        return IntentType.UNKNOWN

    def classify_sync(self, text: str, today: Optional[date] = None) -> ClassifiedIntent:
        intent_type = self.recognize_intent(text)
        entities = extract_entities(text, today=today)
        logger.info(f"Pattern intent: {intent_type.value} for {text[:50]!r}")
        return ClassifiedIntent(intent=intent_type.value, entities=entities)

    async def classify(self, text: str) -> Optional[ClassifiedIntent]:
        return self.classify_sync(text)
