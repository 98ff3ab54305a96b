"""
Intent Schemas - Pydantic models for classified intents.

Both classifiers produce a ClassifiedIntent. The raw ``intent`` label is
kept as the classifier returned it (pattern tags such as
``patrol_report`` or LLM labels such as ``getPatrolReports``);
``intent_type`` resolves either spelling to one IntentType.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class IntentType(str, Enum):
    """
    Intents the assistant can act on.

    PATROL_REPORT: Recent patrols at a site
    SITE_INFO: Details of one site
    GUARD_INFO: Details of one guard
    GUARDS_FOR_SITE: Guards currently assigned to a site
    SITE_PERFORMANCE: Patrol performance counts for a site
    SYSTEM_STATS: Aggregate counts across the system
    LIST_SITES: Every site
    HELP: Usage instructions
    UNKNOWN: Could not determine intent
    """
    PATROL_REPORT = "patrol_report"
    SITE_INFO = "site_info"
    GUARD_INFO = "guard_info"
    GUARDS_FOR_SITE = "guards_for_site"
    SITE_PERFORMANCE = "site_performance"
    SYSTEM_STATS = "system_stats"
    LIST_SITES = "list_sites"
    HELP = "help"
    UNKNOWN = "unknown"

    @classmethod
    def from_label(cls, label: Optional[str]) -> "IntentType":
        """Resolve a pattern tag or an LLM label; anything else is UNKNOWN."""
        if not label:
            return cls.UNKNOWN
        try:
            return cls(label)
        except ValueError:
            return LLM_INTENT_LABELS.get(label, cls.UNKNOWN)


# Labels used in the LLM prompt
LLM_INTENT_LABELS = {
    "getPatrolReports": IntentType.PATROL_REPORT,
    "getSiteInfo": IntentType.SITE_INFO,
    "getGuardInfo": IntentType.GUARD_INFO,
    "getGuardsForSite": IntentType.GUARDS_FOR_SITE,
    "getSitePerformance": IntentType.SITE_PERFORMANCE,
    "getAllSites": IntentType.LIST_SITES,
    "getSystemStats": IntentType.SYSTEM_STATS,
    "help": IntentType.HELP,
}


class Entities(BaseModel):
    """
    Named values extracted from a message. All optional.

    Field aliases match the camelCase keys the LLM returns.
    """
    site_name: Optional[str] = Field(default=None, alias="siteName")
    guard_name: Optional[str] = Field(default=None, alias="guardName")
    date: Optional[str] = Field(default=None, description="YYYY-MM-DD or a relative word")
    timeframe: Optional[str] = Field(default=None, description="today, yesterday or this_week")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ClassifiedIntent(BaseModel):
    """
    Result of classifying one inbound message.

    Example:
        {"intent": "getSiteInfo", "entities": {"siteName": "Atom site"}}
    """
    intent: str = Field(description="Label as produced by the classifier")
    entities: Entities = Field(default_factory=Entities)

    model_config = ConfigDict(populate_by_name=True)

    @property
    def intent_type(self) -> IntentType:
        return IntentType.from_label(self.intent)
