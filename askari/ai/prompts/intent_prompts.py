"""
Intent Prompts - Templates for extracting guard-tour intents with an LLM.

These prompts convert requests like:
  "show me the patrol report for the main gate from yesterday"

Into structured intents like:
  {"intent": "getPatrolReports", "entities": {"siteName": "main gate", "date": "yesterday"}}

Prompt Engineering Techniques:
=============================
1. Schema enforcement (single JSON object, fixed labels)
2. Few-shot examples for the guards-for-site / guard-info split
"""

# ---------------------------------------------------------------------------
# INTENT SYSTEM PROMPT
# ---------------------------------------------------------------------------

INTENT_SYSTEM_PROMPT = """You are an NLU engine for a security operations chatbot.
Extract the user's intent and entities from their request.
Respond with a valid JSON object: { "intent": "...", "entities": { ... } }

Available intents:
- getPatrolReports: siteName, date
- getSiteInfo: siteName
- getGuardInfo: guardName
- getGuardsForSite: siteName
- getSitePerformance: siteName, timeframe
- getAllSites: (no entities)
- getSystemStats: (no entities)
- help: (no entities)

Dates may be YYYY-MM-DD or the words "today" / "yesterday".
Timeframe is "today" or "month"."""


# ---------------------------------------------------------------------------
# INTENT EXTRACTION PROMPT
# ---------------------------------------------------------------------------
# Few-shot template; {request} is the raw user message.

INTENT_EXTRACTION_PROMPT = """Examples:
User: "show me the patrol report for the main gate from yesterday"
{{ "intent": "getPatrolReports", "entities": {{ "siteName": "main gate", "date": "yesterday" }} }}

User: "tell me about guard John Smith"
{{ "intent": "getGuardInfo", "entities": {{ "guardName": "John Smith" }} }}

User: "list all sites"
{{ "intent": "getAllSites", "entities": {{}} }}

User: "list all guards for Atom site"
{{ "intent": "getGuardsForSite", "entities": {{ "siteName": "Atom site" }} }}

User: "give me the information of all guards on Atom site"
{{ "intent": "getGuardsForSite", "entities": {{ "siteName": "Atom site" }} }}

User: "all guard info for Atom site"
{{ "intent": "getGuardsForSite", "entities": {{ "siteName": "Atom site" }} }}

User: "show me all guards for Test site"
{{ "intent": "getGuardsForSite", "entities": {{ "siteName": "Test site" }} }}

User: "guard info for Walker Adams"
{{ "intent": "getGuardInfo", "entities": {{ "guardName": "Walker Adams" }} }}

User: "give me information about guard Avo Yiga"
{{ "intent": "getGuardInfo", "entities": {{ "guardName": "Avo Yiga" }} }}

User: "list guards for Sheraton Hotel"
{{ "intent": "getGuardsForSite", "entities": {{ "siteName": "Sheraton Hotel" }} }}

User: "how is Atom site performing this month"
{{ "intent": "getSitePerformance", "entities": {{ "siteName": "Atom site", "timeframe": "month" }} }}

Now, analyze: "{request}"

JSON response only, no explanation."""
