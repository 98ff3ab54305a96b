"""
Intent Processing Service - turns a chat message into a reply.

Responsibilities:
=================
- Classify the message with the configured IntentClassifier
- Check the entities each intent needs, asking for missing ones
- Call exactly one PatrolAPIClient operation per intent
- Convert API failures into friendly "couldn't fetch" replies

NOT Responsible For:
====================
- HTTP / TwiML handling (router's job)
- Talking to the remote API (PatrolAPIClient's job)
- Building the text of query replies (ResponseFormatter's job)

Architecture:
=============
```
┌─────────────┐
│   Router    │  ← /webhook, /intent
└──────┬──────┘
       │
       ▼
┌─────────────┐
│   Service   │  ← dispatch (this file)
└──────┬──────┘
       │
   ┌───┴────────┐
   │            │
   ▼            ▼
┌──────────┐ ┌─────────┐
│Classifier│ │ Client  │
└──────────┘ └─────────┘
```
"""

import logging
import time
import uuid as uuid_module
from typing import Awaitable, Callable, Dict, Optional

from askari.ai.intent.base import IntentClassifier
from askari.ai.intent.entities import resolve_date
from askari.ai.intent.schemas import Entities, IntentType
from askari.environments.base import PatrolAPIError
from askari.environments.guardtour.client import PatrolAPIClient
from askari.environments.guardtour.schemas import QueryResult
from askari.services.intent_result import IntentResult, IntentResultType


logger = logging.getLogger("askari.services.intent")


NOT_UNDERSTOOD = "Sorry, I didn't understand that. Please try rephrasing your request."
UNKNOWN_REQUEST = 'I didn\'t understand that request. Type "help" to see what I can do for you.'

ASK_PATROL_SITE = (
    "📋 I can get patrol reports for you! Please specify which site you'd like to check.\n\n"
    'Example: "Show patrol report for Site Alpha"'
)
ASK_SITE_INFO_SITE = (
    "🏢 I can provide site information! Please specify which site you'd like to know about.\n\n"
    'Example: "Tell me about Site Alpha"'
)
ASK_GUARD_NAME = (
    "👮 I can provide guard information! Please specify which guard you'd like to know about.\n\n"
    'Example: "Tell me about guard John"'
)
ASK_GUARDS_SITE = (
    "👮 I can list the guards at a site! Please specify which site.\n\n"
    'Example: "List guards for Site Alpha"'
)
ASK_PERFORMANCE_SITE = (
    "📊 Please specify which site you'd like the performance report for.\n\n"
    'Example: "Performance for Site Alpha"'
)

HELP_TEXT = (
    "🤖 *Askari WhatsApp Assistant*\n\n"
    "I can help you with:\n\n"
    "📋 *Patrol Reports*\n"
    '"Show patrol report for Site Alpha"\n'
    '"Get patrol status for Site Beta"\n\n'
    "🏢 *Site Information*\n"
    '"Tell me about Site Alpha"\n'
    '"Site info for Site Beta"\n\n'
    "👮 *Guard Information*\n"
    '"Guard info for John"\n'
    '"Tell me about guard Mary"\n'
    '"List guards for Site Alpha"\n\n'
    "📊 *Site Performance*\n"
    '"Performance for Site Alpha"\n\n'
    "📈 *System Stats*\n"
    '"System stats"\n'
    '"Dashboard"\n\n'
    "📋 *List All Sites*\n"
    '"List all sites"\n'
    '"Show all sites"\n\n'
    "Just ask me naturally - I understand various ways of asking!"
)


Handler = Callable[[Entities], Awaitable[IntentResult]]


class IntentService:
    """
    Dispatches classified intents to the guard-tour client.

    Usage:
        service = IntentService(client=patrol_client, classifier=classifier)
        result = await service.process("show patrols for Atom")
        result.message  # chat-ready text
    """

    def __init__(self, client: PatrolAPIClient, classifier: IntentClassifier):
        self.client = client
        self.classifier = classifier
        self._handlers: Dict[IntentType, Handler] = {
            IntentType.PATROL_REPORT: self._handle_patrol_report,
            IntentType.SITE_INFO: self._handle_site_info,
            IntentType.GUARD_INFO: self._handle_guard_info,
            IntentType.GUARDS_FOR_SITE: self._handle_guards_for_site,
            IntentType.SITE_PERFORMANCE: self._handle_site_performance,
            IntentType.SYSTEM_STATS: self._handle_system_stats,
            IntentType.LIST_SITES: self._handle_list_sites,
            IntentType.HELP: self._handle_help,
        }
        logger.info(f"Intent service initialized ({classifier.strategy or 'custom'} classifier)")

    async def process(self, text: str) -> IntentResult:
        """
        Classify ``text`` and produce the reply.

        API failures become friendly error replies; this method only
        raises for programming errors.
        """
        start_time = time.time()
        request_id = str(uuid_module.uuid4())

        classified = await self.classifier.classify(text)

        if classified is None:
            result = IntentResult(
                success=False,
                intent_type=IntentResultType.UNKNOWN,
                message=NOT_UNDERSTOOD,
            )
        else:
            intent_type = classified.intent_type
            logger.info(
                f"[{request_id}] intent={intent_type.value} "
                f"entities={classified.entities.model_dump(exclude_none=True)}"
            )
            handler = self._handlers.get(intent_type)
            if handler is None:
                result = IntentResult(
                    success=False,
                    intent_type=IntentResultType.UNKNOWN,
                    intent=intent_type.value,
                    message=UNKNOWN_REQUEST,
                )
            else:
                result = await handler(classified.entities)
                result.intent = intent_type.value

        result.request_id = request_id
        result.processing_time_ms = (time.time() - start_time) * 1000
        return result

    # -------------------------------------------------------------------------
    # HANDLERS
    # -------------------------------------------------------------------------

    async def _handle_patrol_report(self, entities: Entities) -> IntentResult:
        site_name = entities.site_name
        if not site_name:
            return self._clarify(ASK_PATROL_SITE)
        return await self._run_query(
            self.client.get_patrol_reports(site_name, resolve_date(entities.date)),
            f"fetch the patrol report for {site_name}",
        )

    async def _handle_site_info(self, entities: Entities) -> IntentResult:
        site_name = entities.site_name
        if not site_name:
            return self._clarify(ASK_SITE_INFO_SITE)
        return await self._run_query(
            self.client.get_site_info(site_name),
            f"fetch information for {site_name}",
        )

    async def _handle_guard_info(self, entities: Entities) -> IntentResult:
        guard_name = entities.guard_name
        if not guard_name:
            return self._clarify(ASK_GUARD_NAME)
        return await self._run_query(
            self.client.get_guard_info(guard_name),
            f"fetch information for guard {guard_name}",
        )

    async def _handle_guards_for_site(self, entities: Entities) -> IntentResult:
        site_name = entities.site_name
        if not site_name:
            return self._clarify(ASK_GUARDS_SITE)
        return await self._run_query(
            self.client.get_guards_for_site(site_name),
            f"fetch the guards for {site_name}",
        )

    async def _handle_site_performance(self, entities: Entities) -> IntentResult:
        site_name = entities.site_name
        if not site_name:
            return self._clarify(ASK_PERFORMANCE_SITE)
        return await self._run_query(
            self.client.get_site_performance(site_name, entities.timeframe or "today"),
            f"fetch performance data for {site_name}",
        )

    async def _handle_system_stats(self, entities: Entities) -> IntentResult:
        return await self._run_query(
            self.client.get_system_stats(),
            "fetch system statistics",
        )

    async def _handle_list_sites(self, entities: Entities) -> IntentResult:
        return await self._run_query(
            self.client.list_sites(),
            "fetch the sites list",
        )

    async def _handle_help(self, entities: Entities) -> IntentResult:
        return IntentResult(success=True, intent_type=IntentResultType.HELP, message=HELP_TEXT)

    # -------------------------------------------------------------------------
    # HELPERS
    # -------------------------------------------------------------------------

    async def _run_query(self, query: Awaitable[QueryResult], action: str) -> IntentResult:
        try:
            outcome = await query
        except PatrolAPIError as e:
            logger.warning(f"Couldn't {action}: {e}")
            return IntentResult(
                success=False,
                intent_type=IntentResultType.ERROR,
                message=f"❌ Sorry, I couldn't {action}. {e}",
            )

        return IntentResult(
            success=True,
            intent_type=IntentResultType.QUERY if outcome.has_data else IntentResultType.NOT_FOUND,
            message=outcome.message,
            data=outcome.to_dict(),
        )

    @staticmethod
    def _clarify(prompt: str) -> IntentResult:
        return IntentResult(success=True, intent_type=IntentResultType.CLARIFICATION, message=prompt)
