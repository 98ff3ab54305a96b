"""
Guard Tour Integration - patrol / guard-tour REST service.

Modules:
========
- auth/: token storage and bearer-token strategies
- client.py: PatrolAPIClient façade over the REST endpoints
- formatter.py: ResponseFormatter (payload → chat text)
- schemas.py: Site, Guard, QueryResult
"""

from askari.environments.guardtour.client import PatrolAPIClient
from askari.environments.guardtour.formatter import ResponseFormatter
from askari.environments.guardtour.schemas import Guard, QueryResult, Site

__all__ = [
    "PatrolAPIClient",
    "ResponseFormatter",
    "Guard",
    "QueryResult",
    "Site",
]
