"""
Environments Module - External Service Integrations

environments/
├── __init__.py           # Module exports
├── base.py               # Exceptions, Credential, AuthStrategy ABC
└── guardtour/            # Patrol / guard-tour REST service
    ├── auth/             # Token store + auth strategies
    ├── client.py         # PatrolAPIClient
    ├── formatter.py      # ResponseFormatter
    └── schemas.py        # Site, Guard, QueryResult
"""

from askari.environments.base import (
    GuardTourError,
    AuthenticationError,
    APIError,
    PatrolAPIError,
)

__all__ = [
    "GuardTourError",
    "AuthenticationError",
    "APIError",
    "PatrolAPIError",
]
