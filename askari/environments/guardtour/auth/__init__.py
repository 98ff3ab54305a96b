"""
Guard Tour Auth Module - bearer token storage and acquisition.
"""

from askari.environments.guardtour.auth.token_store import TokenStore
from askari.environments.guardtour.auth.strategies import (
    StaticTokenAuth,
    RefreshingTokenAuth,
)

__all__ = [
    "TokenStore",
    "StaticTokenAuth",
    "RefreshingTokenAuth",
]
