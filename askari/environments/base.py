"""
Base classes and shared types for external service integrations.

Design Pattern: Strategy Pattern
================================
- AuthStrategy: Abstract base for obtaining a bearer token
  (static token vs. sign-in with refresh on expiry)

The exception hierarchy separates errors that carry internal detail
(AuthenticationError, APIError) from the user-safe PatrolAPIError that
façade operations raise to their callers.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Awaitable, Callable, Optional


# ---------------------------------------------------------------------------
# CUSTOM EXCEPTIONS
# ---------------------------------------------------------------------------


class GuardTourError(Exception):
    """Base exception for all guard-tour integration errors."""
    pass


class AuthenticationError(GuardTourError):
    """Raised when signing in to the guard-tour service fails."""
    pass


class APIError(GuardTourError):
    """Raised when a request to the guard-tour service fails."""

    def __init__(self, message: str, status_code: Optional[int] = None, response: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class PatrolAPIError(GuardTourError):
    """
    User-safe error raised by PatrolAPIClient operations.

    The message is fixed per operation and never includes upstream
    response bodies or transport error text.
    """
    pass


# ---------------------------------------------------------------------------
# DATA STRUCTURES
# ---------------------------------------------------------------------------


@dataclass
class Credential:
    """A cached bearer token and the moment it was stored."""
    token: str
    issued_at: Optional[datetime] = None


# Signature of PatrolAPIClient.authenticate, handed to auth strategies
Authenticator = Callable[[str, str], Awaitable[str]]


# ---------------------------------------------------------------------------
# ABSTRACT BASE CLASSES
# ---------------------------------------------------------------------------


class AuthStrategy(ABC):
    """
    Abstract base class for bearer-token providers.

    PatrolAPIClient asks its strategy for a token before every
    authorized request, passing its own ``authenticate`` coroutine so
    that strategies able to sign in can do so.
    """

    # Identifier used in logs
    mode: str = ""

    @abstractmethod
    async def get_token(self, authenticate: Authenticator) -> str:
        """
        Return a bearer token for the next request.

        Args:
            authenticate: Coroutine signing in with (username, password)

        Raises:
            AuthenticationError: If no usable token can be obtained
        """
        pass

    async def invalidate(self) -> None:
        """Forget the current token after the server rejected it."""
        return None
