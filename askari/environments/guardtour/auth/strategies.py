"""
Guard Tour Auth Strategies - where bearer tokens come from.

StaticTokenAuth
    A long-lived token supplied through configuration. Sent as-is.

RefreshingTokenAuth
    Signs in with username/password through POST /auth/signin and caches
    the resulting JWT in a TokenStore. Before each request the cached
    token's ``exp`` claim is checked; an expired (or missing, or corrupt)
    token triggers a new sign-in whose result overwrites the cache.
"""

import logging

from askari.environments.base import AuthStrategy, AuthenticationError, Authenticator
from askari.environments.guardtour.auth.token_store import TokenStore


logger = logging.getLogger("askari.guardtour.auth")


class StaticTokenAuth(AuthStrategy):
    """Always returns the configured bearer token."""

    mode = "static"

    def __init__(self, token: str):
        if not token:
            logger.warning("Static auth selected but ASKARI_AUTH_TOKEN is empty")
        self.token = token

    async def get_token(self, authenticate: Authenticator) -> str:
        if not self.token:
            raise AuthenticationError("No static access token configured")
        return self.token


class RefreshingTokenAuth(AuthStrategy):
    """
    Username/password sign-in with an on-disk token cache.

    Example:
        auth = RefreshingTokenAuth(TokenStore(path), "ops-bot", "secret")
        token = await auth.get_token(client.authenticate)
    """

    mode = "refresh"

    def __init__(self, token_store: TokenStore, username: str, password: str):
        self.token_store = token_store
        self.username = username
        self.password = password

        if not username or not password:
            logger.warning(
                "Refresh auth selected but ASKARI_USERNAME / ASKARI_PASSWORD "
                "are not both set"
            )

    async def get_token(self, authenticate: Authenticator) -> str:
        if not await self.token_store.is_expired():
            token = await self.token_store.read()
            if token:
                return token

        logger.info("Stored access token missing or expired, signing in")
        token = await authenticate(self.username, self.password)
        await self.token_store.save(token)
        return token

    async def invalidate(self) -> None:
        await self.token_store.clear()
