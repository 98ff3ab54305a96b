"""
Main application entry point - FastAPI app factory and configuration.

Run with:
    uvicorn askari.main:app --port 3000
or:
    askari-server

Services are built once per app in the lifespan handler and stored on
``app.state``; routes get them through the dependencies in askari.deps.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from askari.ai.intent import IntentClassifier, build_classifier
from askari.core.config import Settings, get_settings
from askari.core.logging import configure_logging
from askari.environments.base import AuthStrategy
from askari.environments.guardtour.auth import RefreshingTokenAuth, StaticTokenAuth, TokenStore
from askari.environments.guardtour.client import PatrolAPIClient
from askari.routers import intent, system, webhook
from askari.services.intent_service import IntentService


logger = logging.getLogger("askari.main")


# ---------------------------------------------------------------------------
# SERVICE CONSTRUCTION
# ---------------------------------------------------------------------------

def build_auth_strategy(settings: Settings, token_store: TokenStore) -> AuthStrategy:
    """Pick the bearer-token strategy named by ASKARI_AUTH_MODE."""
    mode = settings.ASKARI_AUTH_MODE.strip().lower()

    if mode == "static":
        return StaticTokenAuth(settings.ASKARI_AUTH_TOKEN)
    if mode == "refresh":
        return RefreshingTokenAuth(
            token_store,
            username=settings.ASKARI_USERNAME,
            password=settings.ASKARI_PASSWORD,
        )

    raise ValueError(f"Unknown ASKARI_AUTH_MODE: {settings.ASKARI_AUTH_MODE!r} (expected 'refresh' or 'static')")


async def build_patrol_client(settings: Settings) -> PatrolAPIClient:
    """Create the token store (if missing) and a client configured from settings."""
    token_store = TokenStore(settings.TOKEN_FILE_PATH)
    await token_store.ensure_initialized()

    return PatrolAPIClient(
        base_url=settings.ASKARI_API_URL,
        auth=build_auth_strategy(settings, token_store),
        timeout=settings.ASKARI_API_TIMEOUT,
        guard_search_limit=settings.GUARD_SEARCH_LIMIT,
    )


# ---------------------------------------------------------------------------
# APPLICATION FACTORY
# ---------------------------------------------------------------------------

def create_app(
    settings: Optional[Settings] = None,
    patrol_client: Optional[PatrolAPIClient] = None,
    classifier: Optional[IntentClassifier] = None,
) -> FastAPI:
    """
    Build the ASGI application.

    Args:
        settings: Defaults to Settings() from the environment
        patrol_client: Pre-built client (tests); closed by its owner, not the app
        classifier: Pre-built classifier (tests); defaults to INTENT_STRATEGY
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_client = patrol_client is None
        client = patrol_client or await build_patrol_client(settings)
        intent_classifier = classifier or build_classifier(settings)

        app.state.settings = settings
        app.state.patrol_client = client
        app.state.intent_service = IntentService(client=client, classifier=intent_classifier)

        logger.info(f"🚀 {settings.APP_NAME} ready on port {settings.PORT}")
        logger.info("📱 Webhook: POST /webhook | 🔍 Health: GET /health | 🧪 API test: GET /test-api")

        if settings.STARTUP_CONNECTION_CHECK:
            result = await client.test_connection()
            if result["success"]:
                logger.info("✅ Guard tour API connection verified")
            else:
                logger.warning("⚠️ Guard tour API connection failed; requests will retry on demand")

        try:
            yield
        finally:
            if owns_client:
                await client.aclose()
            logger.info("Shutdown complete")

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # ---------------------------------------------------------------------------
    # REGISTER ROUTERS
    # ---------------------------------------------------------------------------
    # webhook.router: /webhook for Twilio WhatsApp messages
    # intent.router: /intent for JSON clients
    # system.router: /health, /test-api
    app.include_router(webhook.router)
    app.include_router(intent.router)
    app.include_router(system.router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run("askari.main:app", host="0.0.0.0", port=settings.PORT)
