"""
Configuration module - centralized settings for the entire application.
Uses pydantic-settings to load values from environment variables and .env file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Pydantic-settings automatically:
    1. Reads from environment variables (highest priority)
    2. Falls back to .env file values
    3. Uses default values if neither exists

    To override in production, set environment variables:
        export ASKARI_API_URL=https://guardtour.example.com
        export ASKARI_USERNAME=ops-bot
        export ASKARI_PASSWORD=change-me
    """

    # ---------------------------------------------------------------------------
    # PYDANTIC SETTINGS CONFIGURATION
    # ---------------------------------------------------------------------------
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ---------------------------------------------------------------------------
    # APPLICATION SETTINGS
    # ---------------------------------------------------------------------------
    # APP_NAME: Display name shown in API docs
    APP_NAME: str = "Askari WhatsApp Assistant"

    # SERVICE_NAME: Reported by the /health endpoint
    SERVICE_NAME: str = "Askari WhatsApp Integration"

    DEBUG: bool = False

    # LOG_LEVEL: Root level for the "askari" logger hierarchy
    LOG_LEVEL: str = "INFO"

    # PORT: Local listen port when started with `askari-server`
    PORT: int = 3000

    # ---------------------------------------------------------------------------
    # GUARD TOUR API SETTINGS
    # ---------------------------------------------------------------------------
    # ASKARI_API_URL: Base URL of the remote guard-tour REST service
    ASKARI_API_URL: str = "https://guardtour.legitsystemsug.com"

    # ASKARI_API_TIMEOUT: Per-request timeout in seconds for outbound calls
    ASKARI_API_TIMEOUT: float = 10.0

    # ASKARI_AUTH_MODE: How bearer tokens are obtained
    # - "refresh": sign in with username/password, cache the token on disk,
    #              sign in again once the cached token expires
    # - "static":  always send ASKARI_AUTH_TOKEN as-is
    ASKARI_AUTH_MODE: str = "refresh"

    # ASKARI_AUTH_TOKEN: Long-lived bearer token (static mode only)
    ASKARI_AUTH_TOKEN: str = ""

    # ASKARI_USERNAME / ASKARI_PASSWORD: Credentials for POST /auth/signin
    ASKARI_USERNAME: str = ""
    ASKARI_PASSWORD: str = ""

    # TOKEN_FILE_PATH: JSON file caching the current access token
    TOKEN_FILE_PATH: str = "data/auth_token.json"

    # GUARD_SEARCH_LIMIT: Page size when searching security guards
    GUARD_SEARCH_LIMIT: int = 50

    # STARTUP_CONNECTION_CHECK: Probe the API once when the app starts
    STARTUP_CONNECTION_CHECK: bool = True

    # ---------------------------------------------------------------------------
    # INTENT CLASSIFICATION SETTINGS
    # ---------------------------------------------------------------------------
    # INTENT_STRATEGY: "pattern" (regex tables) or "llm" (Gemini NLU)
    INTENT_STRATEGY: str = "pattern"

    # GEMINI_API_KEY: Google's Gemini API, used only by the "llm" strategy
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.0-flash"

    # AI request timeout in seconds
    AI_REQUEST_TIMEOUT: int = 30


def get_settings() -> Settings:
    """Build a fresh Settings instance from the current environment."""
    return Settings()
