"""Application settings and configuration.

This module defines all configuration options for the Reveal service.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SALT_KEY = "default_salt_change_in_production"
PRODUCTION_ENVIRONMENTS = frozenset({"production", "prod"})


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Reveal", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    environment: str = Field(default="development", alias="APP_ENV")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Identity derivation
    salt_key: str | None = Field(default=None, alias="SALT_KEY")
    trust_forwarded_for: bool = Field(default=False, alias="TRUST_FORWARDED_FOR")

    # Database configuration
    database_url: str = Field(default="sqlite:///./reveal.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Redis backs the request limiter when configured
    redis_url: str | None = Field(default=None, alias="REDIS_URL")

    # Per-address burst limiter in front of mutating routes
    request_limit_enabled: bool = Field(default=True, alias="REQUEST_LIMIT_ENABLED")
    request_rate_per_minute: int = Field(default=5, alias="REQUEST_RATE_PER_MINUTE")
    request_burst: int = Field(default=5, alias="REQUEST_BURST")

    # Throttle gate windows (count of rows per identity inside a trailing window)
    post_rate_limit: int = Field(default=5, alias="POST_RATE_LIMIT")
    post_rate_window_seconds: int = Field(default=600, alias="POST_RATE_WINDOW_SECONDS")
    comment_rate_limit: int = Field(default=10, alias="COMMENT_RATE_LIMIT")
    comment_rate_window_seconds: int = Field(default=300, alias="COMMENT_RATE_WINDOW_SECONDS")
    vote_rate_limit: int = Field(default=30, alias="VOTE_RATE_LIMIT")
    vote_rate_window_seconds: int = Field(default=120, alias="VOTE_RATE_WINDOW_SECONDS")

    # Flag escalation
    post_flag_threshold: int = Field(default=5, alias="POST_FLAG_THRESHOLD")
    comment_flag_threshold: int = Field(default=3, alias="COMMENT_FLAG_THRESHOLD")

    # Content limits
    post_title_max_length: int = Field(default=255, alias="POST_TITLE_MAX_LENGTH")
    post_body_max_length: int = Field(default=5000, alias="POST_BODY_MAX_LENGTH")
    post_body_min_length: int = Field(default=10, alias="POST_BODY_MIN_LENGTH")
    comment_body_max_length: int = Field(default=1000, alias="COMMENT_BODY_MAX_LENGTH")

    # Feed pagination
    feed_default_limit: int = Field(default=50, alias="FEED_DEFAULT_LIMIT")
    feed_max_limit: int = Field(default=100, alias="FEED_MAX_LIMIT")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _require_salt_in_production(self) -> "Settings":
        """Refuse to start a production deployment with the well-known salt."""
        if self.is_production and not self.salt_key:
            raise ValueError("SALT_KEY must be set when APP_ENV is production")
        return self

    @property
    def is_production(self) -> bool:
        """Return True when running in a production environment."""
        return self.environment.strip().lower() in PRODUCTION_ENVIRONMENTS

    @property
    def uses_default_salt(self) -> bool:
        """Return True when identity hashes fall back to the public default salt."""
        return not self.salt_key

    @property
    def identity_salt(self) -> str:
        """Return the salt mixed into every identity hash."""
        return self.salt_key or DEFAULT_SALT_KEY

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides.

        Returns:
            The active database URL (test database if in testing mode, otherwise production)
        """
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url

    @property
    def throttle_limits(self) -> dict[str, tuple[int, int]]:
        """Return `(limit, window_seconds)` per throttled action."""
        return {
            "post_create": (self.post_rate_limit, self.post_rate_window_seconds),
            "comment_create": (self.comment_rate_limit, self.comment_rate_window_seconds),
            "vote_cast": (self.vote_rate_limit, self.vote_rate_window_seconds),
        }

    @property
    def flag_thresholds(self) -> dict[str, int]:
        """Return the flag count that hides each kind of target."""
        return {
            "post": self.post_flag_threshold,
            "comment": self.comment_flag_threshold,
        }


settings = Settings()
