"""Configuration management with environment variable support."""

import os
import secrets
from dataclasses import dataclass, field

from blackjack.strategy.rules import TableRules


def _parse_cors_origins() -> list[str]:
    """Parse CORS_ORIGINS environment variable."""
    origins = os.getenv("CORS_ORIGINS", "http://localhost:8000")
    return [o.strip() for o in origins.split(",") if o.strip()]


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass(frozen=True)
class CORSConfig:
    """CORS configuration."""

    allowed_origins: list[str] = field(default_factory=_parse_cors_origins)
    allow_credentials: bool = True
    allow_methods: list[str] = field(default_factory=lambda: ["*"])
    allow_headers: list[str] = field(default_factory=lambda: ["*"])


@dataclass(frozen=True)
class RateLimitConfig:
    """Rate limiting configuration."""

    enabled: bool = field(default_factory=lambda: _env_flag("RATE_LIMIT_ENABLED", "true"))
    requests_per_minute: int = field(
        default_factory=lambda: int(os.getenv("RATE_LIMIT_RPM", "60"))
    )


@dataclass(frozen=True)
class SecurityConfig:
    """Security configuration."""

    secret_key: str = field(
        default_factory=lambda: os.getenv("SECRET_KEY", secrets.token_urlsafe(32))
    )


@dataclass(frozen=True)
class RedisConfig:
    """Redis connection configuration."""

    enabled: bool = field(default_factory=lambda: _env_flag("REDIS_ENABLED", "false"))
    host: str = field(default_factory=lambda: os.getenv("REDIS_HOST", "localhost"))
    port: int = field(default_factory=lambda: int(os.getenv("REDIS_PORT", "6379")))
    db: int = field(default_factory=lambda: int(os.getenv("REDIS_DB", "0")))
    password: str | None = field(default_factory=lambda: os.getenv("REDIS_PASSWORD"))

    @property
    def url(self) -> str:
        """Build Redis connection URL."""
        auth = f":{self.password}@" if self.password else ""
        return f"redis://{auth}{self.host}:{self.port}/{self.db}"


@dataclass(frozen=True)
class TableConfig:
    """Default table configuration."""

    num_decks: int = field(default_factory=lambda: int(os.getenv("TABLE_NUM_DECKS", "4")))
    replenish_threshold: float = field(
        default_factory=lambda: float(os.getenv("TABLE_REPLENISH_THRESHOLD", "0.5"))
    )
    starting_chips: int = field(
        default_factory=lambda: int(os.getenv("TABLE_STARTING_CHIPS", "100"))
    )
    agent_bet_fraction: float = field(
        default_factory=lambda: float(os.getenv("AGENT_BET_FRACTION", "0.5"))
    )
    agent_bet_round_up: int = field(
        default_factory=lambda: int(os.getenv("AGENT_BET_ROUND_UP", "10"))
    )
    dealer_stand_threshold: int = field(
        default_factory=lambda: int(os.getenv("DEALER_STAND_THRESHOLD", "17"))
    )

    def to_rules(self) -> TableRules:
        """Build validated table rules from this configuration."""
        return TableRules(
            num_decks=self.num_decks,
            replenish_threshold=self.replenish_threshold,
            starting_chips=self.starting_chips,
            agent_bet_fraction=self.agent_bet_fraction,
            agent_bet_round_up=self.agent_bet_round_up,
            dealer_stand_threshold=self.dealer_stand_threshold,
        )


@dataclass(frozen=True)
class PolicyConfig:
    """Agent policy configuration."""

    # Trained policy file; the built-in hit/stand chart is used when unset
    path: str | None = field(default_factory=lambda: os.getenv("POLICY_PATH") or None)


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: _env_flag("DEBUG", "false"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    table_ttl: int = field(
        default_factory=lambda: int(os.getenv("TABLE_TTL", "3600"))
    )  # Seconds an idle table is kept

    redis: RedisConfig = field(default_factory=RedisConfig)
    table: TableConfig = field(default_factory=TableConfig)
    policy: PolicyConfig = field(default_factory=PolicyConfig)
    cors: CORSConfig = field(default_factory=CORSConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)


# Global configuration instance
config = AppConfig()
