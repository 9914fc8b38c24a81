"""
Application settings (Pydantic Settings).
"""
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

# .env at the project root (parent of boothwatch/)
_env_path = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    database_url: str = "sqlite:///./boothwatch.db"
    # Shared key booths send in X-API-Key; ingestion refuses pings when unset
    api_key: str = ""
    # Slack: SLACK_BOT_TOKEN in .env; notifications are skipped when empty
    slack_bot_token: str = ""
    slack_channel: str = "health-alerts"
    slack_api_url: str = "https://slack.com/api/chat.postMessage"
    slack_timeout_seconds: float = 10.0

    # Dashboard listing uses the shorter threshold; the stale sweep the longer one
    stale_threshold_minutes: int = 15
    sweep_stale_threshold_minutes: int = 30
    stale_sweep_interval_minutes: int = 5
    mode_sweep_interval_minutes: int = 60
    mode_alert_threshold_hours: float = 24.0
    health_log_retention_days: int = 3
    retention_sweep_hour: int = 2
    # 0 = re-send on every sweep while the condition holds
    alert_cooldown_minutes: int = 0

    scheduler_enabled: bool = True
    cors_origins: str = ""

    class Config:
        env_file = _env_path
        extra = "ignore"

    @field_validator("api_key", "slack_bot_token", "slack_channel", mode="after")
    @classmethod
    def strip_secrets(cls, v: str) -> str:
        return (v or "").strip()

    @field_validator(
        "stale_threshold_minutes",
        "sweep_stale_threshold_minutes",
        "stale_sweep_interval_minutes",
        "mode_sweep_interval_minutes",
        "health_log_retention_days",
        mode="after",
    )
    @classmethod
    def at_least_one(cls, v: int) -> int:
        return max(1, v)

    @field_validator("alert_cooldown_minutes", mode="after")
    @classmethod
    def non_negative(cls, v: int) -> int:
        return max(0, v)

    @field_validator("retention_sweep_hour", mode="after")
    @classmethod
    def clamp_hour(cls, v: int) -> int:
        return min(23, max(0, v))

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
