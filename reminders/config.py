from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ChronoSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='CHRONO_', env_file='.env', extra='ignore')

    # Storage
    EVENTS_FILE: str = 'data/events.json'

    # Event defaults
    TIMEZONE: str = 'UTC'
    DEFAULT_REMINDER_HOURS: float = Field(default=24, ge=0)
    DEFAULT_COLOR: str = '#c17f3e'

    # Retry policy
    RETRY_INTERVAL_SECONDS: float = Field(default=60, gt=0)
    MAX_ATTEMPTS: int = Field(default=10, ge=1)

    # SMTP
    SMTP_HOST: str = 'smtp.gmail.com'
    SMTP_PORT: int = 465
    SMTP_USERNAME: str = ''
    SMTP_PASSWORD: str = ''
    SMTP_TIMEOUT_SECONDS: float = 30

    # Addresses
    FROM_NAME: str = 'Chrono'
    FROM_EMAIL: str = ''
    TO_EMAIL: str = ''


@lru_cache
def get_settings():
    return ChronoSettings()
