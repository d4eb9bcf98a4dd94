from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from scoreboard.services.periods import SUPPORTED_LOCALES


def _parse_time_of_day(value: str) -> tuple[int, int, int]:
    parts = [int(p) for p in value.strip().split(":")]
    if len(parts) > 3:
        raise ValueError(f"invalid time of day: {value!r}")
    while len(parts) < 3:
        parts.append(0)
    h, m, s = parts[:3]
    if not (0 <= h < 24 and 0 <= m < 60 and 0 <= s < 60):
        raise ValueError(f"invalid time of day: {value!r}")
    return h, m, s


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Google Sheets source
    SPREADSHEET_ID: str = ""
    SHEETS_API_URL: str = "https://sheets.googleapis.com/v4"
    # Either an API key (public spreadsheet) or a ready OAuth access token.
    SHEETS_API_KEY: Optional[str] = None
    SHEETS_ACCESS_TOKEN: Optional[str] = None
    TITLE_LOCALE: str = "ru"
    # Day rows are in local time; "today" for the summary is UTC + this offset.
    SHEET_UTC_OFFSET_H: int = 3

    # Telegram destination for the daily notifications
    BOT_TOKEN: str = ""
    TELEGRAM_API_URL: str = "https://api.telegram.org"
    NOTIFY_CHAT_ID: Optional[str] = None
    NOTIFY_TEXT: str = "Не забудьте заполнить таблицу!"
    # UTC, "HH:MM" or "HH:MM:SS"
    NOTIFY_AT: str = "17:00:00"
    SUMMARY_AT: str = "20:00:00"

    # Ingestion
    FETCH_INTERVAL_MIN: int = 10
    SKIP_PARSE_ERRORS: bool = False
    MAX_TABLES: int = 100
    HTTP_TIMEOUT_S: float = 30.0

    # Disable to serve the read API without background jobs.
    SCHEDULER_ENABLED: bool = True

    @field_validator("NOTIFY_AT", "SUMMARY_AT")
    @classmethod
    def check_time_of_day(cls, v: str) -> str:
        _parse_time_of_day(v)
        return v

    @field_validator("TITLE_LOCALE")
    @classmethod
    def check_locale(cls, v: str) -> str:
        if v not in SUPPORTED_LOCALES:
            raise ValueError(f"TITLE_LOCALE must be one of {SUPPORTED_LOCALES}")
        return v

    @field_validator("SHEET_UTC_OFFSET_H")
    @classmethod
    def check_offset(cls, v: int) -> int:
        if not -12 <= v <= 14:
            raise ValueError("SHEET_UTC_OFFSET_H must be between -12 and 14")
        return v

    @field_validator("FETCH_INTERVAL_MIN")
    @classmethod
    def check_interval(cls, v: int) -> int:
        if v < 1:
            raise ValueError("FETCH_INTERVAL_MIN must be at least 1 minute")
        return v

    @property
    def notify_at_tuple(self) -> tuple[int, int, int]:
        return _parse_time_of_day(self.NOTIFY_AT)

    @property
    def summary_at_tuple(self) -> tuple[int, int, int]:
        return _parse_time_of_day(self.SUMMARY_AT)


settings = Settings()
