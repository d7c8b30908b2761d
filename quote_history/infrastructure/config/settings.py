"""
Runtime configuration: environment (.env supported) -> Settings.

Every tunable of a run lives on one pydantic model. Settings.from_env() is called
once by the CLI composition root; CLI flags are layered on top with with_overrides().
"""

import os
from datetime import datetime, timezone
from typing import Any, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

ENV_PREFIX = "QUOTE_HISTORY_"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64; rv:128.0) Gecko/20100101 Firefox/128.0"
)
DEFAULT_ROW_SELECTOR = "tr.yf-ewueuo"

# period1=345479400 / period2=1722448703 of the history URL.
DEFAULT_PERIOD_START = datetime(1980, 12, 12, 14, 30, tzinfo=timezone.utc)
DEFAULT_PERIOD_END = datetime(2024, 7, 31, 17, 58, 23, tzinfo=timezone.utc)


class Settings(BaseModel):
    period_start: datetime = DEFAULT_PERIOD_START
    period_end: datetime = DEFAULT_PERIOD_END
    max_concurrency: int = Field(default=8, ge=1)
    timeout: Optional[float] = Field(default=None, gt=0)
    user_agent: str = Field(default=DEFAULT_USER_AGENT, min_length=1)
    row_selector: str = Field(default=DEFAULT_ROW_SELECTOR, min_length=1)
    fail_fast: bool = False
    fail_on_empty: bool = False

    @field_validator("period_start", "period_end")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @model_validator(mode="after")
    def _check_period(self) -> "Settings":
        if self.period_start >= self.period_end:
            raise ValueError("period_start must be before period_end")
        return self

    @property
    def period1(self) -> int:
        return int(self.period_start.timestamp())

    @property
    def period2(self) -> int:
        return int(self.period_end.timestamp())

    @classmethod
    def from_env(cls, load_dotenv_file: bool = True) -> "Settings":
        """Build Settings from QUOTE_HISTORY_* environment variables.

        Unset variables keep the field defaults. Values are validated by
        pydantic, so e.g. QUOTE_HISTORY_FAIL_FAST=yes and an ISO date for
        QUOTE_HISTORY_START are both accepted.

        Raises:
            pydantic.ValidationError: on malformed values.
        """
        if load_dotenv_file:
            load_dotenv(find_dotenv(usecwd=True))
        values: dict[str, Any] = {}
        env_names = {
            "START": "period_start",
            "END": "period_end",
            "MAX_CONCURRENCY": "max_concurrency",
            "TIMEOUT": "timeout",
            "USER_AGENT": "user_agent",
            "ROW_SELECTOR": "row_selector",
            "FAIL_FAST": "fail_fast",
            "FAIL_ON_EMPTY": "fail_on_empty",
        }
        for suffix, field_name in env_names.items():
            raw = os.environ.get(ENV_PREFIX + suffix)
            if raw is not None and raw.strip():
                values[field_name] = raw.strip()
        return cls.model_validate(values)

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Return a revalidated copy with every non-None override applied."""
        data = self.model_dump()
        data.update({key: value for key, value in overrides.items() if value is not None})
        return type(self).model_validate(data)
