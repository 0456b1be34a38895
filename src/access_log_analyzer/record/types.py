"""Shared record schema for one access log line."""

from pydantic import BaseModel, ConfigDict, Field

HOURS_PER_DAY = 24


class LogRecord(BaseModel):
    """One decoded log line.

    ``user_id`` and any other extra fields are accepted and dropped.
    ``response_time_ms`` is ``None`` when the field is null or absent.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    timestamp: str | None = Field(default=None, strict=True)
    response_time_ms: float | None = Field(default=None, strict=True)
    http_status: int = Field(strict=True)

    @property
    def status_key(self) -> str:
        return str(self.http_status)
