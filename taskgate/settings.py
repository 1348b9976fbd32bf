"""Environment-backed defaults for AsyncQueue construction.

Only consulted for arguments the caller leaves out; the TASKGATE_QUEUE_ prefix
maps variables onto fields.
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class QueueSettings(BaseSettings):
    """Default values applied when a queue is constructed."""

    model_config = SettingsConfigDict(env_prefix="TASKGATE_QUEUE_", extra="ignore")

    concurrency: int = Field(default=1, description="Max in-flight tasks, 0 for unbounded")

    @field_validator("concurrency")
    @classmethod
    def validate_concurrency(cls, value: int) -> int:
        if value < 0:
            raise ValueError("concurrency must be >= 0")
        return value
