"""Seed data configuration model."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


class SeedSettings(BaseModel):
    """SQL seed configuration section.

    The password is never configured; it is asked for interactively.

    Attributes:
        sql_file: SQL file piped to the database client.
        host: Database host.
        port: Database port.
        user: Database user.
        database: Default database passed to the client, if any.
        timeout: Seconds allowed for the load.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    sql_file: str = "data/seed.sql"
    host: str = "127.0.0.1"
    port: int = Field(default=3306, ge=1, le=65535)
    user: str = Field(default="root", min_length=1)
    database: str | None = None
    timeout: float = Field(default=120.0, gt=0)
