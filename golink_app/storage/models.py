"""
Entity model shared by the storage backends and the service layer.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Fixed width keeps lexical order equal to chronological order
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f+00:00"


class Golink(BaseModel):
    """
    A short alias (go/<name>) mapped to a destination URL.

    id and created_at are assigned once at creation and never change.
    url is the only field that may be updated.
    """

    id: str = Field(..., description="Opaque unique identifier (UUID4)")
    short_link: str = Field(..., description="Alias key, e.g. go/docs")
    url: str = Field(..., description="Destination URL")
    created_at: datetime = Field(..., description="UTC creation time, listing sort key")

    @field_validator("created_at")
    @classmethod
    def normalize_created_at(cls, value: datetime) -> datetime:
        # Naive timestamps are taken as UTC so every stored value compares
        return to_utc(value)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "0b6f7c38-3f0e-4c7e-9f35-9a0d6c1d2a11",
                "short_link": "go/docs",
                "url": "https://docs.example.com",
                "created_at": "2025-10-29T10:30:00.000000+00:00",
            }
        }
    )


def to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    return to_utc(value).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value)
