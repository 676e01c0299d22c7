"""SQLModel database table models."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


def _utc_now() -> datetime:
    """Return current UTC time as an aware datetime for TIMESTAMP WITH TIME ZONE columns."""
    return datetime.now(UTC)


def _new_uuid() -> str:
    return str(uuid.uuid4())


class Agency(SQLModel, table=True):
    __tablename__ = "agencies"

    id: str = Field(default_factory=_new_uuid, primary_key=True)
    slug: str = Field(unique=True, index=True)
    name: str
    logo_url: str | None = None
    primary_color: str | None = None
    secondary_color: str | None = None
    whitelabel_subdomain: str | None = None
    whitelabel_domain: str | None = Field(default=None, index=True)
    whitelabel_verified: bool = Field(default=False)
    whitelabel_verified_at: datetime | None = Field(
        default=None, sa_type=DateTime(timezone=True)
    )
    created_at: datetime = Field(default_factory=_utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=_utc_now, sa_type=DateTime(timezone=True))
