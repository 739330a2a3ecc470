"""Shared model base and time helpers"""

import uuid
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union
from pydantic import BaseModel, Field


def utcnow() -> datetime:
    """Current instant as an aware UTC datetime"""
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    """Normalize a datetime to aware UTC; naive values are taken as UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def day_of(value: Union[date, datetime]) -> date:
    """Calendar (UTC) day of an instant, or the date itself"""
    if isinstance(value, datetime):
        return to_utc(value).date()
    return value


def at_time_of_day(day: date, hhmm: str) -> datetime:
    """
    Combine a calendar day with an HH:MM string into a UTC instant.

    "24:00" is the following midnight.
    """
    hours, minutes = (int(part) for part in hhmm.split(":"))
    midnight = datetime.combine(day, time(), tzinfo=timezone.utc)
    return midnight + timedelta(hours=hours, minutes=minutes)


def new_id() -> str:
    return str(uuid.uuid4())


class Entity(BaseModel):
    """Common identity and audit timestamps"""
    id: str = Field(default_factory=new_id)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def touch(self, now: Optional[datetime] = None) -> None:
        self.updated_at = now or utcnow()
