"""Schemas for organization configuration."""

from typing import Optional

from pydantic import ConfigDict, Field, field_validator
import pytz

from ..core.constants import MAX_CANCELLATION_WINDOW_HOURS, MIN_SLOT_DURATION_MINUTES
from ._strict_base import StrictModel, StrictRequestModel


class OrganizationConfigResponse(StrictModel):
    name: str
    slug: str
    slot_duration_minutes: int
    cancellation_window_hours: int
    open_hour: int
    close_hour: int
    timezone: str

    model_config = ConfigDict(from_attributes=True, **StrictModel.model_config)


class OrganizationConfigUpdate(StrictRequestModel):
    """Partial update; omitted fields keep their value."""

    slot_duration_minutes: Optional[int] = Field(default=None, ge=MIN_SLOT_DURATION_MINUTES)
    cancellation_window_hours: Optional[int] = Field(
        default=None, ge=0, le=MAX_CANCELLATION_WINDOW_HOURS
    )
    open_hour: Optional[int] = Field(default=None, ge=0, le=23)
    close_hour: Optional[int] = Field(default=None, ge=0, le=23)
    timezone: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def reject_null(cls, v: object) -> object:
        if v is None:
            raise ValueError("Field may be omitted but not null")
        return v

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in pytz.all_timezones_set:
            raise ValueError(f"Invalid timezone: {v}")
        return v
