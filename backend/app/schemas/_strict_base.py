"""Strict schema baselines with forbidden extras by default."""

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict

from ..core.timezone_utils import ensure_utc

# Naive datetimes (as returned by SQLite) are read as UTC and always
# serialized with an explicit offset.
UTCDateTime = Annotated[datetime, AfterValidator(ensure_utc)]


class StrictModel(BaseModel):
    """Neutral strict base for response DTOs."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)


class StrictRequestModel(StrictModel):
    """Request DTO base that always forbids unexpected fields."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True, str_strip_whitespace=True)


class MessageResponse(StrictModel):
    """Plain acknowledgement."""

    message: str
