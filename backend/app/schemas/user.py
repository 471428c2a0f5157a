from typing import Optional

from pydantic import ConfigDict, EmailStr, Field, model_validator

from ..core.constants import MIN_PASSWORD_LENGTH
from ._strict_base import StrictModel, StrictRequestModel


class UserProfileResponse(StrictModel):
    id: str
    email: EmailStr
    full_name: str

    model_config = ConfigDict(from_attributes=True, **StrictModel.model_config)


class UserProfileUpdate(StrictRequestModel):
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    password: Optional[str] = Field(default=None, min_length=MIN_PASSWORD_LENGTH)

    @model_validator(mode="after")
    def _require_a_change(self) -> "UserProfileUpdate":
        if self.full_name is None and self.password is None:
            raise ValueError("Provide full_name and/or password")
        return self
