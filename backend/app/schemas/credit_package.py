from pydantic import ConfigDict, Field

from ._strict_base import StrictModel, StrictRequestModel, UTCDateTime


class CreditPackageCreate(StrictRequestModel):
    """Sell a package of credits to a student (``student_id`` is a user id)."""

    student_id: str
    amount: int = Field(..., gt=0)
    days_valid: int = Field(..., ge=1)
    name: str = Field(..., min_length=1, max_length=120)


class CreditPackageResponse(StrictModel):
    id: str
    membership_id: str
    name: str
    initial_amount: int
    remaining_amount: int
    expires_at: UTCDateTime
    created_at: UTCDateTime | None = None

    model_config = ConfigDict(from_attributes=True, **StrictModel.model_config)
