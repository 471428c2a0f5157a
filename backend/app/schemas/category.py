from pydantic import ConfigDict, Field

from ._strict_base import StrictModel, StrictRequestModel, UTCDateTime


class CategoryCreate(StrictRequestModel):
    name: str = Field(..., min_length=1, max_length=80)


class CategoryUpdate(StrictRequestModel):
    name: str = Field(..., min_length=1, max_length=80)


class CategoryResponse(StrictModel):
    id: int
    name: str
    organization_id: str
    created_at: UTCDateTime | None = None

    model_config = ConfigDict(from_attributes=True, **StrictModel.model_config)
