"""Response models for dashboard statistics."""

from typing import Optional, Union

from ..core.enums import MembershipRole
from ._strict_base import StrictModel, UTCDateTime


class StaffCards(StrictModel):
    active_students: int
    classes_today: int
    expiring_packs: int
    register_slug: str


class NextClass(StrictModel):
    title: str
    date: UTCDateTime


class StudentCards(StrictModel):
    credits: int
    next_expiration: Optional[UTCDateTime] = None
    next_class: Optional[NextClass] = None
    classes_this_month: int


class DashboardStatsResponse(StrictModel):
    """Either role-specific cards, or ``empty`` with a message for users without a gym."""

    role: Optional[MembershipRole] = None
    cards: Optional[Union[StaffCards, StudentCards]] = None
    empty: bool = False
    message: Optional[str] = None
