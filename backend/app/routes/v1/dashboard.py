"""Dashboard statistics - API v1."""

from fastapi import APIRouter, Depends

from ...api.dependencies.auth import get_current_principal
from ...api.dependencies.services import get_dashboard_service
from ...principal import CurrentPrincipal
from ...schemas.dashboard import DashboardStatsResponse
from ...services.dashboard_service import DashboardService

router = APIRouter(tags=["dashboard-v1"])


@router.get("/stats", response_model=DashboardStatsResponse)
def get_stats(
    principal: CurrentPrincipal = Depends(get_current_principal),
    dashboard_service: DashboardService = Depends(get_dashboard_service),
) -> DashboardStatsResponse:
    """Role-specific summary cards for the home screen."""
    return DashboardStatsResponse.model_validate(dashboard_service.get_stats(principal))
