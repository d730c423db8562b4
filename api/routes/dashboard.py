"""Dashboard route"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from uuid import UUID

from api.dependencies import get_db, get_current_user
from api.responses import APIResponse, success_response
from domain.models import User
from domain.schemas.report_schemas import DashboardResponse
from services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/{mess_id}", response_model=APIResponse[DashboardResponse])
def get_dashboard(
    mess_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    **Current-month overview of a mess.**

    Includes the freshly computed meal rate, monthly totals, per-member meal
    stats, the expense breakdown by category and the latest meals and expenses.
    """
    return success_response(data=DashboardService.get_dashboard(db, mess_id, current_user))
