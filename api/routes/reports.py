"""Report route"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from uuid import UUID
from typing import Optional

from api.dependencies import get_db, get_current_user, period_params
from api.responses import APIResponse, success_response
from domain.models import User
from domain.schemas.report_schemas import ReportResponse
from services.period import Period
from services.report_service import ReportService

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/{mess_id}", response_model=APIResponse[ReportResponse])
def get_report(
    mess_id: UUID,
    period: Optional[Period] = Depends(period_params),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Period summary and member balances (default: current month)"""
    report = ReportService.get_report(db, mess_id, current_user, period=period)
    return success_response(data=report, message=f"Report for {report.summary.period.month}")
