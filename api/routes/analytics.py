"""Analytics route"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from uuid import UUID

from api.dependencies import get_db, get_current_user
from api.responses import APIResponse, success_response
from domain.models import User
from domain.schemas.report_schemas import AnalyticsResponse
from services.analytics_service import AnalyticsService

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("/{mess_id}", response_model=APIResponse[AnalyticsResponse])
def get_analytics(
    mess_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return success_response(data=AnalyticsService.get_analytics(db, mess_id, current_user))
