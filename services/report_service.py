import logging
from typing import Optional
from uuid import UUID
from sqlalchemy.orm import Session

from domain.models import User
from domain.schemas.report_schemas import AnalyticsSummary, ReportResponse
from services.access import get_mess_or_404, ensure_member
from services.balance_service import BalanceReconciler
from services.dashboard_service import build_monthly_stats
from services.meal_rate_service import MealRateCalculator
from services.period import Period, current_month

logger = logging.getLogger("messmate.reports")


class ReportService:
    @staticmethod
    def get_report(
        db: Session, mess_id: UUID, requesting_user: User, period: Optional[Period] = None
    ) -> ReportResponse:
        """Period summary plus one balance row per member, sharing a single meal rate"""
        mess = get_mess_or_404(db, mess_id)
        ensure_member(mess, requesting_user)

        period = period or current_month()
        breakdown = MealRateCalculator.breakdown(db, mess_id, period)
        stats = build_monthly_stats(db, mess, period, breakdown)
        balances = BalanceReconciler.compute_member_balances(
            db, mess_id, requesting_user, period=period, meal_rate=breakdown.meal_rate
        )

        logger.info(
            f"report_generated mess_id={mess_id} period={period.label} "
            f"members={balances.member_count}"
        )
        return ReportResponse(
            summary=AnalyticsSummary(**stats.model_dump(), period=period.to_info()),
            balances=balances,
        )
