"""Meal logging routes"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from uuid import UUID
from typing import List, Optional

from api.dependencies import (
    get_db,
    get_current_user,
    parse_user_filter,
    period_params,
    Pagination,
)
from api.responses import APIResponse, PaginatedResponse, success_response, paginated_response
from domain.models import User
from domain.schemas.meal_schemas import (
    MealCreate,
    MealBulkCreate,
    MealUpdate,
    MealResponse,
    MealStatistics,
    UserMealSummary,
    CalculateCostsRequest,
    CalculateCostsResponse,
)
from services.meal_service import MealService
from services.period import Period

router = APIRouter(prefix="/meals", tags=["Meals"])


@router.post(
    "", response_model=APIResponse[MealResponse], status_code=status.HTTP_201_CREATED
)
def create_meal(
    meal: MealCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Log one member's meals for a date (manager only)"""
    created = MealService.create_meal(db, meal, current_user)
    return success_response(
        data=MealResponse.model_validate(created), message="Meal added successfully"
    )


@router.post(
    "/bulk",
    response_model=APIResponse[List[MealResponse]],
    status_code=status.HTTP_201_CREATED,
)
def bulk_create_meals(
    bulk: MealBulkCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Log several members' meals at once; rejected as a whole on duplicates"""
    meals = MealService.bulk_create_meals(db, bulk, current_user)
    return success_response(
        data=[MealResponse.model_validate(m) for m in meals],
        message=f"{len(meals)} meals added successfully",
    )


@router.get("", response_model=APIResponse[PaginatedResponse[MealResponse]])
def list_all_meals(
    mess_id: Optional[UUID] = Query(None),
    user_id: Optional[str] = Query(None),
    period: Optional[Period] = Depends(period_params),
    pagination: Pagination = Depends(),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """All meals across messes, newest first (admin only)"""
    items, total = MealService.list_all_meals(
        db,
        current_user,
        pagination.skip,
        pagination.limit,
        mess_id=mess_id,
        user_id=parse_user_filter(user_id),
        period=period,
    )
    return success_response(
        data=paginated_response(
            [MealResponse.model_validate(m) for m in items],
            total,
            pagination.page,
            pagination.limit,
        )
    )


@router.get("/mess/{mess_id}", response_model=APIResponse[List[MealResponse]])
def get_mess_meals(
    mess_id: UUID,
    user_id: Optional[str] = Query(None, description="Member id or 'all'"),
    period: Optional[Period] = Depends(period_params),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    meals = MealService.get_meals(
        db, mess_id, current_user, period=period, user_id=parse_user_filter(user_id)
    )
    return success_response(data=[MealResponse.model_validate(m) for m in meals])


@router.get("/stats/{mess_id}", response_model=APIResponse[MealStatistics])
def get_meal_statistics(
    mess_id: UUID,
    user_id: Optional[str] = Query(None, description="Member id or 'all'"),
    period: Optional[Period] = Depends(period_params),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    stats = MealService.get_statistics(
        db, mess_id, current_user, period=period, user_id=parse_user_filter(user_id)
    )
    return success_response(data=stats)


@router.post(
    "/calculate-costs/{mess_id}", response_model=APIResponse[CalculateCostsResponse]
)
def calculate_meal_costs(
    mess_id: UUID,
    request: Optional[CalculateCostsRequest] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Fill in the cost of meals that have none (manager only)"""
    rate = request.meal_rate if request else None
    updated, applied = MealService.calculate_costs(db, mess_id, current_user, meal_rate=rate)
    return success_response(
        data=CalculateCostsResponse(updated=updated, meal_rate=applied),
        message=f"Updated cost for {updated} meals",
    )


@router.get("/summary/{mess_id}/{user_id}", response_model=APIResponse[UserMealSummary])
def get_user_meal_summary(
    mess_id: UUID,
    user_id: UUID,
    period: Optional[Period] = Depends(period_params),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    summary = MealService.get_user_summary(db, mess_id, user_id, current_user, period=period)
    return success_response(data=summary)


@router.put("/{meal_id}", response_model=APIResponse[MealResponse])
def update_meal(
    meal_id: UUID,
    update: MealUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    meal = MealService.update_meal(db, meal_id, update, current_user)
    return success_response(
        data=MealResponse.model_validate(meal), message="Meal updated successfully"
    )


@router.delete("/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_meal(
    meal_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    MealService.delete_meal(db, meal_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
