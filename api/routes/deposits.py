"""Deposit routes"""

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
from domain.schemas.deposit_schemas import (
    DepositCreate,
    DepositUpdate,
    DepositResponse,
    DepositStatsResponse,
)
from services.deposit_service import DepositService
from services.period import Period

router = APIRouter(prefix="/deposits", tags=["Deposits"])


@router.post(
    "", response_model=APIResponse[DepositResponse], status_code=status.HTTP_201_CREATED
)
def create_deposit(
    deposit: DepositCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Record a member's deposit (manager only)"""
    created = DepositService.create_deposit(db, deposit, current_user)
    return success_response(
        data=DepositResponse.model_validate(created), message="Deposit added successfully"
    )


@router.get("", response_model=APIResponse[PaginatedResponse[DepositResponse]])
def list_all_deposits(
    mess_id: Optional[UUID] = Query(None),
    user_id: Optional[str] = Query(None),
    pagination: Pagination = Depends(),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    items, total = DepositService.list_all_deposits(
        db,
        current_user,
        pagination.skip,
        pagination.limit,
        mess_id=mess_id,
        user_id=parse_user_filter(user_id),
    )
    return success_response(
        data=paginated_response(
            [DepositResponse.model_validate(d) for d in items],
            total,
            pagination.page,
            pagination.limit,
        )
    )


@router.get("/mess/{mess_id}", response_model=APIResponse[List[DepositResponse]])
def get_mess_deposits(
    mess_id: UUID,
    user_id: Optional[str] = Query(None, description="Member id or 'all'"),
    period: Optional[Period] = Depends(period_params),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    deposits = DepositService.get_deposits(
        db, mess_id, current_user, period=period, user_id=parse_user_filter(user_id)
    )
    return success_response(data=[DepositResponse.model_validate(d) for d in deposits])


@router.get("/mess/{mess_id}/stats", response_model=APIResponse[DepositStatsResponse])
def get_deposit_stats(
    mess_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Current-month deposit totals, overall and per member"""
    return success_response(data=DepositService.get_stats(db, mess_id, current_user))


@router.get(
    "/mess/{mess_id}/user/{user_id}", response_model=APIResponse[List[DepositResponse]]
)
def get_user_deposits(
    mess_id: UUID,
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    deposits = DepositService.get_user_deposits(db, mess_id, user_id, current_user)
    return success_response(data=[DepositResponse.model_validate(d) for d in deposits])


@router.put("/{deposit_id}", response_model=APIResponse[DepositResponse])
def update_deposit(
    deposit_id: UUID,
    update: DepositUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    deposit = DepositService.update_deposit(db, deposit_id, update, current_user)
    return success_response(
        data=DepositResponse.model_validate(deposit), message="Deposit updated successfully"
    )


@router.delete("/{deposit_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_deposit(
    deposit_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    DepositService.delete_deposit(db, deposit_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
