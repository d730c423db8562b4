"""Mess routes: creation, membership, meal rate and member balances"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from uuid import UUID
from typing import List

from api.dependencies import get_db, get_current_user
from api.responses import APIResponse, success_response
from domain.models import User
from domain.schemas.mess_schemas import (
    MessCreate,
    MessUpdate,
    MessResponse,
    MemberAdd,
    MealRateResponse,
    CleanupRequest,
    CleanupResponse,
)
from domain.schemas.report_schemas import MemberBalanceReport
from services.mess_service import MessService
from services.balance_service import BalanceReconciler

router = APIRouter(prefix="/mess", tags=["Mess"])


@router.post(
    "", response_model=APIResponse[MessResponse], status_code=status.HTTP_201_CREATED
)
def create_mess(
    mess_data: MessCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create a mess and make the selected user its manager (admin only)"""
    mess = MessService.create_mess(db, mess_data, current_user)
    return success_response(
        data=MessResponse.model_validate(mess), message="Mess created successfully"
    )


@router.get("", response_model=APIResponse[List[MessResponse]])
def list_messes(
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    messes = MessService.list_messes(db, current_user)
    return success_response(data=[MessResponse.model_validate(m) for m in messes])


@router.post("/admin/cleanup", response_model=APIResponse[CleanupResponse])
def cleanup_data(
    request: CleanupRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete a mess's meals, expenses and/or deposits in a date range (admin only)"""
    deleted = MessService.cleanup_data(db, request, current_user)
    return success_response(
        data=CleanupResponse(deleted_count=deleted),
        message=f"Deleted {deleted} records",
    )


@router.get("/{mess_id}", response_model=APIResponse[MessResponse])
def get_mess(
    mess_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Mess details with members; refreshes the cached meal rate"""
    mess = MessService.get_mess(db, mess_id, current_user)
    return success_response(data=MessResponse.model_validate(mess))


@router.put("/{mess_id}", response_model=APIResponse[MessResponse])
def update_mess(
    mess_id: UUID,
    update: MessUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    mess = MessService.update_mess(db, mess_id, update, current_user)
    return success_response(
        data=MessResponse.model_validate(mess), message="Mess updated successfully"
    )


@router.delete("/{mess_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_mess(
    mess_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    MessService.delete_mess(db, mess_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{mess_id}/meal-rate", response_model=APIResponse[MealRateResponse])
def get_meal_rate(
    mess_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Current-month meal rate and the totals it comes from"""
    return success_response(data=MessService.get_meal_rate(db, mess_id, current_user))


@router.get("/{mess_id}/balances", response_model=APIResponse[MemberBalanceReport])
def get_member_balances(
    mess_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Current-month balance of every member"""
    report = BalanceReconciler.compute_member_balances(db, mess_id, current_user)
    return success_response(data=report)


@router.post("/{mess_id}/members", response_model=APIResponse[MessResponse])
def add_member(
    mess_id: UUID,
    member: MemberAdd,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    mess = MessService.add_member(db, mess_id, member.email, current_user)
    return success_response(
        data=MessResponse.model_validate(mess), message="Member added successfully"
    )


@router.delete("/{mess_id}/members/{user_id}", response_model=APIResponse[MessResponse])
def remove_member(
    mess_id: UUID,
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    mess = MessService.remove_member(db, mess_id, user_id, current_user)
    return success_response(
        data=MessResponse.model_validate(mess), message="Member removed successfully"
    )
