"""Expense routes"""

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
from app.exceptions import ServiceValidationError
from domain.enums import ExpenseCategory
from domain.models import User
from domain.schemas.expense_schemas import ExpenseCreate, ExpenseUpdate, ExpenseResponse
from services.expense_service import ExpenseService
from services.period import Period

router = APIRouter(prefix="/expenses", tags=["Expenses"])


def _category_filter(category: Optional[str]) -> Optional[ExpenseCategory]:
    if not category or category == "all":
        return None
    try:
        return ExpenseCategory(category)
    except ValueError:
        raise ServiceValidationError(f"Unknown expense category: {category}")


@router.post(
    "", response_model=APIResponse[ExpenseResponse], status_code=status.HTTP_201_CREATED
)
def create_expense(
    expense: ExpenseCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Record an expense (manager only)"""
    created = ExpenseService.create_expense(db, expense, current_user)
    return success_response(
        data=ExpenseResponse.model_validate(created), message="Expense added successfully"
    )


@router.get("", response_model=APIResponse[PaginatedResponse[ExpenseResponse]])
def list_all_expenses(
    mess_id: Optional[UUID] = Query(None),
    category: Optional[str] = Query(None),
    period: Optional[Period] = Depends(period_params),
    pagination: Pagination = Depends(),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """All expenses across messes, newest first (admin only)"""
    items, total = ExpenseService.list_all_expenses(
        db,
        current_user,
        pagination.skip,
        pagination.limit,
        mess_id=mess_id,
        category=_category_filter(category),
        period=period,
    )
    return success_response(
        data=paginated_response(
            [ExpenseResponse.model_validate(e) for e in items],
            total,
            pagination.page,
            pagination.limit,
        )
    )


@router.get("/mess/{mess_id}", response_model=APIResponse[List[ExpenseResponse]])
def get_mess_expenses(
    mess_id: UUID,
    category: Optional[str] = Query(None, description="Category or 'all'"),
    user_id: Optional[str] = Query(None, description="Paying member id or 'all'"),
    period: Optional[Period] = Depends(period_params),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    expenses = ExpenseService.get_expenses(
        db,
        mess_id,
        current_user,
        period=period,
        category=_category_filter(category),
        user_id=parse_user_filter(user_id),
    )
    return success_response(data=[ExpenseResponse.model_validate(e) for e in expenses])


@router.put("/{expense_id}", response_model=APIResponse[ExpenseResponse])
def update_expense(
    expense_id: UUID,
    update: ExpenseUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    expense = ExpenseService.update_expense(db, expense_id, update, current_user)
    return success_response(
        data=ExpenseResponse.model_validate(expense), message="Expense updated successfully"
    )


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(
    expense_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ExpenseService.delete_expense(db, expense_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
