"""
Tests for the service layer with real database operations.

This suite validates business rules against an in-memory database:
- MessService: creation, membership, manager hand-over, cleanup
- MealService: logging, bulk logging, statistics, lazy costs
- ExpenseService / DepositService: manager-only writes, member checks
- UserService: registration, admin account management
- DashboardService / AnalyticsService / ReportService: read models
"""

import uuid
from datetime import timedelta

import pytest
from sqlalchemy.orm import Session

from test_fixtures import (
    db_session,
    make_admin,
    make_mess,
    make_user,
    add_meal,
    add_expense,
    add_deposit,
    period_day,
    unique_email,
)
from app.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ServiceValidationError,
)
from domain.enums import CleanupType, ExpenseCategory, MealStatus, MealType, UserRole
from domain.models import DEFAULT_MEAL_RATE, Meal, Mess
from domain.schemas.mess_schemas import CleanupRequest, MessCreate, MessUpdate
from domain.schemas.meal_schemas import MealBulkCreate, MealCreate, MealEntry, MealUpdate
from domain.schemas.expense_schemas import ExpenseCreate, ExpenseUpdate
from domain.schemas.deposit_schemas import DepositCreate
from domain.schemas.user_schemas import UserAdminUpdate, UserCreate, UserProfileUpdate
from services import (
    AnalyticsService,
    DashboardService,
    DepositService,
    ExpenseService,
    MealService,
    MessService,
    ReportService,
    UserService,
)
from services.period import current_month, month_period


# =============================================================================
# MESS SERVICE TESTS
# =============================================================================


def test_create_mess_promotes_manager(db_session: Session):
    """
    Verifies:
    - Only admins create messes
    - The manager becomes the first member and is promoted to manager
    - The mess starts at the default meal rate
    """
    admin = make_admin(db_session)
    manager = make_user(db_session, name="Rahim Uddin")

    mess = MessService.create_mess(
        db_session, MessCreate(name="Lake View", manager_id=manager.user_id), admin
    )

    db_session.refresh(manager)
    assert mess.meal_rate == DEFAULT_MEAL_RATE
    assert mess.currency == "৳"
    assert mess.manager_id == manager.user_id
    assert manager.mess_id == mess.mess_id
    assert manager.role == UserRole.MANAGER
    assert mess.member_ids == {manager.user_id}


def test_create_mess_requires_admin(db_session: Session):
    user = make_user(db_session)

    with pytest.raises(ForbiddenError):
        MessService.create_mess(
            db_session, MessCreate(name="Lake View", manager_id=user.user_id), user
        )


def test_create_mess_rejects_busy_or_unknown_manager(db_session: Session):
    admin = make_admin(db_session)
    existing = make_mess(db_session)

    with pytest.raises(ConflictError):
        MessService.create_mess(
            db_session, MessCreate(name="Second", manager_id=existing.manager_id), admin
        )
    with pytest.raises(NotFoundError):
        MessService.create_mess(
            db_session, MessCreate(name="Ghost", manager_id=uuid.uuid4()), admin
        )


def test_get_mess_refreshes_meal_rate(db_session: Session):
    mess = make_mess(db_session)
    add_meal(db_session, mess, mess.manager)
    add_expense(db_session, mess, 36)

    fetched = MessService.get_mess(db_session, mess.mess_id, mess.manager)

    assert fetched.meal_rate == 12.0


def test_get_meal_rate_does_not_persist(db_session: Session):
    mess = make_mess(db_session)
    add_meal(db_session, mess, mess.manager)
    add_expense(db_session, mess, 36)

    result = MessService.get_meal_rate(db_session, mess.mess_id, mess.manager)

    db_session.expire_all()
    assert result.meal_rate == 12.0
    assert result.calculation == "36 / 3 = 12"
    assert mess.meal_rate == DEFAULT_MEAL_RATE


def test_add_and_remove_member(db_session: Session):
    mess = make_mess(db_session)
    user = make_user(db_session, name="Karim Hossain", email="karim@example.com")

    mess = MessService.add_member(db_session, mess.mess_id, "KARIM@example.com", mess.manager)
    assert user.user_id in mess.member_ids

    mess = MessService.remove_member(db_session, mess.mess_id, user.user_id, mess.manager)
    db_session.refresh(user)
    assert user.user_id not in mess.member_ids
    assert user.mess_id is None


def test_add_member_rules(db_session: Session):
    """
    Verifies:
    - Only the manager adds members
    - Unknown emails are 404, users already in a mess are 409
    """
    mess = make_mess(db_session)
    member = make_user(db_session, name="Karim Hossain", mess=mess)
    other = make_mess(db_session, name="Blue House Mess")

    with pytest.raises(ForbiddenError):
        MessService.add_member(db_session, mess.mess_id, unique_email(), member)
    with pytest.raises(NotFoundError):
        MessService.add_member(db_session, mess.mess_id, unique_email(), mess.manager)
    with pytest.raises(ConflictError):
        MessService.add_member(db_session, mess.mess_id, other.manager.email, mess.manager)


def test_manager_cannot_be_removed(db_session: Session):
    mess = make_mess(db_session)
    admin = make_admin(db_session)

    with pytest.raises(ServiceValidationError):
        MessService.remove_member(db_session, mess.mess_id, mess.manager_id, admin)


def test_update_mess_transfers_manager(db_session: Session):
    old_manager = make_user(db_session, name="Rahim Uddin", role=UserRole.MANAGER)
    mess = make_mess(db_session, manager=old_manager)
    member = make_user(db_session, name="Karim Hossain", mess=mess)

    mess = MessService.update_mess(
        db_session,
        mess.mess_id,
        MessUpdate(name="Renamed", manager_id=member.user_id),
        old_manager,
    )

    db_session.refresh(old_manager)
    db_session.refresh(member)
    assert mess.name == "Renamed"
    assert mess.manager_id == member.user_id
    assert member.role == UserRole.MANAGER
    assert old_manager.role == UserRole.USER


def test_update_mess_rejects_outside_manager(db_session: Session):
    mess = make_mess(db_session)
    outsider = make_user(db_session, name="Outsider Omar")

    with pytest.raises(ServiceValidationError):
        MessService.update_mess(
            db_session, mess.mess_id, MessUpdate(manager_id=outsider.user_id), mess.manager
        )
    with pytest.raises(ForbiddenError):
        MessService.update_mess(db_session, mess.mess_id, MessUpdate(name="X"), outsider)


def test_delete_mess_detaches_members(db_session: Session):
    admin = make_admin(db_session)
    mess = make_mess(db_session)
    member = make_user(db_session, name="Karim Hossain", mess=mess)
    add_meal(db_session, mess, member)
    add_expense(db_session, mess, 100)
    add_deposit(db_session, mess, member, 100)
    mess_id = mess.mess_id

    MessService.delete_mess(db_session, mess_id, admin)

    db_session.refresh(member)
    assert member.mess_id is None
    assert db_session.query(Mess).count() == 0
    assert db_session.query(Meal).filter(Meal.mess_id == mess_id).count() == 0


def test_cleanup_data_in_range(db_session: Session):
    admin = make_admin(db_session)
    mess = make_mess(db_session)
    old = month_period(2023, 5)
    add_meal(db_session, mess, mess.manager, on=old.start)
    add_expense(db_session, mess, 50, on=old.end)
    add_deposit(db_session, mess, mess.manager, 50, on=old.end)
    add_meal(db_session, mess, mess.manager)

    deleted = MessService.cleanup_data(
        db_session,
        CleanupRequest(
            mess_id=mess.mess_id,
            start_date=old.start,
            end_date=old.end,
            type=CleanupType.ALL,
        ),
        admin,
    )

    assert deleted == 3
    assert db_session.query(Meal).count() == 1


def test_cleanup_single_type(db_session: Session):
    admin = make_admin(db_session)
    mess = make_mess(db_session)
    period = current_month()
    add_meal(db_session, mess, mess.manager)
    add_expense(db_session, mess, 50)

    deleted = MessService.cleanup_data(
        db_session,
        CleanupRequest(
            mess_id=mess.mess_id,
            start_date=period.start,
            end_date=period.end,
            type=CleanupType.EXPENSES,
        ),
        admin,
    )

    assert deleted == 1
    assert db_session.query(Meal).count() == 1


# =============================================================================
# MEAL SERVICE TESTS
# =============================================================================


def test_create_meal_for_member(db_session: Session):
    mess = make_mess(db_session)
    member = make_user(db_session, name="Karim Hossain", mess=mess)

    meal = MealService.create_meal(
        db_session,
        MealCreate(
            mess_id=mess.mess_id,
            user_id=member.user_id,
            date=period_day(),
            breakfast=1,
            lunch=2,
            dinner=0,
        ),
        mess.manager,
    )

    assert meal.units == 3
    assert meal.status == MealStatus.TAKEN
    assert meal.meal_type == MealType.REGULAR
    assert meal.cost is None


def test_create_meal_checks_roles(db_session: Session):
    mess = make_mess(db_session)
    member = make_user(db_session, name="Karim Hossain", mess=mess)
    outsider = make_user(db_session, name="Outsider Omar")
    entry = dict(mess_id=mess.mess_id, date=period_day(), lunch=1)

    with pytest.raises(ForbiddenError):
        MealService.create_meal(db_session, MealCreate(user_id=member.user_id, **entry), member)
    with pytest.raises(ServiceValidationError):
        MealService.create_meal(
            db_session, MealCreate(user_id=outsider.user_id, **entry), mess.manager
        )


def test_bulk_create_meals(db_session: Session):
    mess = make_mess(db_session)
    member = make_user(db_session, name="Karim Hossain", mess=mess)
    day = period_day(3)

    meals = MealService.bulk_create_meals(
        db_session,
        MealBulkCreate(
            mess_id=mess.mess_id,
            meals=[
                MealEntry(user_id=mess.manager_id, date=day, lunch=1, dinner=1),
                MealEntry(user_id=member.user_id, date=day, lunch=1),
            ],
        ),
        mess.manager,
    )

    assert len(meals) == 2
    assert sum(m.units for m in meals) == 3


def test_bulk_create_rejects_duplicates_without_partial_write(db_session: Session):
    """
    Verifies:
    - A user that already has a meal on the date makes the whole batch fail
    - Nothing from the rejected batch is stored
    """
    mess = make_mess(db_session)
    member = make_user(db_session, name="Karim Hossain", mess=mess)
    day = period_day(4)
    add_meal(db_session, mess, member, on=day)

    with pytest.raises(ConflictError):
        MealService.bulk_create_meals(
            db_session,
            MealBulkCreate(
                mess_id=mess.mess_id,
                meals=[
                    MealEntry(user_id=mess.manager_id, date=day, lunch=1),
                    MealEntry(user_id=member.user_id, date=day, lunch=1),
                ],
            ),
            mess.manager,
        )

    assert db_session.query(Meal).count() == 1


def test_get_meals_filters(db_session: Session):
    mess = make_mess(db_session)
    member = make_user(db_session, name="Karim Hossain", mess=mess)
    add_meal(db_session, mess, mess.manager)
    add_meal(db_session, mess, member)
    add_meal(db_session, mess, member, on=month_period(2022, 3).start)

    everything = MealService.get_meals(db_session, mess.mess_id, member)
    this_month = MealService.get_meals(db_session, mess.mess_id, member, period=current_month())
    mine = MealService.get_meals(
        db_session, mess.mess_id, member, period=current_month(), user_id=member.user_id
    )

    assert len(everything) == 3
    assert len(this_month) == 2
    assert len(mine) == 1


def test_update_meal_resets_cost(db_session: Session):
    mess = make_mess(db_session)
    meal = add_meal(db_session, mess, mess.manager, cost=150.0)
    new_day = period_day(5)

    updated = MealService.update_meal(
        db_session,
        meal.meal_id,
        MealUpdate(date=new_day, breakfast=0, lunch=1, dinner=0),
        mess.manager,
    )

    assert updated.units == 1
    assert updated.date == new_day
    assert updated.cost is None


def test_delete_meal(db_session: Session):
    mess = make_mess(db_session)
    member = make_user(db_session, name="Karim Hossain", mess=mess)
    meal = add_meal(db_session, mess, member)
    meal_id = meal.meal_id

    with pytest.raises(ForbiddenError):
        MealService.delete_meal(db_session, meal_id, member)

    MealService.delete_meal(db_session, meal_id, mess.manager)
    assert db_session.query(Meal).count() == 0

    with pytest.raises(NotFoundError):
        MealService.delete_meal(db_session, meal_id, mess.manager)


def test_meal_statistics(db_session: Session):
    mess = make_mess(db_session)
    m = mess.manager
    add_meal(db_session, mess, m, on=period_day(0), preferences={"vegetarian": True})
    add_meal(db_session, mess, m, on=period_day(1), is_guest=True, guest_name="Cousin")
    add_meal(
        db_session, mess, m, on=period_day(2),
        breakfast=0, lunch=0, dinner=0,
        status=MealStatus.SKIPPED, meal_type=MealType.OFFDAY,
    )

    stats = MealService.get_statistics(db_session, mess.mess_id, m)

    assert stats.total_entries == 3
    assert stats.breakfast_count == 2
    assert stats.total_meal_count == 6
    assert stats.guest_meals == 1
    assert stats.skipped_meals == 1
    assert stats.offday_meals == 1
    assert stats.regular_meals == 2
    assert stats.vegetarian_meals == 1
    assert stats.total_cost == 0


def test_calculate_costs_fills_missing_only(db_session: Session):
    mess = make_mess(db_session)
    add_meal(db_session, mess, mess.manager, on=period_day(0))
    priced = add_meal(db_session, mess, mess.manager, on=period_day(1), cost=99.0)
    add_expense(db_session, mess, 60)

    updated, rate = MealService.calculate_costs(db_session, mess.mess_id, mess.manager)

    db_session.refresh(priced)
    assert updated == 1
    # 60 / 6 meal-units
    assert rate == 10.0
    assert priced.cost == 99.0
    assert MealService.get_statistics(db_session, mess.mess_id, mess.manager).total_cost == 129.0


def test_calculate_costs_with_explicit_rate(db_session: Session):
    mess = make_mess(db_session)
    add_meal(db_session, mess, mess.manager, breakfast=0, lunch=1, dinner=1)

    updated, rate = MealService.calculate_costs(
        db_session, mess.mess_id, mess.manager, meal_rate=45.5
    )

    assert (updated, rate) == (1, 45.5)
    assert db_session.query(Meal).one().cost == 91.0


def test_user_meal_summary(db_session: Session):
    mess = make_mess(db_session)
    member = make_user(db_session, name="Karim Hossain", mess=mess)
    add_meal(db_session, mess, member, on=period_day(0), cost=30.0)
    add_meal(db_session, mess, member, on=period_day(1), breakfast=0, is_guest=True)
    add_meal(db_session, mess, mess.manager, on=period_day(1))

    summary = MealService.get_user_summary(db_session, mess.mess_id, member.user_id, member)

    assert summary.total_days == 2
    assert summary.total_breakfast == 1
    assert summary.total_meals == 5
    assert summary.total_cost == 30
    assert summary.guest_meals == 1


# =============================================================================
# EXPENSE SERVICE TESTS
# =============================================================================


def test_create_expense_defaults(db_session: Session):
    mess = make_mess(db_session)
    member = make_user(db_session, name="Karim Hossain", mess=mess)

    expense = ExpenseService.create_expense(
        db_session,
        ExpenseCreate(
            mess_id=mess.mess_id,
            description="Rice and lentils",
            amount=820.5,
            expensed_by=member.user_id,
        ),
        mess.manager,
    )

    assert expense.category == ExpenseCategory.FOOD
    assert expense.added_by == mess.manager_id
    assert expense.expensed_by == member.user_id
    assert current_month().contains(expense.date)


def test_expense_payer_must_be_member(db_session: Session):
    mess = make_mess(db_session)
    outsider = make_user(db_session, name="Outsider Omar")

    with pytest.raises(ServiceValidationError):
        ExpenseService.create_expense(
            db_session,
            ExpenseCreate(
                mess_id=mess.mess_id,
                description="Gas bill",
                amount=1200,
                expensed_by=outsider.user_id,
            ),
            mess.manager,
        )


def test_get_expenses_filters(db_session: Session):
    mess = make_mess(db_session)
    member = make_user(db_session, name="Karim Hossain", mess=mess)
    add_expense(db_session, mess, 100, paid_by=member)
    add_expense(db_session, mess, 500, category=ExpenseCategory.UTILITIES)

    by_member = ExpenseService.get_expenses(db_session, mess.mess_id, member, user_id=member.user_id)
    utilities = ExpenseService.get_expenses(
        db_session, mess.mess_id, member, category=ExpenseCategory.UTILITIES
    )

    assert [e.amount for e in by_member] == [100]
    assert [e.amount for e in utilities] == [500]


def test_update_and_delete_expense(db_session: Session):
    mess = make_mess(db_session)
    expense = add_expense(db_session, mess, 100)
    new_day = period_day(6)

    updated = ExpenseService.update_expense(
        db_session,
        expense.expense_id,
        ExpenseUpdate(
            description="Fish",
            amount=350,
            category=ExpenseCategory.FOOD,
            expensed_by=mess.manager_id,
            date=new_day,
        ),
        mess.manager,
    )
    assert (updated.amount, updated.date) == (350, new_day)

    expense_id = expense.expense_id
    ExpenseService.delete_expense(db_session, expense_id, mess.manager)
    with pytest.raises(NotFoundError):
        ExpenseService.delete_expense(db_session, expense_id, mess.manager)


def test_admin_expense_listing(db_session: Session):
    admin = make_admin(db_session)
    mess = make_mess(db_session)
    for amount in (10, 20, 30):
        add_expense(db_session, mess, amount)

    items, total = ExpenseService.list_all_expenses(db_session, admin, skip=0, limit=2)

    assert total == 3
    assert len(items) == 2
    with pytest.raises(ForbiddenError):
        ExpenseService.list_all_expenses(db_session, mess.manager, skip=0, limit=2)


# =============================================================================
# DEPOSIT SERVICE TESTS
# =============================================================================


def test_create_deposit(db_session: Session):
    mess = make_mess(db_session)
    member = make_user(db_session, name="Karim Hossain", mess=mess)

    deposit = DepositService.create_deposit(
        db_session,
        DepositCreate(
            mess_id=mess.mess_id, user_id=member.user_id, amount=2000, date=period_day()
        ),
        mess.manager,
    )

    assert deposit.amount == 2000
    with pytest.raises(ForbiddenError):
        DepositService.create_deposit(
            db_session,
            DepositCreate(
                mess_id=mess.mess_id, user_id=member.user_id, amount=10, date=period_day()
            ),
            member,
        )


def test_deposit_stats(db_session: Session):
    mess = make_mess(db_session)
    member = make_user(db_session, name="Karim Hossain", mess=mess)
    add_deposit(db_session, mess, member, 300)
    add_deposit(db_session, mess, member, 200)
    add_deposit(db_session, mess, mess.manager, 1000)
    add_deposit(db_session, mess, mess.manager, 5000, on=current_month().start - timedelta(days=1))

    stats = DepositService.get_stats(db_session, mess.mess_id, member)

    assert stats.monthly.total_amount == 1500
    assert stats.monthly.deposit_count == 3
    assert [s.user_id for s in stats.member_stats] == [mess.manager_id, member.user_id]
    assert stats.member_stats[1].total_amount == 500
    assert stats.member_stats[1].deposit_count == 2


def test_user_deposits_newest_first(db_session: Session):
    mess = make_mess(db_session)
    member = make_user(db_session, name="Karim Hossain", mess=mess)
    add_deposit(db_session, mess, member, 100, on=period_day(0))
    add_deposit(db_session, mess, member, 200, on=period_day(2))
    add_deposit(db_session, mess, mess.manager, 300)

    deposits = DepositService.get_user_deposits(
        db_session, mess.mess_id, member.user_id, member
    )

    assert [d.amount for d in deposits] == [200, 100]


def test_outsider_cannot_read_deposits(db_session: Session):
    mess = make_mess(db_session)
    outsider = make_user(db_session, name="Outsider Omar")

    with pytest.raises(ForbiddenError):
        DepositService.get_deposits(db_session, mess.mess_id, outsider)


# =============================================================================
# USER SERVICE TESTS
# =============================================================================


def test_register_user_lowercases_email_and_rejects_duplicates(db_session: Session):
    user = UserService.register_user(
        db_session, UserCreate(name="Nusrat Jahan", email="Nusrat@Example.com")
    )

    assert user.email == "nusrat@example.com"
    assert user.role == UserRole.USER
    with pytest.raises(ConflictError):
        UserService.register_user(
            db_session, UserCreate(name="Someone Else", email="nusrat@example.com")
        )


def test_update_profile(db_session: Session):
    user = make_user(db_session)

    updated = UserService.update_profile(
        db_session, user, UserProfileUpdate(phone="+8801700000000")
    )

    assert updated.phone == "+8801700000000"
    assert updated.name == user.name


def test_list_users_filters(db_session: Session):
    admin = make_admin(db_session)
    make_user(db_session, name="Karim Hossain")
    deleted = make_user(db_session, name="Tanvir Ahmed")
    deleted.is_deleted = True
    db_session.commit()

    assert len(UserService.list_users(db_session, admin)) == 2
    assert len(UserService.list_users(db_session, admin, include_admins=False)) == 1
    assert len(UserService.list_users(db_session, admin, include_deleted=True)) == 3
    assert [u.name for u in UserService.list_users(db_session, admin, search="karim")] == [
        "Karim Hossain"
    ]
    assert len(UserService.list_users(db_session, admin, role=UserRole.ADMIN)) == 1


def test_user_stats(db_session: Session):
    admin = make_admin(db_session)
    mess = make_mess(db_session)
    make_user(db_session, name="Karim Hossain", mess=mess)

    stats = UserService.get_stats(db_session, admin)

    assert stats.total_users == 3
    assert stats.users_with_mess == 2
    assert stats.users_without_mess == 1
    assert stats.by_role["admin"] == 1
    assert stats.by_role["manager"] == 1


def test_get_user_self_or_admin(db_session: Session):
    user = make_user(db_session)
    other = make_user(db_session, name="Karim Hossain")

    assert UserService.get_user(db_session, user.user_id, user).user_id == user.user_id
    with pytest.raises(ForbiddenError):
        UserService.get_user(db_session, user.user_id, other)


def test_admin_update_user_role_and_email(db_session: Session):
    admin = make_admin(db_session)
    user = make_user(db_session)
    taken = make_user(db_session, name="Karim Hossain")

    updated = UserService.update_user(
        db_session, user.user_id, UserAdminUpdate(role=UserRole.ADMIN), admin
    )
    assert updated.role == UserRole.ADMIN

    with pytest.raises(ConflictError):
        UserService.update_user(
            db_session, user.user_id, UserAdminUpdate(email=taken.email), admin
        )


def test_delete_user_rules(db_session: Session):
    """
    Verifies:
    - Admins cannot delete themselves
    - Mess managers cannot be deleted while they manage a mess
    - Other users are removed permanently
    """
    admin = make_admin(db_session)
    mess = make_mess(db_session)
    user = make_user(db_session)

    with pytest.raises(ServiceValidationError):
        UserService.delete_user(db_session, admin.user_id, admin)
    with pytest.raises(ConflictError):
        UserService.delete_user(db_session, mess.manager_id, admin)

    user_id = user.user_id
    UserService.delete_user(db_session, user_id, admin)
    with pytest.raises(NotFoundError):
        UserService.get_user(db_session, user_id, admin)


def test_soft_delete_and_restore(db_session: Session):
    admin = make_admin(db_session)
    mess = make_mess(db_session)
    member = make_user(db_session, name="Karim Hossain", mess=mess)

    deleted = UserService.soft_delete_user(db_session, member.user_id, admin)
    assert deleted.is_deleted is True
    assert deleted.deleted_at is not None
    assert deleted.mess_id is None

    with pytest.raises(ConflictError):
        UserService.soft_delete_user(db_session, member.user_id, admin)

    restored = UserService.restore_user(db_session, member.user_id, admin)
    assert restored.is_deleted is False
    assert restored.deleted_at is None


# =============================================================================
# READ MODEL TESTS
# =============================================================================


def _busy_mess(db: Session):
    mess = make_mess(db)
    member = make_user(db, name="Karim Hossain", mess=mess)
    add_meal(db, mess, mess.manager, on=period_day(0))
    add_meal(db, mess, mess.manager, on=period_day(1), breakfast=0)
    add_meal(db, mess, member, on=period_day(1))
    add_expense(db, mess, 160, category=ExpenseCategory.FOOD)
    add_expense(db, mess, 40, category=ExpenseCategory.UTILITIES)
    add_deposit(db, mess, member, 500)
    return mess, member


def test_dashboard(db_session: Session):
    mess, member = _busy_mess(db_session)

    dashboard = DashboardService.get_dashboard(db_session, mess.mess_id, member)

    # 200 / 8 meal-units
    assert dashboard.mess.meal_rate == 25.0
    assert dashboard.monthly_stats.total_members == 2
    assert dashboard.monthly_stats.total_meals == 8
    assert dashboard.monthly_stats.meal_entries == 3
    assert dashboard.monthly_stats.expense_count == 2
    assert dashboard.monthly_stats.total_deposits == 500
    assert [c.category for c in dashboard.expense_breakdown] == ["food", "utilities"]
    assert len(dashboard.recent_meals) == 3
    assert dashboard.calculation_breakdown.calculation == "200 / 8 = 25"

    manager_stats = next(
        s for s in dashboard.member_stats if s.user_id == mess.manager_id
    )
    assert manager_stats.total_meals == 5
    assert manager_stats.days_with_meals == 2
    assert manager_stats.avg_meals_per_day == 2.5


def test_analytics(db_session: Session):
    mess, member = _busy_mess(db_session)

    analytics = AnalyticsService.get_analytics(db_session, mess.mess_id, member)

    assert analytics.summary.meal_rate == 25.0
    assert analytics.calculations.avg_meals_per_member == 4.0
    assert analytics.calculations.avg_expense_per_member == 100.0
    assert analytics.calculations.net_balance == 300.0
    assert analytics.calculations.meal_cost_percentage == 100.0
    assert [d.meals for d in analytics.daily_trends] == [3, 5]
    assert {f.name for f in analytics.financial_overview} == {"Expenses", "Deposits"}


def test_report_combines_summary_and_balances(db_session: Session):
    mess, member = _busy_mess(db_session)

    report = ReportService.get_report(db_session, mess.mess_id, member)

    member_row = next(r for r in report.balances.balances if r.user_id == member.user_id)
    assert report.summary.total_expenses == 200
    assert report.balances.meal_rate == report.summary.meal_rate == 25.0
    # 500 - (3 * 25 + 200 / 2)
    assert member_row.balance == 325.0


def test_read_models_reject_outsiders(db_session: Session):
    mess, _ = _busy_mess(db_session)
    outsider = make_user(db_session, name="Outsider Omar")

    for call in (
        DashboardService.get_dashboard,
        AnalyticsService.get_analytics,
        ReportService.get_report,
    ):
        with pytest.raises(ForbiddenError):
            call(db_session, mess.mess_id, outsider)
