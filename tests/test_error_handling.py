"""
Error handling and edge case tests.

This suite covers how failures surface to API clients:
- Service errors mapped to status codes and the error envelope
- Request validation failures (422)
- Unexpected exceptions (500) without leaking internals
- Filter parsing for periods and user ids
"""

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from test_fixtures import (
    auth,
    client,
    db_session,
    make_mess,
    make_user,
    add_expense,
)
from api.dependencies import get_db, parse_user_filter
from app.exceptions import (
    AppError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ServiceValidationError,
    UnauthorizedError,
)
from main import app
from services.dashboard_service import DashboardService
from services.period import month_period, period_from_filters


# =============================================================================
# EXCEPTION TYPES
# =============================================================================


@pytest.mark.parametrize(
    "error_cls, status, code",
    [
        (ServiceValidationError, 400, "SERVICE_VALIDATION_ERROR"),
        (UnauthorizedError, 401, "UNAUTHORIZED"),
        (ForbiddenError, 403, "FORBIDDEN"),
        (NotFoundError, 404, "NOT_FOUND"),
        (ConflictError, 409, "CONFLICT"),
    ],
)
def test_error_classes_carry_status_and_code(error_cls, status, code):
    error = error_cls()

    assert isinstance(error, AppError)
    assert error.http_status == status
    assert error.code == code
    assert str(error) == error.default_message


def test_to_dict_includes_details_only_when_present():
    plain = NotFoundError("Mess not found")
    detailed = ConflictError(
        "Meals already logged", details={"user_ids": ["a", "b"]}, code="MEALS_EXIST"
    )

    assert plain.to_dict() == {"code": "NOT_FOUND", "message": "Mess not found"}
    assert detailed.to_dict() == {
        "code": "MEALS_EXIST",
        "message": "Meals already logged",
        "details": {"user_ids": ["a", "b"]},
    }


# =============================================================================
# ERROR ENVELOPE
# =============================================================================


def test_not_found_envelope(client: TestClient, db_session: Session):
    """
    Verifies:
    - Unknown mess id returns 404
    - Body carries success=false, the error code and a timestamp
    """
    user = make_user(db_session)

    response = client.get(
        "/mess/00000000-0000-0000-0000-000000000000", headers=auth(user)
    )

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "NOT_FOUND"
    assert "timestamp" in body


def test_missing_caller_envelope(client: TestClient):
    response = client.get("/users/profile")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


def test_validation_error_envelope(client: TestClient, db_session: Session):
    """
    Verifies:
    - Body validation failures return 422
    - Field errors are listed under error.details.errors
    """
    mess = make_mess(db_session)

    response = client.post(
        "/expenses",
        json={"mess_id": str(mess.mess_id), "amount": -5, "category": "food"},
        headers=auth(mess.manager),
    )

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"]["errors"]


def test_unknown_route_uses_envelope(client: TestClient):
    response = client.get("/no-such-route")

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_unexpected_exception_returns_500(db_session: Session, monkeypatch):
    """
    Verifies:
    - An exception escaping a service becomes a generic 500
    - The original message is not exposed to the client
    """

    def _boom(*args, **kwargs):
        raise RuntimeError("secret internal state")

    def _override_get_db():
        yield db_session

    mess = make_mess(db_session)
    monkeypatch.setattr(DashboardService, "get_dashboard", _boom)
    app.dependency_overrides[get_db] = _override_get_db
    try:
        client = TestClient(app, raise_server_exceptions=False)
        response = client.get(f"/dashboard/{mess.mess_id}", headers=auth(mess.manager))
    finally:
        app.dependency_overrides.pop(get_db, None)

    assert response.status_code == 500
    body = response.json()
    assert body["error"]["code"] == "INTERNAL_SERVER_ERROR"
    assert "secret" not in response.text


# =============================================================================
# FILTER PARSING
# =============================================================================


def test_period_from_filters_range_wins_over_month():
    period = period_from_filters(2024, 2, date(2024, 5, 1), date(2024, 5, 10))

    assert period.start == date(2024, 5, 1)
    assert period.end == date(2024, 5, 10)


def test_period_from_filters_month_only():
    period = period_from_filters(2024, 2)

    assert period == month_period(2024, 2)
    assert period.end == date(2024, 2, 29)


def test_period_from_filters_incomplete_is_none():
    assert period_from_filters(2024, None) is None
    assert period_from_filters(start=date(2024, 1, 1)) is None


def test_period_from_filters_rejects_bad_input():
    with pytest.raises(ServiceValidationError):
        period_from_filters(2024, 13)
    with pytest.raises(ServiceValidationError):
        period_from_filters(start=date(2024, 3, 2), end=date(2024, 3, 1))


def test_parse_user_filter():
    assert parse_user_filter(None) is None
    assert parse_user_filter("all") is None
    with pytest.raises(ServiceValidationError):
        parse_user_filter("someone")


def test_invalid_filters_over_http(client: TestClient, db_session: Session):
    mess = make_mess(db_session)
    add_expense(db_session, mess, 100)
    url = f"/expenses/mess/{mess.mess_id}"

    assert client.get(url, params={"user_id": "all"}, headers=auth(mess.manager)).status_code == 200
    assert client.get(url, params={"user_id": "bogus"}, headers=auth(mess.manager)).status_code == 400
    assert client.get(url, params={"month": 13, "year": 2024}, headers=auth(mess.manager)).status_code == 422
