"""Tests for the REST framework exception handler of domain errors."""

from __future__ import annotations

from datetime import date
from uuid import uuid4

import pytest
from rest_framework import status
from rest_framework.exceptions import NotAuthenticated

from apps.availability.domain.timeline import UnavailableKind, UnavailableRange
from shared.domain.exceptions import (
    AuthorizationError,
    ConflictError,
    DependencyError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from shared.domain.value_objects import DateRange
from shared.infrastructure.api import domain_exception_handler


@pytest.mark.parametrize(
    "error, expected_status, expected_code",
    [
        (ValidationError("bad dates"), status.HTTP_400_BAD_REQUEST, "invalid"),
        (InvalidTransitionError(), status.HTTP_400_BAD_REQUEST, "invalid_transition"),
        (NotFoundError(), status.HTTP_404_NOT_FOUND, "not_found"),
        (AuthorizationError(), status.HTTP_403_FORBIDDEN, "not_permitted"),
        (ConflictError(), status.HTTP_409_CONFLICT, "dates_unavailable"),
        (DependencyError(), status.HTTP_503_SERVICE_UNAVAILABLE, "dependency_unavailable"),
    ],
)
def test_domain_errors_map_to_status_and_code(error, expected_status, expected_code) -> None:
    response = domain_exception_handler(error, {"view": None})

    assert response.status_code == expected_status
    assert response.data["code"] == expected_code
    assert response.data["detail"]


def test_conflict_response_lists_public_fields_only() -> None:
    conflict = UnavailableRange(
        kind=UnavailableKind.BOOKING,
        range=DateRange(date(2026, 7, 1), date(2026, 7, 4)),
        source_id=uuid4(),
        label="Approved booking",
    )

    response = domain_exception_handler(ConflictError(conflicts=[conflict]), {"view": None})

    assert response.data["conflicts"] == [
        {
            "kind": "booking",
            "start_date": "2026-07-01",
            "end_date": "2026-07-04",
            "label": "Approved booking",
        }
    ]


def test_non_domain_errors_fall_back_to_rest_framework() -> None:
    response = domain_exception_handler(NotAuthenticated(), {"view": None, "request": None})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
