"""URL routing for borrow requests."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import BorrowRequestViewSet

router = DefaultRouter()
router.register(r"", BorrowRequestViewSet, basename="borrow-request")

urlpatterns = [
    path("", include(router.urls)),
]
