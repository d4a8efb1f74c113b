"""URL routing for horse listings."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import HorseViewSet

router = DefaultRouter()
router.register(r"", HorseViewSet, basename="horse")

urlpatterns = [
    path("", include(router.urls)),
]
