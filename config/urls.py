"""URL configuration for StableMate project.

The `urlpatterns` list routes URLs to views. It includes the Django admin,
the application-level routers of each app and the OpenAPI schema.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView  # type: ignore

# API versioning. v1 is our initial version; future versions can be added here.

urlpatterns = [
    path('admin/', admin.site.urls),
    # Application URLs
    path('api/v1/auth/', include('apps.users.urls', namespace='auth')),
    # Availability routes hang off a horse: /horses/<horse_id>/blocks/ etc.
    path('api/v1/horses/', include('apps.availability.urls')),
    path('api/v1/horses/', include('apps.horses.urls')),
    path('api/v1/requests/', include('apps.borrowing.urls')),
    path('api/v1/notifications/', include('apps.notifications.urls')),
    # API schema and docs
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
]
