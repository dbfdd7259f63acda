"""Minimal URL configuration for tests."""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("manage/", include("speaker_portal.manage.urls")),
    path("external/", include("speaker_portal.external.urls")),
    path("speakers/", include("speaker_portal.speakers.urls")),
]
