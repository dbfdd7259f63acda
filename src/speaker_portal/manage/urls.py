"""URL configuration for the organizer endpoints.

Mount under a prefix in the host project::

    urlpatterns = [
        path("manage/", include("speaker_portal.manage.urls")),
    ]
"""

from django.urls import path

from speaker_portal.manage.views import (
    ExternalSpeakersView,
    ImportSpeakersView,
    PresentationFileDownloadView,
    PushProjectView,
    SubmissionsView,
    SyncProjectsView,
    SyncProjectView,
)

app_name = "manage"

urlpatterns = [
    path("sync/", SyncProjectsView.as_view(), name="sync-projects"),
    path("files/<int:file_id>/download/", PresentationFileDownloadView.as_view(), name="file-download"),
    path("<str:project_slug>/sync/", SyncProjectView.as_view(), name="sync-project"),
    path("<str:project_slug>/push/", PushProjectView.as_view(), name="push-project"),
    path("<str:project_slug>/external-speakers/", ExternalSpeakersView.as_view(), name="external-speakers"),
    path(
        "<str:project_slug>/external-speakers/import/",
        ImportSpeakersView.as_view(),
        name="import-speakers",
    ),
    path("<str:project_slug>/submissions/", SubmissionsView.as_view(), name="submissions"),
]
