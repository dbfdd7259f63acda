"""URL configuration for the speaker-facing endpoints.

Mount in the host project::

    urlpatterns = [
        path("speakers/", include("speaker_portal.speakers.urls")),
    ]
"""

from django.urls import path

from speaker_portal.speakers.views import (
    ArrivalGuideView,
    AttendanceView,
    ConsentView,
    DashboardView,
    HonorariumView,
    LoginView,
    LogoutView,
    OrganizerInfoView,
    PresentationFileDeleteView,
    PresentationFilesView,
    PresentationInfoView,
    ProfileView,
    ProjectInfoView,
    TransportationView,
)

app_name = "speakers"

urlpatterns = [
    path("p/<str:slug>/", ProjectInfoView.as_view(), name="project"),
    path("p/<str:slug>/login/", LoginView.as_view(), name="login"),
    path("logout/", LogoutView.as_view(), name="logout"),
    path("me/", DashboardView.as_view(), name="dashboard"),
    path("me/profile/", ProfileView.as_view(), name="profile"),
    path("me/honorarium/", HonorariumView.as_view(), name="honorarium"),
    path("me/transportation/", TransportationView.as_view(), name="transportation"),
    path("me/presentation/", PresentationInfoView.as_view(), name="presentation"),
    path("me/files/", PresentationFilesView.as_view(), name="files"),
    path("me/files/<int:file_id>/delete/", PresentationFileDeleteView.as_view(), name="file-delete"),
    path("me/consent/", ConsentView.as_view(), name="consent"),
    path("me/attendance/", AttendanceView.as_view(), name="attendance"),
    path("me/guide/", ArrivalGuideView.as_view(), name="guide"),
    path("me/organizer/", OrganizerInfoView.as_view(), name="organizer"),
]
