"""URL configuration for the external sync app.

Mount the webhook endpoint in the host project::

    urlpatterns = [
        path("external/", include("speaker_portal.external.urls")),
    ]
"""

from django.urls import path

from speaker_portal.external.webhooks import external_webhook

app_name = "external"

urlpatterns = [
    path("webhook/", external_webhook, name="webhook"),
]
