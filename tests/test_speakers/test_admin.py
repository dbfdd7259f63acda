"""Smoke tests for the speaker and webhook admin pages."""

import pytest
from django.contrib.auth.models import User
from django.urls import reverse

from speaker_portal.external.models import WebhookEvent, WebhookProcessingError
from speaker_portal.projects.models import Project
from speaker_portal.speakers.models import HonorariumInfo, PresentationFile, SpeakerSession


@pytest.fixture
def admin_client(client, db):
    client.force_login(User.objects.create_superuser(username="admin", password="password", email="a@test.com"))
    return client


@pytest.fixture
def speaker(db):
    project = Project.objects.create(project_name="AI Summit", slug="ai-summit")
    return SpeakerSession.objects.create(
        project=project, speaker_name="Kim", email="kim@example.com", external_supplier_id="s1"
    )


def test_speaker_session_change_page_renders_inlines(admin_client, speaker):
    HonorariumInfo.objects.create(session=speaker, bank_name="KB", account_number="123", account_holder="Kim")

    response = admin_client.get(reverse("admin:portal_speakers_speakersession_change", args=[speaker.pk]))

    assert response.status_code == 200
    assert b"KB" in response.content
    assert "external_supplier_id" in response.context["adminform"].readonly_fields


def test_speaker_session_changelist_search(admin_client, speaker):
    response = admin_client.get(reverse("admin:portal_speakers_speakersession_changelist"), {"q": "s1"})

    assert response.status_code == 200
    assert list(response.context["cl"].result_list) == [speaker]


def test_presentation_file_changelist(admin_client, speaker):
    PresentationFile.objects.create(session=speaker, file="presentations/deck.pdf", file_name="deck.pdf")

    response = admin_client.get(reverse("admin:portal_speakers_presentationfile_changelist"))

    assert response.status_code == 200
    assert b"deck.pdf" in response.content


def test_webhook_admin_is_read_only(admin_client, db):
    event = WebhookEvent.objects.create(event_type="UPDATE", table="projects", record_id="p1", payload={})
    WebhookProcessingError.objects.create(event=event, message="boom")

    assert admin_client.get(reverse("admin:portal_external_webhookevent_add")).status_code == 403
    assert admin_client.get(reverse("admin:portal_external_webhookevent_change", args=[event.pk])).status_code == 200
    assert admin_client.get(reverse("admin:portal_external_webhookprocessingerror_changelist")).status_code == 200
