import django.db.models.deletion
import django.utils.timezone
import encrypted_fields.fields
from django.db import migrations, models

import speaker_portal.speakers.models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("portal_projects", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="SpeakerSession",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "speaker_id",
                    models.CharField(
                        default=speaker_portal.speakers.models._new_speaker_id,
                        max_length=64,
                        unique=True,
                    ),
                ),
                ("speaker_name", models.CharField(max_length=200)),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                ("organization", models.CharField(blank=True, default="", max_length=200)),
                ("department", models.CharField(blank=True, default="", max_length=200)),
                ("position", models.CharField(blank=True, default="", max_length=200)),
                ("phone", models.CharField(blank=True, default="", max_length=50)),
                ("event_name", models.CharField(blank=True, default="", max_length=200)),
                ("presentation_date", models.DateTimeField(blank=True, null=True)),
                ("external_supplier_id", models.CharField(blank=True, max_length=100, null=True)),
                ("synced_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "project",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="speakers",
                        to="portal_projects.project",
                    ),
                ),
            ],
            options={
                "ordering": ["speaker_name"],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("external_supplier_id", None), _negated=True),
                        fields=("project", "external_supplier_id"),
                        name="unique_speaker_external_id_per_project",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="HonorariumInfo",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("bank_name", models.CharField(max_length=100)),
                ("account_number", encrypted_fields.fields.EncryptedCharField(max_length=128)),
                ("account_holder", models.CharField(max_length=100)),
                (
                    "id_card_file",
                    models.FileField(blank=True, upload_to=speaker_portal.speakers.models.document_upload_to),
                ),
                (
                    "bankbook_file",
                    models.FileField(blank=True, upload_to=speaker_portal.speakers.models.document_upload_to),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "session",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="honorarium",
                        to="portal_speakers.speakersession",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "honorarium info",
            },
        ),
        migrations.CreateModel(
            name="PresentationInfo",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("use_audio", models.BooleanField(default=False)),
                ("use_video", models.BooleanField(default=False)),
                ("use_personal_laptop", models.BooleanField(default=False)),
                ("special_requests", models.TextField(blank=True, default="")),
                ("custom_fields", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "session",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="presentation_info",
                        to="portal_speakers.speakersession",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "presentation info",
            },
        ),
        migrations.CreateModel(
            name="PresentationFile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "file",
                    models.FileField(
                        max_length=255,
                        upload_to=speaker_portal.speakers.models.presentation_upload_to,
                    ),
                ),
                ("file_name", models.CharField(max_length=255)),
                ("file_type", models.CharField(blank=True, default="", max_length=100)),
                ("file_size", models.PositiveBigIntegerField(default=0)),
                ("is_primary", models.BooleanField(default=False)),
                ("uploaded_at", models.DateTimeField(auto_now_add=True)),
                (
                    "session",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="files",
                        to="portal_speakers.speakersession",
                    ),
                ),
            ],
            options={
                "ordering": ["-is_primary", "-uploaded_at"],
            },
        ),
        migrations.CreateModel(
            name="ConsentRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("privacy_consent", models.BooleanField(default=False)),
                ("portrait_consent", models.BooleanField(default=False)),
                ("recording_consent", models.BooleanField(default=False)),
                ("copyright_consent", models.BooleanField(default=False)),
                ("distribution_consent", models.BooleanField(default=False)),
                ("custom_consents", models.JSONField(blank=True, default=dict)),
                (
                    "signature_image",
                    models.FileField(blank=True, upload_to=speaker_portal.speakers.models.signature_upload_to),
                ),
                ("consent_date", models.DateTimeField(default=django.utils.timezone.now)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "session",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="consent",
                        to="portal_speakers.speakersession",
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="TransportationInfo",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("transportation_method", models.CharField(max_length=50)),
                ("departure_location", models.CharField(blank=True, default="", max_length=200)),
                ("arrival_location", models.CharField(blank=True, default="", max_length=200)),
                ("departure_date", models.DateField(blank=True, null=True)),
                ("departure_time", models.TimeField(blank=True, null=True)),
                ("arrival_date", models.DateField(blank=True, null=True)),
                ("arrival_time", models.TimeField(blank=True, null=True)),
                ("vehicle_type", models.CharField(blank=True, default="", max_length=100)),
                ("vehicle_number", models.CharField(blank=True, default="", max_length=50)),
                ("train_number", models.CharField(blank=True, default="", max_length=50)),
                ("seat_number", models.CharField(blank=True, default="", max_length=50)),
                ("flight_number", models.CharField(blank=True, default="", max_length=50)),
                ("airline", models.CharField(blank=True, default="", max_length=100)),
                ("requires_reimbursement", models.BooleanField(default=False)),
                ("estimated_cost", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("actual_cost", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                (
                    "receipt_file",
                    models.FileField(blank=True, upload_to=speaker_portal.speakers.models.receipt_upload_to),
                ),
                ("receipt_submitted", models.BooleanField(default=False)),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "session",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="transportation",
                        to="portal_speakers.speakersession",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "transportation info",
            },
        ),
        migrations.CreateModel(
            name="AttendanceResponse",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("field_key", models.SlugField(max_length=100)),
                ("response", models.BooleanField()),
                ("responded_at", models.DateTimeField(auto_now=True)),
                (
                    "session",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="attendance_responses",
                        to="portal_speakers.speakersession",
                    ),
                ),
            ],
            options={
                "ordering": ["field_key"],
                "unique_together": {("session", "field_key")},
            },
        ),
    ]
