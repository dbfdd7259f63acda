import django.db.models.deletion
from django.db import migrations, models

import speaker_portal.projects.models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Project",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("project_name", models.CharField(max_length=200)),
                ("event_name", models.CharField(blank=True, default="", max_length=200)),
                ("description", models.TextField(blank=True, default="")),
                ("start_date", models.DateField(blank=True, null=True)),
                ("end_date", models.DateField(blank=True, null=True)),
                ("slug", models.SlugField(allow_unicode=True, max_length=200, unique=True)),
                ("is_active", models.BooleanField(default=True)),
                ("external_project_id", models.CharField(blank=True, max_length=100, null=True, unique=True)),
                ("synced_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-start_date", "project_name"],
            },
        ),
        migrations.CreateModel(
            name="ProjectSetting",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("setting_key", models.CharField(max_length=100)),
                ("setting_value", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "project",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="settings",
                        to="portal_projects.project",
                    ),
                ),
            ],
            options={
                "ordering": ["setting_key"],
                "unique_together": {("project", "setting_key")},
            },
        ),
        migrations.CreateModel(
            name="PresentationField",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("field_key", models.SlugField(max_length=100)),
                ("field_label", models.CharField(max_length=200)),
                (
                    "field_type",
                    models.CharField(
                        choices=[
                            ("text", "Text"),
                            ("textarea", "Text area"),
                            ("number", "Number"),
                            ("date", "Date"),
                            ("select", "Select"),
                            ("checkbox", "Checkbox"),
                        ],
                        default="text",
                        max_length=20,
                    ),
                ),
                ("field_description", models.TextField(blank=True, default="")),
                ("options", models.JSONField(blank=True, default=list)),
                ("is_required", models.BooleanField(default=False)),
                ("display_order", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "project",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="presentation_fields",
                        to="portal_projects.project",
                    ),
                ),
            ],
            options={
                "ordering": ["display_order", "id"],
                "unique_together": {("project", "field_key")},
            },
        ),
        migrations.CreateModel(
            name="ConsentField",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("field_key", models.SlugField(max_length=100)),
                ("title", models.CharField(max_length=200)),
                ("content", models.TextField(blank=True, default="")),
                ("is_required", models.BooleanField(default=True)),
                ("display_order", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "project",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="consent_fields",
                        to="portal_projects.project",
                    ),
                ),
            ],
            options={
                "ordering": ["display_order", "id"],
                "unique_together": {("project", "field_key")},
            },
        ),
        migrations.CreateModel(
            name="AttendanceField",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("field_key", models.SlugField(max_length=100)),
                ("field_label", models.CharField(max_length=200)),
                ("field_description", models.TextField(blank=True, default="")),
                ("is_required", models.BooleanField(default=False)),
                ("display_order", models.PositiveIntegerField(default=0)),
                ("deadline", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "project",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="attendance_fields",
                        to="portal_projects.project",
                    ),
                ),
            ],
            options={
                "ordering": ["display_order", "id"],
                "unique_together": {("project", "field_key")},
            },
        ),
        migrations.CreateModel(
            name="TransportationSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "supported_methods",
                    models.JSONField(
                        blank=True,
                        default=speaker_portal.projects.models._default_transportation_methods,
                    ),
                ),
                ("requires_receipt", models.BooleanField(default=True)),
                ("receipt_deadline", models.DateTimeField(blank=True, null=True)),
                ("additional_notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "project",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="transportation_settings",
                        to="portal_projects.project",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "transportation settings",
            },
        ),
        migrations.CreateModel(
            name="ArrivalGuide",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("venue_name", models.CharField(blank=True, default="", max_length=200)),
                ("venue_address", models.CharField(blank=True, default="", max_length=500)),
                ("venue_map_url", models.URLField(blank=True, default="")),
                ("check_in_time", models.CharField(blank=True, default="", max_length=100)),
                ("check_in_location", models.CharField(blank=True, default="", max_length=200)),
                ("presentation_time", models.CharField(blank=True, default="", max_length=100)),
                ("presentation_room", models.CharField(blank=True, default="", max_length=200)),
                ("parking_info", models.TextField(blank=True, default="")),
                ("contact_name", models.CharField(blank=True, default="", max_length=100)),
                ("contact_phone", models.CharField(blank=True, default="", max_length=50)),
                ("contact_email", models.EmailField(blank=True, default="", max_length=254)),
                ("emergency_contact", models.CharField(blank=True, default="", max_length=100)),
                ("additional_notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "project",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="arrival_guide",
                        to="portal_projects.project",
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="ArrivalChecklistItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("item_text", models.CharField(max_length=500)),
                ("display_order", models.PositiveIntegerField(default=0)),
                ("requires_response", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "project",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="checklist_items",
                        to="portal_projects.project",
                    ),
                ),
            ],
            options={
                "ordering": ["display_order", "id"],
            },
        ),
    ]
