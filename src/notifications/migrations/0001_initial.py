import uuid

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("tenants", "0001_initial"),
        ("employees", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Notification",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="modifie le")),
                ("type", models.CharField(
                    choices=[
                        ("LATE", "Retard"),
                        ("ABSENCE", "Absence"),
                        ("GEOFENCE", "Hors zone"),
                        ("EXPENSE", "Note de frais"),
                    ],
                    max_length=20,
                    verbose_name="type",
                )),
                ("title", models.CharField(max_length=200, verbose_name="titre")),
                ("message", models.TextField(verbose_name="message")),
                ("is_read", models.BooleanField(default=False, verbose_name="lu")),
                ("read_at", models.DateTimeField(blank=True, null=True, verbose_name="lu le")),
                ("created_at", models.DateTimeField(
                    db_index=True, default=django.utils.timezone.now, verbose_name="cree le",
                )),
                ("employee", models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="subject_notifications",
                    to="employees.employee",
                    verbose_name="employe concerne",
                )),
                ("manager", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="notifications",
                    to="employees.employee",
                    verbose_name="destinataire",
                )),
                ("tenant", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="notifications",
                    to="tenants.tenant",
                    verbose_name="entreprise",
                )),
            ],
            options={
                "verbose_name": "Notification",
                "verbose_name_plural": "Notifications",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["manager", "type", "employee", "created_at"],
                        name="notification_antispam_idx",
                    ),
                    models.Index(fields=["manager", "is_read"], name="notification_unread_idx"),
                ],
            },
        ),
    ]
