import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("tenants", "0001_initial"),
        ("employees", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Attendance",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="cree le")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="modifie le")),
                ("check_in", models.DateTimeField(verbose_name="arrivee")),
                ("check_out", models.DateTimeField(blank=True, null=True, verbose_name="depart")),
                ("last_reminder_sent_at", models.DateTimeField(
                    blank=True, null=True, verbose_name="derniere relance de depart",
                )),
                ("latitude", models.FloatField(blank=True, null=True, verbose_name="latitude")),
                ("longitude", models.FloatField(blank=True, null=True, verbose_name="longitude")),
                ("distance_from_site", models.FloatField(blank=True, null=True, verbose_name="distance du site (m)")),
                ("photo_url", models.CharField(blank=True, default="", max_length=500, verbose_name="photo")),
                ("employee", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="attendances",
                    to="employees.employee",
                    verbose_name="employe",
                )),
                ("site", models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="attendances",
                    to="tenants.site",
                    verbose_name="site",
                )),
                ("tenant", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="attendances",
                    to="tenants.tenant",
                    verbose_name="entreprise",
                )),
            ],
            options={
                "verbose_name": "Pointage",
                "verbose_name_plural": "Pointages",
                "ordering": ["-check_in"],
                "indexes": [
                    models.Index(fields=["check_out"], name="attendance_check_out_idx"),
                    models.Index(fields=["employee", "check_in"], name="attendance_employee_day_idx"),
                ],
            },
        ),
    ]
